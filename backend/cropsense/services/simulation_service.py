"""Simulation Orchestrator: forecast + financial projections for a market choice."""

from __future__ import annotations

import logging
import statistics
from typing import Sequence

from ..constants import (
    DEFAULT_QUANTITY_KG,
    UNIT_COST_PER_KG,
    VOLATILITY_HIGH_THRESHOLD,
    VOLATILITY_MEDIUM_THRESHOLD,
    Season,
)
from ..schemas.forecast_schema import Forecast, ForecastRequest
from ..schemas.simulation_schema import (
    RiskAssessment,
    SimulationPredictions,
    SimulationRequest,
    SimulationResult,
)
from .forecast_service import ForecastService

logger = logging.getLogger(__name__)


def price_volatility(prices: Sequence[float]) -> float:
    """Coefficient of variation (population stdev / mean). 0 for empty or zero-mean series."""
    if not prices:
        return 0.0
    mean = statistics.fmean(prices)
    if mean == 0:
        return 0.0
    return statistics.pstdev(prices) / mean


def volatility_bucket(prices: Sequence[float]) -> str:
    volatility = price_volatility(prices)
    if volatility >= VOLATILITY_HIGH_THRESHOLD:
        return "high"
    if volatility >= VOLATILITY_MEDIUM_THRESHOLD:
        return "medium"
    return "low"


def seasonal_risk(season: Season) -> str:
    return "medium" if season == Season.KHARIF else "low"


def project_revenue(forecast: Forecast, quantity: float) -> float:
    prices = forecast.price_trend.thirty_day
    avg_price = statistics.fmean(prices) if prices else 0.0
    return round(avg_price * quantity, 2)


def project_profit(revenue: float, quantity: float) -> float:
    return round(revenue - quantity * UNIT_COST_PER_KG, 2)


class SimulationService:
    def __init__(self, forecast_service: ForecastService):
        self.forecast_service = forecast_service

    async def get_simulation(self, request: SimulationRequest) -> SimulationResult:
        forecast_request = ForecastRequest(
            crop=request.crop,
            district=request.district,
            season=request.season,
            quantity=request.quantity or DEFAULT_QUANTITY_KG,
            scenario="simulation",
        )
        forecast = await self.forecast_service.get_forecast(forecast_request)

        quantity = request.quantity if request.quantity is not None else float(forecast.recommended_quantity)
        revenue = project_revenue(forecast, quantity)
        profit = project_profit(revenue, quantity)

        risk = RiskAssessment(
            glut_risk=forecast.glut_risk,
            market_volatility=volatility_bucket(forecast.price_trend.thirty_day),
            seasonal_factor=seasonal_risk(request.season),
        )

        logger.info(
            "[SIMULATION] %s kg %s at %s: revenue=%.2f profit=%.2f volatility=%s",
            quantity, request.crop, request.market_choice, revenue, profit, risk.market_volatility,
        )

        return SimulationResult(
            **forecast.model_dump(),
            market_choice=request.market_choice,
            predictions=SimulationPredictions(
                revenue=revenue,
                profit=profit,
                risk_assessment=risk,
            ),
        )
