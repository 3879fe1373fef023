"""Forecast routes — crop demand/price forecast and scenario simulation.

Endpoints:
  POST /api/forecast   — Forecast demand, price and glut risk for a crop
  POST /api/simulate   — Forecast plus revenue/profit/risk for a market choice

Request-shape problems (missing crop/district/season, unknown season,
non-positive quantity) are rejected by FastAPI with 422 before the
orchestrators run. The orchestrators themselves never raise.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from ..schemas.forecast_schema import Forecast, ForecastRequest
from ..schemas.simulation_schema import SimulationRequest, SimulationResult
from ..services.forecast_dependency import get_forecast_service, get_simulation_service
from ..services.forecast_service import ForecastService
from ..services.simulation_service import SimulationService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Forecast"],
)


@router.post(
    "/forecast",
    response_model=Forecast,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Generate Crop Forecast",
    response_description="Demand/price trends, glut risk and market advice",
)
async def create_forecast(
    req: ForecastRequest,
    forecast_service: ForecastService = Depends(get_forecast_service),
) -> Forecast:
    """Forecast demand and price for the next 30 days.

    Uses the AI model when configured; otherwise, or on any AI failure,
    returns mock data (``source: "mock-data"``, plus ``warning`` on failure).
    """
    forecast = await forecast_service.get_forecast(req)
    logger.info("[FORECAST] Forecast ready for %s (source=%s)", req.crop, forecast.source)
    return forecast


@router.post(
    "/simulate",
    response_model=SimulationResult,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Simulate Market Scenario",
    response_description="Forecast with revenue, profit and risk projections",
)
async def simulate(
    req: SimulationRequest,
    simulation_service: SimulationService = Depends(get_simulation_service),
) -> SimulationResult:
    """Project revenue and profit of selling at the chosen market."""
    result = await simulation_service.get_simulation(req)
    logger.info("[SIMULATION] Simulation ready for %s at %s", req.crop, req.market_choice)
    return result
