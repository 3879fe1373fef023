"""Mock Forecast Generator: synthetic, network-free forecasts.

Used when no AI key is configured and as the recovery path whenever the AI
path fails. It cannot fail for a validated ``ForecastRequest``.

Randomness and the clock are injectable so tests can pin exact outputs:

    MockForecastGenerator(rng=random.Random(7), today=lambda: date(2026, 1, 1))
"""

from __future__ import annotations

import logging
import math
import random
import statistics
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional

from ..constants import (
    FORECAST_DAYS,
    GLUT_HIGH_RATIO,
    GLUT_MEDIUM_RATIO,
    GROWTH_CYCLE_DAYS,
    PLANTING_LEAD_DAYS,
    RECOMMENDED_QUANTITY_FACTOR,
    SEASONAL_AMPLITUDE,
    SEASONAL_PERIOD_DAYS,
    SOURCE_MOCK,
)
from ..schemas.forecast_schema import Forecast, ForecastRequest, TrendSeries, utc_now
from .advice import build_recommendations, mock_action_summary
from .market_data import economic_params, markets_for, suggested_markets_for

logger = logging.getLogger(__name__)


def classify_glut_risk(quantity: float, mean_demand: float) -> str:
    """Oversupply risk of planting ``quantity`` against average daily demand."""
    if quantity > mean_demand * GLUT_HIGH_RATIO:
        return "high"
    if quantity > mean_demand * GLUT_MEDIUM_RATIO:
        return "medium"
    return "low"


def seasonal_factor(day: int) -> float:
    """Weekly demand cycle, +/- SEASONAL_AMPLITUDE around 1.0."""
    return 1 + math.sin(2 * math.pi * day / SEASONAL_PERIOD_DAYS) * SEASONAL_AMPLITUDE


class MockForecastGenerator:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        today: Optional[Callable[[], date]] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self._rng = rng or random.Random()
        self._today = today or date.today
        self._now = now or utc_now

    def _daily_series(self, baseline_demand: int, base_price: float, volatility: float):
        demand: List[int] = []
        price: List[float] = []
        for day in range(FORECAST_DAYS):
            # One noise draw per day drives both demand and price.
            noise = 1 + (self._rng.random() - 0.5) * volatility
            demand.append(round(baseline_demand * seasonal_factor(day) * noise))
            price.append(round(base_price * noise, 2))
        return demand, price

    def generate(self, request: ForecastRequest) -> Forecast:
        econ = economic_params(request.crop)
        baseline_demand = round(request.quantity * econ.demand_multiplier)

        demand, price = self._daily_series(baseline_demand, econ.base_price, econ.volatility)

        mean_demand = statistics.fmean(demand)
        glut_risk = classify_glut_risk(request.quantity, mean_demand)
        recommended = round(mean_demand * RECOMMENDED_QUANTITY_FACTOR)

        suggested = suggested_markets_for(request.district)
        planting = self._today() + timedelta(days=PLANTING_LEAD_DAYS)
        selling = planting + timedelta(days=GROWTH_CYCLE_DAYS)

        summary = mock_action_summary(request.crop, recommended, suggested, selling)

        logger.info(
            "[MOCK] %s/%s: mean demand=%.1f kg, glut=%s, recommended=%d kg",
            request.crop, request.district, mean_demand, glut_risk, recommended,
        )

        return Forecast(
            crop=request.crop,
            district=request.district,
            season=request.season,
            quantity=request.quantity,
            demand_trend=TrendSeries.from_series(demand),
            price_trend=TrendSeries.from_series(price),
            glut_risk=glut_risk,
            optimal_planting_time=planting.isoformat(),
            optimal_selling_time=selling.isoformat(),
            recommended_quantity=recommended,
            suggested_markets=suggested,
            action_summary=summary,
            recommendations=build_recommendations(
                crop=request.crop,
                district=request.district,
                planting=planting,
                selling=selling,
                recommended_quantity=recommended,
                markets=suggested,
                glut_risk=glut_risk,
                market_strategy=summary,
            ),
            markets=markets_for(request.district),
            source=SOURCE_MOCK,
            timestamp=self._now(),
        )
