"""Farmer-facing advice text shared by the mock and AI forecast paths."""

from __future__ import annotations

from datetime import date
from typing import List, Sequence, Union

from ..schemas.forecast_schema import Recommendations


def display_date(value: Union[date, str]) -> str:
    """Render an ISO date as '25 Oct 2026'; non-ISO strings pass through."""
    if isinstance(value, date):
        return value.strftime("%d %b %Y")
    try:
        return date.fromisoformat(str(value)[:10]).strftime("%d %b %Y")
    except ValueError:
        return str(value)


def mock_action_summary(
    crop: str,
    recommended_quantity: int,
    markets: Sequence[str],
    selling_date: date,
) -> str:
    return (
        f"Plant {recommended_quantity} kg of {crop}. "
        f"Sell at {' and '.join(markets[:2])} markets around {display_date(selling_date)} "
        f"to minimize glut risk."
    )


def build_recommendations(
    *,
    crop: str,
    district: str,
    planting: Union[date, str],
    selling: Union[date, str],
    recommended_quantity: Union[int, float],
    markets: Sequence[str],
    glut_risk: str,
    market_strategy: str,
) -> Recommendations:
    planting_txt = display_date(planting)
    selling_txt = display_date(selling)

    actions: List[str] = [
        f"🌱 Start planting around {planting_txt}",
        f"💰 Best selling period: {selling_txt}",
        f"📊 Recommended quantity: {recommended_quantity} kg",
    ]
    if markets:
        actions.append(f"🏪 Focus on {' and '.join(markets[:2])} markets")
    actions.append(f"⚠️ Glut risk: {glut_risk.capitalize()}")

    return Recommendations(
        sowing_time=f"Optimal sowing for {crop} in {district} is {planting_txt}",
        selling_time=f"Best selling window is {selling_txt}",
        market_strategy=market_strategy,
        actions=actions,
    )
