"""Canonical forecast schemas.

This is the one response shape owned by the forecast core. Both the mock
generator and the AI response normalizer produce a ``Forecast``; routes
serialize it by alias (camelCase, ``7day``-style horizon keys).
Do NOT add legacy field aliases here (e.g. ``marketHeatmap``).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, Field, field_validator

from ..constants import DEFAULT_QUANTITY_KG, FORECAST_DAYS, GLUT_RISK_LEVELS, Season

Number = Union[int, float]
RiskLevel = Literal["low", "medium", "high"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ForecastRequest(BaseModel):
    """Farmer input for a single forecast. Immutable once constructed."""

    crop: str = Field(..., min_length=1, max_length=100, description="Crop name, e.g. 'Rice'")
    district: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Region name used for market lookups, e.g. 'Karnataka'",
    )
    season: Season = Field(..., description="Cropping season: Kharif, Rabi or Zaid")
    quantity: float = Field(
        default=DEFAULT_QUANTITY_KG,
        gt=0,
        description="Planned quantity in kilograms",
    )
    scenario: str = Field(
        default="standard",
        max_length=50,
        description="Scenario hint forwarded to the AI model",
    )

    class Config:
        frozen = True

    @field_validator("crop", "district")
    @classmethod
    def strip_names(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class TrendSeries(BaseModel):
    """Three nested horizons over ONE underlying daily series.

    Always build through ``from_series`` so the 7-day list is a prefix of the
    14-day list, which is a prefix of the 30-day list.
    """

    seven_day: List[Number] = Field(..., alias="7day")
    fourteen_day: List[Number] = Field(..., alias="14day")
    thirty_day: List[Number] = Field(..., alias="30day")

    class Config:
        frozen = True
        populate_by_name = True

    @classmethod
    def from_series(cls, values: Sequence[Number]) -> "TrendSeries":
        series = list(values)[:FORECAST_DAYS]
        return cls(
            seven_day=series[:7],
            fourteen_day=series[:14],
            thirty_day=series,
        )


class MarketRecord(BaseModel):
    name: str
    lat: float
    lng: float
    demand: RiskLevel
    price: Optional[float] = None
    risk: Optional[RiskLevel] = None

    class Config:
        frozen = True


class Recommendations(BaseModel):
    """Structured advice block rendered by the front end."""

    sowing_time: str = Field(..., alias="sowingTime")
    selling_time: str = Field(..., alias="sellingTime")
    market_strategy: str = Field(..., alias="marketStrategy")
    actions: List[str] = Field(default_factory=list)

    class Config:
        frozen = True
        populate_by_name = True


class Forecast(BaseModel):
    """The complete forecast returned to callers, whichever path produced it."""

    crop: str
    district: str
    season: Season
    quantity: float

    demand_trend: TrendSeries = Field(..., alias="demandTrend")
    price_trend: TrendSeries = Field(..., alias="priceTrend")
    glut_risk: RiskLevel = Field(..., alias="glutRisk")

    optimal_planting_time: str = Field(..., alias="optimalPlantingTime")
    optimal_selling_time: str = Field(..., alias="optimalSellingTime")
    recommended_quantity: Number = Field(..., alias="recommendedQuantity")

    suggested_markets: List[str] = Field(default_factory=list, alias="suggestedMarkets")
    action_summary: str = Field(..., alias="actionSummary")
    recommendations: Recommendations
    markets: List[MarketRecord] = Field(default_factory=list)

    source: Literal["gemini-ai", "mock-data"] = Field(
        ..., description="Provenance tag: which generator produced this forecast"
    )
    timestamp: datetime = Field(default_factory=utc_now)
    warning: Optional[str] = Field(
        default=None,
        description="Advisory set only when the AI path failed and mock data was substituted",
    )

    class Config:
        frozen = True
        populate_by_name = True

    @field_validator("glut_risk", mode="before")
    @classmethod
    def lowercase_risk(cls, v):
        if isinstance(v, str) and v.lower() in GLUT_RISK_LEVELS:
            return v.lower()
        return v
