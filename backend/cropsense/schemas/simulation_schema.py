"""Pydantic schemas for the scenario simulation endpoint."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..constants import DEFAULT_MARKET_CHOICE, Season
from .forecast_schema import Forecast, RiskLevel


class SimulationRequest(BaseModel):
    """Forecast input plus the market scenario to project."""

    crop: str = Field(..., min_length=1, max_length=100)
    district: str = Field(..., min_length=1, max_length=100)
    season: Season
    quantity: Optional[float] = Field(
        default=None,
        gt=0,
        description="Quantity (kg) to project; defaults to the forecast's recommendation",
    )
    market_choice: str = Field(
        default=DEFAULT_MARKET_CHOICE,
        alias="marketChoice",
        max_length=100,
    )

    class Config:
        frozen = True
        populate_by_name = True

    @field_validator("crop", "district")
    @classmethod
    def strip_names(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("must not be blank")
        return stripped


class RiskAssessment(BaseModel):
    glut_risk: RiskLevel = Field(..., alias="glutRisk")
    market_volatility: RiskLevel = Field(
        ...,
        alias="marketVolatility",
        description="Bucketed coefficient of variation of the 30-day price series",
    )
    seasonal_factor: RiskLevel = Field(..., alias="seasonalFactor")

    class Config:
        frozen = True
        populate_by_name = True


class SimulationPredictions(BaseModel):
    revenue: float = Field(..., description="Projected revenue (currency)")
    profit: float = Field(..., description="Revenue minus per-kg production cost")
    risk_assessment: RiskAssessment = Field(..., alias="riskAssessment")

    class Config:
        frozen = True
        populate_by_name = True


class SimulationResult(Forecast):
    """A forecast extended with financial projections for one market choice."""

    simulation_type: Literal["scenario-analysis"] = Field(
        default="scenario-analysis", alias="simulationType"
    )
    market_choice: str = Field(..., alias="marketChoice")
    predictions: SimulationPredictions
