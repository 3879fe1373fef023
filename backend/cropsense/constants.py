"""Centralized constants shared across the forecast services and routes.

This module is the SINGLE SOURCE OF TRUTH for season labels, risk levels,
trend horizons and the fixed heuristics used by the mock generator and the
simulation projections. Reused by:
  - Mock Forecast Generator
  - Response Normalizer
  - Simulation Service
"""

from __future__ import annotations

from enum import Enum


class Season(str, Enum):
    """Indian cropping seasons accepted by the forecast endpoints."""

    KHARIF = "Kharif"
    RABI = "Rabi"
    ZAID = "Zaid"


# ── Glut risk ───────────────────────────────────────────────────────────
# Canonical (output) labels are lowercase. The AI prompt asks for the
# capitalized form and the normalizer matches it exactly.
GLUT_RISK_LEVELS: tuple[str, ...] = ("low", "medium", "high")
AI_GLUT_RISK_LABELS: tuple[str, ...] = ("Low", "Medium", "High")

GLUT_HIGH_RATIO = 1.5
GLUT_MEDIUM_RATIO = 1.2

# ── Trend horizons ──────────────────────────────────────────────────────
HORIZON_DAYS: dict[str, int] = {
    "7day": 7,
    "14day": 14,
    "30day": 30,
}
FORECAST_DAYS = 30

# ── Mock generator heuristics ───────────────────────────────────────────
DEFAULT_QUANTITY_KG = 100.0
SEASONAL_PERIOD_DAYS = 7
SEASONAL_AMPLITUDE = 0.1
RECOMMENDED_QUANTITY_FACTOR = 0.9
PLANTING_LEAD_DAYS = 7
GROWTH_CYCLE_DAYS = 90

# ── Simulation ──────────────────────────────────────────────────────────
UNIT_COST_PER_KG = 10.0
VOLATILITY_MEDIUM_THRESHOLD = 0.08
VOLATILITY_HIGH_THRESHOLD = 0.15
DEFAULT_MARKET_CHOICE = "Local Market"

# ── Provenance ──────────────────────────────────────────────────────────
SOURCE_AI = "gemini-ai"
SOURCE_MOCK = "mock-data"
