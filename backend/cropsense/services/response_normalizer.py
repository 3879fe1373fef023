"""Response Normalizer: raw model text -> canonical ``Forecast``.

Pipeline (each step raises, nothing is silently substituted):
  1. sanitize_json        — strip fences/prose, slice first '{' .. last '}'
  2. parse_ai_response    — json.loads, else MalformedResponseError
  3. validate_ai_forecast — required keys + glut_risk enum, else ResponseValidationError
  4. normalize_ai_forecast — reshape the snake_case AI schema into Forecast

This module is the ONLY translator between the AI prompt schema and the
canonical schema.
"""

from __future__ import annotations

import json
import logging
import random
import re
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..constants import AI_GLUT_RISK_LABELS, SOURCE_AI
from ..schemas.forecast_schema import Forecast, ForecastRequest, MarketRecord, TrendSeries, utc_now
from .advice import build_recommendations
from .errors import MalformedResponseError, ResponseValidationError
from .market_data import market_coordinates

logger = logging.getLogger(__name__)

_REQUIRED_KEYS = ["forecast_trend", "glut_risk"]

_LEADING_FENCE = re.compile(r"^```[a-zA-Z]*\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")

# Synthesized map pins for AI-suggested markets
_AI_MARKET_PRICE_MIN = 25.0
_AI_MARKET_PRICE_SPAN = 15.0


# ---------------------------------------------------------------------------
# JSON sanitizer — extracts the JSON object from LLM output
# ---------------------------------------------------------------------------
def sanitize_json(raw: str) -> str:
    """Extract a JSON object substring from raw LLM output.

    Handles:
      - Markdown fences (```json ... ```)
      - Leading/trailing whitespace and BOM
      - Prose before/after the JSON object

    Raises MalformedResponseError if no '{' ... '}' span is found.
    """
    text = (raw or "").strip().lstrip("\ufeff")
    text = _LEADING_FENCE.sub("", text)
    text = _TRAILING_FENCE.sub("", text).strip()

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise MalformedResponseError("AI did not return a JSON object: no '{...}' span found")
    return text[start : end + 1]


def parse_ai_response(raw: str) -> Dict[str, Any]:
    sanitized = sanitize_json(raw)
    try:
        return json.loads(sanitized)
    except json.JSONDecodeError as exc:
        logger.warning("[NORMALIZER] JSON parse failed: %s", exc)
        raise MalformedResponseError(f"AI output is not valid JSON: {exc.msg}") from exc


def validate_required_keys(parsed: dict, required_keys: Sequence[str]) -> List[str]:
    """Return the required keys missing from ``parsed`` (empty list when complete)."""
    return [k for k in required_keys if parsed.get(k) is None]


def validate_ai_forecast(data: Dict[str, Any]) -> None:
    """Check the fields the reshape step depends on.

    ``glut_risk`` must match the capitalized enum the prompt asked for exactly.
    """
    missing = validate_required_keys(data, _REQUIRED_KEYS)
    if missing:
        raise ResponseValidationError(f"Missing required field(s): {', '.join(missing)}")

    trend = data["forecast_trend"]
    if not isinstance(trend, list) or len(trend) == 0:
        raise ResponseValidationError("forecast_trend must be a non-empty array")
    if not all(isinstance(item, dict) for item in trend):
        raise ResponseValidationError("forecast_trend entries must be objects")

    if data["glut_risk"] not in AI_GLUT_RISK_LABELS:
        raise ResponseValidationError(
            f"glut_risk must be one of {', '.join(AI_GLUT_RISK_LABELS)}, got {data['glut_risk']!r}"
        )


def synthesize_markets(names: Sequence[str], rng: Optional[random.Random] = None) -> List[MarketRecord]:
    """Map pins for AI-suggested market names. The first suggestion is the low-risk pick."""
    rng = rng or random.Random()
    records: List[MarketRecord] = []
    for index, name in enumerate(names):
        lat, lng = market_coordinates(name, rng)
        records.append(
            MarketRecord(
                name=name,
                lat=lat,
                lng=lng,
                demand="high",
                price=round(_AI_MARKET_PRICE_MIN + rng.random() * _AI_MARKET_PRICE_SPAN, 2),
                risk="low" if index == 0 else "medium",
            )
        )
    return records


def normalize_ai_forecast(
    raw: str,
    request: ForecastRequest,
    *,
    rng: Optional[random.Random] = None,
    now: Optional[Callable[[], datetime]] = None,
) -> Forecast:
    """Turn raw model text into a canonical Forecast, or raise a ForecastError."""
    data = parse_ai_response(raw)
    validate_ai_forecast(data)

    trend = data["forecast_trend"]
    # Truncate, never pad: short replies give short series.
    demand = [item.get("expected_demand_kg") for item in trend]
    price = [item.get("expected_price_per_kg") for item in trend]

    glut_risk = data["glut_risk"].lower()
    suggested = data.get("suggested_markets") or []
    if not isinstance(suggested, list):
        raise ResponseValidationError("suggested_markets must be an array")

    planting = data.get("optimal_planting_time")
    selling = data.get("optimal_selling_time")
    recommended = data.get("recommended_quantity_kg")
    summary = data.get("action_summary")

    try:
        forecast = Forecast(
            crop=request.crop,
            district=request.district,
            season=request.season,
            quantity=request.quantity,
            demand_trend=TrendSeries.from_series(demand),
            price_trend=TrendSeries.from_series(price),
            glut_risk=glut_risk,
            optimal_planting_time=planting,
            optimal_selling_time=selling,
            recommended_quantity=recommended,
            suggested_markets=suggested,
            action_summary=summary,
            recommendations=build_recommendations(
                crop=request.crop,
                district=request.district,
                planting=str(planting),
                selling=str(selling),
                recommended_quantity=recommended,
                markets=[str(m) for m in suggested],
                glut_risk=glut_risk,
                market_strategy=str(summary),
            ),
            markets=synthesize_markets([str(m) for m in suggested], rng),
            source=SOURCE_AI,
            timestamp=(now or utc_now)(),
        )
    except ValidationError as exc:
        raise ResponseValidationError(
            f"AI response does not fit the forecast schema ({exc.error_count()} error(s))"
        ) from exc

    logger.info(
        "[NORMALIZER] AI forecast normalized: %d trend days, glut=%s",
        len(trend), glut_risk,
    )
    return forecast
