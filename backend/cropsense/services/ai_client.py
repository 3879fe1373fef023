"""AI Forecast Client: Gemini via the OpenAI-compatible endpoint.

All forecast-model traffic goes through ``GeminiForecastClient``.
This ensures:
  - Credential presence is checked ONCE, at construction (``is_available``).
  - A bounded thinking budget keeps latency predictable.
  - The streamed reply races a hard wall-clock timeout (default 15s).
  - Every failure surfaces as a typed ``ForecastError``; no retries here.

The client returns raw model text. Cleaning and validation belong to
``response_normalizer``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

from openai import APITimeoutError, AsyncOpenAI, OpenAIError

from ..config import get_ai_timeout, get_gemini_base_url, get_gemini_key, get_gemini_model, get_thinking_budget
from ..schemas.forecast_schema import ForecastRequest
from .errors import ForecastTimeoutError, ForecastTransportError, ForecastUnavailableError
from .timing import async_timer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# System prompt: terse, JSON-only, exact key set.
# ---------------------------------------------------------------------------
SYSTEM_PROMPT = (
    "You are CropSense AI. Respond with ONLY valid JSON, no extra text. "
    "Generate a quick crop forecast with these exact keys: "
    "forecast_trend (array of 7 objects with date, expected_demand_kg, expected_price_per_kg), "
    "glut_risk ('Low'/'Medium'/'High'), "
    "optimal_planting_time (YYYY-MM-DD), "
    "optimal_selling_time (YYYY-MM-DD), "
    "recommended_quantity_kg (number), "
    "suggested_markets (array of 2-3 market names), "
    "action_summary (one sentence of practical advice). "
    "Use realistic Indian market data. Be fast and concise."
)


def build_messages(request: ForecastRequest) -> List[Dict[str, str]]:
    """System instruction plus the farmer's input as a JSON user message."""
    user_payload = {
        "crop": request.crop,
        "district": request.district,
        "season": request.season.value,
        "quantity": request.quantity,
        "scenario": request.scenario,
    }
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": json.dumps(user_payload)},
    ]


def build_extra_body(thinking_budget: int) -> Dict[str, Any]:
    """Gemini-specific options, passed through the OpenAI SDK untouched."""
    return {
        "extra_body": {
            "google": {
                "thinking_config": {"thinking_budget": thinking_budget},
            }
        }
    }


class GeminiForecastClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        thinking_budget: Optional[int] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.api_key = get_gemini_key() if api_key is None else api_key.strip()
        self.model = model or get_gemini_model()
        self.base_url = base_url or get_gemini_base_url()
        self.timeout_seconds = timeout_seconds if timeout_seconds is not None else get_ai_timeout()
        self.thinking_budget = thinking_budget if thinking_budget is not None else get_thinking_budget()
        self.is_available = bool(self.api_key)

        self._client = client
        if self._client is None and self.is_available:
            # The SDK must not retry on its own: one attempt, then fallback.
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url, max_retries=0)

        if self.is_available:
            logger.info("[GEMINI] Client configured (model=%s)", self.model)
        else:
            logger.warning("[GEMINI] GEMINI_API_KEY not set. Forecasts will use mock data.")

    async def _accumulate(self, request: ForecastRequest) -> str:
        stream = await self._client.chat.completions.create(
            model=self.model,
            messages=build_messages(request),
            stream=True,
            extra_body=build_extra_body(self.thinking_budget),
        )
        parts: List[str] = []
        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                text = chunk.choices[0].delta.content
                if text:
                    parts.append(text)
        finally:
            # Also runs when wait_for cancels us; releases the HTTP connection.
            await stream.close()
        return "".join(parts)

    async def request_forecast(self, request: ForecastRequest) -> str:
        """Return the model's raw reply text for ``request``.

        Raises
        ------
        ForecastUnavailableError
            No API key configured.
        ForecastTimeoutError
            No complete reply within ``timeout_seconds``.
        ForecastTransportError
            Any SDK or network failure.
        """
        if not self.is_available or self._client is None:
            raise ForecastUnavailableError()

        logger.info(
            "[GEMINI] Requesting forecast: %s in %s (%s), %s kg",
            request.crop, request.district, request.season.value, request.quantity,
        )

        try:
            async with async_timer("gemini", "STREAM"):
                raw = await asyncio.wait_for(self._accumulate(request), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            raise ForecastTimeoutError(
                f"AI request timeout after {self.timeout_seconds:g} seconds"
            )
        except APITimeoutError as exc:
            raise ForecastTimeoutError(f"AI request timeout: {exc}") from exc
        except OpenAIError as exc:
            raise ForecastTransportError(f"AI transport error: {exc}") from exc
        except OSError as exc:
            raise ForecastTransportError(f"AI network error: {exc}") from exc

        logger.info("[GEMINI] Raw output length: %d chars", len(raw))
        logger.debug("[GEMINI] Raw output (first 300 chars): %s", raw[:300])
        return raw
