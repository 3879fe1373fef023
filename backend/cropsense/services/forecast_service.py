"""Forecast Orchestrator: the single fallback boundary.

Entry point: ForecastService.get_forecast(request) -> Forecast

Flow:
  1. If the AI client is unavailable → mock forecast (normal mode, no advisory)
  2. AI client → raw text → response normalizer → Forecast
  3. Any failure in step 2 → mock forecast tagged with a ``warning`` advisory

Never raises. The generator, client and normalizer stay fallback-agnostic.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from ..schemas.forecast_schema import Forecast, ForecastRequest
from .errors import ForecastError
from .mock_generator import MockForecastGenerator
from .response_normalizer import normalize_ai_forecast
from .timing import StepTimer

logger = logging.getLogger(__name__)

FALLBACK_WARNING_PREFIX = "Using fallback data"


class ForecastClient(Protocol):
    is_available: bool

    async def request_forecast(self, request: ForecastRequest) -> str: ...


class ForecastService:
    def __init__(
        self,
        ai_client: Optional[ForecastClient],
        generator: Optional[MockForecastGenerator] = None,
        normalizer: Callable[[str, ForecastRequest], Forecast] = normalize_ai_forecast,
        ai_available: Optional[bool] = None,
    ):
        self.ai_client = ai_client
        self.generator = generator or MockForecastGenerator()
        self.normalizer = normalizer
        if ai_available is None:
            ai_available = bool(ai_client is not None and ai_client.is_available)
        self.ai_available = ai_available

    def _fallback(self, request: ForecastRequest, reason: str) -> Forecast:
        forecast = self.generator.generate(request)
        return forecast.model_copy(update={"warning": f"{FALLBACK_WARNING_PREFIX}: {reason}"})

    async def get_forecast(self, request: ForecastRequest) -> Forecast:
        logger.info(
            "[FORECAST] Processing %s in %s (%s season), %s kg",
            request.crop, request.district, request.season.value, request.quantity,
        )

        if not self.ai_available or self.ai_client is None:
            logger.info("[FORECAST] AI not configured. Using mock forecast data")
            return self.generator.generate(request)

        timer = StepTimer("forecast")
        try:
            with timer.step("ai_request"):
                raw = await self.ai_client.request_forecast(request)
            with timer.step("normalize"):
                forecast = self.normalizer(raw, request)
        except ForecastError as exc:
            logger.warning("[FORECAST] AI path failed (%s): %s. Falling back to mock data", type(exc).__name__, exc)
            return self._fallback(request, exc.message)
        except Exception as exc:
            logger.exception("[FORECAST] Unexpected AI path error. Falling back to mock data")
            return self._fallback(request, f"unexpected error: {exc}")
        finally:
            timer.summary()

        logger.info("[FORECAST] AI forecast generated for %s", request.crop)
        return forecast
