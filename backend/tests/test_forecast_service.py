"""Forecast and simulation orchestrator tests — fallback behaviour and projections."""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
import json
import random
import time
from datetime import date

import pytest

from cropsense.schemas.forecast_schema import Forecast, ForecastRequest, TrendSeries
from cropsense.schemas.simulation_schema import SimulationRequest
from cropsense.services.ai_client import GeminiForecastClient
from cropsense.services.errors import (
    ForecastTimeoutError,
    ForecastTransportError,
    MalformedResponseError,
)
from cropsense.services.forecast_service import ForecastService
from cropsense.services.mock_generator import MockForecastGenerator
from cropsense.services.simulation_service import (
    SimulationService,
    price_volatility,
    volatility_bucket,
)

REQUEST = ForecastRequest(crop="Rice", district="Karnataka", season="Kharif", quantity=100)

VALID_REPLY = json.dumps({
    "forecast_trend": [
        {"date": "2026-11-01", "expected_demand_kg": 120, "expected_price_per_kg": 24.5},
        {"date": "2026-11-02", "expected_demand_kg": 118, "expected_price_per_kg": 25.0},
    ],
    "glut_risk": "High",
    "optimal_planting_time": "2026-11-01",
    "optimal_selling_time": "2027-02-01",
    "recommended_quantity_kg": 80,
    "suggested_markets": ["KR Market", "Mysore Market"],
    "action_summary": "Reduce planting to 80 kg.",
})


class _StubClient:
    """Stands in for GeminiForecastClient: returns a reply or raises."""

    def __init__(self, reply=None, error=None, is_available=True):
        self.reply = reply
        self.error = error
        self.is_available = is_available
        self.calls = 0

    async def request_forecast(self, request):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.reply


def _generator():
    return MockForecastGenerator(rng=random.Random(11), today=lambda: date(2026, 10, 18))


def _service(client):
    return ForecastService(ai_client=client, generator=_generator())


# ===================================================================== #
#  Forecast orchestrator                                                 #
# ===================================================================== #

class TestForecastService:
    def test_unavailable_ai_returns_mock_without_warning(self):
        client = _StubClient(is_available=False)
        forecast = asyncio.run(_service(client).get_forecast(REQUEST))

        assert forecast.source == "mock-data"
        assert forecast.warning is None
        assert client.calls == 0

    def test_no_client_returns_mock(self):
        forecast = asyncio.run(_service(None).get_forecast(REQUEST))
        assert forecast.source == "mock-data"

    def test_availability_override_skips_client(self):
        client = _StubClient(reply=VALID_REPLY)
        service = ForecastService(ai_client=client, generator=_generator(), ai_available=False)
        forecast = asyncio.run(service.get_forecast(REQUEST))

        assert forecast.source == "mock-data"
        assert client.calls == 0

    def test_valid_reply_is_ai_generated(self):
        forecast = asyncio.run(_service(_StubClient(reply=VALID_REPLY)).get_forecast(REQUEST))

        assert forecast.source == "gemini-ai"
        assert forecast.glut_risk == "high"
        assert forecast.demand_trend.thirty_day == [120, 118]
        assert forecast.warning is None

    @pytest.mark.parametrize(
        "error",
        [
            ForecastTimeoutError("AI request timeout after 15 seconds"),
            ForecastTransportError("AI transport error: connection refused"),
            MalformedResponseError("no JSON"),
        ],
    )
    def test_ai_errors_fall_back_with_warning(self, error):
        forecast = asyncio.run(_service(_StubClient(error=error)).get_forecast(REQUEST))

        assert isinstance(forecast, Forecast)
        assert forecast.source == "mock-data"
        assert forecast.warning == f"Using fallback data: {error.message}"
        assert len(forecast.demand_trend.seven_day) == 7

    def test_invalid_reply_falls_back(self):
        reply = json.dumps({"forecast_trend": [], "glut_risk": "Low"})
        forecast = asyncio.run(_service(_StubClient(reply=reply)).get_forecast(REQUEST))

        assert forecast.source == "mock-data"
        assert "non-empty" in forecast.warning

    def test_unexpected_error_falls_back(self):
        forecast = asyncio.run(_service(_StubClient(error=KeyError("choices"))).get_forecast(REQUEST))
        assert forecast.source == "mock-data"
        assert forecast.warning.startswith("Using fallback data: unexpected error")

    def test_hanging_model_falls_back_within_timeout(self):
        class _HangingCompletions:
            async def create(self, **kwargs):
                await asyncio.sleep(10)

        sdk = type("SDK", (), {})()
        sdk.chat = type("Chat", (), {})()
        sdk.chat.completions = _HangingCompletions()
        client = GeminiForecastClient(api_key="test-key", timeout_seconds=0.1, client=sdk)

        started = time.perf_counter()
        forecast = asyncio.run(_service(client).get_forecast(REQUEST))
        elapsed = time.perf_counter() - started

        assert forecast.source == "mock-data"
        assert "timeout" in forecast.warning
        assert elapsed < 5


# ===================================================================== #
#  Simulation orchestrator                                               #
# ===================================================================== #

class _FixedForecastService:
    """Returns a prepared forecast and records the request it was asked for."""

    def __init__(self, forecast):
        self.forecast = forecast
        self.requests = []

    async def get_forecast(self, request):
        self.requests.append(request)
        return self.forecast


def _flat_forecast(price=20.0, recommended=90):
    base = _generator().generate(REQUEST)
    return base.model_copy(update={
        "price_trend": TrendSeries.from_series([price] * 30),
        "recommended_quantity": recommended,
    })


class TestVolatility:
    def test_zero_variance_is_low(self):
        assert price_volatility([20.0] * 30) == 0.0
        assert volatility_bucket([20.0] * 30) == "low"

    def test_buckets(self):
        assert volatility_bucket([100, 100, 100, 116]) == "low"       # cv ~0.068
        assert volatility_bucket([80, 120]) == "high"                 # cv 0.2
        assert volatility_bucket([90, 110]) == "medium"               # cv 0.1

    def test_zero_mean_is_low(self):
        assert volatility_bucket([0, 0, 0]) == "low"


class TestSimulationService:
    def test_flat_prices_profit_is_exact(self):
        forecast_service = _FixedForecastService(_flat_forecast(price=20.0))
        request = SimulationRequest(crop="Rice", district="Karnataka", season="Rabi", quantity=150, marketChoice="KR Market")
        result = asyncio.run(SimulationService(forecast_service).get_simulation(request))

        revenue = result.predictions.revenue
        assert revenue == 20.0 * 150
        assert result.predictions.profit == revenue - 150 * 10
        assert result.predictions.risk_assessment.market_volatility == "low"
        assert result.predictions.risk_assessment.seasonal_factor == "low"
        assert result.market_choice == "KR Market"
        assert result.simulation_type == "scenario-analysis"

    def test_missing_quantity_uses_recommendation(self):
        forecast_service = _FixedForecastService(_flat_forecast(price=30.0, recommended=90))
        request = SimulationRequest(crop="Rice", district="Karnataka", season="Kharif")
        result = asyncio.run(SimulationService(forecast_service).get_simulation(request))

        assert result.predictions.revenue == 2700.0
        assert result.predictions.profit == 1800.0
        assert result.predictions.risk_assessment.seasonal_factor == "medium"
        assert result.market_choice == "Local Market"
        assert forecast_service.requests[0].quantity == 100
        assert forecast_service.requests[0].scenario == "simulation"

    def test_risk_copies_glut_risk(self):
        forecast = _flat_forecast().model_copy(update={"glut_risk": "high"})
        request = SimulationRequest(crop="Rice", district="Karnataka", season="Zaid", quantity=10)
        result = asyncio.run(SimulationService(_FixedForecastService(forecast)).get_simulation(request))

        assert result.predictions.risk_assessment.glut_risk == "high"
        assert result.glut_risk == "high"

    def test_end_to_end_with_mock_path(self):
        service = SimulationService(_service(_StubClient(is_available=False)))
        request = SimulationRequest(crop="Wheat", district="Punjab", season="Rabi", quantity=200)
        result = asyncio.run(service.get_simulation(request))

        assert result.source == "mock-data"
        assert result.predictions.revenue > 0
        assert result.predictions.risk_assessment.market_volatility in {"low", "medium", "high"}
