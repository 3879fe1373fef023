"""HTTP surface tests — /api/forecast, /api/simulate, / and /health.

The Gemini client is kept out of the picture by overriding the service
dependencies with a mock-only ForecastService.
"""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import random

import pytest
from fastapi.testclient import TestClient

from cropsense.main import app
from cropsense.services.forecast_dependency import get_forecast_service, get_simulation_service
from cropsense.services.forecast_service import ForecastService
from cropsense.services.mock_generator import MockForecastGenerator
from cropsense.services.simulation_service import SimulationService

KARNATAKA_MARKETS = {"Bangalore APMC", "Mysore Market", "Hubli APMC", "Mangalore Market"}


@pytest.fixture
def client():
    forecast_service = ForecastService(
        ai_client=None,
        generator=MockForecastGenerator(rng=random.Random(42)),
    )
    simulation_service = SimulationService(forecast_service)
    app.dependency_overrides[get_forecast_service] = lambda: forecast_service
    app.dependency_overrides[get_simulation_service] = lambda: simulation_service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestForecastEndpoint:
    def test_rice_karnataka(self, client):
        res = client.post(
            "/api/forecast",
            json={"crop": "Rice", "district": "Karnataka", "season": "Kharif", "quantity": 100},
        )
        assert res.status_code == 200
        body = res.json()

        assert len(body["demandTrend"]["7day"]) == 7
        assert len(body["demandTrend"]["14day"]) == 14
        assert len(body["priceTrend"]["30day"]) == 30
        assert body["glutRisk"] in {"low", "medium", "high"}
        assert body["source"] == "mock-data"
        assert "warning" not in body
        assert KARNATAKA_MARKETS & {m["name"] for m in body["markets"]}
        assert body["recommendations"]["sowingTime"]
        assert body["actionSummary"].startswith("Plant ")

    def test_quantity_defaults_to_100(self, client):
        res = client.post("/api/forecast", json={"crop": "Onion", "district": "Maharashtra", "season": "Rabi"})
        assert res.status_code == 200
        assert res.json()["quantity"] == 100

    def test_missing_season_is_422(self, client):
        res = client.post("/api/forecast", json={"crop": "Rice", "district": "Karnataka"})
        assert res.status_code == 422

    def test_unknown_season_is_422(self, client):
        res = client.post(
            "/api/forecast",
            json={"crop": "Rice", "district": "Karnataka", "season": "Monsoon"},
        )
        assert res.status_code == 422

    def test_non_positive_quantity_is_422(self, client):
        res = client.post(
            "/api/forecast",
            json={"crop": "Rice", "district": "Karnataka", "season": "Kharif", "quantity": 0},
        )
        assert res.status_code == 422

    def test_blank_crop_is_422(self, client):
        res = client.post(
            "/api/forecast",
            json={"crop": "   ", "district": "Karnataka", "season": "Kharif"},
        )
        assert res.status_code == 422


class TestSimulateEndpoint:
    def test_simulation_payload(self, client):
        res = client.post(
            "/api/simulate",
            json={
                "crop": "Tomato",
                "district": "Tamil Nadu",
                "season": "Zaid",
                "quantity": 200,
                "marketChoice": "Koyambedu Market",
            },
        )
        assert res.status_code == 200
        body = res.json()

        assert body["simulationType"] == "scenario-analysis"
        assert body["marketChoice"] == "Koyambedu Market"
        predictions = body["predictions"]
        assert predictions["profit"] == pytest.approx(predictions["revenue"] - 200 * 10, abs=0.01)
        assert set(predictions["riskAssessment"]) == {"glutRisk", "marketVolatility", "seasonalFactor"}
        assert predictions["riskAssessment"]["seasonalFactor"] == "low"
        assert len(body["priceTrend"]["30day"]) == 30

    def test_default_market_choice(self, client):
        res = client.post("/api/simulate", json={"crop": "Rice", "district": "Karnataka", "season": "Kharif"})
        assert res.status_code == 200
        body = res.json()
        assert body["marketChoice"] == "Local Market"
        assert body["predictions"]["riskAssessment"]["seasonalFactor"] == "medium"

    def test_invalid_season_is_422(self, client):
        res = client.post("/api/simulate", json={"crop": "Rice", "district": "Karnataka", "season": "Winter"})
        assert res.status_code == 422

    @pytest.mark.parametrize(
        "payload",
        [
            {"crop": "   ", "district": "Karnataka", "season": "Kharif"},
            {"crop": "Rice", "district": "  ", "season": "Kharif"},
        ],
    )
    def test_blank_names_are_422(self, client, payload):
        res = client.post("/api/simulate", json=payload)
        assert res.status_code == 422

    def test_names_are_stripped(self, client):
        res = client.post("/api/simulate", json={"crop": "  Rice ", "district": "Karnataka ", "season": "Rabi"})
        assert res.status_code == 200
        assert (res.json()["crop"], res.json()["district"]) == ("Rice", "Karnataka")


class TestGeneralEndpoints:
    def test_root(self, client):
        body = client.get("/").json()
        assert body["name"] == "CropSense"
        assert "forecast" in body["endpoints"]

    def test_health(self, client):
        res = client.get("/health")
        assert res.status_code == 200
        body = res.json()
        assert body["status"] == "healthy"
        assert isinstance(body["ai_configured"], bool)
