"""FastAPI dependencies that hand the orchestrators to route handlers.

Services are built once per application (at startup, or lazily on the first
request when the lifespan did not run) and kept on ``app.state``. Tests swap
them with ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import FastAPI, Request

from .ai_client import GeminiForecastClient
from .forecast_service import ForecastService
from .simulation_service import SimulationService


def build_services(app: FastAPI) -> ForecastService:
    forecast_service = ForecastService(ai_client=GeminiForecastClient())
    app.state.forecast_service = forecast_service
    app.state.simulation_service = SimulationService(forecast_service)
    return forecast_service


def get_forecast_service(request: Request) -> ForecastService:
    service = getattr(request.app.state, "forecast_service", None)
    if service is None:
        service = build_services(request.app)
    return service


def get_simulation_service(request: Request) -> SimulationService:
    service = getattr(request.app.state, "simulation_service", None)
    if service is None:
        build_services(request.app)
        service = request.app.state.simulation_service
    return service
