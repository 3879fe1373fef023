from .ai_client import GeminiForecastClient
from .forecast_service import ForecastService
from .mock_generator import MockForecastGenerator, classify_glut_risk
from .response_normalizer import normalize_ai_forecast
from .simulation_service import SimulationService

__all__ = [
    "GeminiForecastClient",
    "ForecastService",
    "MockForecastGenerator",
    "classify_glut_risk",
    "normalize_ai_forecast",
    "SimulationService",
]
