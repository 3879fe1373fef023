# Schemas package
from .forecast_schema import Forecast, ForecastRequest, MarketRecord, Recommendations, TrendSeries
from .simulation_schema import RiskAssessment, SimulationPredictions, SimulationRequest, SimulationResult

__all__ = [
    "ForecastRequest",
    "TrendSeries",
    "MarketRecord",
    "Recommendations",
    "Forecast",
    "SimulationRequest",
    "RiskAssessment",
    "SimulationPredictions",
    "SimulationResult",
]
