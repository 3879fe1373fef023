"""Static market reference data.

Pure lookups, no I/O. Every lookup resolves unknown keys to a designated
default (Karnataka for regions, Rice for crops) instead of raising.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..schemas.forecast_schema import MarketRecord

DEFAULT_REGION = "Karnataka"
DEFAULT_CROP = "Rice"

# Fallback anchor for AI-suggested market names we have no coordinates for.
DEFAULT_COORDINATES: Tuple[float, float] = (12.9716, 77.5946)
UNKNOWN_MARKET_JITTER_DEG = 1.0


@dataclass(frozen=True)
class CropEconomics:
    base_price: float  # currency per kg
    volatility: float  # width of the daily random band, as a fraction
    demand_multiplier: float


_CROP_ECONOMICS: Dict[str, CropEconomics] = {
    "Rice": CropEconomics(base_price=25, volatility=0.10, demand_multiplier=1.2),
    "Wheat": CropEconomics(base_price=22, volatility=0.08, demand_multiplier=1.1),
    "Maize": CropEconomics(base_price=18, volatility=0.12, demand_multiplier=1.0),
    "Cotton": CropEconomics(base_price=45, volatility=0.15, demand_multiplier=0.9),
    "Sugarcane": CropEconomics(base_price=3, volatility=0.05, demand_multiplier=1.3),
    "Tomato": CropEconomics(base_price=35, volatility=0.20, demand_multiplier=1.1),
    "Onion": CropEconomics(base_price=20, volatility=0.18, demand_multiplier=1.0),
    "Potato": CropEconomics(base_price=15, volatility=0.12, demand_multiplier=1.1),
}

_REGION_MARKETS: Dict[str, List[MarketRecord]] = {
    "Karnataka": [
        MarketRecord(name="Bangalore APMC", lat=12.9716, lng=77.5946, demand="high"),
        MarketRecord(name="Mysore Market", lat=12.2958, lng=76.6394, demand="medium"),
        MarketRecord(name="Hubli APMC", lat=15.3647, lng=75.1240, demand="low"),
        MarketRecord(name="Mangalore Market", lat=12.9141, lng=74.8560, demand="high"),
    ],
    "Maharashtra": [
        MarketRecord(name="Mumbai APMC", lat=19.0760, lng=72.8777, demand="high"),
        MarketRecord(name="Pune Market", lat=18.5204, lng=73.8567, demand="medium"),
        MarketRecord(name="Nashik APMC", lat=19.9975, lng=73.7898, demand="low"),
        MarketRecord(name="Nagpur Market", lat=21.1458, lng=79.0882, demand="medium"),
    ],
    "Tamil Nadu": [
        MarketRecord(name="Chennai Koyambedu", lat=13.0827, lng=80.2707, demand="high"),
        MarketRecord(name="Coimbatore Market", lat=11.0168, lng=76.9558, demand="medium"),
        MarketRecord(name="Madurai APMC", lat=9.9252, lng=78.1198, demand="low"),
        MarketRecord(name="Salem Market", lat=11.6643, lng=78.1460, demand="medium"),
    ],
}

# Candidate selling markets named in advice text (separate from the map pins above).
_SUGGESTED_MARKETS: Dict[str, List[str]] = {
    "Karnataka": ["KR Market", "Yeshwantpur Market", "Bangalore Central Market"],
    "Maharashtra": ["Crawford Market", "Pune Market", "Nashik Market"],
    "Tamil Nadu": ["Koyambedu Market", "Chennai Central Market", "Coimbatore Market"],
    "Punjab": ["Ludhiana Market", "Amritsar Market", "Jalandhar Market"],
    "Haryana": ["Gurgaon Market", "Faridabad Market", "Panipat Market"],
}

_MARKET_COORDINATES: Dict[str, Tuple[float, float]] = {
    "KR Market": (12.9716, 77.5946),
    "Yeshwantpur Market": (13.0283, 77.5546),
    "Bangalore Central Market": (12.9716, 77.5946),
    "Mysore Market": (12.2958, 76.6394),
    "Hubli Market": (15.3647, 75.1240),
    "Mangalore Market": (12.9141, 74.8560),
}


def markets_for(region: str) -> List[MarketRecord]:
    """Map pins for a region; unknown regions get the Karnataka list."""
    return list(_REGION_MARKETS.get(region, _REGION_MARKETS[DEFAULT_REGION]))


def economic_params(crop: str) -> CropEconomics:
    """Baseline economics for a crop; unknown crops get Rice's parameters."""
    return _CROP_ECONOMICS.get(crop, _CROP_ECONOMICS[DEFAULT_CROP])


def suggested_markets_for(region: str) -> List[str]:
    return list(_SUGGESTED_MARKETS.get(region, _SUGGESTED_MARKETS[DEFAULT_REGION]))


def market_coordinates(name: str, rng: Optional[random.Random] = None) -> Tuple[float, float]:
    """Known coordinates for a market name, else a jittered default anchor."""
    if name in _MARKET_COORDINATES:
        return _MARKET_COORDINATES[name]
    rng = rng or random.Random()
    lat, lng = DEFAULT_COORDINATES
    return (
        lat + (rng.random() - 0.5) * 2 * UNKNOWN_MARKET_JITTER_DEG,
        lng + (rng.random() - 0.5) * 2 * UNKNOWN_MARKET_JITTER_DEG,
    )
