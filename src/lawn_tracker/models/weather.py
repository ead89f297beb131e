"""
Weather data models.

Contains the normalized snapshot produced by the weather provider.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class WeatherSnapshot:
    """Current conditions plus forecast temperature averages (°F)."""

    current_temp: float
    current_humidity: float  # %
    forecast_avg_max_temp: float
    forecast_avg_min_temp: float
    location_city: Optional[str] = None
    location_zip: Optional[str] = None
    location_country: Optional[str] = None
    description: Optional[str] = None
