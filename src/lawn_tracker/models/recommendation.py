"""
Recommendation data models.

All of these are derived values: they are recomputed on every request and
never persisted. Optional fields mean "no recommendation available".
"""

from dataclasses import dataclass, field
from typing import Optional, List

from .weather import WeatherSnapshot


@dataclass
class PGREstimate:
    """Estimated timing of the next PGR application."""

    days_until_next: int
    gdd_per_day: float
    recommended_interval_days: int
    message: str


@dataclass
class GDDInfo:
    """Growing degree day summary for the current forecast."""

    current_gdd: float
    base_temp: float
    next_estimate: Optional[PGREstimate] = None
    weather: Optional[WeatherSnapshot] = None


@dataclass
class ApplicationEstimate:
    """Estimated timing of the next fertilizer or iron application."""

    days_until_next: int
    interval_months: int
    message: str
    recommendations: Optional[List[str]] = None  # fertilizer only


@dataclass
class SoilAnalysis:
    """Overall soil health assessment."""

    overall: str  # Excellent, Good, Fair or Poor
    score: int  # 0-100
    issues: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass
class RecommendationBundle:
    """Everything the tracker recommends for the current state."""

    gdd_info: Optional[GDDInfo] = None
    fertilizer: Optional[ApplicationEstimate] = None
    iron: Optional[ApplicationEstimate] = None
    soil_analysis: Optional[SoilAnalysis] = None
