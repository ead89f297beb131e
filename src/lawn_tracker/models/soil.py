"""
Soil data models and reference ranges.

Contains the soil measurement DTO and the range tables shared by the soil
interpreter and the application interval model.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Dict, Any, List

from ..core.date_utils import DateUtils


SOIL_PARAMETERS = (
    "pH",
    "nitrogen",
    "phosphorus",
    "potassium",
    "calcium",
    "magnesium",
    "organicMatter",
)

SOIL_UNITS = {
    "pH": "",
    "nitrogen": "ppm",
    "phosphorus": "ppm",
    "potassium": "ppm",
    "calcium": "ppm",
    "magnesium": "ppm",
    "organicMatter": "%",
}


@dataclass(frozen=True)
class SoilRange:
    """Interpretation thresholds for one soil parameter."""

    low: float
    optimal: float
    high: float


@dataclass(frozen=True)
class ValidRange:
    """Plausible bounds for a measured value; anything outside is discarded."""

    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


SOIL_RANGES: Dict[str, SoilRange] = {
    "pH": SoilRange(low=5.5, optimal=6.5, high=7.5),
    "nitrogen": SoilRange(low=20, optimal=40, high=60),
    "phosphorus": SoilRange(low=10, optimal=20, high=40),
    "potassium": SoilRange(low=100, optimal=200, high=300),
    "calcium": SoilRange(low=500, optimal=1000, high=1500),
    "magnesium": SoilRange(low=50, optimal=100, high=200),
    "organicMatter": SoilRange(low=2, optimal=4, high=6),
}

VALID_RANGES: Dict[str, ValidRange] = {
    "pH": ValidRange(min=4.0, max=9.0),
    "nitrogen": ValidRange(min=1, max=200),
    "phosphorus": ValidRange(min=1, max=100),
    "potassium": ValidRange(min=10, max=500),
    "calcium": ValidRange(min=100, max=3000),
    "magnesium": ValidRange(min=10, max=500),
    "organicMatter": ValidRange(min=0.1, max=20),
}


class SoilStatus(str, Enum):
    """Position of a value relative to its acceptable band."""

    BELOW = "below"
    OPTIMAL = "optimal"
    ABOVE = "above"


@dataclass
class ParameterClassification:
    """Classification of a single soil value."""

    parameter: str
    value: float
    status: SoilStatus
    distance_from_band: float  # 0 when inside [low, high]


@dataclass
class SoilReportAnalysis:
    """Cleaned output of a soil document analysis."""

    soil_data: Dict[str, float] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)
    overall_assessment: Optional[str] = None
    priority_actions: List[str] = field(default_factory=list)


@dataclass
class SoilMeasurement:
    """A soil test snapshot."""

    id: int
    date: date
    values: Dict[str, float] = field(default_factory=dict)  # absent keys are unmeasured
    recommendations: List[str] = field(default_factory=list)
    priority_actions: List[str] = field(default_factory=list)
    overall_assessment: Optional[str] = None
    source: str = "manual"  # manual, ai or text

    def get(self, parameter: str) -> Optional[float]:
        """Get a measured value, or None if it was not measured."""
        return self.values.get(parameter)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "values": dict(self.values),
            "recommendations": list(self.recommendations),
            "priority_actions": list(self.priority_actions),
            "overall_assessment": self.overall_assessment,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SoilMeasurement":
        """
        Build a measurement from a stored dictionary.

        Values may be nested under ``values`` or stored flat at the top level,
        as the browser version of the tracker did.

        Raises:
            ValueError: If the date is invalid
        """
        day = DateUtils.to_date(data.get("date"))
        if day is None:
            raise ValueError(f"Invalid soil measurement date: {data.get('date')!r}")

        raw_values = data.get("values")
        if raw_values is None:
            raw_values = {p: data[p] for p in SOIL_PARAMETERS if p in data}

        values = {
            p: float(v) for p, v in raw_values.items()
            if p in SOIL_PARAMETERS and v is not None
        }

        return cls(
            id=int(data["id"]),
            date=day,
            values=values,
            recommendations=list(data.get("recommendations") or []),
            priority_actions=list(
                data.get("priority_actions") or data.get("priorityActions") or []
            ),
            overall_assessment=(
                data.get("overall_assessment") or data.get("overallAssessment") or None
            ),
            source=data.get("source", "manual"),
        )
