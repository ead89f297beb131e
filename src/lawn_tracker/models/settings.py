"""
Lawn profile settings.

Owned by the host and consumed read-only by the recommendation engine.
"""

from dataclasses import dataclass
from typing import Optional, Dict, Any


@dataclass
class Settings:
    """Single lawn profile."""

    grass_type: Optional[str] = None
    zip_code: Optional[str] = None
    square_footage: Optional[float] = None  # sq ft
    use_geolocation: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "grass_type": self.grass_type,
            "zip_code": self.zip_code,
            "square_footage": self.square_footage,
            "use_geolocation": self.use_geolocation,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Settings":
        """Build settings from a stored dictionary (snake_case or camelCase keys)."""
        data = data or {}
        square_footage = data.get("square_footage", data.get("squareFootage"))
        try:
            square_footage = float(square_footage) if square_footage not in (None, "") else None
        except (TypeError, ValueError):
            square_footage = None

        return cls(
            grass_type=data.get("grass_type", data.get("grassType")) or None,
            zip_code=data.get("zip_code", data.get("zipCode")) or None,
            square_footage=square_footage,
            use_geolocation=bool(data.get("use_geolocation", data.get("useGeolocation", False))),
        )
