"""
Application data models.

A single polymorphic record covers PGR, fertilizer and iron applications,
discriminated by ``kind``.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Dict, Any

from ..core.date_utils import DateUtils


class ApplicationKind(str, Enum):
    """Kind of product applied to the lawn."""

    PGR = "pgr"
    FERTILIZER = "fertilizer"
    IRON = "iron"

    @property
    def storage_key(self) -> str:
        """Key under which this kind's history is persisted."""
        return f"applications:{self.value}"


@dataclass
class Application:
    """A single product application."""

    id: int  # creation-order sortable
    date: date
    rate: float  # oz/1000 sq ft for PGR, lbs/1000 sq ft otherwise
    kind: ApplicationKind
    product_type: Optional[str] = None  # key into a product catalog
    npk: Optional[str] = None  # fertilizer only
    notes: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "rate": self.rate,
            "kind": self.kind.value,
            "product_type": self.product_type,
            "npk": self.npk,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Application":
        """
        Build an application from a stored dictionary.

        Accepts both snake_case keys and the camelCase keys used by the
        browser version of the tracker (``productType``, ``ouncesPer1000``).

        Raises:
            ValueError: If the date or kind is invalid
        """
        day = DateUtils.to_date(data.get("date"))
        if day is None:
            raise ValueError(f"Invalid application date: {data.get('date')!r}")

        rate = data.get("rate")
        if rate is None:
            rate = data.get("ouncesPer1000", data.get("lbsPer1000"))
        if rate is None:
            raise ValueError(f"Application {data.get('id')} has no rate")

        return cls(
            id=int(data["id"]),
            date=day,
            rate=float(rate),
            kind=ApplicationKind(data.get("kind", ApplicationKind.PGR.value)),
            product_type=data.get("product_type", data.get("productType")) or None,
            npk=data.get("npk") or None,
            notes=data.get("notes") or None,
        )
