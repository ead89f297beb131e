"""
Grass type reference data.

Turfgrasses are grouped into cool-season and warm-season classes, which drive
base temperatures and fertilization cadence.
"""

from enum import Enum
from typing import Optional, Union


class GrassClass(str, Enum):
    """Physiological class of a turfgrass."""

    COOL_SEASON = "cool-season"
    WARM_SEASON = "warm-season"
    UNCLASSIFIED = "unclassified"


class GrassType(str, Enum):
    """Supported grass types."""

    KENTUCKY_BLUEGRASS = "Kentucky Bluegrass"
    PERENNIAL_RYEGRASS = "Perennial Ryegrass"
    TALL_FESCUE = "Tall Fescue"
    FINE_FESCUE = "Fine Fescue"
    BERMUDAGRASS = "Bermudagrass"
    ZOYSIAGRASS = "Zoysiagrass"
    ST_AUGUSTINEGRASS = "St. Augustinegrass"
    CENTIPEDEGRASS = "Centipedegrass"
    BUFFALOGRASS = "Buffalograss"

    @property
    def grass_class(self) -> GrassClass:
        """Class this grass belongs to."""
        if self in COOL_SEASON_GRASSES:
            return GrassClass.COOL_SEASON
        return GrassClass.WARM_SEASON


COOL_SEASON_GRASSES = frozenset({
    GrassType.KENTUCKY_BLUEGRASS,
    GrassType.PERENNIAL_RYEGRASS,
    GrassType.TALL_FESCUE,
    GrassType.FINE_FESCUE,
})

WARM_SEASON_GRASSES = frozenset({
    GrassType.BERMUDAGRASS,
    GrassType.ZOYSIAGRASS,
    GrassType.ST_AUGUSTINEGRASS,
    GrassType.CENTIPEDEGRASS,
    GrassType.BUFFALOGRASS,
})


def classify_grass(grass_type: Optional[Union[GrassType, str]]) -> GrassClass:
    """
    Classify a grass type name.

    Args:
        grass_type: GrassType member or display name

    Returns:
        GrassClass; unknown or missing names are UNCLASSIFIED
    """
    if not grass_type:
        return GrassClass.UNCLASSIFIED
    try:
        return GrassType(grass_type).grass_class
    except ValueError:
        return GrassClass.UNCLASSIFIED
