"""
Product catalogs for fertilizer and iron programs.

Each entry carries the product's base re-application interval in months plus
descriptive content metadata.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Union


@dataclass(frozen=True)
class ProductCatalogEntry:
    """Static reference data for a commercial product."""

    name: str
    interval_months: int
    npk: Optional[str] = None  # fertilizer analysis, e.g. '32-0-4'
    iron_content: Optional[Union[float, str]] = None  # percent iron
    slow_release: bool = False
    organic: bool = False
    liquid: bool = False
    granular: bool = False


ProductCatalog = Dict[str, ProductCatalogEntry]


def _catalog(*entries: ProductCatalogEntry) -> ProductCatalog:
    return {entry.name: entry for entry in entries}


FERTILIZER_PRODUCTS: ProductCatalog = _catalog(
    ProductCatalogEntry("Scotts Turf Builder", 6, npk="32-0-4", slow_release=True),
    ProductCatalogEntry("Milorganite", 8, npk="6-4-0", organic=True),
    ProductCatalogEntry("Lesco Professional", 6, npk="18-0-6", slow_release=True),
    ProductCatalogEntry("Pennington UltraGreen", 6, npk="30-0-4", slow_release=True),
    ProductCatalogEntry("Custom Mix", 6, npk="custom"),
)

IRON_PRODUCTS: ProductCatalog = _catalog(
    ProductCatalogEntry("Ferrous Sulfate", 4, iron_content=20),
    ProductCatalogEntry("Chelated Iron", 4, iron_content=6, liquid=True),
    ProductCatalogEntry("Ironite", 6, iron_content=1.5, granular=True),
    ProductCatalogEntry("Custom Iron", 4, iron_content="custom"),
)
