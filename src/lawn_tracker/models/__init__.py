"""
Data models for the lawn tracker.

Contains DTOs for applications, soil measurements, weather, settings and
recommendations, plus the shared reference tables.
"""

from .grass import GrassType, GrassClass, classify_grass
from .application import Application, ApplicationKind
from .catalog import ProductCatalogEntry, FERTILIZER_PRODUCTS, IRON_PRODUCTS
from .soil import (
    SOIL_PARAMETERS,
    SOIL_RANGES,
    VALID_RANGES,
    SoilRange,
    ValidRange,
    SoilStatus,
    ParameterClassification,
    SoilReportAnalysis,
    SoilMeasurement,
)
from .weather import WeatherSnapshot
from .settings import Settings
from .recommendation import (
    PGREstimate,
    GDDInfo,
    ApplicationEstimate,
    SoilAnalysis,
    RecommendationBundle,
)

__all__ = [
    "GrassType",
    "GrassClass",
    "classify_grass",
    "Application",
    "ApplicationKind",
    "ProductCatalogEntry",
    "FERTILIZER_PRODUCTS",
    "IRON_PRODUCTS",
    "SOIL_PARAMETERS",
    "SOIL_RANGES",
    "VALID_RANGES",
    "SoilRange",
    "ValidRange",
    "SoilStatus",
    "ParameterClassification",
    "SoilReportAnalysis",
    "SoilMeasurement",
    "WeatherSnapshot",
    "Settings",
    "PGREstimate",
    "GDDInfo",
    "ApplicationEstimate",
    "SoilAnalysis",
    "RecommendationBundle",
]
