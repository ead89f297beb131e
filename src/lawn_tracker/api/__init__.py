"""
API layer for external providers.

Provides the weather and soil document analysis clients and their typed errors.
"""

from .client import APIClient
from .errors import (
    ProviderError,
    NotFound,
    AuthFailure,
    RateLimited,
    UnsupportedFormat,
    ParseFailure,
)
from .weather import OpenWeatherMapAPI
from .soil_analyzer import OpenAISoilAnalyzer, parse_model_content

__all__ = [
    "APIClient",
    "ProviderError",
    "NotFound",
    "AuthFailure",
    "RateLimited",
    "UnsupportedFormat",
    "ParseFailure",
    "OpenWeatherMapAPI",
    "OpenAISoilAnalyzer",
    "parse_model_content",
]
