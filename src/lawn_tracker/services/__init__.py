"""
Business logic services for the lawn tracker.

Services combine the algorithms, providers and repository into higher-level
operations.
"""

from .recommendations import RecommendationOrchestrator
from .soil_reports import SoilReportService

__all__ = [
    "RecommendationOrchestrator",
    "SoilReportService",
]
