"""
Data processing module for the lawn tracker.

Provides validation of untrusted input, soil report text parsing and history
aggregation.
"""

from .validator import DataValidator
from .text_parser import SoilReportTextParser
from .history import HistoryAggregator

__all__ = [
    "DataValidator",
    "SoilReportTextParser",
    "HistoryAggregator",
]
