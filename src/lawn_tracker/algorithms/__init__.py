"""
Calculation algorithms for the lawn tracker.

Provides growing degree day, application interval and soil interpretation models.
"""

from .gdd import GDDCalculator
from .soil import SoilInterpreter
from .intervals import (
    ApplicationIntervalModel,
    IntervalRules,
    FERTILIZER_RULES,
    IRON_RULES,
)

__all__ = [
    "GDDCalculator",
    "SoilInterpreter",
    "ApplicationIntervalModel",
    "IntervalRules",
    "FERTILIZER_RULES",
    "IRON_RULES",
]
