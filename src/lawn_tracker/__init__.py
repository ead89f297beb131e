"""
Lawn Tracker

This package records lawn care applications and soil tests and recommends
when to re-apply plant growth regulator, fertilizer and iron using a growing
degree day model, local weather and soil test interpretation.
"""

__version__ = "0.1.0"
__description__ = "Lawn care tracking with GDD-based application recommendations"


def __getattr__(name):
    """Lazy import to avoid importing dependencies when not needed."""
    if name == "LawnTrackerApp":
        from .main import LawnTrackerApp
        return LawnTrackerApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "LawnTrackerApp",
]
