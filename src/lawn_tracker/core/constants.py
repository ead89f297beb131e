"""
Application-wide constants for lawn care recommendations.

This module defines default values and thresholds used throughout the application.
Reference tables (soil ranges, product catalogs) live with their models.
"""

# Growing degree days (°F)
DEFAULT_BASE_TEMP = 50.0  # cool-season and unclassified grasses
WARM_SEASON_BASE_TEMP = 60.0

# PGR re-application intervals, checked in order (GDD/day threshold, days)
PGR_INTERVAL_THRESHOLDS = (
    (15.0, 14),
    (10.0, 21),
    (5.0, 28),
)
PGR_MAX_INTERVAL_DAYS = 35

# Flat month length used for fertilizer and iron intervals
DAYS_PER_MONTH = 30

# Fertilizer program (months)
FERTILIZER_DEFAULT_INTERVAL = 6
FERTILIZER_MIN_INTERVAL = 4
FERTILIZER_MAX_INTERVAL = 8

# Iron program (months)
IRON_DEFAULT_INTERVAL = 4
IRON_MIN_INTERVAL = 3
IRON_MAX_INTERVAL = 6
IRON_HIGH_PH = 7.0  # iron is less available above this pH
IRON_LOW_PH = 6.0

# Soil scoring
NEAR_OPTIMAL_FRACTION = 0.2  # share of each half-span around optimal
SCORE_NEAR_OPTIMAL = 1.0
SCORE_ACCEPTABLE = 0.7
SCORE_TOO_HIGH = 0.5
SCORE_TOO_LOW = 0.0

SCORE_LABELS = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "Fair"),
)
SCORE_LABEL_FLOOR = "Poor"

# Forecast window used to average temperatures (days)
FORECAST_WINDOW_DAYS = 7

# Soil history time ranges (months back from today, None = everything)
SOIL_HISTORY_RANGES = {
    "3months": 3,
    "6months": 6,
    "1year": 12,
    "all": None,
}

NO_SOIL_DATA_RECOMMENDATION = "Upload a soil test for personalized recommendations"
