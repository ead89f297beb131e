"""
Growing degree day (GDD) calculation module.

Implements the simple averaging method for daily GDD and a rate-based
estimate of when a plant growth regulator (PGR) should be re-applied.

The averaging method:
    GDD = max(0, (T_max + T_min) / 2 - T_base)

Base temperatures are 50°F for cool-season grasses and 60°F for warm-season
grasses. All temperatures are in °F.
"""

import logging
from datetime import date
from typing import Optional, Union

from ..core import constants
from ..core.date_utils import DateUtils, DateLike
from ..models.grass import GrassClass, GrassType, classify_grass
from ..models.recommendation import PGREstimate
from ..models.weather import WeatherSnapshot

logger = logging.getLogger(__name__)


class GDDCalculator:
    """
    Calculator for growing degree days and PGR timing.

    All methods are pure functions of their inputs.
    """

    @staticmethod
    def daily_gdd(
        max_temp: float,
        min_temp: float,
        base_temp: float = constants.DEFAULT_BASE_TEMP
    ) -> float:
        """
        Calculate growing degree days for a single day.

        Args:
            max_temp: Daily maximum temperature (°F)
            min_temp: Daily minimum temperature (°F)
            base_temp: Base temperature below which no growth accumulates (°F)

        Returns:
            Growing degree days (never negative)
        """
        avg_temp = (max_temp + min_temp) / 2
        return max(0.0, avg_temp - base_temp)

    @staticmethod
    def base_temp_for(grass_type: Optional[Union[GrassType, str]]) -> float:
        """
        Get the GDD base temperature for a grass type.

        Args:
            grass_type: Grass type name; unknown names use the cool-season default

        Returns:
            Base temperature (°F)
        """
        if classify_grass(grass_type) == GrassClass.WARM_SEASON:
            return constants.WARM_SEASON_BASE_TEMP
        return constants.DEFAULT_BASE_TEMP

    @staticmethod
    def recommended_interval_days(gdd_per_day: float) -> int:
        """
        Select the PGR re-application interval for an accumulation rate.

        Faster accumulation means faster growth and a shorter interval.

        Args:
            gdd_per_day: Average GDD accumulated per day

        Returns:
            Interval in days (14, 21, 28 or 35)
        """
        for threshold, interval in constants.PGR_INTERVAL_THRESHOLDS:
            if gdd_per_day > threshold:
                return interval
        return constants.PGR_MAX_INTERVAL_DAYS

    @staticmethod
    def estimate_next_pgr_application(
        last_application_date: Optional[DateLike],
        current_gdd: Optional[float],
        today: DateLike
    ) -> Optional[PGREstimate]:
        """
        Estimate when the next PGR application is due.

        The accumulation rate is the current GDD spread over the days since the
        last application; the rate selects a fixed interval.

        Args:
            last_application_date: Date of the most recent PGR application
            current_gdd: Current GDD value; zero or missing means no estimate
            today: Reference date

        Returns:
            PGREstimate, or None when there is not enough data
        """
        if not last_application_date or not current_gdd:
            return None

        last_day = DateUtils.to_date(last_application_date)
        today_day = DateUtils.to_date(today)
        if last_day is None or today_day is None:
            logger.warning(f"Cannot estimate PGR timing from date {last_application_date!r}")
            return None

        days_since = (today_day - last_day).days
        gdd_per_day = current_gdd / max(1, days_since)
        interval = GDDCalculator.recommended_interval_days(gdd_per_day)
        days_until_next = max(0, interval - days_since)

        if days_until_next == 0:
            message = "Ready for next application!"
        else:
            message = (
                f"Estimated {days_until_next} days until next application "
                f"({gdd_per_day:.1f} GDD/day)"
            )

        logger.debug(
            f"PGR estimate: {days_since} days since last application, "
            f"{gdd_per_day:.2f} GDD/day, interval {interval} days"
        )

        return PGREstimate(
            days_until_next=days_until_next,
            gdd_per_day=gdd_per_day,
            recommended_interval_days=interval,
            message=message,
        )

    @staticmethod
    def gdd_for_period(
        weather: Optional[WeatherSnapshot],
        base_temp: float,
        start: date,
        end: date
    ) -> float:
        """
        Estimate GDD accumulated over a date range from forecast averages.

        Args:
            weather: Weather snapshot providing forecast averages
            base_temp: Base temperature (°F)
            start: First day of the period
            end: Last day of the period

        Returns:
            Accumulated GDD, or 0 without weather data
        """
        if weather is None:
            return 0.0

        days = DateUtils.days_between(start, end)
        daily = GDDCalculator.daily_gdd(
            weather.forecast_avg_max_temp,
            weather.forecast_avg_min_temp,
            base_temp
        )
        return daily * days
