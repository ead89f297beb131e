"""
Date and timezone utilities.

Centralizes all date/time operations with proper timezone handling. The
recommendation engine works at calendar-day granularity, so most helpers
normalize their inputs to ``datetime.date``.
"""

import calendar
import logging
from datetime import date, datetime
from typing import Optional, Union

import pytz
from pytz.tzinfo import BaseTzInfo

from . import constants

DateLike = Union[date, datetime, str]


class DateUtils:
    """Utilities for date and timezone handling."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize date utilities.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def parse_timezone(timezone_str: str) -> BaseTzInfo:
        """
        Parse timezone string to pytz timezone object.

        Args:
            timezone_str: Timezone string (e.g., 'America/Chicago', 'UTC')

        Returns:
            pytz timezone object

        Raises:
            ValueError: If timezone is invalid
        """
        try:
            return pytz.timezone(timezone_str)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValueError(f"Invalid timezone: {timezone_str}")

    def today(
        self,
        timezone_str: str = "UTC",
        reference_time: Optional[datetime] = None
    ) -> date:
        """
        Get the current calendar day in the specified timezone.

        Args:
            timezone_str: Timezone string (e.g., 'America/Chicago')
            reference_time: Reference time (defaults to now in UTC)

        Returns:
            Local calendar date
        """
        tz = self.parse_timezone(timezone_str)

        if reference_time is None:
            reference_time = datetime.now(pytz.UTC)
        elif reference_time.tzinfo is None:
            # Assume UTC if no timezone
            reference_time = pytz.UTC.localize(reference_time)

        local_day = reference_time.astimezone(tz).date()
        self.logger.debug(f"Today in {timezone_str}: {local_day.isoformat()}")
        return local_day

    @staticmethod
    def to_date(value: Optional[DateLike]) -> Optional[date]:
        """
        Normalize a date, datetime or ISO string to a calendar date.

        Args:
            value: Value to normalize

        Returns:
            Calendar date, or None if the value is empty or unparseable
        """
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            try:
                return datetime.fromisoformat(text).date()
            except ValueError:
                pass
            try:
                return date.fromisoformat(text[:10])
            except ValueError:
                return None
        return None

    @staticmethod
    def days_between(start: DateLike, end: DateLike) -> int:
        """
        Count whole calendar days from start to end.

        Args:
            start: Earlier date
            end: Later date

        Returns:
            Number of days (negative if end precedes start)

        Raises:
            ValueError: If either value cannot be parsed as a date
        """
        start_day = DateUtils.to_date(start)
        end_day = DateUtils.to_date(end)
        if start_day is None or end_day is None:
            raise ValueError(f"Cannot compute day difference between {start!r} and {end!r}")
        return (end_day - start_day).days

    @staticmethod
    def subtract_months(day: date, months: int) -> date:
        """
        Move a date back by whole calendar months.

        The day of month is clamped to the length of the target month
        (e.g. May 31 minus 3 months is Feb 28/29).

        Args:
            day: Starting date
            months: Number of months to go back

        Returns:
            Shifted date
        """
        month_index = day.year * 12 + (day.month - 1) - months
        year, month = divmod(month_index, 12)
        month += 1
        last_day = calendar.monthrange(year, month)[1]
        return date(year, month, min(day.day, last_day))

    @staticmethod
    def range_cutoff(time_range: str, today: date) -> Optional[date]:
        """
        Get the earliest date included in a named history range.

        Args:
            time_range: One of '3months', '6months', '1year', 'all'
            today: Reference date

        Returns:
            Cutoff date, or None when the range includes everything
        """
        months = constants.SOIL_HISTORY_RANGES.get(time_range)
        if months is None:
            return None
        return DateUtils.subtract_months(today, months)
