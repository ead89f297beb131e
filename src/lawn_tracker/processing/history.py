"""
History aggregation module.

Queries over the application log and soil history: most recent record of a
kind, elapsed days, product totals and time-windowed soil series.
"""

import logging
from datetime import date
from typing import List, Optional, Sequence, Tuple

from ..core.date_utils import DateUtils
from ..models.application import Application, ApplicationKind
from ..models.soil import SoilMeasurement


class HistoryAggregator:
    """Aggregate application and soil history."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize history aggregator.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def most_recent(
        applications: Sequence[Application],
        kind: Optional[ApplicationKind] = None
    ) -> Optional[Application]:
        """
        Find the most recent application, optionally of one kind.

        Latest date wins; on equal dates the later-inserted record wins.

        Args:
            applications: Application log in insertion order
            kind: Restrict to this kind

        Returns:
            Most recent application, or None if there is none
        """
        candidates = [
            (app.date, index, app)
            for index, app in enumerate(applications)
            if kind is None or app.kind == kind
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda item: (item[0], item[1]))[2]

    @staticmethod
    def latest_measurement(history: Sequence[SoilMeasurement]) -> Optional[SoilMeasurement]:
        """
        Find the most recent soil measurement by date.

        Args:
            history: Soil measurements in insertion order

        Returns:
            Latest measurement, or None for an empty history
        """
        if not history:
            return None
        indexed = list(enumerate(history))
        return max(indexed, key=lambda item: (item[1].date, item[0]))[1]

    def days_since_last(
        self,
        applications: Sequence[Application],
        kind: ApplicationKind,
        today: date
    ) -> Optional[int]:
        """
        Count days since the most recent application of a kind.

        Args:
            applications: Application log
            kind: Application kind
            today: Reference date

        Returns:
            Whole days elapsed (negative for a future-dated application),
            or None without any application
        """
        last = self.most_recent(applications, kind)
        if last is None:
            return None
        return DateUtils.days_between(last.date, today)

    def total_product_used(
        self,
        applications: Sequence[Application],
        square_footage: Optional[float],
        kind: ApplicationKind = ApplicationKind.PGR
    ) -> float:
        """
        Total product applied to the whole lawn.

        Rates are per 1000 sq ft, so each application contributes
        rate * square_footage / 1000.

        Args:
            applications: Application log
            square_footage: Lawn area in sq ft
            kind: Application kind to total

        Returns:
            Total product (0 when the lawn area is unknown)
        """
        if not square_footage:
            return 0.0

        total = sum(
            app.rate * square_footage / 1000
            for app in applications
            if app.kind == kind
        )
        self.logger.debug(f"Total {kind.value} used over {square_footage:g} sq ft: {total:.2f}")
        return total

    @staticmethod
    def filter_soil_history(
        history: Sequence[SoilMeasurement],
        time_range: str,
        today: date
    ) -> List[SoilMeasurement]:
        """
        Restrict soil history to a named time range, oldest first.

        Args:
            history: Soil measurements
            time_range: '3months', '6months', '1year' or 'all'
            today: Reference date

        Returns:
            Measurements on or after the range cutoff, sorted by date
        """
        cutoff = DateUtils.range_cutoff(time_range, today)
        selected = [m for m in history if cutoff is None or m.date >= cutoff]
        return sorted(selected, key=lambda m: m.date)

    def parameter_series(
        self,
        history: Sequence[SoilMeasurement],
        parameter: str,
        time_range: str,
        today: date
    ) -> List[Tuple[date, float]]:
        """
        Build a dated series of one soil parameter.

        Args:
            history: Soil measurements
            parameter: Soil parameter name
            time_range: Named time range
            today: Reference date

        Returns:
            (date, value) pairs sorted by date, skipping unmeasured reports
        """
        series = [
            (measurement.date, measurement.values[parameter])
            for measurement in self.filter_soil_history(history, time_range, today)
            if measurement.values.get(parameter) is not None
        ]
        self.logger.debug(f"{parameter} series over {time_range}: {len(series)} point(s)")
        return series
