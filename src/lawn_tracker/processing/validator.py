"""
Data validation module.

Validates untrusted soil payloads and user-supplied application data.
"""

import logging
import math
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..core.date_utils import DateUtils
from ..models.application import ApplicationKind
from ..models.grass import GrassType
from ..models.soil import SOIL_PARAMETERS, VALID_RANGES, ValidRange

# Leading number, parsed the way a lenient float parser would ("6.5 ppm" -> 6.5)
_NUMBER_PREFIX = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


class DataValidator:
    """Validate soil and application data."""

    def __init__(
        self,
        valid_ranges: Optional[Dict[str, ValidRange]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize data validator.

        Args:
            valid_ranges: Plausible bounds per soil parameter (defaults to VALID_RANGES)
            logger: Logger instance
        """
        self.valid_ranges = valid_ranges or VALID_RANGES
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def parse_number(value: Any) -> Optional[float]:
        """
        Parse a numeric value leniently.

        Args:
            value: Number or string such as '6.5' or '120 ppm'

        Returns:
            Finite float, or None if the value is not numeric
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            match = _NUMBER_PREFIX.match(value)
            if not match:
                return None
            number = float(match.group(1))
        else:
            return None

        if math.isnan(number) or math.isinf(number):
            return None
        return number

    def clean_soil_data(self, payload: Optional[Mapping[str, Any]]) -> Dict[str, float]:
        """
        Keep only known soil parameters with plausible numeric values.

        Out-of-range, non-numeric and unknown fields are dropped individually;
        nothing is substituted.

        Args:
            payload: Raw soil values, e.g. from an AI document analysis

        Returns:
            Cleaned mapping of parameter to value
        """
        cleaned: Dict[str, float] = {}
        if not payload:
            return cleaned

        for parameter, raw_value in payload.items():
            valid_range = self.valid_ranges.get(parameter)
            if valid_range is None:
                continue

            value = self.parse_number(raw_value)
            if value is None:
                if raw_value is not None:
                    self.logger.debug(f"Dropping non-numeric {parameter}: {raw_value!r}")
                continue

            if not valid_range.contains(value):
                self.logger.warning(
                    f"Dropping {parameter}={value:g} "
                    f"(expected {valid_range.min:g}-{valid_range.max:g})"
                )
                continue

            cleaned[parameter] = value

        return cleaned

    def validate_application(self, data: Mapping[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate user-supplied application fields.

        Args:
            data: Dictionary with kind, date, rate and optional product_type / npk

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        kind = data.get("kind")
        try:
            kind = ApplicationKind(kind)
        except ValueError:
            errors.append(f"Invalid application kind: {kind!r}")
            kind = None

        if DateUtils.to_date(data.get("date")) is None:
            errors.append(f"Invalid date: {data.get('date')!r}")

        rate = self.parse_number(data.get("rate"))
        if rate is None:
            errors.append(f"Invalid rate: {data.get('rate')!r}")
        elif rate <= 0:
            errors.append(f"Invalid rate: {rate:g} (must be > 0)")

        if data.get("npk") and kind not in (None, ApplicationKind.FERTILIZER):
            errors.append("NPK analysis only applies to fertilizer applications")

        return len(errors) == 0, errors

    def validate_settings(self, data: Mapping[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validate lawn profile settings.

        Args:
            data: Dictionary with grass_type, zip_code and square_footage

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        grass_type = data.get("grass_type")
        if grass_type:
            try:
                GrassType(grass_type)
            except ValueError:
                errors.append(f"Unknown grass type: {grass_type}")

        square_footage = data.get("square_footage")
        if square_footage not in (None, ""):
            area = self.parse_number(square_footage)
            if area is None or area <= 0:
                errors.append(f"Invalid square footage: {square_footage!r} (must be > 0)")

        return len(errors) == 0, errors

    def check_soil_completeness(self, values: Mapping[str, float]) -> List[str]:
        """
        List soil parameters missing from a measurement.

        Args:
            values: Measured values

        Returns:
            Missing parameter names, in reference order
        """
        missing = [p for p in SOIL_PARAMETERS if values.get(p) is None]
        if missing:
            self.logger.info(f"Soil measurement missing: {', '.join(missing)}")
        return missing
