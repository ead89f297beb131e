"""
Soil report text parser.

Fallback extraction of soil values from plain report text when AI document
analysis is unavailable. Each parameter has a list of patterns tried in order;
the first positive number found wins.
"""

import logging
import re
from typing import Dict, List, Optional, Pattern

from .validator import DataValidator

_FLAGS = re.IGNORECASE

SOIL_TEXT_PATTERNS: Dict[str, List[Pattern]] = {
    "pH": [
        re.compile(r"\bpH\s*Level[:\s]*([0-9.]+)", _FLAGS),
        re.compile(r"\bpH[:\s]*([0-9.]+)", _FLAGS),
        re.compile(r"([0-9.]+)\s*pH\b", _FLAGS),
    ],
    "nitrogen": [
        re.compile(r"\b(?:total\s+)?nitrogen[:\s]*([0-9.]+)", _FLAGS),
        re.compile(r"\bN[:\s]+([0-9.]+)", _FLAGS),
        re.compile(r"([0-9.]+)\s*ppm\s*N\b", _FLAGS),
    ],
    "phosphorus": [
        re.compile(r"\bphosphorus[:\s]*([0-9.]+)", _FLAGS),
        re.compile(r"\bP[:\s]+([0-9.]+)", _FLAGS),
        re.compile(r"([0-9.]+)\s*ppm\s*P\b", _FLAGS),
    ],
    "potassium": [
        re.compile(r"\bpotassium[:\s]*([0-9.]+)", _FLAGS),
        re.compile(r"\bK[:\s]+([0-9.]+)", _FLAGS),
        re.compile(r"([0-9.]+)\s*ppm\s*K\b", _FLAGS),
    ],
    "calcium": [
        re.compile(r"\bcalcium[:\s]*([0-9.]+)", _FLAGS),
        re.compile(r"\bCa[:\s]+([0-9.]+)", _FLAGS),
        re.compile(r"([0-9.]+)\s*ppm\s*Ca\b", _FLAGS),
    ],
    "magnesium": [
        re.compile(r"\bmagnesium[:\s]*([0-9.]+)", _FLAGS),
        re.compile(r"\bMg[:\s]+([0-9.]+)", _FLAGS),
        re.compile(r"([0-9.]+)\s*ppm\s*Mg\b", _FLAGS),
    ],
    "organicMatter": [
        re.compile(r"\borganic\s*matter[:\s]*([0-9.]+)", _FLAGS),
        re.compile(r"\bOM[:\s]+([0-9.]+)", _FLAGS),
        re.compile(r"([0-9.]+)\s*%\s*OM\b", _FLAGS),
    ],
}


class SoilReportTextParser:
    """Extract soil values from report text with regular expressions."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize text parser.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def parse(self, text: str) -> Dict[str, float]:
        """
        Extract soil values from text.

        Args:
            text: Report text

        Returns:
            Mapping of parameter to value for every parameter found
        """
        soil_data: Dict[str, float] = {}
        if not text:
            return soil_data

        for parameter, patterns in SOIL_TEXT_PATTERNS.items():
            for pattern in patterns:
                match = pattern.search(text)
                if not match:
                    continue
                value = DataValidator.parse_number(match.group(1))
                if value is not None and value > 0:
                    soil_data[parameter] = value
                    break

        self.logger.info(
            f"Parsed {len(soil_data)} soil value(s) from text: {', '.join(soil_data) or 'none'}"
        )
        return soil_data
