"""
Soil test interpretation module.

Classifies soil measurements against reference ranges, scores overall soil
health and generates rule-based recommendations.

Scoring awards each of the seven parameters a contribution:
- below the low threshold: 0.0
- above the high threshold: 0.5
- within 20% of the half-span around the optimal value: 1.0
- anywhere else inside [low, high]: 0.7

and maps the average onto 0-100.
"""

import logging
from typing import Dict, List, Mapping, Optional, Union

from ..core import constants
from ..models.recommendation import SoilAnalysis
from ..models.soil import (
    SOIL_PARAMETERS,
    SOIL_RANGES,
    ParameterClassification,
    SoilMeasurement,
    SoilRange,
    SoilStatus,
)
from ..processing.validator import DataValidator

SoilInput = Union[SoilMeasurement, Mapping[str, float]]

# (parameter, triggering status, recommendation), evaluated in order
RECOMMENDATION_RULES = (
    ("pH", SoilStatus.BELOW, "Consider lime application to raise soil pH"),
    ("pH", SoilStatus.ABOVE, "Consider sulfur application to lower soil pH"),
    ("nitrogen", SoilStatus.BELOW, "Increase nitrogen application rate or frequency"),
    ("nitrogen", SoilStatus.ABOVE, "Reduce nitrogen application rate"),
    ("phosphorus", SoilStatus.BELOW, "Consider phosphorus-rich fertilizer or starter fertilizer"),
    ("potassium", SoilStatus.BELOW, "Consider potassium supplement or balanced fertilizer"),
    ("organicMatter", SoilStatus.BELOW, "Consider organic amendments like compost or humic acid"),
)


def soil_values(soil: Optional[SoilInput]) -> Dict[str, float]:
    """
    Extract measured values from a measurement or a plain mapping.

    Non-numeric values are treated as unmeasured.

    Args:
        soil: SoilMeasurement, mapping of parameter to value, or None

    Returns:
        Mapping of measured parameters to values (unmeasured keys absent)
    """
    if soil is None:
        return {}
    raw = soil.values if isinstance(soil, SoilMeasurement) else soil
    values = {}
    for parameter in SOIL_PARAMETERS:
        value = DataValidator.parse_number(raw.get(parameter))
        if value is not None:
            values[parameter] = value
    return values


class SoilInterpreter:
    """Interpret soil test results."""

    def __init__(
        self,
        ranges: Optional[Dict[str, SoilRange]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize soil interpreter.

        Args:
            ranges: Reference ranges per parameter (defaults to SOIL_RANGES)
            logger: Logger instance
        """
        self.ranges = ranges or SOIL_RANGES
        self.logger = logger or logging.getLogger(__name__)

    def classify(self, parameter: str, value: float) -> ParameterClassification:
        """
        Classify a value against the parameter's acceptable band.

        Args:
            parameter: Soil parameter name (e.g. 'pH', 'nitrogen')
            value: Measured value

        Returns:
            Classification with status and distance from the band

        Raises:
            ValueError: If the parameter has no reference range
        """
        soil_range = self.ranges.get(parameter)
        if soil_range is None:
            raise ValueError(f"Unknown soil parameter: {parameter}")

        if value < soil_range.low:
            status = SoilStatus.BELOW
            distance = soil_range.low - value
        elif value > soil_range.high:
            status = SoilStatus.ABOVE
            distance = value - soil_range.high
        else:
            status = SoilStatus.OPTIMAL
            distance = 0.0

        return ParameterClassification(
            parameter=parameter,
            value=value,
            status=status,
            distance_from_band=distance,
        )

    def classify_all(self, soil: Optional[SoilInput]) -> Dict[str, ParameterClassification]:
        """Classify every measured parameter."""
        return {
            parameter: self.classify(parameter, value)
            for parameter, value in soil_values(soil).items()
            if parameter in self.ranges
        }

    def generate_recommendations(self, soil: Optional[SoilInput]) -> List[str]:
        """
        Generate rule-based recommendations from a soil measurement.

        Each rule is evaluated independently, so any number may fire.

        Args:
            soil: Soil measurement; None means no soil test is on file

        Returns:
            List of recommendation strings
        """
        if soil is None:
            return [constants.NO_SOIL_DATA_RECOMMENDATION]

        classifications = self.classify_all(soil)
        recommendations = []
        for parameter, status, message in RECOMMENDATION_RULES:
            classification = classifications.get(parameter)
            if classification is not None and classification.status == status:
                recommendations.append(message)

        self.logger.debug(f"Generated {len(recommendations)} soil recommendations")
        return recommendations

    def _contribution(self, parameter: str, value: float) -> float:
        soil_range = self.ranges[parameter]
        if value < soil_range.low:
            return constants.SCORE_TOO_LOW
        if value > soil_range.high:
            return constants.SCORE_TOO_HIGH

        fraction = constants.NEAR_OPTIMAL_FRACTION
        near_low = soil_range.optimal - (soil_range.optimal - soil_range.low) * fraction
        near_high = soil_range.optimal + (soil_range.high - soil_range.optimal) * fraction
        if near_low <= value <= near_high:
            return constants.SCORE_NEAR_OPTIMAL
        return constants.SCORE_ACCEPTABLE

    @staticmethod
    def label_for(score: int) -> str:
        """Map a 0-100 score to its label."""
        for threshold, label in constants.SCORE_LABELS:
            if score >= threshold:
                return label
        return constants.SCORE_LABEL_FLOOR

    def score(self, soil: Optional[SoilInput]) -> Optional[SoilAnalysis]:
        """
        Score overall soil health.

        Unmeasured parameters contribute the acceptable-tier value and record
        no issue.

        Args:
            soil: Soil measurement

        Returns:
            SoilAnalysis with label, score and issues (no recommendations),
            or None without a measurement
        """
        if soil is None:
            return None

        values = soil_values(soil)
        issues = []
        total = 0.0

        for parameter in self.ranges:
            value = values.get(parameter)
            if value is None:
                total += constants.SCORE_ACCEPTABLE
                continue

            status = self.classify(parameter, value).status
            if status == SoilStatus.BELOW:
                issues.append(f"{parameter} is too low ({value:g})")
            elif status == SoilStatus.ABOVE:
                issues.append(f"{parameter} is too high ({value:g})")
            total += self._contribution(parameter, value)

        score = round(100 * total / len(self.ranges))
        overall = self.label_for(score)

        self.logger.info(f"Soil score: {score} ({overall}), {len(issues)} issue(s)")
        return SoilAnalysis(overall=overall, score=score, issues=issues)

    def analyze(self, soil: Optional[SoilInput]) -> Optional[SoilAnalysis]:
        """
        Score a soil measurement and attach recommendations.

        Args:
            soil: Soil measurement

        Returns:
            Complete SoilAnalysis, or None without a measurement
        """
        analysis = self.score(soil)
        if analysis is None:
            return None
        analysis.recommendations = self.generate_recommendations(soil)
        return analysis
