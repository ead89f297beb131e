"""
Soil report ingestion service.

Turns soil test reports into stored SoilMeasurement records. Reports arrive
as images (analyzed by the AI document analyzer), as plain text (parsed with
regular expressions) or as manually entered values; every path runs the
values through the same range validation before they are saved.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from ..api.errors import AuthFailure, ProviderError, UnsupportedFormat
from ..api.soil_analyzer import OpenAISoilAnalyzer
from ..models.soil import SoilMeasurement, SoilReportAnalysis
from ..processing.text_parser import SoilReportTextParser
from ..processing.validator import DataValidator
from ..storage.repository import LawnRepository

TEXT_SUFFIXES = (".txt", ".csv")


class SoilReportService:
    """Ingest soil reports into the lawn repository."""

    def __init__(
        self,
        repository: LawnRepository,
        analyzer: Optional[OpenAISoilAnalyzer] = None,
        validator: Optional[DataValidator] = None,
        text_parser: Optional[SoilReportTextParser] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize soil report service.

        Args:
            repository: Repository receiving the measurements
            analyzer: AI document analyzer (image reports need one)
            validator: Validator for soil values
            text_parser: Parser for text reports
            logger: Logger instance
        """
        self.repository = repository
        self.analyzer = analyzer
        self.logger = logger or logging.getLogger(__name__)
        self.validator = validator or DataValidator(logger=self.logger)
        self.text_parser = text_parser or SoilReportTextParser(logger=self.logger)

    def _store(
        self,
        analysis: SoilReportAnalysis,
        measured_on: Optional[date],
        source: str
    ) -> SoilMeasurement:
        if not analysis.soil_data:
            raise ValueError("No valid soil values found in the report")

        missing = self.validator.check_soil_completeness(analysis.soil_data)
        if missing:
            self.logger.warning(f"Soil report is missing {len(missing)} parameter(s)")

        return self.repository.add_soil_measurement(
            analysis.soil_data,
            measured_on=measured_on,
            recommendations=analysis.recommendations,
            priority_actions=analysis.priority_actions,
            overall_assessment=analysis.overall_assessment,
            source=source,
        )

    def add_manual(
        self,
        values: Mapping[str, Any],
        measured_on: Optional[date] = None
    ) -> SoilMeasurement:
        """
        Record manually entered soil values.

        Blank and non-numeric fields are ignored.

        Args:
            values: Parameter to value mapping (strings allowed)
            measured_on: Test date

        Returns:
            Stored measurement

        Raises:
            ValueError: If no valid value remains
        """
        cleaned = self.validator.clean_soil_data(values)
        return self._store(SoilReportAnalysis(soil_data=cleaned), measured_on, "manual")

    def import_text(self, text: str, measured_on: Optional[date] = None) -> SoilMeasurement:
        """
        Record a soil report given as text.

        Args:
            text: Report text
            measured_on: Test date

        Returns:
            Stored measurement

        Raises:
            ValueError: If no soil values can be extracted
        """
        cleaned = self.validator.clean_soil_data(self.text_parser.parse(text))
        return self._store(SoilReportAnalysis(soil_data=cleaned), measured_on, "text")

    def import_document(
        self,
        document: Union[str, Path],
        measured_on: Optional[date] = None
    ) -> SoilMeasurement:
        """
        Record a soil report file.

        Text files go straight to the text parser. Images go to the AI
        analyzer; when no analyzer is configured the image cannot be read.

        Args:
            document: Path to the report
            measured_on: Test date

        Returns:
            Stored measurement

        Raises:
            UnsupportedFormat: If the file cannot be handled
            AuthFailure: If the analyzer has no valid API key
            ProviderError: If the analyzer call fails
            ValueError: If no soil values can be extracted
        """
        path = Path(document)
        if path.suffix.lower() in TEXT_SUFFIXES:
            self.logger.info(f"Parsing text soil report {path.name}")
            return self.import_text(path.read_text(encoding="utf-8"), measured_on)

        if self.analyzer is None:
            raise UnsupportedFormat(
                f"Cannot analyze {path.name}: no soil analyzer configured. "
                "Use manual entry or a text report instead."
            )

        try:
            analysis = self.analyzer.analyze(path)
        except AuthFailure:
            self.logger.error("Soil analyzer rejected the API key")
            raise
        except ProviderError as e:
            self.logger.error(f"Soil analysis failed for {path.name}: {e}")
            raise

        return self._store(analysis, measured_on, "ai")
