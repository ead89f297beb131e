"""
AI soil report analyzer.

Sends a photo or scan of a soil test report to an OpenAI vision model and
extracts soil values plus narrative recommendations. The model's output is
treated as untrusted: every value is range-checked before it is accepted.
"""

import base64
import json
import logging
import mimetypes
import os
import re
from pathlib import Path
from typing import Dict, Any, Optional, Tuple, Union

from ..models.soil import SoilReportAnalysis
from ..processing.validator import DataValidator
from .client import APIClient
from .errors import AuthFailure, NotFound, ParseFailure, UnsupportedFormat

DEFAULT_ANALYZER_URL = "https://api.openai.com/v1"

SUPPORTED_MIME_TYPES = ("image/png", "image/jpeg", "image/gif", "image/webp")

ANALYSIS_PROMPT = """Please analyze this soil test report and provide both the data extraction and intelligent recommendations.

First, extract the following values in JSON format:
{
  "pH": number,
  "nitrogen": number (in ppm),
  "phosphorus": number (in ppm),
  "potassium": number (in ppm),
  "calcium": number (in ppm),
  "magnesium": number (in ppm),
  "organicMatter": number (in percentage)
}

If a value is not found or unclear, use null.

Then, provide recommendations based on the soil data. Consider:
- pH levels (optimal: 6.0-7.0)
- Nitrogen levels (optimal: 20-60 ppm)
- Phosphorus levels (optimal: 10-40 ppm)
- Potassium levels (optimal: 100-300 ppm)
- Calcium levels (optimal: 500-1500 ppm)
- Magnesium levels (optimal: 50-200 ppm)
- Organic matter (optimal: 2-6%)

Return your response in this exact format:
{
  "soilData": { ... extracted values ... },
  "recommendations": ["Specific recommendation 1", "Specific recommendation 2"],
  "overallAssessment": "Brief overall assessment of soil health",
  "priorityActions": ["Most important action to take", "Second priority action"]
}

Common variations to look for:
- pH might be listed as "pH", "pH Level", or just a number
- Nitrogen might be "N", "Nitrogen", "Total N"
- Phosphorus might be "P", "Phosphorus", "P2O5"
- Potassium might be "K", "Potassium", "K2O"
- Calcium might be "Ca", "Calcium"
- Magnesium might be "Mg", "Magnesium"
- Organic Matter might be "OM", "Organic Matter", "Organic Carbon"
"""

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```")
_BARE_JSON = re.compile(r"\{[\s\S]*\}")


def parse_model_content(content: str) -> Dict[str, Any]:
    """
    Extract a JSON object from a model reply.

    Tries the raw text, then a fenced code block, then the outermost braces.

    Args:
        content: Message content returned by the model

    Returns:
        Parsed JSON object

    Raises:
        ParseFailure: If no JSON object can be recovered
    """
    candidates = [content]
    fenced = _FENCED_JSON.search(content)
    if fenced:
        candidates.append(fenced.group(1))
    bare = _BARE_JSON.search(content)
    if bare:
        candidates.append(bare.group(0))

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except ValueError:
            continue
        if isinstance(parsed, dict):
            return parsed

    raise ParseFailure("Failed to parse soil data from model response.")


class OpenAISoilAnalyzer(APIClient):
    """Soil document analyzer backed by the OpenAI chat completions API."""

    provider_name = "OpenAI"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_ANALYZER_URL,
        model: str = "gpt-4o",
        max_tokens: int = 500,
        temperature: float = 0.1,
        timeout: int = 60,
        max_retries: int = 3,
        validator: Optional[DataValidator] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize soil analyzer.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var
            base_url: Base URL for the API
            model: Vision-capable model name
            max_tokens: Completion token limit
            temperature: Sampling temperature
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            validator: Validator used to clean extracted values
            logger: Logger instance
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        super().__init__(base_url, timeout, max_retries, True, logger)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.validator = validator or DataValidator(logger=self.logger)

    def _update_headers(self) -> None:
        """Update session headers with the bearer token."""
        super()._update_headers()
        if self.api_key:
            self.session.headers.update({"Authorization": f"Bearer {self.api_key}"})

    def _error_for_status(self, status_code, detail):
        if status_code == 404:
            return NotFound(
                f"{self.model} model not available. Use manual entry instead.",
                status_code
            )
        return super()._error_for_status(status_code, detail)

    @staticmethod
    def _load_document(
        document: Union[str, Path, bytes],
        mime_type: Optional[str]
    ) -> Tuple[bytes, Optional[str]]:
        if isinstance(document, bytes):
            return document, mime_type
        path = Path(document)
        return path.read_bytes(), mime_type or mimetypes.guess_type(path.name)[0]

    def build_request(self, content: bytes, mime_type: str) -> Dict[str, Any]:
        """
        Build the chat completion request body.

        Args:
            content: Raw image bytes
            mime_type: Image MIME type

        Returns:
            Request body dictionary
        """
        encoded = base64.b64encode(content).decode("ascii")
        return {
            "model": self.model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": ANALYSIS_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                        },
                    ],
                }
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

    def interpret(self, parsed: Dict[str, Any]) -> SoilReportAnalysis:
        """
        Turn a parsed model reply into a cleaned analysis.

        Accepts both the wrapped format (``soilData`` plus recommendations) and
        a flat mapping of soil values.

        Args:
            parsed: JSON object from the model

        Returns:
            SoilReportAnalysis with range-validated values
        """
        if isinstance(parsed.get("soilData"), dict) and "recommendations" in parsed:
            return SoilReportAnalysis(
                soil_data=self.validator.clean_soil_data(parsed["soilData"]),
                recommendations=[str(r) for r in parsed.get("recommendations") or []],
                overall_assessment=parsed.get("overallAssessment") or None,
                priority_actions=[str(a) for a in parsed.get("priorityActions") or []],
            )
        return SoilReportAnalysis(soil_data=self.validator.clean_soil_data(parsed))

    def analyze(
        self,
        document: Union[str, Path, bytes],
        mime_type: Optional[str] = None
    ) -> SoilReportAnalysis:
        """
        Analyze a soil test report image.

        Args:
            document: Path to the image, or its raw bytes
            mime_type: MIME type (guessed from the file name when omitted)

        Returns:
            Cleaned soil report analysis

        Raises:
            UnsupportedFormat: If the document is not a supported image
            AuthFailure: If the API key is missing or rejected
            RateLimited: If the provider is throttling requests
            ParseFailure: If no soil data can be recovered from the reply
            ProviderError: On any other failure
        """
        content, mime_type = self._load_document(document, mime_type)
        if mime_type not in SUPPORTED_MIME_TYPES:
            raise UnsupportedFormat(
                f"Unsupported document type: {mime_type or 'unknown'}. "
                f"Supported: {', '.join(SUPPORTED_MIME_TYPES)}"
            )
        if not self.api_key:
            raise AuthFailure(
                "OpenAI API key not found. Set OPENAI_API_KEY or "
                "soil_analyzer.api_key in the configuration."
            )

        self.logger.info(f"Analyzing soil report ({mime_type}, {len(content)} bytes) with {self.model}")
        data = self.post("/chat/completions", self.build_request(content, mime_type))

        try:
            message_content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ParseFailure("Invalid response from OpenAI API.") from e

        self.logger.debug(f"Model response: {message_content}")
        analysis = self.interpret(parse_model_content(message_content or ""))
        self.logger.info(
            f"Extracted {len(analysis.soil_data)} soil value(s), "
            f"{len(analysis.recommendations)} recommendation(s)"
        )
        return analysis
