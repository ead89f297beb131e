"""
Tests for the external provider clients.

HTTP traffic is mocked at the session level; no network access is needed.
"""

import json
import os
import unittest
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock, patch

import pytest  # type: ignore
import pytz  # type: ignore
import requests  # type: ignore

from src.lawn_tracker.api import (
    AuthFailure,
    NotFound,
    OpenAISoilAnalyzer,
    OpenWeatherMapAPI,
    ParseFailure,
    ProviderError,
    RateLimited,
    UnsupportedFormat,
    parse_model_content,
)

FIXTURES = Path(__file__).parent / "fixtures"


def make_response(status_code, payload=None, text=None):
    """Build a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status_code
    response.url = "https://example.test/endpoint"
    response.encoding = "utf-8"
    body = text if text is not None else json.dumps(payload or {})
    response._content = body.encode("utf-8")
    return response


class TestOpenWeatherMapAPI(unittest.TestCase):
    """Test the weather client."""

    def setUp(self):
        """Set up test fixtures."""
        with open(FIXTURES / "weather_responses.json") as f:
            self.responses = json.load(f)
        self.now = datetime.fromtimestamp(self.responses["now"], tz=pytz.UTC)
        self.client = OpenWeatherMapAPI(api_key="test-key", logger=Mock())

    def tearDown(self):
        self.client.close()

    def _route(self, current, forecast):
        def request(method, url, **kwargs):
            if url.endswith("/weather"):
                return current
            if url.endswith("/forecast"):
                return forecast
            raise AssertionError(f"Unexpected URL {url}")
        return request

    def test_fetch(self):
        """Test a snapshot is built from current conditions and the forecast window."""
        route = self._route(
            make_response(200, self.responses["current"]),
            make_response(200, self.responses["forecast"]),
        )
        with patch.object(self.client.session, "request", side_effect=route) as request:
            snapshot = self.client.fetch("53703", now=self.now)

        self.assertAlmostEqual(snapshot.current_temp, 82.4)
        self.assertAlmostEqual(snapshot.current_humidity, 58)
        self.assertAlmostEqual(snapshot.forecast_avg_max_temp, 88.0)
        self.assertAlmostEqual(snapshot.forecast_avg_min_temp, 68.0)
        self.assertEqual(snapshot.location_city, "Madison")
        self.assertEqual(snapshot.location_zip, "53703")
        self.assertEqual(snapshot.location_country, "US")
        self.assertEqual(snapshot.description, "scattered clouds")

        params = request.call_args.kwargs["params"]
        self.assertEqual(params["zip"], "53703,US")
        self.assertEqual(params["appid"], "test-key")
        self.assertEqual(params["units"], "imperial")

    def test_fetch_without_forecast_entries(self):
        """Test fallback to the current max/min when the forecast is empty."""
        route = self._route(
            make_response(200, self.responses["current"]),
            make_response(200, {"list": []}),
        )
        with patch.object(self.client.session, "request", side_effect=route):
            snapshot = self.client.fetch("53703", now=self.now)

        self.assertEqual(snapshot.forecast_avg_max_temp, 85.0)
        self.assertEqual(snapshot.forecast_avg_min_temp, 75.0)

    def test_naive_reference_time(self):
        """Test a naive reference time is treated as UTC."""
        route = self._route(
            make_response(200, self.responses["current"]),
            make_response(200, self.responses["forecast"]),
        )
        naive = self.now.replace(tzinfo=None)
        with patch.object(self.client.session, "request", side_effect=route):
            snapshot = self.client.fetch("53703", now=naive)

        self.assertAlmostEqual(snapshot.forecast_avg_max_temp, 88.0)

    def test_reference_time_in_local_zone(self):
        """Test an aware local reference time selects the same forecast window."""
        route = self._route(
            make_response(200, self.responses["current"]),
            make_response(200, self.responses["forecast"]),
        )
        local = self.now.astimezone(pytz.timezone("America/Chicago"))
        with patch.object(self.client.session, "request", side_effect=route):
            snapshot = self.client.fetch("53703", now=local)

        self.assertAlmostEqual(snapshot.forecast_avg_max_temp, 88.0)
        self.assertAlmostEqual(snapshot.forecast_avg_min_temp, 68.0)

    def test_status_mapping(self):
        """Test HTTP failures map to typed provider errors."""
        cases = [
            (401, AuthFailure),
            (403, AuthFailure),
            (404, NotFound),
            (429, RateLimited),
            (500, ProviderError),
        ]
        for status_code, error in cases:
            with self.subTest(status_code=status_code):
                with patch.object(
                    self.client.session, "request",
                    return_value=make_response(status_code, {"message": "nope"})
                ):
                    with self.assertRaises(error) as ctx:
                        self.client.fetch("53703", now=self.now)
                self.assertEqual(ctx.exception.status_code, status_code)

    def test_not_found_message(self):
        with patch.object(self.client.session, "request", return_value=make_response(404)):
            with self.assertRaises(NotFound) as ctx:
                self.client.fetch("00000", now=self.now)
        self.assertIn("zip code", str(ctx.exception))

    def test_connection_error(self):
        with patch.object(
            self.client.session, "request",
            side_effect=requests.exceptions.ConnectionError("offline")
        ):
            with self.assertRaises(ProviderError):
                self.client.fetch("53703", now=self.now)

    def test_invalid_json(self):
        with patch.object(self.client.session, "request", return_value=make_response(200, text="<html>")):
            with self.assertRaises(ParseFailure):
                self.client.fetch("53703", now=self.now)

    def test_unexpected_payload(self):
        route = self._route(
            make_response(200, {"name": "Madison"}),
            make_response(200, self.responses["forecast"]),
        )
        with patch.object(self.client.session, "request", side_effect=route):
            with self.assertRaises(ParseFailure):
                self.client.fetch("53703", now=self.now)

    def test_missing_api_key(self):
        """Test a missing key fails before any request is made."""
        with patch.dict(os.environ, {}, clear=True):
            client = OpenWeatherMapAPI(logger=Mock())
        with patch.object(client.session, "request") as request:
            with self.assertRaises(AuthFailure):
                client.fetch("53703")
        request.assert_not_called()

    def test_api_key_from_environment(self):
        with patch.dict(os.environ, {"WEATHER_API_KEY": "env-key"}, clear=True):
            client = OpenWeatherMapAPI(logger=Mock())
        self.assertEqual(client.api_key, "env-key")

    def test_missing_zip_code(self):
        with self.assertRaises(NotFound):
            self.client.fetch("")


class TestParseModelContent:
    """Test cases for extracting JSON from model replies."""

    def test_raw_json(self):
        assert parse_model_content('{"pH": 6.5}') == {"pH": 6.5}

    def test_fenced_block(self):
        content = 'Here are the results:\n```json\n{"pH": 6.5, "nitrogen": 30}\n```\nLet me know.'
        assert parse_model_content(content) == {"pH": 6.5, "nitrogen": 30}

    def test_bare_object(self):
        content = 'The extracted values are {"potassium": 150} based on the report.'
        assert parse_model_content(content) == {"potassium": 150}

    def test_no_json(self):
        with pytest.raises(ParseFailure):
            parse_model_content("I could not read this report.")

    def test_json_array_rejected(self):
        with pytest.raises(ParseFailure):
            parse_model_content("[1, 2, 3]")


class TestOpenAISoilAnalyzer:
    """Test cases for the AI soil report analyzer."""

    @pytest.fixture
    def analyzer(self):
        client = OpenAISoilAnalyzer(api_key="sk-test", logger=Mock())
        yield client
        client.close()

    @staticmethod
    def completion(content):
        return make_response(200, {"choices": [{"message": {"content": content}}]})

    def test_bearer_header(self, analyzer):
        assert analyzer.session.headers["Authorization"] == "Bearer sk-test"

    def test_interpret_wrapped(self, analyzer):
        analysis = analyzer.interpret({
            "soilData": {"pH": 15, "nitrogen": 30, "phosphorus": None},
            "recommendations": ["Apply lime"],
            "overallAssessment": "Fair",
            "priorityActions": ["Raise pH"],
        })

        assert analysis.soil_data == {"nitrogen": 30.0}
        assert analysis.recommendations == ["Apply lime"]
        assert analysis.overall_assessment == "Fair"
        assert analysis.priority_actions == ["Raise pH"]

    def test_interpret_flat(self, analyzer):
        analysis = analyzer.interpret({"pH": "6.2", "calcium": 50000})

        assert analysis.soil_data == {"pH": 6.2}
        assert analysis.recommendations == []

    def test_analyze_image_bytes(self, analyzer):
        content = (
            '```json\n{"soilData": {"pH": 6.4, "nitrogen": 18, "organicMatter": 3.1}, '
            '"recommendations": ["Increase nitrogen"], '
            '"overallAssessment": "Good overall", "priorityActions": []}\n```'
        )
        with patch.object(analyzer.session, "request", return_value=self.completion(content)) as request:
            analysis = analyzer.analyze(b"\x89PNG fake", mime_type="image/png")

        assert analysis.soil_data == {"pH": 6.4, "nitrogen": 18.0, "organicMatter": 3.1}
        assert analysis.recommendations == ["Increase nitrogen"]

        kwargs = request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"].endswith("/chat/completions")
        body = kwargs["json"]
        assert body["model"] == "gpt-4o"
        image = body["messages"][0]["content"][1]["image_url"]["url"]
        assert image.startswith("data:image/png;base64,")

    def test_analyze_image_file(self, analyzer, tmp_path):
        path = tmp_path / "report.jpg"
        path.write_bytes(b"\xff\xd8 fake jpeg")
        with patch.object(
            analyzer.session, "request",
            return_value=self.completion('{"pH": 7.1}')
        ) as request:
            analysis = analyzer.analyze(path)

        assert analysis.soil_data == {"pH": 7.1}
        image = request.call_args.kwargs["json"]["messages"][0]["content"][1]["image_url"]["url"]
        assert image.startswith("data:image/jpeg;base64,")

    def test_unsupported_format(self, analyzer):
        with patch.object(analyzer.session, "request") as request:
            with pytest.raises(UnsupportedFormat):
                analyzer.analyze(b"%PDF-1.7", mime_type="application/pdf")
        request.assert_not_called()

    def test_missing_api_key(self):
        with patch.dict(os.environ, {}, clear=True):
            analyzer = OpenAISoilAnalyzer(logger=Mock())
        assert "Authorization" not in analyzer.session.headers
        with pytest.raises(AuthFailure):
            analyzer.analyze(b"\x89PNG", mime_type="image/png")

    def test_rate_limited(self, analyzer):
        with patch.object(analyzer.session, "request", return_value=make_response(429)):
            with pytest.raises(RateLimited):
                analyzer.analyze(b"\x89PNG", mime_type="image/png")

    def test_model_not_available(self, analyzer):
        with patch.object(analyzer.session, "request", return_value=make_response(404)):
            with pytest.raises(NotFound, match="model not available"):
                analyzer.analyze(b"\x89PNG", mime_type="image/png")

    def test_invalid_response_shape(self, analyzer):
        with patch.object(analyzer.session, "request", return_value=make_response(200, {"choices": []})):
            with pytest.raises(ParseFailure):
                analyzer.analyze(b"\x89PNG", mime_type="image/png")

    def test_unparseable_reply(self, analyzer):
        with patch.object(
            analyzer.session, "request",
            return_value=self.completion("Sorry, the image is too blurry.")
        ):
            with pytest.raises(ParseFailure):
                analyzer.analyze(b"\x89PNG", mime_type="image/png")
