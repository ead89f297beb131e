"""
OpenWeatherMap client.

Fetches current conditions and the 5-day forecast for a postal code and
normalizes them into a WeatherSnapshot (imperial units).
"""

import logging
import os
from datetime import datetime, timedelta
from typing import Dict, Any, List, Optional, Tuple

import pytz

from ..core import constants
from ..models.weather import WeatherSnapshot
from .client import APIClient
from .errors import AuthFailure, NotFound, ParseFailure

DEFAULT_WEATHER_URL = "https://api.openweathermap.org/data/2.5"


class OpenWeatherMapAPI(APIClient):
    """Weather provider backed by the OpenWeatherMap REST API."""

    provider_name = "OpenWeatherMap"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_WEATHER_URL,
        timeout: int = 30,
        max_retries: int = 3,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize weather client.

        Args:
            api_key: OpenWeatherMap API key. Falls back to OPENWEATHER_API_KEY
                     or WEATHER_API_KEY env vars
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        super().__init__(base_url, timeout, max_retries, verify_ssl, logger)
        self.api_key = (
            api_key or os.getenv("OPENWEATHER_API_KEY") or os.getenv("WEATHER_API_KEY")
        )

    def _params(self, zip_code: str, country_code: str) -> Dict[str, str]:
        return {
            "zip": f"{zip_code},{country_code}",
            "appid": self.api_key,
            "units": "imperial",
        }

    def _error_for_status(self, status_code, detail):
        if status_code == 404:
            return NotFound("Location not found. Please check your zip code.", status_code)
        return super()._error_for_status(status_code, detail)

    def fetch(
        self,
        zip_code: str,
        country_code: str = "US",
        now: Optional[datetime] = None
    ) -> WeatherSnapshot:
        """
        Fetch current weather and forecast averages for a postal code.

        Args:
            zip_code: Postal code
            country_code: ISO country code
            now: Reference time for the forecast window (defaults to now, UTC)

        Returns:
            Normalized weather snapshot

        Raises:
            AuthFailure: If the API key is missing or rejected
            NotFound: If the postal code cannot be resolved
            RateLimited: If the provider is throttling requests
            ProviderError: On any other failure
        """
        if not self.api_key:
            raise AuthFailure(
                "OpenWeatherMap API key not found. Set OPENWEATHER_API_KEY "
                "or weather.api_key in the configuration."
            )
        if not zip_code:
            raise NotFound("Location not found. No zip code configured.")

        if now is None:
            now = datetime.now(pytz.UTC)
        elif now.tzinfo is None:
            # Assume UTC if no timezone
            now = pytz.UTC.localize(now)

        self.logger.info(f"Fetching weather for {zip_code},{country_code}")
        params = self._params(zip_code, country_code)

        current = self.get("/weather", params=params)
        forecast = self.get("/forecast", params=params)

        try:
            main = current["main"]
            avg_max, avg_min = self._forecast_averages(forecast.get("list", []), now)
            conditions = current.get("weather") or [{}]

            snapshot = WeatherSnapshot(
                current_temp=float(main["temp"]),
                current_humidity=float(main["humidity"]),
                forecast_avg_max_temp=avg_max if avg_max is not None else float(main["temp_max"]),
                forecast_avg_min_temp=avg_min if avg_min is not None else float(main["temp_min"]),
                location_city=current.get("name"),
                location_zip=zip_code,
                location_country=current.get("sys", {}).get("country"),
                description=conditions[0].get("description"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ParseFailure(f"Unexpected weather response: {e}") from e

        self.logger.info(
            f"Weather for {snapshot.location_city or zip_code}: "
            f"{snapshot.current_temp:.1f}°F, "
            f"forecast avg {snapshot.forecast_avg_min_temp:.1f}-{snapshot.forecast_avg_max_temp:.1f}°F"
        )
        return snapshot

    def _forecast_averages(
        self,
        items: List[Dict[str, Any]],
        now: datetime
    ) -> Tuple[Optional[float], Optional[float]]:
        """
        Average forecast max/min temperatures over the next week.

        Args:
            items: Forecast entries with 'dt' (unix seconds) and 'main' temps
            now: Start of the window (timezone-aware)

        Returns:
            Tuple of (avg_max, avg_min), both None if no entry falls in the window
        """
        window_end = now + timedelta(days=constants.FORECAST_WINDOW_DAYS)
        upcoming = [
            item for item in items
            if now < datetime.fromtimestamp(item["dt"], tz=pytz.UTC) <= window_end
        ]
        if not upcoming:
            self.logger.warning("No forecast entries in window, using current temperatures")
            return None, None

        avg_max = sum(item["main"]["temp_max"] for item in upcoming) / len(upcoming)
        avg_min = sum(item["main"]["temp_min"] for item in upcoming) / len(upcoming)
        return avg_max, avg_min
