"""
Base API client for external providers.

Handles HTTP requests, session management, and mapping of HTTP failures to
typed provider errors.
"""

import logging
from typing import Dict, Any, Optional

import requests  # type: ignore
from requests.adapters import HTTPAdapter  # type: ignore
from urllib3.util.retry import Retry  # type: ignore

from .errors import AuthFailure, NotFound, ParseFailure, ProviderError, RateLimited


class APIClient:
    """Base client for JSON-over-HTTP providers."""

    provider_name = "API"

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        max_retries: int = 3,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize API client.

        Args:
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts for server errors
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.verify_ssl = verify_ssl

        # Retry server errors only; 429 is raised to the caller
        self.session = requests.Session()
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=1,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET", "POST"],
            raise_on_status=False
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self._update_headers()

    def _update_headers(self) -> None:
        """Update session headers."""
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json"
        })

    def _error_for_status(self, status_code: Optional[int], detail: str) -> ProviderError:
        """
        Map an HTTP status code to a typed provider error.

        Args:
            status_code: HTTP status code
            detail: Error detail for the message

        Returns:
            ProviderError subclass instance
        """
        if status_code in (401, 403):
            return AuthFailure(
                f"Invalid {self.provider_name} API key. Please check your API key.",
                status_code
            )
        if status_code == 404:
            return NotFound(f"{self.provider_name} resource not found: {detail}", status_code)
        if status_code == 429:
            return RateLimited(
                f"{self.provider_name} rate limit exceeded. Please try again later.",
                status_code
            )
        return ProviderError(f"{self.provider_name} error: {status_code} - {detail}", status_code)

    def _make_request(
        self,
        method: str,
        endpoint: str,
        **kwargs
    ) -> requests.Response:
        """
        Make HTTP request to API.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            ProviderError: On request failure (typed by status code)
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault("verify", self.verify_ssl)

        self.logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                timeout=self.timeout,
                **kwargs
            )
            response.raise_for_status()
            return response

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            self.logger.error(f"API request failed: {method} {url} - {status_code}")
            raise self._error_for_status(status_code, str(e)) from e

        except requests.exceptions.RequestException as e:
            self.logger.error(f"API request failed: {method} {url} - {e}")
            raise ProviderError(f"Unable to reach {self.provider_name}: {e}") from e

    @staticmethod
    def _json(response: requests.Response) -> Dict[str, Any]:
        """Decode a JSON response body."""
        try:
            return response.json()
        except ValueError as e:
            raise ParseFailure(f"Response is not valid JSON: {e}") from e

    def get(self, endpoint: str, params: Optional[Dict] = None) -> Dict[str, Any]:
        """
        Make GET request.

        Args:
            endpoint: API endpoint
            params: Query parameters

        Returns:
            JSON response as dictionary
        """
        response = self._make_request("GET", endpoint, params=params)
        return self._json(response)

    def post(self, endpoint: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Make POST request.

        Args:
            endpoint: API endpoint
            data: Request body data

        Returns:
            JSON response as dictionary
        """
        response = self._make_request("POST", endpoint, json=data)
        return self._json(response)

    def close(self) -> None:
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
