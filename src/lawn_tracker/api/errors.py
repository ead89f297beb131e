"""
Typed failures raised by external providers.

Callers decide whether to retry; the recommendation engine never sees these,
it only sees missing data.
"""

from typing import Optional


class ProviderError(Exception):
    """Generic failure of an external provider."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFound(ProviderError):
    """The requested resource (e.g. a postal code) could not be resolved."""


class AuthFailure(ProviderError):
    """Credentials are missing or were rejected."""


class RateLimited(ProviderError):
    """The provider is throttling requests."""


class UnsupportedFormat(ProviderError):
    """The document type cannot be analyzed."""


class ParseFailure(ProviderError):
    """The provider's response could not be interpreted."""
