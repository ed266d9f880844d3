"""
Failures delivered to a RemoteCallback's on_failed branch.

Upstream status codes are passed through untouched:
- 409 limit greater than 100, limit below 1, invalid or empty parameter,
      missing apikey, missing hash, missing ts
- 401 invalid referer, invalid hash
- 405 method not allowed
- 403 forbidden
"""

from typing import Optional


class MarvelApiError(Exception):
    """Base class for every failure surfaced by a Call."""


class NetworkError(MarvelApiError):
    """Connectivity problem or timeout before a response was received."""

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.message = message
        self.url = url


class HttpStatusError(MarvelApiError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None, url: str = None):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.code = code
        self.url = url

    @property
    def unauthorized(self) -> bool:
        return self.status_code == 401


class DecodeError(MarvelApiError):
    """Response body is not JSON or does not have the expected shape."""


class CallCancelledError(MarvelApiError):
    """The enqueued call was cancelled before it completed."""
