"""
Spotify client exceptions.

Provides a clean exception hierarchy for authentication, transport
and Web API failures. Every error raised by the library for remote
input derives from SpotifyError.
"""

from typing import Optional


class SpotifyError(Exception):
    """Base exception for all Spotify-related errors."""
    pass


class SpotifyAuthError(SpotifyError):
    """Raised when a handshake or a token refresh is rejected."""
    pass


class SpotifyInvalidStateError(SpotifyAuthError):
    """Raised when the OAuth state returned on redirect does not match."""
    pass


class SpotifyTokenExpiredError(SpotifyAuthError):
    """Raised when a token has expired and auto refresh is disabled."""
    pass


class SpotifyRefreshUnavailableError(SpotifyError):
    """Raised when a refresh is attempted on a flow or token that cannot refresh."""
    pass


class SpotifyNetworkError(SpotifyError):
    """Raised when the transport fails and no response was obtained."""
    pass


class SpotifyParseError(SpotifyError):
    """Raised when a response body does not match the expected shape."""
    pass


class SpotifyHTTPError(SpotifyError):
    """Raised for non-2xx responses whose body is not a Spotify error object."""

    def __init__(self, status: int, body: bytes = b""):
        super().__init__(f"HTTP error {status}")
        self.status = status
        self.body = body


class SpotifyAPIError(SpotifyError):
    """Raised when the Web API returns a structured error object."""

    def __init__(self, status: int, message: str):
        super().__init__(f"API error {status}: {message}")
        self.status = status
        self.message = message


class SpotifyRateLimitError(SpotifyAPIError):
    """Raised when rate limited by Spotify API."""

    def __init__(
        self, status: int, message: str, retry_after: Optional[int] = None
    ):
        super().__init__(status, message)
        self.retry_after = retry_after


class SpotifyNotFoundError(SpotifyAPIError):
    """Raised when a requested resource is not found."""
    pass
