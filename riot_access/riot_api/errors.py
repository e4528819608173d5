"""Custom error classes for the Riot API access layer."""

from typing import Any, Dict, Iterable, Optional


class RiotAPIError(Exception):
    """Base exception for Riot API errors with status code tracking."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Any = None,
        retry_after: Optional[float] = None,
        url: Optional[str] = None,
    ) -> None:
        """
        Initialize RiotAPIError.

        Args:
            message: Error message
            status_code: HTTP status code (400, 401, 429, 500, 503, etc.)
            response_data: Parsed response body, if any
            retry_after: Seconds to wait before retry (for 429 errors)
            url: Request URL with the API key removed
        """
        super().__init__(message)
        self.status_code: Optional[int] = status_code
        self.response_data: Any = response_data
        self.retry_after: Optional[float] = retry_after
        self.url: Optional[str] = url
        self.message: str = message

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.status_code == 429 and self.retry_after:
            return f"Rate Limit Error {self.status_code}: {self.message} (Retry after: {self.retry_after}s)"
        if self.status_code:
            return f"Riot API Error {self.status_code}: {self.message}"
        return f"Riot API Error: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "status_code": self.status_code,
            "retry_after": self.retry_after,
            "url": self.url,
            "response_data": self.response_data,
        }

    # Helper methods for error type checking
    def is_rate_limit(self) -> bool:
        """Check if this is a rate limit error (429)."""
        return self.status_code == 429

    def is_not_found(self) -> bool:
        """Check if this is a not found error (404)."""
        return self.status_code == 404

    def is_auth_error(self) -> bool:
        """Check if this is an authentication error (401)."""
        return self.status_code == 401

    def is_server_error(self) -> bool:
        """Check if this is a server error (5xx)."""
        return self.status_code is not None and self.status_code >= 500

    def is_bad_request(self) -> bool:
        """Check if this is a bad request error (400)."""
        return self.status_code == 400


# Caller input errors, raised before any I/O


class RegionNotSupportedError(RiotAPIError):
    """The requested region is not served by the method."""

    def __init__(self, method: str, region: Any, supported: Iterable[Any]) -> None:
        self.method = method
        self.region = region
        self.supported = sorted(_region_str(r) for r in supported)
        super().__init__(
            f'Region "{_region_str(region)}" is not supported by method '
            f'"{method}", supported: {self.supported}'
        )


class InvalidTemplateError(RiotAPIError, ValueError):
    """An operation template could not be resolved into a URL."""

    pass


class ArgumentCountError(RiotAPIError, ValueError):
    """Argument pairs were given with an odd number of items."""

    pass


# Transport and payload errors


class TransportError(RiotAPIError):
    """The HTTP request could not be completed. The cause is chained."""

    pass


class ResponsePayloadError(RiotAPIError):
    """The server answered successfully but the body was not usable."""

    pass


# Status code errors


class ClientError(RiotAPIError):
    """The request was rejected by the server (400, 401)."""

    pass


class BadRequestError(ClientError):
    """Bad request (400) - invalid parameters."""

    pass


class AuthenticationError(ClientError):
    """Authentication error (401) - invalid or missing API key."""

    pass


class RateLimitExceededError(RiotAPIError):
    """Rate limit error (429) - the server refused the call."""

    pass


class RateLimitTimeoutError(RiotAPIError):
    """The rate limiter could not admit the call within the timeout budget."""

    pass


class ServerError(RiotAPIError):
    """Server side failure (500, 503). Transient, not retried."""

    pass


class InternalServerError(ServerError):
    """Internal server error (500)."""

    pass


class ServiceUnavailableError(ServerError):
    """Service unavailable (503) - Riot servers down."""

    pass


# Endpoint-level not found errors


class NotFoundError(RiotAPIError):
    """Not found (404) - raised by endpoint methods, never by the core."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("status_code", 404)
        super().__init__(message, **kwargs)


class SummonerNotFoundError(NotFoundError):
    """The summoner does not exist in the region."""

    pass


class GameDataNotFoundError(NotFoundError):
    """No game data exists for the summoner."""

    pass


class LeagueNotFoundError(NotFoundError):
    """The summoner is not placed in any league."""

    pass


class TeamNotFoundError(NotFoundError):
    """The requested team does not exist."""

    pass


class StaticDataNotFoundError(NotFoundError):
    """The requested static data entry does not exist."""

    pass


def _region_str(region: Any) -> str:
    return region.value if hasattr(region, "value") else str(region)
