"""HTTP status classification shared by the dispatcher and endpoint methods."""

from enum import Enum
from typing import Any, Mapping, Optional

from .errors import (
    AuthenticationError,
    BadRequestError,
    InternalServerError,
    RateLimitExceededError,
    ServiceUnavailableError,
)


class StatusOutcome(str, Enum):
    """Closed set of outcomes a status code can map to."""

    SUCCESS = "success"
    CLIENT_ERROR = "client_error"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    PASS_THROUGH = "pass_through"


_OUTCOMES = {
    200: StatusOutcome.SUCCESS,
    400: StatusOutcome.CLIENT_ERROR,
    401: StatusOutcome.CLIENT_ERROR,
    404: StatusOutcome.PASS_THROUGH,
    429: StatusOutcome.RATE_LIMITED,
    500: StatusOutcome.SERVER_ERROR,
    503: StatusOutcome.SERVER_ERROR,
}

_ERRORS = {
    400: (BadRequestError, "bad request"),
    401: (AuthenticationError, "unauthorized"),
    429: (RateLimitExceededError, "rate limit exceeded"),
    500: (InternalServerError, "internal"),
    503: (ServiceUnavailableError, "unavailable"),
}


def classify_status(status: int) -> StatusOutcome:
    """Map a status code to its outcome. Unknown codes pass through."""
    return _OUTCOMES.get(status, StatusOutcome.PASS_THROUGH)


def is_fatal(outcome: StatusOutcome) -> bool:
    """Check if an outcome ends the call with an error."""
    return outcome not in (StatusOutcome.SUCCESS, StatusOutcome.PASS_THROUGH)


def _retry_after(headers: Optional[Mapping[str, str]]) -> Optional[float]:
    if not headers:
        return None
    value = headers.get("Retry-After") or headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def raise_for_status(
    status: int,
    url: Optional[str] = None,
    response_data: Any = None,
    headers: Optional[Mapping[str, str]] = None,
) -> StatusOutcome:
    """
    Raise the mapped error for fatal status codes.

    Args:
        status: HTTP status code
        url: Redacted request URL, attached to the error
        response_data: Parsed error body, if any
        headers: Response headers, used for ``Retry-After`` on 429

    Returns:
        The outcome for success and pass-through codes

    Raises:
        ClientError: For 400 and 401
        RateLimitExceededError: For 429
        ServerError: For 500 and 503
    """
    outcome = classify_status(status)
    if not is_fatal(outcome):
        return outcome

    error_cls, message = _ERRORS[status]
    raise error_cls(
        message,
        status_code=status,
        response_data=response_data,
        retry_after=_retry_after(headers) if status == 429 else None,
        url=url,
    )
