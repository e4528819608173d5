"""
Riot API access layer.

This package turns logical API operations into HTTP requests, paces them
with a client-side rate limiter, caches responses and maps status codes to
a small error taxonomy.
"""

from .api import RiotAPI
from .cache import ResponseCache
from .classifier import StatusOutcome, classify_status, raise_for_status
from .client import RiotAPIClient
from .constants import Region, Season
from .endpoints import ArgMap, RiotAPIEndpoints, build_url, create_arg_map
from .errors import (
    ArgumentCountError,
    AuthenticationError,
    BadRequestError,
    ClientError,
    GameDataNotFoundError,
    InternalServerError,
    InvalidTemplateError,
    LeagueNotFoundError,
    NotFoundError,
    RateLimitExceededError,
    RateLimitTimeoutError,
    RegionNotSupportedError,
    ResponsePayloadError,
    RiotAPIError,
    ServerError,
    ServiceUnavailableError,
    StaticDataNotFoundError,
    SummonerNotFoundError,
    TeamNotFoundError,
    TransportError,
)
from .models import ApiMethod, RateLimitConfig, RequestDescriptor, Response
from .rate_limiter import RateLimiter

__all__ = [
    "RiotAPI",
    "RiotAPIClient",
    "RateLimiter",
    "ResponseCache",
    "RiotAPIEndpoints",
    "ArgMap",
    "create_arg_map",
    "build_url",
    "StatusOutcome",
    "classify_status",
    "raise_for_status",
    "Region",
    "Season",
    "ApiMethod",
    "RateLimitConfig",
    "RequestDescriptor",
    "Response",
    "RiotAPIError",
    "RegionNotSupportedError",
    "InvalidTemplateError",
    "ArgumentCountError",
    "TransportError",
    "ResponsePayloadError",
    "ClientError",
    "BadRequestError",
    "AuthenticationError",
    "RateLimitExceededError",
    "RateLimitTimeoutError",
    "ServerError",
    "InternalServerError",
    "ServiceUnavailableError",
    "NotFoundError",
    "SummonerNotFoundError",
    "GameDataNotFoundError",
    "LeagueNotFoundError",
    "TeamNotFoundError",
    "StaticDataNotFoundError",
]
