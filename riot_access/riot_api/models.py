"""Pydantic models for requests and responses of the execution layer."""

from enum import Enum
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    ROLLING_WINDOW_SECONDS,
    SHORT_INTERVAL_SECONDS,
    Region,
)

ArgPairs = Tuple[Tuple[str, str], ...]


def stringify_arg(value: Any) -> str:
    """Render an argument value the way the API expects it in a URL."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _to_pairs(value: Union[None, Mapping[str, Any], Iterable[Any]]) -> ArgPairs:
    """Normalize an ArgMap, mapping or pair iterable into a tuple of pairs."""
    if value is None:
        return ()
    if hasattr(value, "items"):
        items = value.items()
    else:
        items = value
    return tuple((str(k), stringify_arg(v)) for k, v in items)


class ApiMethod(BaseModel):
    """Static description of one API method (host, path prefix, regions)."""

    header: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    supported_regions: FrozenSet[Region] = Field(default_factory=frozenset)
    custom_endpoint: Optional[str] = None
    use_secure: bool = True
    unlimited: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def display_name(self) -> str:
        """Name used in error messages and logs."""
        return self.name or self.header or self.custom_endpoint or "unknown"

    def supports(self, region: Optional[Region]) -> bool:
        """Check if a region may be requested. ``None`` is always allowed."""
        return region is None or region in self.supported_regions


class RequestDescriptor(BaseModel):
    """A logical request, immutable once built."""

    method: ApiMethod
    region: Optional[Region] = None
    operation: Optional[str] = None
    path_args: Optional[ArgPairs] = None
    query_args: ArgPairs = ()
    use_global: bool = False
    skip_cache: bool = False
    bypass_rate_limit: bool = False

    model_config = ConfigDict(frozen=True)

    @field_validator("path_args", mode="before")
    @classmethod
    def _normalize_path_args(cls, v: Any) -> Optional[ArgPairs]:
        # None keeps the "no substitution" meaning
        return None if v is None else _to_pairs(v)

    @field_validator("query_args", mode="before")
    @classmethod
    def _normalize_query_args(cls, v: Any) -> ArgPairs:
        return _to_pairs(v)


class Response(BaseModel):
    """
    A response as handed out by the dispatcher.

    ``raw_value`` is the parsed JSON body, or ``None`` when a pass-through
    status came without a usable body. Shared between the cache and every
    caller, so it is frozen.
    """

    raw_value: Any = None
    status_code: int
    created_at: float

    model_config = ConfigDict(frozen=True)

    def age(self, now: float) -> float:
        """Seconds since the response was received."""
        return now - self.created_at

    def is_stale(self, ttl: float, now: float) -> bool:
        """Check if the response is at least ``ttl`` seconds old."""
        return self.age(now) >= ttl

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class RateLimitConfig(BaseModel):
    """Limits for the spacing gate and the rolling window."""

    limit_per_10_seconds: int = Field(..., gt=0)
    limit_per_10_minutes: int = Field(..., gt=0)
    short_interval: float = Field(default=SHORT_INTERVAL_SECONDS, gt=0)
    rolling_window: float = Field(default=ROLLING_WINDOW_SECONDS, gt=0)

    model_config = ConfigDict(frozen=True)

    @property
    def min_spacing(self) -> float:
        """Minimum seconds between two limited requests."""
        return self.short_interval / self.limit_per_10_seconds

    @property
    def rolling_window_limit(self) -> int:
        return self.limit_per_10_minutes


class SummonerDTO(BaseModel):
    """League of Legends Summoner information."""

    id: int
    name: str
    profile_icon_id: int = Field(..., alias="profileIconId")
    summoner_level: int = Field(..., alias="summonerLevel")
    revision_date: Optional[int] = Field(None, alias="revisionDate")
    region: Optional[Region] = None

    model_config = ConfigDict(populate_by_name=True)


class ShardDTO(BaseModel):
    """Status shard information."""

    name: str
    slug: str
    hostname: Optional[str] = None
    region_tag: Optional[str] = None
    locales: Tuple[str, ...] = ()
    services: Tuple[dict, ...] = ()

    model_config = ConfigDict(populate_by_name=True)
