"""Entry point bundling the dispatcher and every endpoint method."""

from typing import Optional, Union

from ..config import Settings, get_global_settings
from ..core.logging import setup_logging
from .client import RiotAPIClient
from .constants import Region
from .methods import (
    ChampionMethod,
    GameMethod,
    LeagueMethod,
    LolStatusMethod,
    StaticDataMethod,
    StatsMethod,
    SummonerMethod,
    TeamMethod,
)
from .models import SummonerDTO


class RiotAPI:
    """
    Access to the Riot API through its method groups.

    The client and all methods are created up front and share one rate
    limiter and one response cache.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        user_agent: Optional[str] = None,
        settings: Optional[Settings] = None,
        client: Optional[RiotAPIClient] = None,
        default_locale: Optional[str] = None,
        configure_logging: bool = False,
    ):
        """
        Initialize the API.

        Args:
            api_key: Riot API key (uses config if None)
            user_agent: User-Agent header value (uses config if None)
            settings: Settings to build the client from
            client: Prebuilt client, overrides the three arguments above
            default_locale: Locale for static data requests, API default if None
            configure_logging: Set up structlog from the settings
        """
        settings = settings or get_global_settings()
        if configure_logging:
            setup_logging(settings.log_level, json_logs=settings.json_logs)

        self.client = client or RiotAPIClient(
            api_key=api_key, user_agent=user_agent, settings=settings
        )

        self.champion = ChampionMethod(self.client)
        self.game = GameMethod(self.client)
        self.league = LeagueMethod(self.client)
        self.stats = StatsMethod(self.client)
        self.summoner = SummonerMethod(self.client)
        self.team = TeamMethod(self.client)
        self.status = LolStatusMethod(self.client)
        self.static_data = StaticDataMethod(self.client, default_locale=default_locale)

    async def __aenter__(self):
        await self.client.start_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.client.close()

    async def close(self) -> None:
        await self.client.close()

    # Convenience methods

    async def get_summoner(self, region: Region, name_or_id: Union[str, int]) -> SummonerDTO:
        """Returns a summoner by name (str) or ID (int)."""
        if isinstance(name_or_id, int):
            return await self.summoner.get_summoner_by_id(region, name_or_id)
        return await self.summoner.get_summoner_by_name(region, name_or_id)

    def set_rate_limit_enabled(self, enabled: bool) -> None:
        self.client.set_rate_limit_enabled(enabled)

    def set_cache_enabled(self, enabled: bool) -> None:
        self.client.set_cache_enabled(enabled)

    def clear_api_call_cache(self) -> None:
        self.client.clear_cache()

    def remaining_api_calls(self) -> int:
        """Number of calls left before hitting the 10 minute limit."""
        return self.client.remaining_api_calls()

    def time_until_more_api_calls(self) -> float:
        return self.client.time_until_more_api_calls()
