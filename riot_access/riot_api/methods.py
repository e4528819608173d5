"""Endpoint methods built on the dispatcher.

Each method class describes one API method (host, path prefix, version,
regions) and turns responses into values or endpoint-specific errors.
Payloads are returned mostly as parsed JSON.
"""

from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

from .client import RiotAPIClient
from .constants import ALL_REGIONS, STATUS_ENDPOINT, Region, Season
from .endpoints import ArgMap, create_arg_map
from .errors import (
    GameDataNotFoundError,
    LeagueNotFoundError,
    NotFoundError,
    ResponsePayloadError,
    RiotAPIError,
    StaticDataNotFoundError,
    SummonerNotFoundError,
    TeamNotFoundError,
)
from .models import ApiMethod, RequestDescriptor, Response, ShardDTO, SummonerDTO

MAX_IDS_PER_REQUEST = 40


def standardize_summoner_name(summoner_name: str) -> str:
    """Lower-case summoner name without whitespace, as keyed by the API."""
    return summoner_name.replace(" ", "").lower()


def encode_for_uri(text: str) -> str:
    """Remove spaces and percent-encode the rest for use in a URL path."""
    return quote(text.replace(" ", ""), safe="")


def _join_ids(ids: tuple) -> str:
    if not ids:
        raise ValueError("At least one ID is required")
    if len(ids) > MAX_IDS_PER_REQUEST:
        raise ValueError(f"Only {MAX_IDS_PER_REQUEST} IDs are allowed per request")
    return ",".join(str(i) for i in ids)


class BaseMethod:
    """Common request plumbing for endpoint methods."""

    api_method: ApiMethod

    def __init__(self, client: RiotAPIClient):
        """
        Initialize the method.

        Args:
            client: Dispatcher shared by all methods of one API instance
        """
        self.client = client
        self.skip_cache = False

    def is_region_supported(self, region: Region) -> bool:
        return region in self.api_method.supported_regions

    def set_skip_cache(self, skip_cache: bool) -> None:
        """Always fetch fresh data for this method's requests."""
        self.skip_cache = skip_cache

    async def _get_method_result(
        self,
        region: Optional[Region] = None,
        operation: Optional[str] = None,
        path_args: Optional[ArgMap] = None,
        query_args: Optional[ArgMap] = None,
        use_global: bool = False,
        timeout: Optional[float] = None,
    ) -> Response:
        """Build a descriptor for this method and execute it."""
        descriptor = RequestDescriptor(
            method=self.api_method,
            region=region,
            operation=operation,
            path_args=path_args,
            query_args=query_args,
            use_global=use_global,
            skip_cache=self.skip_cache,
            bypass_rate_limit=self.api_method.unlimited,
        )
        return await self.client.execute(descriptor, timeout=timeout)

    @staticmethod
    def _expect_ok(
        response: Response, not_found: Optional[Callable[[], NotFoundError]] = None
    ) -> Any:
        """
        Return the value of a 200 response, raising for pass-through codes.

        Without a ``not_found`` factory a 404 is treated like any other
        unexpected status.
        """
        if response.status_code == 404 and not_found is not None:
            raise not_found()
        if response.status_code != 200:
            raise RiotAPIError(
                f"Unexpected response status {response.status_code}",
                status_code=response.status_code,
                response_data=response.raw_value,
            )
        return response.raw_value

    @staticmethod
    def _require(value: Any, key: str) -> Any:
        if not isinstance(value, dict) or key not in value:
            raise ResponsePayloadError(f"Server returned invalid data: missing {key!r}")
        return value[key]


class SummonerMethod(BaseMethod):
    """Summoner lookups by name and ID."""

    api_method = ApiMethod(
        header="api/lol",
        name="summoner",
        version="1.4",
        supported_regions=ALL_REGIONS,
    )

    async def get_summoner_by_name(self, region: Region, summoner_name: str) -> SummonerDTO:
        """
        Returns the summoner with the given name.

        Raises:
            SummonerNotFoundError: If the summoner was not found
            RegionNotSupportedError: If the region is not supported by the method
        """
        standardized = standardize_summoner_name(summoner_name)
        response = await self._get_method_result(
            region,
            "by-name/{summonerName}",
            create_arg_map("summonerName", encode_for_uri(standardized)),
        )
        value = self._expect_ok(
            response,
            lambda: SummonerNotFoundError(
                f"The summoner {summoner_name} was not found in {region.value}"
            ),
        )
        return SummonerDTO(**self._require(value, standardized), region=region)

    async def get_summoner_by_id(self, region: Region, summoner_id: int) -> SummonerDTO:
        """Returns the summoner with the given ID."""
        response = await self._get_method_result(
            region,
            "{summonerId}",
            create_arg_map("summonerId", summoner_id),
        )
        value = self._expect_ok(
            response,
            lambda: SummonerNotFoundError(
                f"The summoner {summoner_id} was not found in {region.value}"
            ),
        )
        return SummonerDTO(**self._require(value, str(summoner_id)), region=region)

    async def get_summoner_names(self, region: Region, *summoner_ids: int) -> Dict[int, str]:
        """
        Returns names for up to 40 summoner IDs.

        Invalid IDs are dropped by the server as long as one ID is valid.
        """
        response = await self._get_method_result(
            region,
            "{summonerIds}/name",
            create_arg_map("summonerIds", _join_ids(summoner_ids)),
        )
        value = self._expect_ok(
            response,
            lambda: SummonerNotFoundError(f"The summoners were not found in {region.value}"),
        )
        return {int(k): v for k, v in value.items()}

    async def get_summoner_mastery_pages(
        self, region: Region, summoner_id: int
    ) -> List[Dict[str, Any]]:
        """Returns the mastery pages of a summoner."""
        return await self._get_pages(region, summoner_id, "masteries")

    async def get_summoner_rune_pages(self, region: Region, summoner_id: int) -> List[Dict[str, Any]]:
        """Returns the rune pages of a summoner."""
        return await self._get_pages(region, summoner_id, "runes")

    async def _get_pages(self, region: Region, summoner_id: int, kind: str) -> List[Dict[str, Any]]:
        response = await self._get_method_result(
            region,
            "{summonerId}/" + kind,
            create_arg_map("summonerId", summoner_id),
        )
        value = self._expect_ok(
            response,
            lambda: SummonerNotFoundError(
                f"The summoner {summoner_id} was not found in {region.value}"
            ),
        )
        root = self._require(value, str(summoner_id))
        if self._require(root, "summonerId") != summoner_id:
            raise ResponsePayloadError("Server returned invalid data: summoner ID mismatch")
        return list(root.get("pages", []))


class GameMethod(BaseMethod):
    """Recent games."""

    api_method = ApiMethod(
        header="api/lol",
        name="game",
        version="1.3",
        supported_regions=frozenset({Region.NA, Region.EUW, Region.EUNE}),
    )

    async def get_recent_games(self, region: Region, summoner_id: int) -> List[Dict[str, Any]]:
        """Returns the recent games (max 10) of a summoner."""
        response = await self._get_method_result(
            region,
            "by-summoner/{summonerId}/recent",
            create_arg_map("summonerId", summoner_id),
        )
        root = self._expect_ok(
            response,
            lambda: GameDataNotFoundError(
                f"No game data for summoner {summoner_id} in {region.value}"
            ),
        )

        # Make sure the server answered for the right summoner
        if self._require(root, "summonerId") != summoner_id:
            raise ResponsePayloadError("Server returned invalid data: summoner ID mismatch")
        return list(root.get("games", []))


class ChampionMethod(BaseMethod):
    """Champion status (enabled, free to play)."""

    api_method = ApiMethod(
        header="api/lol",
        name="champion",
        version="1.2",
        supported_regions=frozenset({Region.NA, Region.EUW, Region.EUNE, Region.BR, Region.TR}),
    )

    async def get_champions(self, region: Region, free_to_play: bool = False) -> List[Dict[str, Any]]:
        """Returns champion status, optionally only the free-to-play rotation."""
        response = await self._get_method_result(
            region,
            query_args=create_arg_map("freeToPlay", free_to_play),
        )
        value = self._expect_ok(
            response, lambda: NotFoundError(f"No champion data in {region.value}")
        )
        return list(self._require(value, "champions"))


class LeagueMethod(BaseMethod):
    """League placements."""

    api_method = ApiMethod(
        header="api/lol",
        name="league",
        version="2.5",
        supported_regions=ALL_REGIONS,
    )

    async def get_leagues_by_summoner(self, region: Region, summoner_id: int) -> List[Dict[str, Any]]:
        """Returns the leagues a summoner is placed in."""
        response = await self._get_method_result(
            region,
            "by-summoner/{summonerIds}",
            create_arg_map("summonerIds", summoner_id),
        )
        value = self._expect_ok(
            response,
            lambda: LeagueNotFoundError(
                f"Summoner {summoner_id} is not in a league in {region.value}"
            ),
        )
        return list(self._require(value, str(summoner_id)))


class StatsMethod(BaseMethod):
    """Player statistics, per queue type and per ranked champion."""

    api_method = ApiMethod(
        header="api/lol",
        name="stats",
        version="1.1",
        supported_regions=frozenset({Region.NA, Region.EUW, Region.EUNE}),
    )

    async def get_stat_summaries(
        self, region: Region, summoner_id: int, season: Optional[Season] = None
    ) -> List[Dict[str, Any]]:
        """
        Returns the stat summaries of a summoner, one per queue type.

        Args:
            region: Region of the summoner
            summoner_id: ID of the summoner
            season: Season to read, current season if None

        Raises:
            SummonerNotFoundError: If the summoner was not found
        """
        root = await self._get_summoner_stats(region, summoner_id, "summary", season)
        return list(root.get("playerStatSummaries", []))

    async def get_ranked_champion_stats(
        self, region: Region, summoner_id: int, season: Optional[Season] = None
    ) -> List[Dict[str, Any]]:
        """Returns ranked stats of a summoner per champion played."""
        root = await self._get_summoner_stats(region, summoner_id, "ranked", season)
        return list(root.get("champions", []))

    async def _get_summoner_stats(
        self, region: Region, summoner_id: int, kind: str, season: Optional[Season]
    ) -> Dict[str, Any]:
        response = await self._get_method_result(
            region,
            "by-summoner/{summonerId}/" + kind,
            create_arg_map("summonerId", summoner_id),
            ArgMap().add_if("season", season),
        )
        root = self._expect_ok(
            response,
            lambda: SummonerNotFoundError(
                f"The summoner {summoner_id} was not found in {region.value}"
            ),
        )
        if self._require(root, "summonerId") != summoner_id:
            raise ResponsePayloadError("Server returned invalid data: summoner ID mismatch")
        return root


class TeamMethod(BaseMethod):
    """Ranked teams."""

    api_method = ApiMethod(
        header="api/lol",
        name="team",
        version="2.4",
        supported_regions=ALL_REGIONS,
    )

    async def get_teams_by_summoner(self, region: Region, summoner_id: int) -> List[Dict[str, Any]]:
        """
        Returns the teams of a summoner.

        The API answers 404 instead of an empty collection for summoners
        without teams, so that maps to an empty list.
        """
        response = await self._get_method_result(
            region,
            "by-summoner/{summonerIds}",
            create_arg_map("summonerIds", summoner_id),
        )
        if response.status_code == 404:
            return []
        value = self._expect_ok(response)
        return list(value.get(str(summoner_id), []))

    async def get_teams(self, region: Region, *team_ids: str) -> Dict[str, Dict[str, Any]]:
        """Returns teams keyed by their full ID, up to 40 per request."""
        response = await self._get_method_result(
            region,
            "{teamIds}",
            create_arg_map("teamIds", _join_ids(team_ids)),
        )
        value = self._expect_ok(
            response,
            lambda: TeamNotFoundError(f"The teams were not found in {region.value}"),
        )
        return dict(value)

    async def get_team(self, region: Region, team_id: str) -> Dict[str, Any]:
        """Returns one team by ID."""
        teams = await self.get_teams(region, team_id)
        if team_id not in teams:
            raise TeamNotFoundError(f"The team {team_id} was not found in {region.value}")
        return teams[team_id]


class LolStatusMethod(BaseMethod):
    """Shard status, served by an unauthenticated host outside the rate limit."""

    api_method = ApiMethod(
        header="shards",
        supported_regions=ALL_REGIONS,
        custom_endpoint=STATUS_ENDPOINT,
        use_secure=False,
        unlimited=True,
    )

    async def get_shards(self) -> List[ShardDTO]:
        response = await self._get_method_result()
        value = self._expect_ok(response, lambda: NotFoundError("No shards listed"))
        return [ShardDTO(**shard) for shard in value]

    async def get_shard(self, region: Region) -> ShardDTO:
        """Returns one shard with its services and incidents."""
        response = await self._get_method_result(
            None,
            "{region}",
            create_arg_map("region", region),
        )
        value = self._expect_ok(
            response, lambda: NotFoundError(f"No shard for {region.value}")
        )
        return ShardDTO(**value)


class StaticDataMethod(BaseMethod):
    """Static game data, served by the global host outside the rate limit."""

    api_method = ApiMethod(
        header="api/lol/static-data",
        version="1.2",
        supported_regions=ALL_REGIONS,
        unlimited=True,
    )

    def __init__(self, client: RiotAPIClient, default_locale: Optional[str] = None):
        super().__init__(client)
        self.default_locale = default_locale

    def _locale_args(self, locale: Optional[str], data: Optional[str] = None) -> ArgMap:
        return ArgMap().add_if("locale", locale or self.default_locale).add_if("champData", data)

    async def get_champions(
        self,
        region: Region,
        locale: Optional[str] = None,
        data: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Returns the champion list keyed by champion key."""
        response = await self._get_method_result(
            region,
            "champion",
            query_args=self._locale_args(locale, data),
            use_global=True,
        )
        value = self._expect_ok(
            response, lambda: StaticDataNotFoundError("No champion data")
        )
        return dict(self._require(value, "data"))

    async def get_champion(
        self,
        region: Region,
        champion_id: int,
        locale: Optional[str] = None,
        data: Optional[str] = None,
    ) -> Dict[str, Any]:
        response = await self._get_method_result(
            region,
            "champion/{id}",
            create_arg_map("id", champion_id),
            self._locale_args(locale, data),
            use_global=True,
        )
        return self._expect_ok(
            response,
            lambda: StaticDataNotFoundError(f"Champion {champion_id} not found"),
        )

    async def get_masteries(
        self,
        region: Region,
        locale: Optional[str] = None,
        data: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Returns the mastery list.

        Args:
            region: Region whose data version is read
            locale: Locale of the texts, default locale if None
            data: Extra fields to include, e.g. ``"all"``
        """
        response = await self._get_method_result(
            region,
            "mastery",
            query_args=ArgMap()
            .add_if("locale", locale or self.default_locale)
            .add_if("masteryListData", data),
            use_global=True,
        )
        return self._expect_ok(
            response, lambda: StaticDataNotFoundError("No mastery data")
        )

    async def get_region_info(self, region: Region) -> Dict[str, Any]:
        """Returns the realm info (data versions, CDN) of a region."""
        response = await self._get_method_result(region, "realm", use_global=True)
        return self._expect_ok(
            response, lambda: StaticDataNotFoundError(f"No realm data for {region.value}")
        )

    async def get_versions(self, region: Region) -> List[str]:
        """Returns the available data versions, newest first."""
        response = await self._get_method_result(region, "versions", use_global=True)
        value = self._expect_ok(
            response, lambda: StaticDataNotFoundError(f"No versions for {region.value}")
        )
        return list(value)
