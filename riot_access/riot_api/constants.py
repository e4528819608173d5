"""Riot API constants and enum definitions."""

from enum import Enum


class Region(str, Enum):
    """Game regions accepted by the API."""

    NA = "na"
    EUW = "euw"
    EUNE = "eune"
    BR = "br"
    TR = "tr"
    OCE = "oce"
    LAN = "lan"
    LAS = "las"
    RU = "ru"
    KR = "kr"


ALL_REGIONS = frozenset(Region)

# Hosts
REGIONAL_ENDPOINT = "{region}.api.pvp.net"
GLOBAL_ENDPOINT = "global.api.pvp.net"
STATUS_ENDPOINT = "status.leagueoflegends.com"

# Rate limit windows
SHORT_INTERVAL_SECONDS = 10.0
ROLLING_WINDOW_SECONDS = 600.0

DEFAULT_HEADERS = {"Accept-Charset": "UTF-8"}


class Season(str, Enum):
    """Ranked seasons accepted by the stats method."""

    SEASON_3 = "SEASON3"
    SEASON_4 = "SEASON4"
