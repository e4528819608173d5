"""Client-side access layer for the rate-limited Riot JSON API."""

__version__ = "0.1.0"
