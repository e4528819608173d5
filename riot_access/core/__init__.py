"""Shared infrastructure for the access layer."""

from .logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
