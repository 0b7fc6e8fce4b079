"""Streamsig application package."""

from .config import get_settings
from .core.player import get_player_functions
from .formats import resolve_formats, select_format

__all__ = ["get_player_functions", "get_settings", "resolve_formats", "select_format"]
