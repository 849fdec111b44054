"""Runtime configuration helpers."""

from .settings import DEFAULT_RECENT_TRADES, DEFAULT_STARTING_CASH, Settings, load_settings

__all__ = [
    "DEFAULT_RECENT_TRADES",
    "DEFAULT_STARTING_CASH",
    "Settings",
    "load_settings",
]
