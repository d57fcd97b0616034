"""Persistence for configurations (TOML files) and rolling state (SQLite)."""

from src.storage.config_store import ConfigStore, CONFIG_SUFFIX
from src.storage.state_store import StateStore, STATE_DB_NAME

__all__ = [
    "ConfigStore",
    "CONFIG_SUFFIX",
    "StateStore",
    "STATE_DB_NAME",
]
