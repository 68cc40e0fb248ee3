"""Persistence and card-source adapters for the battle engine."""

from .card_source import InMemoryCardSource, SqlCardSource
from .json_store import JsonBattleStore
from .memory_store import InMemoryBattleStore
from .sql_store import SqlBattleStore

__all__ = [
    "InMemoryBattleStore",
    "InMemoryCardSource",
    "JsonBattleStore",
    "SqlBattleStore",
    "SqlCardSource",
]
