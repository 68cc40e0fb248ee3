"""Protocol-based interfaces for the battle engine's collaborators.

This module exports the contracts for the two external dependencies, enabling
dependency injection of real adapters in production and fakes in tests.
"""

from circlebattle.interfaces.battle_store import IBattleStore
from circlebattle.interfaces.card_source import ICardSource

__all__ = [
    "IBattleStore",
    "ICardSource",
]
