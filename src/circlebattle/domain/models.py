"""Dataclasses describing the circle battle entities.

These are the in-memory shapes the rules layer operates on.  Persistence
adapters translate them to and from stored documents through
:mod:`circlebattle.repository.codec`; nothing in here knows about storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import NewType

from .enums import RequestStatus

# --- Strongly typed identifiers -------------------------------------------------

CardID = NewType("CardID", str)
CircleID = NewType("CircleID", str)
PlayerID = NewType("PlayerID", str)
BattleID = NewType("BattleID", str)
RequestID = NewType("RequestID", str)


# --- Core dataclasses -----------------------------------------------------------


@dataclass(slots=True)
class Card:
    """A member card as fielded in battle.

    ``max_hp`` and ``attack`` are derived from the card id and grade and never
    change; ``current_hp`` is the only stat mutated during a battle.
    """

    id: CardID
    name: str
    grade: int
    position: str = ""
    hobby: str = ""
    description: str = ""
    image_url: str = ""
    creator_id: str = ""
    circle_id: CircleID | None = None
    affiliated_group: str | None = None
    max_hp: int = 0
    attack: int = 0
    flavor: str = ""
    current_hp: int = 0

    @property
    def is_knocked_out(self) -> bool:
        return self.current_hp <= 0


@dataclass(slots=True)
class Player:
    """One side of a battle. Index 0 of ``deck`` is the active card."""

    player_id: PlayerID
    circle_id: CircleID
    circle_name: str
    hp: int
    deck: list[Card] = field(default_factory=list)

    @property
    def active_card(self) -> Card | None:
        return self.deck[0] if self.deck else None

    @property
    def bench(self) -> list[Card]:
        return self.deck[1:]


@dataclass(slots=True)
class BattleState:
    """Full state of a battle; ``logs`` are ordered newest first."""

    battle_id: BattleID
    player_me: Player
    player_opponent: Player
    current_turn: int
    current_player_id: PlayerID
    winner_id: str = ""
    logs: list[str] = field(default_factory=list)
    version: int | None = None

    @property
    def is_finished(self) -> bool:
        return self.winner_id != ""

    def add_log(self, entry: str) -> None:
        """Record an event as the most recent log entry."""

        self.logs.insert(0, entry)

    def player(self, player_id: str) -> Player | None:
        if player_id == self.player_me.player_id:
            return self.player_me
        if player_id == self.player_opponent.player_id:
            return self.player_opponent
        return None

    def opponent_of(self, player: Player) -> Player:
        return self.player_opponent if player is self.player_me else self.player_me


@dataclass(slots=True)
class BattleRequest:
    """A challenge sent from one circle to another."""

    request_id: RequestID
    from_circle_id: CircleID
    from_circle_name: str
    to_circle_id: CircleID
    to_circle_name: str
    status: RequestStatus
    created_at: datetime
    battle_id: BattleID | None = None
    version: int | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
