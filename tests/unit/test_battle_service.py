"""Unit tests for the battle session service.

Tests cover:
- Battle creation with real pools, short pools and mock fallback
- Circle name fallback
- Attack and retreat persistence
- Error translation for store failures and concurrent writers
"""

from __future__ import annotations

import random

import pytest

from circlebattle.domain import models as dm
from circlebattle.domain.deck import is_placeholder
from circlebattle.errors import (
    AbortedError,
    FailedPreconditionError,
    InternalError,
    InvalidArgumentError,
    NotFoundError,
    StoreError,
)
from circlebattle.repository import InMemoryBattleStore, InMemoryCardSource
from circlebattle.services import BattleSessionService


def _card_source(*circles: tuple[str, str, int]) -> InMemoryCardSource:
    source = InMemoryCardSource()
    for circle_id, name, count in circles:
        source.add_circle(circle_id, name)
        for index in range(count):
            source.add_card(
                dm.Card(
                    id=dm.CardID(f"{circle_id}-{index}"),
                    name=f"{name} {index}",
                    grade=1,
                    circle_id=dm.CircleID(circle_id),
                )
            )
    return source


class _BrokenStore(InMemoryBattleStore):
    def save_battle(self, state: dm.BattleState) -> None:
        raise StoreError("disk on fire")


class _InterleavingStore(InMemoryBattleStore):
    """Runs a rival write between a service's read and its write."""

    def __init__(self) -> None:
        super().__init__()
        self.rival = None

    def get_battle(self, battle_id: str) -> dm.BattleState:
        state = super().get_battle(battle_id)
        rival, self.rival = self.rival, None
        if rival is not None:
            rival()
        return state


@pytest.fixture
def store():
    return InMemoryBattleStore()


@pytest.fixture
def service(store):
    source = _card_source(("alpha", "Alpha", 6), ("beta", "Beta", 3))
    return BattleSessionService(store, source, rng_factory=lambda: random.Random(0))


class TestCreateBattle:
    def test_creates_and_stores_opening_state(self, service, store):
        battle = service.create_battle("alpha", "beta")

        assert battle.battle_id.startswith("battle-")
        assert battle.version == 0
        assert battle.current_player_id == "alpha"
        assert battle.player_me.circle_name == "Alpha"
        assert battle.player_opponent.circle_name == "Beta"
        assert store.get_battle(battle.battle_id) == battle

    def test_short_pool_is_padded(self, service):
        battle = service.create_battle("alpha", "beta")

        assert len(battle.player_me.deck) == 5
        assert not any(is_placeholder(card) for card in battle.player_me.deck)
        opponent_deck = battle.player_opponent.deck
        assert len(opponent_deck) == 5
        assert sum(is_placeholder(card) for card in opponent_deck) == 2

    def test_missing_pool_without_fallback_is_internal(self, store):
        service = BattleSessionService(store, _card_source(("alpha", "Alpha", 5)))

        with pytest.raises(InternalError, match="failed to get cards for circle beta"):
            service.create_battle("alpha", "beta")

    def test_missing_pool_with_fallback_uses_mock_cards(self, store, caplog):
        source = _card_source(("alpha", "Alpha", 5))
        service = BattleSessionService(store, source, enable_mock_fallback=True)

        with caplog.at_level("WARNING"):
            battle = service.create_battle("alpha", "beta")

        deck_ids = {card.id for card in battle.player_opponent.deck}
        assert deck_ids == {f"beta-card-{i}" for i in range(5)}
        assert "falling back to mock cards" in caplog.text

    def test_unknown_circle_name_falls_back(self, store):
        source = _card_source(("alpha", "Alpha", 5))
        source.add_card(
            dm.Card(id=dm.CardID("x-1"), name="X", grade=1, circle_id=dm.CircleID("x"))
        )
        service = BattleSessionService(store, source)

        battle = service.create_battle("alpha", "x")

        assert battle.player_opponent.circle_name == "Circle x"

    def test_store_failure_is_internal(self):
        service = BattleSessionService(
            _BrokenStore(), _card_source(("alpha", "Alpha", 5), ("beta", "Beta", 5))
        )

        with pytest.raises(InternalError, match="failed to save battle"):
            service.create_battle("alpha", "beta")


class TestStartBattle:
    @pytest.mark.parametrize("first,second", [("", "beta"), ("alpha", ""), ("", "")])
    def test_empty_ids_rejected(self, service, first, second):
        with pytest.raises(InvalidArgumentError, match="circle IDs required"):
            service.start_battle(first, second)

    def test_self_battle_rejected(self, service):
        with pytest.raises(InvalidArgumentError, match="cannot battle itself"):
            service.start_battle("alpha", "alpha")

    def test_start_battle_creates_battle(self, service):
        battle = service.start_battle("alpha", "beta")
        assert service.get_battle(battle.battle_id) == battle


class TestTurns:
    def test_get_missing_battle(self, service):
        with pytest.raises(NotFoundError):
            service.get_battle("battle-nope")

    def test_attack_is_persisted(self, service):
        battle = service.create_battle("alpha", "beta")

        updated = service.attack(battle.battle_id, "alpha")

        stored = service.get_battle(battle.battle_id)
        assert stored == updated
        assert stored.version == 1
        assert stored.current_player_id == "beta"
        assert stored.current_turn == 2

    def test_out_of_turn_attack_leaves_store_untouched(self, service):
        battle = service.create_battle("alpha", "beta")

        with pytest.raises(FailedPreconditionError):
            service.attack(battle.battle_id, "beta")

        assert service.get_battle(battle.battle_id) == battle

    def test_alternating_attacks(self, service):
        battle = service.create_battle("alpha", "beta")

        service.attack(battle.battle_id, "alpha")
        updated = service.attack(battle.battle_id, "beta")

        assert updated.current_player_id == "alpha"
        assert updated.current_turn == 3
        assert updated.version == 2

    def test_retreat_is_persisted(self, service):
        battle = service.create_battle("alpha", "beta")
        bench_card = battle.player_me.deck[3].id

        service.retreat(battle.battle_id, "alpha", 2)

        stored = service.get_battle(battle.battle_id)
        assert stored.player_me.active_card.id == bench_card
        assert stored.current_player_id == "beta"

    def test_invalid_retreat_leaves_store_untouched(self, service):
        battle = service.create_battle("alpha", "beta")

        with pytest.raises(InvalidArgumentError):
            service.retreat(battle.battle_id, "alpha", 4)

        assert service.get_battle(battle.battle_id) == battle

    def test_finished_battle_is_not_rewritten(self, service, store):
        battle = service.create_battle("alpha", "beta")
        battle.winner_id = "alpha"
        store.save_battle(battle)

        result = service.attack(battle.battle_id, "alpha")

        assert result.version == 1
        assert store.get_battle(battle.battle_id).version == 1

    def test_finished_battle_ignores_retreat(self, service, store):
        battle = service.create_battle("alpha", "beta")
        battle.winner_id = "alpha"
        store.save_battle(battle)
        before = store.get_battle(battle.battle_id)

        result = service.retreat(battle.battle_id, "alpha", 0)

        assert result == before
        stored = store.get_battle(battle.battle_id)
        assert stored.version == 1
        assert stored == before

    def test_lost_update_is_aborted(self):
        store = _InterleavingStore()
        source = _card_source(("alpha", "Alpha", 5), ("beta", "Beta", 5))
        service = BattleSessionService(store, source)
        battle = service.create_battle("alpha", "beta")

        def rival() -> None:
            winner = InMemoryBattleStore.get_battle(store, battle.battle_id)
            winner.add_log("rival write")
            store.save_battle(winner)

        store.rival = rival
        with pytest.raises(AbortedError, match="modified by another request"):
            service.attack(battle.battle_id, "alpha")

        stored = service.get_battle(battle.battle_id)
        assert stored.logs[0] == "rival write"
        assert stored.version == 1
