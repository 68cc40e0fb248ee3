"""Battle Session Service.

Owns battle creation and the attack/retreat flow.  Each operation is one
read-modify-write against the battle store: load the full state, apply the
rules from :mod:`circlebattle.domain.battle`, write the full state back.
Writes are compare-and-set on the state's version, so a request that lost a
race fails with :class:`~circlebattle.errors.AbortedError` instead of
silently overwriting the winner's update.
"""

from __future__ import annotations

import logging
import uuid

from circlebattle.domain import models as dm
from circlebattle.domain.battle import apply_attack, apply_retreat, new_battle_state, new_player
from circlebattle.domain.deck import build_deck
from circlebattle.domain.rules_config import DEFAULT_RULES, RulesConfig
from circlebattle.domain.stats import generate_mock_cards
from circlebattle.errors import (
    CardSourceError,
    FailedPreconditionError,
    InternalError,
    InvalidArgumentError,
)
from circlebattle.interfaces import IBattleStore, ICardSource
from circlebattle.services.persistence import load_battle, save_battle
from circlebattle.utils.rng import RngFactory, fresh_rng

logger = logging.getLogger(__name__)


def fallback_circle_name(circle_id: str) -> str:
    return f"Circle {circle_id}"


def resolve_circle_name(card_source: ICardSource, circle_id: str) -> str:
    """Look up a circle's name, falling back to a synthetic label on failure."""

    try:
        return card_source.get_circle_name(circle_id)
    except CardSourceError as exc:
        logger.warning("failed to get circle name for %s: %s", circle_id, exc)
        return fallback_circle_name(circle_id)


def validate_circle_pair(first: str, second: str) -> None:
    """Reject a pairing unless both circle ids are set and differ.

    A circle may not battle or challenge itself.

    Raises:
        InvalidArgumentError: If either id is empty or both are the same
    """
    if not first or not second:
        raise InvalidArgumentError("circle IDs required")
    if first == second:
        raise InvalidArgumentError(f"circle {first} cannot battle itself")


class BattleSessionService:
    """Service for creating battles and playing turns."""

    def __init__(
        self,
        store: IBattleStore,
        card_source: ICardSource,
        *,
        enable_mock_fallback: bool = False,
        rng_factory: RngFactory = fresh_rng,
        rules: RulesConfig = DEFAULT_RULES,
    ):
        self.store = store
        self.card_source = card_source
        self.enable_mock_fallback = enable_mock_fallback
        self.rng_factory = rng_factory
        self.rules = rules

    def _card_pool(self, circle_id: str) -> list[dm.Card]:
        try:
            return self.card_source.get_circle_cards(circle_id)
        except CardSourceError as exc:
            logger.error("failed to get cards for circle %s: %s", circle_id, exc)
            if not self.enable_mock_fallback:
                raise InternalError(f"failed to get cards for circle {circle_id}") from exc
            logger.warning("falling back to mock cards for circle %s", circle_id)
            pool_size = self.rules.deck.mock_pool_size
            return generate_mock_cards(circle_id, pool_size, rules=self.rules)

    def create_battle(self, my_circle_id: str, opponent_circle_id: str) -> dm.BattleState:
        """Create and persist a new battle between two circles.

        Args:
            my_circle_id: Initiating circle; it takes the first turn
            opponent_circle_id: Challenged circle

        Returns:
            The stored opening BattleState

        Raises:
            InternalError: If a card pool cannot be loaded (and mock fallback
                is disabled) or the battle cannot be saved
        """
        my_cards = self._card_pool(my_circle_id)
        opponent_cards = self._card_pool(opponent_circle_id)

        my_name = resolve_circle_name(self.card_source, my_circle_id)
        opponent_name = resolve_circle_name(self.card_source, opponent_circle_id)

        my_deck = build_deck(my_cards, rng=self.rng_factory(), rules=self.rules)
        opponent_deck = build_deck(opponent_cards, rng=self.rng_factory(), rules=self.rules)

        state = new_battle_state(
            dm.BattleID(f"battle-{uuid.uuid4().hex}"),
            new_player(dm.CircleID(my_circle_id), my_name, my_deck, rules=self.rules),
            new_player(
                dm.CircleID(opponent_circle_id), opponent_name, opponent_deck, rules=self.rules
            ),
            rules=self.rules,
        )
        save_battle(self.store, state)
        logger.info(
            "battle %s created: %s vs %s", state.battle_id, my_circle_id, opponent_circle_id
        )
        return state

    def start_battle(self, my_circle_id: str, opponent_circle_id: str) -> dm.BattleState:
        """Start an ad-hoc battle outside the request workflow."""

        validate_circle_pair(my_circle_id, opponent_circle_id)
        return self.create_battle(my_circle_id, opponent_circle_id)

    def get_battle(self, battle_id: str) -> dm.BattleState:
        return load_battle(self.store, battle_id)

    def attack(self, battle_id: str, player_id: str) -> dm.BattleState:
        """Attack with the caller's active card.

        Returns the state unchanged (and unsaved) when the battle is already
        over or a deck is empty.

        Raises:
            NotFoundError: If the battle does not exist
            FailedPreconditionError: If it is not the caller's turn
            InvalidArgumentError: If the caller is not part of the battle
            AbortedError: If the battle changed while this attack was applied
        """
        state = load_battle(self.store, battle_id)
        try:
            result = apply_attack(state, player_id, rng=self.rng_factory(), rules=self.rules)
        except FailedPreconditionError:
            logger.debug("rejected out-of-turn attack on %s by %s", battle_id, player_id)
            raise
        if result is None:
            return state

        save_battle(self.store, state)
        if result.battle_over:
            logger.info("battle %s won by %s", state.battle_id, state.winner_id)
        return state

    def retreat(self, battle_id: str, player_id: str, bench_index: int) -> dm.BattleState:
        """Swap the caller's active card with a bench card and pass the turn.

        Raises:
            NotFoundError: If the battle does not exist
            FailedPreconditionError: If it is not the caller's turn
            InvalidArgumentError: If the caller is unknown or the bench index is out of range
            AbortedError: If the battle changed concurrently
        """
        state = load_battle(self.store, battle_id)
        try:
            retreated = apply_retreat(state, player_id, bench_index)
        except FailedPreconditionError:
            logger.debug("rejected out-of-turn retreat on %s by %s", battle_id, player_id)
            raise
        if retreated:
            save_battle(self.store, state)
        return state
