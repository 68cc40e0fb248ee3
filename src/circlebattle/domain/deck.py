"""Deck construction from a circle's card pool."""

from __future__ import annotations

import random
import uuid
from collections.abc import Sequence
from dataclasses import replace

from circlebattle.domain.models import Card, CardID
from circlebattle.domain.rules_config import DEFAULT_RULES, RulesConfig
from circlebattle.utils.rng import fresh_rng


def build_deck(
    pool: Sequence[Card],
    *,
    rng: random.Random | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[Card]:
    """Pick a battle deck from ``pool``.

    The pool is shuffled and the first ``deck_size`` cards are taken; short
    pools are topped up with placeholder cards.  The input is never mutated
    and every returned card is a copy.
    """

    rng = rng or fresh_rng()
    deck_size = rules.deck.deck_size

    shuffled = list(pool)
    rng.shuffle(shuffled)

    deck = [replace(card) for card in shuffled[:deck_size]]
    while len(deck) < deck_size:
        deck.append(create_placeholder_card(rules=rules))
    return deck


def create_placeholder_card(*, rules: RulesConfig = DEFAULT_RULES) -> Card:
    """Create a filler card with a unique synthetic id."""

    deck_rules = rules.deck
    return Card(
        id=CardID(f"dummy-{uuid.uuid4().hex}"),
        name=deck_rules.placeholder_name,
        grade=deck_rules.placeholder_grade,
        max_hp=deck_rules.placeholder_max_hp,
        attack=deck_rules.placeholder_attack,
        flavor=deck_rules.placeholder_flavor,
        current_hp=deck_rules.placeholder_max_hp,
    )


def is_placeholder(card: Card) -> bool:
    return card.id.startswith("dummy-")
