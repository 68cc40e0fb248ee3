"""Deterministic battle stats for cards.

A card's combat stats are never stored on their own: they are recomputed from
the card id and grade whenever a card pool is loaded.  The generator is seeded
from a stable hash of the id so the numbers survive restarts, while distinct
cards still vary.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from circlebattle.domain.models import Card, CardID
from circlebattle.domain.rules_config import DEFAULT_RULES, RulesConfig
from circlebattle.utils.rng import seeded_rng, uniform_below


@dataclass(frozen=True, slots=True)
class BattleStats:
    """Static combat stats derived for one card."""

    max_hp: int
    attack: int
    flavor: str


def generate_battle_stats(
    card_id: str, grade: int, *, rules: RulesConfig = DEFAULT_RULES
) -> BattleStats:
    """Derive combat stats for a card.

    One generator is seeded from the card id and drawn twice, HP first and
    attack second.

    Args:
        card_id: Stable card identifier
        grade: Card tier, usually 1-4
        rules: Rule constants to apply

    Returns:
        BattleStats with ``max_hp``, ``attack`` and ``flavor``
    """
    stat_rules = rules.stats
    rng = seeded_rng(card_id)

    max_hp = stat_rules.base_hp + grade * stat_rules.hp_per_grade
    max_hp += uniform_below(rng, stat_rules.hp_variance)
    attack = stat_rules.base_attack + grade * stat_rules.attack_per_grade
    attack += uniform_below(rng, stat_rules.attack_variance)

    return BattleStats(max_hp=max_hp, attack=attack, flavor=stat_rules.flavor)


def with_battle_stats(card: Card, *, rules: RulesConfig = DEFAULT_RULES) -> Card:
    """Return a copy of ``card`` with generated stats and full current HP."""

    stats = generate_battle_stats(card.id, card.grade, rules=rules)
    return replace(
        card,
        max_hp=stats.max_hp,
        attack=stats.attack,
        flavor=stats.flavor,
        current_hp=stats.max_hp,
    )


def generate_mock_cards(
    prefix: str, count: int, *, rules: RulesConfig = DEFAULT_RULES
) -> list[Card]:
    """Build a stand-in card pool for a circle whose cards could not be loaded."""

    cards: list[Card] = []
    for index in range(count):
        card = Card(id=CardID(f"{prefix}-card-{index}"), name=f"Card {index}", grade=1)
        cards.append(with_battle_stats(card, rules=rules))
    return cards
