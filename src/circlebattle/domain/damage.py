"""Per-attack damage calculation."""

from __future__ import annotations

import random

from circlebattle.domain.models import Card
from circlebattle.domain.rules_config import DEFAULT_RULES, RulesConfig
from circlebattle.utils.rng import fresh_rng


def calculate_damage(
    attacker: Card,
    *,
    rng: random.Random | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> int:
    """Return the attacker's attack scaled by a multiplier in ``[0.9, 1.1)``.

    Without an explicit ``rng`` every call draws from a fresh generator, so
    the same attacker deals different damage turn to turn.
    """

    rng = rng or fresh_rng()
    low = rules.damage.min_multiplier
    high = rules.damage.max_multiplier
    multiplier = low + rng.random() * (high - low)
    return round(attacker.attack * multiplier)
