"""Declarative rule configuration for the battle engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StatRules:
    """Base stats derived from a card's grade."""

    base_hp: int = 500
    hp_per_grade: int = 50
    hp_variance: int = 100  # exclusive upper bound of the random bonus
    base_attack: int = 100
    attack_per_grade: int = 20
    attack_variance: int = 50
    flavor: str = "Another day of failing to get out of the futon."


@dataclass(frozen=True, slots=True)
class DeckRules:
    """Deck size and the placeholder used to fill short decks."""

    deck_size: int = 5
    placeholder_name: str = "recruiting…"
    placeholder_grade: int = 1
    placeholder_max_hp: int = 600
    placeholder_attack: int = 150
    placeholder_flavor: str = "A promising newcomer."
    mock_pool_size: int = 5


@dataclass(frozen=True, slots=True)
class DamageRules:
    """Bounds of the multiplier applied to a card's attack."""

    min_multiplier: float = 0.9
    max_multiplier: float = 1.1


@dataclass(frozen=True, slots=True)
class MatchRules:
    """Match setup constants."""

    starting_lives: int = 3
    first_turn: int = 1
    opening_log: str = "Battle Start!"


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    stats: StatRules = StatRules()
    deck: DeckRules = DeckRules()
    damage: DamageRules = DamageRules()
    match: MatchRules = MatchRules()


DEFAULT_RULES = RulesConfig()
