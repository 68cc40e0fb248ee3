"""Domain model and rules for circle battles.

This package operates purely in memory.  It exposes:

* Dataclasses describing cards, players, battles and requests (see :mod:`models`).
* Enumerations used across the rules layer.
* Rule configuration objects (see :mod:`rules_config`).
* Pure rule functions: stat generation, deck building, damage and the
  attack/retreat state machine.
"""

from . import battle, damage, deck, enums, models, rules_config, stats

__all__ = [
    "battle",
    "damage",
    "deck",
    "enums",
    "models",
    "rules_config",
    "stats",
]
