"""SQLAlchemy models for the circle battle engine.

This module exports all database models and the declarative base.
"""

from .base import Base, TimestampMixin, VersionedMixin, utc_now
from .battle import BattleRecord, BattleRequestRecord
from .card import CardRecord, CircleRecord

__all__ = [
    "Base",
    "BattleRecord",
    "BattleRequestRecord",
    "CardRecord",
    "CircleRecord",
    "TimestampMixin",
    "VersionedMixin",
    "utc_now",
]
