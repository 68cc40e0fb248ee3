"""Card source adapters.

Both adapters return cards with battle stats freshly derived from id and
grade, so a card's stats never depend on what happens to be stored.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from circlebattle.database import Database
from circlebattle.domain import models as dm
from circlebattle.domain.stats import with_battle_stats
from circlebattle.errors import CardSourceError
from circlebattle.models import CardRecord, CircleRecord

DEFAULT_CARD_POOL_LIMIT = 20


class InMemoryCardSource:
    """Card source over plain dictionaries, for tests and local play."""

    def __init__(
        self,
        circle_names: Mapping[str, str] | None = None,
        cards: Iterable[dm.Card] = (),
        *,
        limit: int = DEFAULT_CARD_POOL_LIMIT,
    ) -> None:
        self._circle_names = dict(circle_names or {})
        self._cards = list(cards)
        self.limit = limit

    def add_circle(self, circle_id: str, name: str) -> None:
        self._circle_names[circle_id] = name

    def add_card(self, card: dm.Card) -> None:
        self._cards.append(card)

    def get_circle_cards(self, circle_id: str) -> list[dm.Card]:
        matching = [card for card in self._cards if card.circle_id == circle_id][: self.limit]
        if not matching:
            raise CardSourceError(f"no cards found for circle {circle_id}")
        return [with_battle_stats(replace(card)) for card in matching]

    def get_circle_name(self, circle_id: str) -> str:
        name = self._circle_names.get(circle_id)
        if not isinstance(name, str) or not name:
            raise CardSourceError(f"circle {circle_id} not found")
        return name


class SqlCardSource:
    """Read circles and cards from the ``circles`` and ``cards`` tables."""

    def __init__(self, database: Database, *, limit: int = DEFAULT_CARD_POOL_LIMIT) -> None:
        self.database = database
        self.limit = limit

    @staticmethod
    def _to_card(record: CardRecord) -> dm.Card:
        card = dm.Card(
            id=dm.CardID(record.id),
            name=record.name,
            grade=record.grade,
            position=record.position,
            hobby=record.hobby,
            description=record.description,
            image_url=record.image_url,
            creator_id=record.creator_id,
            circle_id=dm.CircleID(record.circle_id) if record.circle_id else None,
            affiliated_group=record.affiliated_group or None,
        )
        return with_battle_stats(card)

    def get_circle_cards(self, circle_id: str) -> list[dm.Card]:
        query = (
            select(CardRecord)
            .where(CardRecord.circle_id == circle_id)
            .order_by(CardRecord.id)
            .limit(self.limit)
        )
        try:
            with self.database.session() as session:
                cards = [self._to_card(record) for record in session.scalars(query)]
        except SQLAlchemyError as exc:
            raise CardSourceError(f"failed to load cards for circle {circle_id}: {exc}") from exc
        if not cards:
            raise CardSourceError(f"no cards found for circle {circle_id}")
        return cards

    def get_circle_name(self, circle_id: str) -> str:
        try:
            with self.database.session() as session:
                circle = session.get(CircleRecord, circle_id)
        except SQLAlchemyError as exc:
            raise CardSourceError(f"failed to get circle {circle_id}: {exc}") from exc
        if circle is None:
            raise CardSourceError(f"circle {circle_id} not found")
        if not isinstance(circle.name, str) or not circle.name.strip():
            raise CardSourceError(f"circle {circle_id} has no usable name")
        return circle.name
