"""SQLAlchemy-backed battle store."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from circlebattle.database import Database
from circlebattle.domain import models as dm
from circlebattle.errors import (
    ConcurrentModificationError,
    DocumentNotFoundError,
    StoreError,
)
from circlebattle.models import BattleRecord, BattleRequestRecord
from circlebattle.repository.codec import (
    decode_battle,
    decode_battle_request,
    encode_battle,
    encode_battle_request,
)
from circlebattle.repository.memory_store import BATTLE_REQUESTS, BATTLES


class SqlBattleStore:
    """Persist battles and requests as JSON documents in SQL tables.

    Updates are issued as ``UPDATE ... WHERE id = :id AND version = :expected``
    so two writers racing on the same document cannot both succeed.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    def _write(
        self,
        model: type[BattleRecord] | type[BattleRequestRecord],
        collection: str,
        key: str,
        expected: int | None,
        values: dict[str, Any],
    ) -> int:
        try:
            with self.database.session() as session:
                if expected is None:
                    return self._insert(session, model, collection, key, values)
                return self._update(session, model, collection, key, expected, values)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to save {collection}/{key}: {exc}") from exc

    @staticmethod
    def _insert(
        session: Session,
        model: type[BattleRecord] | type[BattleRequestRecord],
        collection: str,
        key: str,
        values: dict[str, Any],
    ) -> int:
        session.add(model(id=key, version=0, **values))
        try:
            session.commit()
        except IntegrityError as exc:
            session.rollback()
            current = session.get(model, key)
            actual = current.version if current is not None else None
            raise ConcurrentModificationError(collection, key, None, actual) from exc
        return 0

    @staticmethod
    def _update(
        session: Session,
        model: type[BattleRecord] | type[BattleRequestRecord],
        collection: str,
        key: str,
        expected: int,
        values: dict[str, Any],
    ) -> int:
        result = session.execute(
            update(model)
            .where(model.id == key, model.version == expected)
            .values(version=expected + 1, **values)
        )
        if result.rowcount != 1:
            session.rollback()
            actual = session.execute(select(model.version).where(model.id == key)).scalar()
            raise ConcurrentModificationError(collection, key, expected, actual)
        session.commit()
        return expected + 1

    def _read(
        self,
        model: type[BattleRecord] | type[BattleRequestRecord],
        collection: str,
        key: str,
    ) -> tuple[int, dict[str, Any]]:
        try:
            with self.database.session() as session:
                record = session.get(model, key)
                if record is None:
                    raise DocumentNotFoundError(collection, key)
                return record.version, record.document
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to load {collection}/{key}: {exc}") from exc

    def save_battle(self, state: dm.BattleState) -> None:
        values = {"winner_id": state.winner_id, "document": encode_battle(state)}
        state.version = self._write(BattleRecord, BATTLES, state.battle_id, state.version, values)

    def get_battle(self, battle_id: str) -> dm.BattleState:
        version, document = self._read(BattleRecord, BATTLES, battle_id)
        return decode_battle(document, version=version)

    def save_battle_request(self, request: dm.BattleRequest) -> None:
        values = {
            "from_circle_id": request.from_circle_id,
            "to_circle_id": request.to_circle_id,
            "status": str(request.status),
            "requested_at": request.created_at,
            "document": encode_battle_request(request),
        }
        request.version = self._write(
            BattleRequestRecord, BATTLE_REQUESTS, request.request_id, request.version, values
        )

    def get_battle_request(self, request_id: str) -> dm.BattleRequest:
        version, document = self._read(BattleRequestRecord, BATTLE_REQUESTS, request_id)
        return decode_battle_request(document, version=version)

    def list_battle_requests(
        self,
        *,
        from_circle_id: str | None = None,
        to_circle_id: str | None = None,
    ) -> list[dm.BattleRequest]:
        query = select(BattleRequestRecord).order_by(BattleRequestRecord.requested_at.desc())
        if from_circle_id is not None:
            query = query.where(BattleRequestRecord.from_circle_id == from_circle_id)
        if to_circle_id is not None:
            query = query.where(BattleRequestRecord.to_circle_id == to_circle_id)
        try:
            with self.database.session() as session:
                records = session.scalars(query).all()
                return [
                    decode_battle_request(record.document, version=record.version)
                    for record in records
                ]
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to list {BATTLE_REQUESTS}: {exc}") from exc
