"""Versioned document schema between the domain dataclasses and the stores.

Stored documents use camelCase keys and carry a ``schemaVersion``.  Documents
written before versioning was introduced have no ``schemaVersion`` and are
read as version 1.  Store bookkeeping such as the concurrency ``version`` is
kept outside the document by each adapter.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from circlebattle.domain import models as dm
from circlebattle.domain.enums import RequestStatus
from circlebattle.errors import DocumentSchemaError

SCHEMA_VERSION = 1
SUPPORTED_SCHEMA_VERSIONS = frozenset({1})


class _Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class _VersionedDocument(_Document):
    schema_version: int = SCHEMA_VERSION

    @field_validator("schema_version")
    @classmethod
    def _known_version(cls, value: int) -> int:
        if value not in SUPPORTED_SCHEMA_VERSIONS:
            raise ValueError(f"unsupported schema version {value}")
        return value


class CardDocument(_Document):
    id: str
    name: str = ""
    grade: int = 0
    position: str = ""
    hobby: str = ""
    description: str = ""
    image_url: str = ""
    creator_id: str = ""
    circle_id: str | None = None
    affiliated_group: str | None = None
    max_hp: int = 0
    attack: int = 0
    flavor: str = ""
    current_hp: int = 0


class PlayerDocument(_Document):
    player_id: str
    circle_id: str
    circle_name: str = ""
    hp: int = 0
    deck: list[CardDocument] = Field(default_factory=list)


class BattleStateDocument(_VersionedDocument):
    battle_id: str
    player_me: PlayerDocument
    player_opponent: PlayerDocument
    current_turn: int = 1
    current_player_id: str
    winner_id: str = ""
    logs: list[str] = Field(default_factory=list)


class BattleRequestDocument(_VersionedDocument):
    request_id: str
    from_circle_id: str
    from_circle_name: str = ""
    to_circle_id: str
    to_circle_name: str = ""
    status: RequestStatus
    created_at: datetime
    battle_id: str | None = None

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value


def _without_version(data: dict[str, Any]) -> dict[str, Any]:
    data.pop("version", None)
    return data


def _card_from_document(doc: CardDocument) -> dm.Card:
    return dm.Card(**doc.model_dump())


def _player_from_document(doc: PlayerDocument) -> dm.Player:
    return dm.Player(
        player_id=dm.PlayerID(doc.player_id),
        circle_id=dm.CircleID(doc.circle_id),
        circle_name=doc.circle_name,
        hp=doc.hp,
        deck=[_card_from_document(card) for card in doc.deck],
    )


def encode_battle(state: dm.BattleState) -> dict[str, Any]:
    """Serialize a battle to a JSON-compatible document."""

    doc = BattleStateDocument.model_validate(_without_version(asdict(state)))
    return doc.model_dump(by_alias=True, mode="json")


def decode_battle(data: Mapping[str, Any], *, version: int | None = None) -> dm.BattleState:
    """Rebuild a battle from a stored document.

    Raises:
        DocumentSchemaError: If the document is malformed or of an unknown version
    """
    try:
        doc = BattleStateDocument.model_validate(data)
    except ValidationError as exc:
        raise DocumentSchemaError(f"invalid battle document: {exc}") from exc

    return dm.BattleState(
        battle_id=dm.BattleID(doc.battle_id),
        player_me=_player_from_document(doc.player_me),
        player_opponent=_player_from_document(doc.player_opponent),
        current_turn=doc.current_turn,
        current_player_id=dm.PlayerID(doc.current_player_id),
        winner_id=doc.winner_id,
        logs=list(doc.logs),
        version=version,
    )


def encode_battle_request(request: dm.BattleRequest) -> dict[str, Any]:
    """Serialize a battle request to a JSON-compatible document."""

    doc = BattleRequestDocument.model_validate(_without_version(asdict(request)))
    return doc.model_dump(by_alias=True, mode="json")


def decode_battle_request(
    data: Mapping[str, Any], *, version: int | None = None
) -> dm.BattleRequest:
    """Rebuild a battle request from a stored document.

    Raises:
        DocumentSchemaError: If the document is malformed or of an unknown version
    """
    try:
        doc = BattleRequestDocument.model_validate(data)
    except ValidationError as exc:
        raise DocumentSchemaError(f"invalid battle request document: {exc}") from exc

    return dm.BattleRequest(
        request_id=dm.RequestID(doc.request_id),
        from_circle_id=dm.CircleID(doc.from_circle_id),
        from_circle_name=doc.from_circle_name,
        to_circle_id=dm.CircleID(doc.to_circle_id),
        to_circle_name=doc.to_circle_name,
        status=doc.status,
        created_at=doc.created_at,
        battle_id=dm.BattleID(doc.battle_id) if doc.battle_id is not None else None,
        version=version,
    )
