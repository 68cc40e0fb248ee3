"""Translate battle store failures into service errors."""

from __future__ import annotations

import logging

from circlebattle.domain import models as dm
from circlebattle.errors import (
    AbortedError,
    ConcurrentModificationError,
    DocumentNotFoundError,
    InternalError,
    NotFoundError,
    StoreError,
)
from circlebattle.interfaces import IBattleStore

logger = logging.getLogger(__name__)


def load_battle(store: IBattleStore, battle_id: str) -> dm.BattleState:
    try:
        return store.get_battle(battle_id)
    except DocumentNotFoundError as exc:
        raise NotFoundError(f"battle not found: {battle_id}") from exc
    except StoreError as exc:
        logger.error("failed to load battle %s: %s", battle_id, exc)
        raise InternalError(f"failed to load battle {battle_id}") from exc


def save_battle(store: IBattleStore, state: dm.BattleState) -> None:
    try:
        store.save_battle(state)
    except ConcurrentModificationError as exc:
        logger.info("battle %s was modified concurrently: %s", state.battle_id, exc)
        raise AbortedError(
            f"battle {state.battle_id} was modified by another request; reload and retry"
        ) from exc
    except StoreError as exc:
        logger.error("failed to save battle %s: %s", state.battle_id, exc)
        raise InternalError(f"failed to save battle {state.battle_id}") from exc


def load_request(store: IBattleStore, request_id: str) -> dm.BattleRequest:
    try:
        return store.get_battle_request(request_id)
    except DocumentNotFoundError as exc:
        raise NotFoundError(f"battle request not found: {request_id}") from exc
    except StoreError as exc:
        logger.error("failed to load battle request %s: %s", request_id, exc)
        raise InternalError(f"failed to load battle request {request_id}") from exc


def save_request(store: IBattleStore, request: dm.BattleRequest) -> None:
    try:
        store.save_battle_request(request)
    except ConcurrentModificationError as exc:
        logger.info("battle request %s was modified concurrently: %s", request.request_id, exc)
        raise AbortedError(
            f"battle request {request.request_id} was modified by another request"
        ) from exc
    except StoreError as exc:
        logger.error("failed to save battle request %s: %s", request.request_id, exc)
        raise InternalError(f"failed to save battle request {request.request_id}") from exc


def list_requests(
    store: IBattleStore,
    *,
    from_circle_id: str | None = None,
    to_circle_id: str | None = None,
) -> list[dm.BattleRequest]:
    try:
        return store.list_battle_requests(
            from_circle_id=from_circle_id, to_circle_id=to_circle_id
        )
    except StoreError as exc:
        logger.error("failed to list battle requests: %s", exc)
        raise InternalError("failed to list battle requests") from exc
