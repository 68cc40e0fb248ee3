"""In-process battle store.

Documents are kept encoded, exactly as a remote store would hold them, so
callers never share objects with the store and every read returns a fresh
copy.
"""

from __future__ import annotations

import threading
from typing import Any

from circlebattle.domain import models as dm
from circlebattle.errors import DocumentNotFoundError
from circlebattle.repository.codec import (
    decode_battle,
    decode_battle_request,
    encode_battle,
    encode_battle_request,
)
from circlebattle.repository.versioning import next_version

BATTLES = "battles"
BATTLE_REQUESTS = "battle_requests"


class InMemoryBattleStore:
    """Dictionary-backed store with compare-and-set writes."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._collections: dict[str, dict[str, tuple[int, dict[str, Any]]]] = {
            BATTLES: {},
            BATTLE_REQUESTS: {},
        }

    def _put(self, collection: str, key: str, expected: int | None, doc: dict[str, Any]) -> int:
        with self._lock:
            docs = self._collections[collection]
            stored = docs.get(key)
            version = next_version(collection, key, expected, stored[0] if stored else None)
            docs[key] = (version, doc)
            return version

    def _get(self, collection: str, key: str) -> tuple[int, dict[str, Any]]:
        with self._lock:
            stored = self._collections[collection].get(key)
        if stored is None:
            raise DocumentNotFoundError(collection, key)
        return stored

    def save_battle(self, state: dm.BattleState) -> None:
        state.version = self._put(BATTLES, state.battle_id, state.version, encode_battle(state))

    def get_battle(self, battle_id: str) -> dm.BattleState:
        version, doc = self._get(BATTLES, battle_id)
        return decode_battle(doc, version=version)

    def save_battle_request(self, request: dm.BattleRequest) -> None:
        request.version = self._put(
            BATTLE_REQUESTS, request.request_id, request.version, encode_battle_request(request)
        )

    def get_battle_request(self, request_id: str) -> dm.BattleRequest:
        version, doc = self._get(BATTLE_REQUESTS, request_id)
        return decode_battle_request(doc, version=version)

    def list_battle_requests(
        self,
        *,
        from_circle_id: str | None = None,
        to_circle_id: str | None = None,
    ) -> list[dm.BattleRequest]:
        with self._lock:
            stored = list(self._collections[BATTLE_REQUESTS].values())
        requests = [decode_battle_request(doc, version=version) for version, doc in stored]
        return filter_requests(requests, from_circle_id=from_circle_id, to_circle_id=to_circle_id)


def filter_requests(
    requests: list[dm.BattleRequest],
    *,
    from_circle_id: str | None = None,
    to_circle_id: str | None = None,
) -> list[dm.BattleRequest]:
    """Apply circle filters and order newest first."""

    matching = [
        request
        for request in requests
        if (from_circle_id is None or request.from_circle_id == from_circle_id)
        and (to_circle_id is None or request.to_circle_id == to_circle_id)
    ]
    return sorted(matching, key=lambda request: request.created_at, reverse=True)
