"""JSON-file battle store."""

from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any

from circlebattle.domain import models as dm
from circlebattle.errors import DocumentNotFoundError, DocumentSchemaError, StoreError
from circlebattle.repository.codec import (
    decode_battle,
    decode_battle_request,
    encode_battle,
    encode_battle_request,
)
from circlebattle.repository.memory_store import BATTLE_REQUESTS, BATTLES, filter_requests
from circlebattle.repository.versioning import next_version

_DIRECTORY_LOCKS: dict[Path, threading.Lock] = {}
_DIRECTORY_LOCKS_GUARD = threading.Lock()


def _directory_lock(base_path: Path) -> threading.Lock:
    """Return the lock shared by every store rooted at ``base_path`` in this process."""

    key = base_path.resolve()
    with _DIRECTORY_LOCKS_GUARD:
        return _DIRECTORY_LOCKS.setdefault(key, threading.Lock())


class JsonBattleStore:
    """Persist battles and battle requests as JSON snapshots on disk.

    Each document lives in ``<base>/<collection>/<key>.json`` wrapped as
    ``{"version": n, "document": {...}}``.  Writes go through a temporary file
    and an atomic rename.  The compare-and-set lock is shared by all stores
    on the same directory within a process; run a single writer process per
    directory.
    """

    def __init__(self, base_path: Path) -> None:
        self.base_path = base_path
        for collection in (BATTLES, BATTLE_REQUESTS):
            (self.base_path / collection).mkdir(parents=True, exist_ok=True)
        self._lock = _directory_lock(base_path)

    def _path_for(self, collection: str, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise DocumentNotFoundError(collection, key)
        return self.base_path / collection / f"{key}.json"

    def _read(self, path: Path) -> dict[str, Any] | None:
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreError(f"failed to read {path}: {exc}") from exc
        try:
            envelope = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise DocumentSchemaError(f"{path} is not valid JSON") from exc
        if not isinstance(envelope, dict) or "document" not in envelope:
            raise DocumentSchemaError(f"{path} is missing its document envelope")
        return envelope

    def _put(self, collection: str, key: str, expected: int | None, doc: dict[str, Any]) -> int:
        path = self._path_for(collection, key)
        with self._lock:
            current = self._read(path)
            version = next_version(
                collection, key, expected, current["version"] if current else None
            )
            payload = json.dumps({"version": version, "document": doc}, indent=2)
            tmp_path = path.with_suffix(".json.tmp")
            try:
                tmp_path.write_text(payload, encoding="utf-8")
                os.replace(tmp_path, path)
            except OSError as exc:
                raise StoreError(f"failed to write {path}: {exc}") from exc
        return version

    def _get(self, collection: str, key: str) -> dict[str, Any]:
        envelope = self._read(self._path_for(collection, key))
        if envelope is None:
            raise DocumentNotFoundError(collection, key)
        return envelope

    def save_battle(self, state: dm.BattleState) -> None:
        """Serialize a battle to disk."""

        state.version = self._put(BATTLES, state.battle_id, state.version, encode_battle(state))

    def get_battle(self, battle_id: str) -> dm.BattleState:
        """Load a previously saved battle."""

        envelope = self._get(BATTLES, battle_id)
        return decode_battle(envelope["document"], version=envelope["version"])

    def save_battle_request(self, request: dm.BattleRequest) -> None:
        request.version = self._put(
            BATTLE_REQUESTS, request.request_id, request.version, encode_battle_request(request)
        )

    def get_battle_request(self, request_id: str) -> dm.BattleRequest:
        envelope = self._get(BATTLE_REQUESTS, request_id)
        return decode_battle_request(envelope["document"], version=envelope["version"])

    def list_battle_requests(
        self,
        *,
        from_circle_id: str | None = None,
        to_circle_id: str | None = None,
    ) -> list[dm.BattleRequest]:
        requests: list[dm.BattleRequest] = []
        for path in sorted((self.base_path / BATTLE_REQUESTS).glob("*.json")):
            envelope = self._read(path)
            if envelope is None:  # pragma: no cover - removed between glob and read
                continue
            requests.append(
                decode_battle_request(envelope["document"], version=envelope["version"])
            )
        return filter_requests(requests, from_circle_id=from_circle_id, to_circle_id=to_circle_id)
