"""Concurrency checks for the stores and the read-modify-write services.

Many threads race on the same battle or request.  Whatever the interleaving,
exactly one writer may win and every loser must fail loudly.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from circlebattle.database import Database
from circlebattle.domain import models as dm
from circlebattle.domain.battle import new_battle_state, new_player
from circlebattle.domain.deck import build_deck
from circlebattle.domain.enums import RequestStatus
from circlebattle.errors import (
    AbortedError,
    ConcurrentModificationError,
    FailedPreconditionError,
)
from circlebattle.repository import (
    InMemoryBattleStore,
    InMemoryCardSource,
    JsonBattleStore,
    SqlBattleStore,
)
from circlebattle.services import BattleRequestService, BattleSessionService

WORKERS = 8


def _source() -> InMemoryCardSource:
    source = InMemoryCardSource()
    for circle_id in ("alpha", "beta"):
        source.add_circle(circle_id, circle_id.title())
        for index in range(5):
            source.add_card(
                dm.Card(
                    id=dm.CardID(f"{circle_id}-{index}"),
                    name=f"Member {index}",
                    grade=1,
                    circle_id=dm.CircleID(circle_id),
                )
            )
    return source


@pytest.fixture(params=["memory", "json", "sql"])
def store(request, tmp_path):
    if request.param == "memory":
        yield InMemoryBattleStore()
    elif request.param == "json":
        yield JsonBattleStore(tmp_path)
    else:
        database = Database.from_url("sqlite://")
        database.init_db()
        yield SqlBattleStore(database)
        database.dispose()


def _opening_battle(battle_id: str) -> dm.BattleState:
    return new_battle_state(
        dm.BattleID(battle_id),
        new_player(dm.CircleID("alpha"), "Alpha", build_deck([])),
        new_player(dm.CircleID("beta"), "Beta", build_deck([])),
    )


def _stale_saves(make_store, battle_id: str, count: int = WORKERS) -> list[str | None]:
    """Every writer loads the same version, then all save at once."""

    barrier = threading.Barrier(count)
    outcomes: list[str | None] = []
    lock = threading.Lock()

    def writer(index: int) -> None:
        store = make_store()
        state = store.get_battle(battle_id)
        state.add_log(f"writer {index}")
        barrier.wait()
        try:
            store.save_battle(state)
        except ConcurrentModificationError:
            outcome = None
        else:
            outcome = f"writer {index}"
        with lock:
            outcomes.append(outcome)

    with ThreadPoolExecutor(max_workers=count) as pool:
        for future in [pool.submit(writer, index) for index in range(count)]:
            future.result()
    return outcomes


def _race(action, count: int = WORKERS) -> tuple[list[object], list[Exception]]:
    barrier = threading.Barrier(count)
    successes: list[object] = []
    failures: list[Exception] = []
    lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        try:
            result = action()
        except (AbortedError, FailedPreconditionError) as exc:
            with lock:
                failures.append(exc)
        else:
            with lock:
                successes.append(result)

    with ThreadPoolExecutor(max_workers=count) as pool:
        futures = [pool.submit(worker) for _ in range(count)]
        for future in futures:
            future.result()
    return successes, failures


def test_concurrent_attacks_apply_exactly_once(store):
    battles = BattleSessionService(store, _source())
    battle = battles.create_battle("alpha", "beta")

    successes, failures = _race(lambda: battles.attack(battle.battle_id, "alpha"))

    assert len(successes) == 1
    assert len(failures) == WORKERS - 1
    stored = battles.get_battle(battle.battle_id)
    assert stored.version == 1
    assert stored.current_turn == 2
    assert sum("attacked!" in entry for entry in stored.logs) == 1


def test_concurrent_accepts_start_one_battle(store):
    source = _source()
    battles = BattleSessionService(store, source)
    requests = BattleRequestService(store, source, battles)
    sent = requests.send_battle_request("alpha", "beta")

    successes, failures = _race(lambda: requests.accept_battle_request(sent.request_id))

    assert len(successes) == 1
    assert len(failures) == WORKERS - 1
    stored = requests.get_battle_request(sent.request_id)
    assert stored.status == RequestStatus.ACCEPTED
    assert stored.battle_id == successes[0].battle_id


@pytest.mark.parametrize("round_", range(10))
def test_stale_saves_have_one_winner(store, round_):
    battle_id = f"battle-{round_}"
    store.save_battle(_opening_battle(battle_id))

    outcomes = _stale_saves(lambda: store, battle_id)

    winners = [outcome for outcome in outcomes if outcome is not None]
    assert len(winners) == 1
    stored = store.get_battle(battle_id)
    assert stored.version == 1
    assert stored.logs[0] == winners[0]


@pytest.mark.parametrize("round_", range(10))
def test_json_stores_on_same_directory_share_the_lock(tmp_path, round_):
    battle_id = f"battle-{round_}"
    JsonBattleStore(tmp_path).save_battle(_opening_battle(battle_id))

    outcomes = _stale_saves(lambda: JsonBattleStore(tmp_path), battle_id)

    winners = [outcome for outcome in outcomes if outcome is not None]
    assert len(winners) == 1
    stored = JsonBattleStore(tmp_path).get_battle(battle_id)
    assert stored.version == 1
    assert stored.logs[0] == winners[0]


@pytest.mark.parametrize("round_", range(10))
def test_sql_stores_on_shared_in_memory_database_have_one_winner(round_):
    database = Database.from_url("sqlite://")
    database.init_db()
    SqlBattleStore(database).save_battle(_opening_battle("battle-1"))

    outcomes = _stale_saves(lambda: SqlBattleStore(database), "battle-1")

    winners = [outcome for outcome in outcomes if outcome is not None]
    assert len(winners) == 1
    stored = SqlBattleStore(database).get_battle("battle-1")
    assert stored.version == 1
    assert stored.logs[0] == winners[0]
    database.dispose()
