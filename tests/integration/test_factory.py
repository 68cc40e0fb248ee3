"""Tests for settings and service wiring."""

from __future__ import annotations

import pytest

from circlebattle.config import Settings
from circlebattle.database import Database
from circlebattle.factory import (
    create_all_services,
    create_battle_store,
    create_card_source,
    uses_database,
)
from circlebattle.repository import (
    InMemoryBattleStore,
    InMemoryCardSource,
    JsonBattleStore,
    SqlBattleStore,
    SqlCardSource,
)
from circlebattle.services import BattleRequestService, BattleSessionService


def test_settings_read_prefixed_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("CIRCLEBATTLE_ENABLE_MOCK_FALLBACK", "true")
    monkeypatch.setenv("CIRCLEBATTLE_STORE_BACKEND", "json")
    monkeypatch.setenv("CIRCLEBATTLE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CIRCLEBATTLE_CARD_POOL_LIMIT", "7")

    settings = Settings(_env_file=None)

    assert settings.enable_mock_fallback is True
    assert settings.store_backend == "json"
    assert settings.data_dir == tmp_path
    assert settings.card_pool_limit == 7


def test_settings_defaults():
    settings = Settings(_env_file=None)

    assert settings.enable_mock_fallback is False
    assert settings.store_backend == "sql"
    assert settings.card_pool_limit == 20


@pytest.mark.parametrize(
    "backend,expected",
    [("memory", InMemoryBattleStore), ("json", JsonBattleStore)],
)
def test_file_and_memory_stores(tmp_path, backend, expected):
    settings = Settings(_env_file=None, store_backend=backend, data_dir=tmp_path)

    assert isinstance(create_battle_store(settings), expected)


def test_sql_backends_need_database():
    settings = Settings(_env_file=None)

    assert uses_database(settings)
    with pytest.raises(ValueError):
        create_battle_store(settings)
    with pytest.raises(ValueError):
        create_card_source(settings)


def test_create_all_services_wires_sql():
    settings = Settings(_env_file=None, database_url="sqlite://", card_pool_limit=9)
    database = Database.from_settings(settings)
    database.init_db()

    services = create_all_services(settings, database)

    assert isinstance(services["store"], SqlBattleStore)
    assert isinstance(services["card_source"], SqlCardSource)
    assert services["card_source"].limit == 9
    assert isinstance(services["battles"], BattleSessionService)
    assert isinstance(services["requests"], BattleRequestService)
    assert services["requests"].battles is services["battles"]
    database.dispose()


def test_create_all_services_in_memory():
    settings = Settings(
        _env_file=None,
        store_backend="memory",
        card_source_backend="memory",
        enable_mock_fallback=True,
    )

    services = create_all_services(settings)

    assert not uses_database(settings)
    assert isinstance(services["card_source"], InMemoryCardSource)
    assert services["battles"].enable_mock_fallback is True
