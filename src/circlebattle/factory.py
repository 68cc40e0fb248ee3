"""Service Factory for the circle battle engine.

This module provides factory functions for creating service instances with
proper dependency wiring. Use these functions in production code to ensure
all service dependencies are correctly initialized.

For testing, inject in-memory adapters or protocol-based fakes instead.

Example:
    # Production usage
    from circlebattle.factory import create_all_services
    services = create_all_services(get_settings())

    # Testing usage
    from circlebattle.repository import InMemoryBattleStore, InMemoryCardSource
    from circlebattle.services import BattleSessionService

    battles = BattleSessionService(InMemoryBattleStore(), InMemoryCardSource())
"""

from circlebattle.config import Settings
from circlebattle.database import Database
from circlebattle.interfaces import IBattleStore, ICardSource
from circlebattle.repository import (
    InMemoryBattleStore,
    InMemoryCardSource,
    JsonBattleStore,
    SqlBattleStore,
    SqlCardSource,
)
from circlebattle.services import BattleRequestService, BattleSessionService


def uses_database(settings: Settings) -> bool:
    return settings.store_backend == "sql" or settings.card_source_backend == "sql"


def create_battle_store(settings: Settings, database: Database | None = None) -> IBattleStore:
    """Create the battle store selected by ``settings.store_backend``.

    Args:
        settings: Application settings
        database: Required when the backend is ``sql``

    Returns:
        A store implementing IBattleStore
    """
    if settings.store_backend == "memory":
        return InMemoryBattleStore()
    if settings.store_backend == "json":
        return JsonBattleStore(settings.data_dir)
    if database is None:
        raise ValueError("the sql store backend needs a database")
    return SqlBattleStore(database)


def create_card_source(settings: Settings, database: Database | None = None) -> ICardSource:
    """Create the card source selected by ``settings.card_source_backend``."""

    if settings.card_source_backend == "memory":
        return InMemoryCardSource(limit=settings.card_pool_limit)
    if database is None:
        raise ValueError("the sql card source needs a database")
    return SqlCardSource(database, limit=settings.card_pool_limit)


def create_battle_service(
    settings: Settings, store: IBattleStore, card_source: ICardSource
) -> BattleSessionService:
    """Create a BattleSessionService honouring the mock-fallback setting."""

    return BattleSessionService(
        store,
        card_source,
        enable_mock_fallback=settings.enable_mock_fallback,
    )


def create_request_service(
    store: IBattleStore, card_source: ICardSource, battles: BattleSessionService
) -> BattleRequestService:
    return BattleRequestService(store, card_source, battles)


def create_all_services(settings: Settings, database: Database | None = None) -> dict:
    """Create all services with proper dependency wiring.

    Returns:
        Dictionary containing:
        - store: the battle store
        - card_source: the card source
        - battles: BattleSessionService
        - requests: BattleRequestService
    """
    store = create_battle_store(settings, database)
    card_source = create_card_source(settings, database)
    battles = create_battle_service(settings, store, card_source)
    return {
        "store": store,
        "card_source": card_source,
        "battles": battles,
        "requests": create_request_service(store, card_source, battles),
    }
