"""Runtime primitives backing the circle battle HTTP API."""

from __future__ import annotations

import logging

from circlebattle.config import Settings, get_settings
from circlebattle.database import Database
from circlebattle.factory import (
    create_battle_service,
    create_battle_store,
    create_card_source,
    create_request_service,
    uses_database,
)
from circlebattle.interfaces import IBattleStore, ICardSource

logger = logging.getLogger(__name__)


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        store: IBattleStore | None = None,
        card_source: ICardSource | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.database: Database | None = None
        if uses_database(self.settings):
            self.database = Database.from_settings(self.settings)
            self.database.init_db()

        if store is None:
            store = create_battle_store(self.settings, self.database)
        if card_source is None:
            card_source = create_card_source(self.settings, self.database)
        self.store = store
        self.card_source = card_source
        self.battles = create_battle_service(self.settings, self.store, self.card_source)
        self.requests = create_request_service(self.store, self.card_source, self.battles)
        logger.info(
            "api state ready (store=%s, card source=%s)",
            self.settings.store_backend,
            self.settings.card_source_backend,
        )

    def database_healthy(self) -> bool | None:
        """Return the database health, or None when no database is configured."""

        if self.database is None:
            return None
        return self.database.check_health()

    async def shutdown(self) -> None:
        if self.database is not None:
            self.database.dispose()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
