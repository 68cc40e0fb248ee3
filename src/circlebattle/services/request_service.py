"""Battle Request Service.

Manages the challenge handshake between circles.  A request starts out
``pending`` and moves exactly once, to ``accepted`` (creating a battle) or to
``rejected``.
"""

from __future__ import annotations

import logging
import uuid

from circlebattle.domain import models as dm
from circlebattle.domain.enums import RequestDirection, RequestStatus
from circlebattle.errors import AbortedError, FailedPreconditionError, InvalidArgumentError
from circlebattle.interfaces import IBattleStore, ICardSource
from circlebattle.models.base import utc_now
from circlebattle.services.battle_service import (
    BattleSessionService,
    resolve_circle_name,
    validate_circle_pair,
)
from circlebattle.services.persistence import list_requests, load_request, save_request

logger = logging.getLogger(__name__)


class BattleRequestService:
    """Service for sending, accepting and rejecting battle requests."""

    def __init__(
        self,
        store: IBattleStore,
        card_source: ICardSource,
        battles: BattleSessionService,
    ):
        self.store = store
        self.card_source = card_source
        self.battles = battles

    def send_battle_request(self, from_circle_id: str, to_circle_id: str) -> dm.BattleRequest:
        """Create a pending challenge from one circle to another.

        Raises:
            InvalidArgumentError: If either circle id is empty or both are the same
            InternalError: If the request cannot be saved
        """
        validate_circle_pair(from_circle_id, to_circle_id)

        request = dm.BattleRequest(
            request_id=dm.RequestID(f"req-{uuid.uuid4().hex}"),
            from_circle_id=dm.CircleID(from_circle_id),
            from_circle_name=resolve_circle_name(self.card_source, from_circle_id),
            to_circle_id=dm.CircleID(to_circle_id),
            to_circle_name=resolve_circle_name(self.card_source, to_circle_id),
            status=RequestStatus.PENDING,
            created_at=utc_now(),
            battle_id=None,
        )
        save_request(self.store, request)
        logger.info(
            "battle request %s sent: %s -> %s", request.request_id, from_circle_id, to_circle_id
        )
        return request

    def get_battle_request(self, request_id: str) -> dm.BattleRequest:
        return load_request(self.store, request_id)

    def _pending_request(self, request_id: str) -> dm.BattleRequest:
        request = load_request(self.store, request_id)
        if not request.is_pending:
            raise FailedPreconditionError(
                f"battle request {request_id} is already {request.status}"
            )
        return request

    def accept_battle_request(self, request_id: str) -> dm.BattleState:
        """Accept a pending request and start the battle it asks for.

        The challenger becomes ``player_me`` and moves first.  If the battle
        cannot be created the request is left pending.

        Raises:
            NotFoundError: If the request does not exist
            FailedPreconditionError: If the request is no longer pending
            AbortedError: If another caller resolved the request at the same time
        """
        request = self._pending_request(request_id)
        state = self.battles.create_battle(request.from_circle_id, request.to_circle_id)

        request.status = RequestStatus.ACCEPTED
        request.battle_id = state.battle_id
        try:
            save_request(self.store, request)
        except AbortedError:
            logger.warning(
                "battle request %s resolved concurrently; battle %s is orphaned",
                request_id,
                state.battle_id,
            )
            raise
        logger.info("battle request %s accepted as battle %s", request_id, state.battle_id)
        return state

    def reject_battle_request(self, request_id: str) -> dm.BattleRequest:
        """Reject a pending request; no battle is created.

        Raises:
            NotFoundError: If the request does not exist
            FailedPreconditionError: If the request is no longer pending
        """
        request = self._pending_request(request_id)
        request.status = RequestStatus.REJECTED
        save_request(self.store, request)
        logger.info("battle request %s rejected", request_id)
        return request

    def list_battle_requests(
        self,
        circle_id: str,
        *,
        direction: RequestDirection = RequestDirection.INCOMING,
        status: RequestStatus | None = None,
    ) -> list[dm.BattleRequest]:
        """Return a circle's incoming or outgoing requests, newest first."""

        if not circle_id:
            raise InvalidArgumentError("circle ID required")

        if direction == RequestDirection.INCOMING:
            requests = list_requests(self.store, to_circle_id=circle_id)
        else:
            requests = list_requests(self.store, from_circle_id=circle_id)
        if status is not None:
            requests = [request for request in requests if request.status == status]
        return requests
