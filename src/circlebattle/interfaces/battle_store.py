"""Battle Store Protocol Interface.

Keyed, full-document persistence for battles and battle requests with
optimistic concurrency.
"""

from typing import Protocol

from circlebattle.domain.models import BattleRequest, BattleState


class IBattleStore(Protocol):
    """Protocol for persisting battle state and battle requests.

    Saves are compare-and-set on the object's ``version``: ``None`` means the
    document must not exist yet, an integer must match the stored version.  On
    success the object's ``version`` is advanced to the stored value.
    """

    def save_battle(self, state: BattleState) -> None:
        """Write the whole battle document.

        Raises:
            ConcurrentModificationError: If the stored version moved on
            StoreError: On any other storage failure
        """
        ...

    def get_battle(self, battle_id: str) -> BattleState:
        """Load a battle.

        Raises:
            DocumentNotFoundError: If no battle has this id
            StoreError: On any other storage failure
        """
        ...

    def save_battle_request(self, request: BattleRequest) -> None:
        """Write the whole battle request document (same semantics as save_battle)."""
        ...

    def get_battle_request(self, request_id: str) -> BattleRequest:
        """Load a battle request.

        Raises:
            DocumentNotFoundError: If no request has this id
        """
        ...

    def list_battle_requests(
        self,
        *,
        from_circle_id: str | None = None,
        to_circle_id: str | None = None,
    ) -> list[BattleRequest]:
        """Return requests matching every given circle filter, newest first."""
        ...
