"""Service layer for the circle battle engine.

Services depend on Protocol interfaces (IBattleStore, ICardSource) for clean
architecture:

- Use factory.py for production dependency wiring
- Inject in-memory adapters or protocol-based fakes for testing
"""

from circlebattle.services.battle_service import BattleSessionService
from circlebattle.services.request_service import BattleRequestService

__all__ = [
    "BattleRequestService",
    "BattleSessionService",
]
