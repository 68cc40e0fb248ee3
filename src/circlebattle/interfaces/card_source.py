"""Card Source Protocol Interface.

The card source owns circles and their member cards.  The battle engine only
reads from it.
"""

from typing import Protocol

from circlebattle.domain.models import Card


class ICardSource(Protocol):
    """Protocol for looking up a circle's cards and display name.

    Implementations raise :class:`circlebattle.errors.CardSourceError` when the
    data cannot be provided.
    """

    def get_circle_cards(self, circle_id: str) -> list[Card]:
        """Return the circle's card pool with battle stats filled in.

        Args:
            circle_id: Circle to look up

        Returns:
            Up to the configured limit of cards; never empty

        Raises:
            CardSourceError: If the circle has no cards or the lookup fails
        """
        ...

    def get_circle_name(self, circle_id: str) -> str:
        """Return the circle's display name.

        Raises:
            CardSourceError: If the circle is missing or its record is malformed
        """
        ...
