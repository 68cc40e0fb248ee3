"""Compare-and-set helpers shared by the store adapters."""

from __future__ import annotations

from circlebattle.errors import ConcurrentModificationError


def next_version(collection: str, key: str, expected: int | None, stored: int | None) -> int:
    """Validate a write against the stored version and return the new version.

    ``expected`` is the version the writer loaded (``None`` for a brand new
    document); ``stored`` is what the store currently holds (``None`` when the
    document does not exist).
    """

    if expected != stored:
        raise ConcurrentModificationError(collection, key, expected, stored)
    return 0 if stored is None else stored + 1
