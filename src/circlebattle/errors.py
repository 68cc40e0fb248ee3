"""Exception hierarchy for the circle battle engine.

Service-level errors carry an :class:`ErrorCode` so any transport can map them
to its own status codes.  Store and card-source errors are raised by adapters
and translated by the services.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Transport-agnostic error categories."""

    NOT_FOUND = "not_found"
    INVALID_ARGUMENT = "invalid_argument"
    FAILED_PRECONDITION = "failed_precondition"
    ABORTED = "aborted"
    INTERNAL = "internal"


class BattleEngineError(Exception):
    """Base for errors surfaced to callers of the battle services."""

    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(BattleEngineError):
    code = ErrorCode.NOT_FOUND


class InvalidArgumentError(BattleEngineError):
    code = ErrorCode.INVALID_ARGUMENT


class FailedPreconditionError(BattleEngineError):
    code = ErrorCode.FAILED_PRECONDITION


class AbortedError(BattleEngineError):
    """A concurrent writer got there first; the caller may retry."""

    code = ErrorCode.ABORTED


class InternalError(BattleEngineError):
    code = ErrorCode.INTERNAL


# --- Adapter errors ---------------------------------------------------------------


class StoreError(Exception):
    """Base for battle store failures."""


class DocumentNotFoundError(StoreError):
    def __init__(self, collection: str, key: str):
        super().__init__(f"{collection}/{key} not found")
        self.collection = collection
        self.key = key


class ConcurrentModificationError(StoreError):
    def __init__(self, collection: str, key: str, expected: int | None, actual: int | None):
        super().__init__(
            f"{collection}/{key} changed concurrently (expected version {expected}, "
            f"found {actual})"
        )
        self.collection = collection
        self.key = key
        self.expected = expected
        self.actual = actual


class DocumentSchemaError(StoreError):
    """A stored document could not be decoded."""


class CardSourceError(Exception):
    """The card source could not provide cards or a circle name."""
