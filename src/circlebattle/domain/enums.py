"""Enumerations for the circle battle domain."""

from __future__ import annotations

from enum import StrEnum


class RequestStatus(StrEnum):
    """Lifecycle of a battle request between two circles."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class RequestDirection(StrEnum):
    """Which side of a request a circle is on."""

    INCOMING = "incoming"
    OUTGOING = "outgoing"
