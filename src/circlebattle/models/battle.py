"""Battle and battle request tables.

Both tables hold the full codec document in a JSON column next to a handful
of columns used for lookups and for the optimistic ``version`` check.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, VersionedMixin


class BattleRecord(Base, VersionedMixin, TimestampMixin):
    """Stored battle state.

    Attributes:
        id: Battle id
        version: Incremented on every write; writers must present the value they read
        winner_id: Copy of the document's winner for querying finished battles
        document: Encoded BattleState
    """

    __tablename__ = "battles"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    winner_id: Mapped[str] = mapped_column(String, nullable=False, default="")
    document: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    def __repr__(self) -> str:
        return f"<BattleRecord(id={self.id!r}, version={self.version})>"


class BattleRequestRecord(Base, VersionedMixin, TimestampMixin):
    """Stored battle request.

    Attributes:
        id: Request id
        version: Incremented on every write
        from_circle_id: Challenging circle
        to_circle_id: Challenged circle
        status: pending / accepted / rejected
        requested_at: When the challenge was sent
        document: Encoded BattleRequest
    """

    __tablename__ = "battle_requests"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    from_circle_id: Mapped[str] = mapped_column(String, nullable=False)
    to_circle_id: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    requested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    document: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    __table_args__ = (
        Index("idx_battle_requests_from", "from_circle_id"),
        Index("idx_battle_requests_to", "to_circle_id"),
    )

    def __repr__(self) -> str:
        return f"<BattleRequestRecord(id={self.id!r}, status={self.status!r})>"
