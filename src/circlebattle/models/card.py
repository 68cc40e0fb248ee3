"""Circle and card tables read by the SQL card source."""

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class CircleRecord(Base):
    """A circle (club) whose members' cards form its card pool."""

    __tablename__ = "circles"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)

    cards: Mapped[list["CardRecord"]] = relationship("CardRecord", back_populates="circle")

    def __repr__(self) -> str:
        return f"<CircleRecord(id={self.id!r}, name={self.name!r})>"


class CardRecord(Base):
    """A member card.  Battle stats are not stored; they are derived from id and grade."""

    __tablename__ = "cards"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    grade: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    position: Mapped[str] = mapped_column(String, nullable=False, default="")
    hobby: Mapped[str] = mapped_column(String, nullable=False, default="")
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    image_url: Mapped[str] = mapped_column(String, nullable=False, default="")
    creator_id: Mapped[str] = mapped_column(String, nullable=False, default="")
    circle_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("circles.id"), nullable=True
    )
    affiliated_group: Mapped[str | None] = mapped_column(String, nullable=True)

    circle: Mapped["CircleRecord"] = relationship("CircleRecord", back_populates="cards")

    __table_args__ = (Index("idx_cards_circle", "circle_id"),)

    def __repr__(self) -> str:
        return f"<CardRecord(id={self.id!r}, circle_id={self.circle_id!r})>"
