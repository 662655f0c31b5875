"""Database models for storing raffle items, their entrants and draw results."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from .base import ID_TYPE, Base
from ..draw.items import RaffleItem


class RaffleItemRecord(Base):
    """A prize offered in the raffle."""

    __tablename__ = "raffle_items"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)
    """Primary key."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    """Item name, unique across the table."""

    value: Mapped[int] = mapped_column(Integer, nullable=False)
    """Item value; lower values are drawn first."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    """Timestamp when the item was registered."""

    entries: Mapped[list["RaffleEntryRecord"]] = relationship(
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="RaffleEntryRecord.position",
    )
    """Participants entered for this item, in source order."""

    result: Mapped[Optional["RaffleResultRecord"]] = relationship(
        back_populates="item",
        cascade="all, delete-orphan",
        uselist=False,
    )
    """Latest draw result for this item, if any."""

    __table_args__ = (UniqueConstraint("name", name="raffle_items_name_key"),)

    def __init__(
        self,
        *,
        name: str,
        value: int,
        entries: Optional[list["RaffleEntryRecord"]] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.name = name
        self.value = value
        if entries is not None:
            self.entries = entries
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<RaffleItemRecord(id={id}, name={name}, value={value})>".format(
            id=self.id,
            name=self.name,
            value=self.value,
        )

    def to_item(self) -> RaffleItem:
        """Return the plain :class:`RaffleItem` used by the draw engine."""
        return RaffleItem.build(
            self.name, self.value, [entry.participant_name for entry in self.entries]
        )

    @classmethod
    def get_by_name(cls, session: Session, name: str) -> Optional["RaffleItemRecord"]:
        """Return the item matching ``name`` if it exists."""

        return session.scalar(select(cls).where(cls.name == name))


class RaffleEntryRecord(Base):
    """Eligibility of one participant for one item."""

    __tablename__ = "raffle_entries"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)

    item_id: Mapped[int] = mapped_column(
        ID_TYPE,
        ForeignKey("raffle_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    """Foreign key referencing :class:`RaffleItemRecord`."""

    participant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    """Case-sensitive participant name."""

    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Zero-based position of the participant in the source row."""

    item: Mapped["RaffleItemRecord"] = relationship(back_populates="entries")

    __table_args__ = (
        UniqueConstraint("item_id", "participant_name", name="uq_raffle_entry_per_item"),
    )

    def __init__(
        self,
        *,
        participant_name: str,
        position: int = 0,
        item: Optional["RaffleItemRecord"] = None,
        item_id: Optional[int] = None,
    ) -> None:
        self.participant_name = participant_name
        self.position = position
        if item is not None:
            self.item = item
        if item_id is not None:
            self.item_id = item_id


class RaffleResultRecord(Base):
    """Outcome of the latest draw for an item."""

    __tablename__ = "raffle_results"

    id: Mapped[int] = mapped_column(ID_TYPE, primary_key=True, autoincrement=True)

    item_id: Mapped[int] = mapped_column(
        ID_TYPE,
        ForeignKey("raffle_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    """Item this result belongs to."""

    winner_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    """Winning participant; ``None`` when nobody was eligible."""

    draw_position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Zero-based position of the item in the draw order."""

    drawn_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    """Timestamp when the result was recorded."""

    item: Mapped["RaffleItemRecord"] = relationship(back_populates="result")

    __table_args__ = (UniqueConstraint("item_id", name="uq_raffle_result_item"),)

    def __init__(
        self,
        *,
        winner_name: Optional[str],
        draw_position: int = 0,
        item: Optional["RaffleItemRecord"] = None,
        item_id: Optional[int] = None,
        drawn_at: Optional[datetime] = None,
    ) -> None:
        self.winner_name = winner_name
        self.draw_position = draw_position
        if item is not None:
            self.item = item
        if item_id is not None:
            self.item_id = item_id
        if drawn_at is not None:
            self.drawn_at = drawn_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<RaffleResultRecord(id={id}, item_id={item_id}, winner_name={winner})>".format(
            id=self.id,
            item_id=self.item_id,
            winner=self.winner_name,
        )


__all__ = [
    "RaffleEntryRecord",
    "RaffleItemRecord",
    "RaffleResultRecord",
]
