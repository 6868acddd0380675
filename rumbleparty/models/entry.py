"""Live state of each numbered entrant during the match."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .party import Party


class RumbleEntry(Base):
    """Wrestler occupying an entry number, with entrance and elimination times."""

    __tablename__ = "rumble_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    party_id: Mapped[int] = mapped_column(
        ForeignKey("parties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    entry_number: Mapped[int] = mapped_column(Integer, nullable=False)
    wrestler_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    entered_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    eliminated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    eliminated_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    is_winner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    party: Mapped["Party"] = relationship(back_populates="entries")

    __table_args__ = (
        UniqueConstraint("party_id", "entry_number", name="uq_rumble_entry_number"),
        CheckConstraint("entry_number BETWEEN 1 AND 30", name="entry_number_range"),
    )

    def __init__(
        self,
        *,
        entry_number: int,
        party: Optional["Party"] = None,
        party_id: Optional[int] = None,
        wrestler_name: Optional[str] = None,
    ) -> None:
        self.entry_number = entry_number
        if party is not None:
            self.party = party
        if party_id is not None:
            self.party_id = party_id
        self.wrestler_name = wrestler_name
        self.is_winner = False

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return (
            f"<RumbleEntry(party_id={self.party_id}, entry_number={self.entry_number}, "
            f"wrestler_name={self.wrestler_name!r})>"
        )

    @property
    def has_entered(self) -> bool:
        return self.entered_at is not None

    @property
    def is_eliminated(self) -> bool:
        return self.eliminated_at is not None

    @property
    def is_active(self) -> bool:
        """``True`` while the wrestler is in the ring."""
        return self.has_entered and not self.is_eliminated


__all__ = ["RumbleEntry"]
