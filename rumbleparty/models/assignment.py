"""Persisted entry-number assignments."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .party import Party, PartyParticipant


class NumberAssignment(Base):
    """One participant holding one entry number.

    Exclusive numbers have a single row. A shared number has one row per
    group member, all flagged ``is_shared`` and carrying the same
    ``share_group`` index.
    """

    __tablename__ = "number_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    party_id: Mapped[int] = mapped_column(
        ForeignKey("parties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    participant_id: Mapped[int] = mapped_column(
        ForeignKey("party_participants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    entry_number: Mapped[int] = mapped_column(Integer, nullable=False)
    is_shared: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    share_group: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    """Index of the shared number among the party's shared numbers, ascending."""

    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    party: Mapped["Party"] = relationship(back_populates="assignments")
    participant: Mapped["PartyParticipant"] = relationship(back_populates="assignments")

    __table_args__ = (
        UniqueConstraint(
            "participant_id", "entry_number", name="uq_number_assignment_participant"
        ),
        CheckConstraint("entry_number BETWEEN 1 AND 30", name="entry_number_range"),
        Index("ix_number_assignments_party_number", "party_id", "entry_number"),
    )

    def __init__(
        self,
        *,
        entry_number: int,
        party: Optional["Party"] = None,
        party_id: Optional[int] = None,
        participant: Optional["PartyParticipant"] = None,
        participant_id: Optional[int] = None,
        is_shared: bool = False,
        share_group: Optional[int] = None,
        assigned_at: Optional[datetime] = None,
    ) -> None:
        self.entry_number = entry_number
        if party is not None:
            self.party = party
        if party_id is not None:
            self.party_id = party_id
        if participant is not None:
            self.participant = participant
        if participant_id is not None:
            self.participant_id = participant_id
        self.is_shared = is_shared
        self.share_group = share_group
        if assigned_at is not None:
            self.assigned_at = assigned_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return (
            f"<NumberAssignment(id={self.id}, participant_id={self.participant_id}, "
            f"entry_number={self.entry_number}, is_shared={self.is_shared})>"
        )


__all__ = ["NumberAssignment"]
