"""Database models for watch parties and their participants."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from ..distribution import TOTAL_NUMBERS, DistributionMode
from .base import Base

if TYPE_CHECKING:
    from .assignment import NumberAssignment
    from .entry import RumbleEntry
    from .event import RumbleEvent
    from .user import User


class PartyStatus(str, enum.Enum):
    """Lifecycle of a party, in order."""

    LOBBY = "LOBBY"
    NUMBERS_ASSIGNED = "NUMBERS_ASSIGNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Party(Base):
    """A watch party in which a host hands out the 30 entry numbers."""

    __tablename__ = "parties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    """Display name chosen by the host."""

    invite_code: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    """Upper-case code participants use to join."""

    host_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    """User who created and administers the party."""

    event_id: Mapped[int] = mapped_column(
        ForeignKey("rumble_events.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    """Event being watched."""

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PartyStatus.LOBBY.value
    )
    """Current :class:`PartyStatus` value."""

    distribution_mode: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DistributionMode.EXCLUDE.value
    )
    """:class:`DistributionMode` value used when numbers are distributed."""

    entry_fee: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    """Optional buy-in. When set, only paid participants receive numbers."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    host: Mapped["User"] = relationship(back_populates="hosted_parties")
    event: Mapped["RumbleEvent"] = relationship(back_populates="parties")
    participants: Mapped[list["PartyParticipant"]] = relationship(
        back_populates="party",
        cascade="all, delete-orphan",
        order_by="PartyParticipant.id",
    )
    assignments: Mapped[list["NumberAssignment"]] = relationship(
        back_populates="party",
        cascade="all, delete-orphan",
    )
    entries: Mapped[list["RumbleEntry"]] = relationship(
        back_populates="party",
        cascade="all, delete-orphan",
        order_by="RumbleEntry.entry_number",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('LOBBY','NUMBERS_ASSIGNED','IN_PROGRESS','COMPLETED')",
            name="status_enum",
        ),
        CheckConstraint(
            "distribution_mode IN ('EXCLUDE','BUY_EXTRA','SHARED')",
            name="distribution_mode_enum",
        ),
    )

    def __init__(
        self,
        *,
        name: str,
        invite_code: str,
        host: Optional["User"] = None,
        host_id: Optional[int] = None,
        event: Optional["RumbleEvent"] = None,
        event_id: Optional[int] = None,
        status: PartyStatus | str = PartyStatus.LOBBY,
        distribution_mode: DistributionMode | str = DistributionMode.EXCLUDE,
        entry_fee: Optional[float] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.name = name
        self.invite_code = invite_code.upper()
        if host is not None:
            self.host = host
        if host_id is not None:
            self.host_id = host_id
        if event is not None:
            self.event = event
        if event_id is not None:
            self.event_id = event_id
        self.status = PartyStatus(status).value
        self.distribution_mode = DistributionMode.coerce(distribution_mode).value
        self.entry_fee = entry_fee
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<Party(id={id}, name={name!r}, status={status}, mode={mode})>".format(
            id=self.id,
            name=self.name,
            status=self.status,
            mode=self.distribution_mode,
        )

    @property
    def mode(self) -> DistributionMode:
        return DistributionMode(self.distribution_mode)

    @property
    def party_status(self) -> PartyStatus:
        return PartyStatus(self.status)

    @classmethod
    def get_by_invite_code(
        cls, session: Session, invite_code: str
    ) -> Optional["Party"]:
        """Return the party matching ``invite_code``, ignoring case."""

        return session.scalar(
            select(cls).where(cls.invite_code == invite_code.strip().upper())
        )

    def participant_for_user(
        self, user: "User | int"
    ) -> Optional["PartyParticipant"]:
        """Return the participant record for ``user`` if they joined."""

        user_id = user if isinstance(user, int) else user.id
        for participant in self.participants:
            if participant.user_id == user_id:
                return participant
        return None

    def assigned_numbers(self) -> set[int]:
        """Return every entry number held by at least one participant."""
        return {assignment.entry_number for assignment in self.assignments}

    def unassigned_numbers(self) -> list[int]:
        """Return entry numbers nobody holds, ascending."""
        taken = self.assigned_numbers()
        return [n for n in range(1, TOTAL_NUMBERS + 1) if n not in taken]

    def entry(self, entry_number: int) -> Optional["RumbleEntry"]:
        """Return the :class:`RumbleEntry` for ``entry_number`` if created."""
        for entry in self.entries:
            if entry.entry_number == entry_number:
                return entry
        return None


class PartyParticipant(Base):
    """Membership of a user in a party."""

    __tablename__ = "party_participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    party_id: Mapped[int] = mapped_column(
        ForeignKey("parties.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    has_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    joined_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    party: Mapped["Party"] = relationship(back_populates="participants")
    user: Mapped["User"] = relationship(back_populates="participations")
    assignments: Mapped[list["NumberAssignment"]] = relationship(
        back_populates="participant",
        cascade="all, delete-orphan",
        order_by="NumberAssignment.entry_number",
    )

    __table_args__ = (
        UniqueConstraint("party_id", "user_id", name="uq_party_participant"),
    )

    def __init__(
        self,
        *,
        party: Optional["Party"] = None,
        party_id: Optional[int] = None,
        user: Optional["User"] = None,
        user_id: Optional[int] = None,
        has_paid: bool = False,
        joined_at: Optional[datetime] = None,
    ) -> None:
        if party is not None:
            self.party = party
        if party_id is not None:
            self.party_id = party_id
        if user is not None:
            self.user = user
        if user_id is not None:
            self.user_id = user_id
        self.has_paid = has_paid
        if joined_at is not None:
            self.joined_at = joined_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return (
            f"<PartyParticipant(id={self.id}, party_id={self.party_id}, "
            f"user_id={self.user_id}, has_paid={self.has_paid})>"
        )


__all__ = ["Party", "PartyParticipant", "PartyStatus"]
