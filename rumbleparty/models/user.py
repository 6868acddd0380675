from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Integer, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .party import Party, PartyParticipant


class User(Base):
    """Account that can host parties or join them as a participant."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    hosted_parties: Mapped[list["Party"]] = relationship(back_populates="host")
    participations: Mapped[list["PartyParticipant"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __init__(
        self,
        *,
        email: str,
        name: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.email = email.strip().lower()
        self.name = name
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"

    @classmethod
    def get_by_email(cls, session: Session, email: str) -> Optional["User"]:
        """Return the user registered under ``email`` (case-insensitive)."""
        return session.scalar(select(cls).where(cls.email == email.strip().lower()))
