from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .party import Party


class RumbleEvent(Base):
    """A televised Royal Rumble match that parties watch along with."""

    __tablename__ = "rumble_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="UPCOMING")
    """``"UPCOMING"``, ``"LIVE"`` or ``"COMPLETED"``."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    parties: Mapped[list["Party"]] = relationship(back_populates="event")

    __table_args__ = (
        CheckConstraint(
            "status IN ('UPCOMING','LIVE','COMPLETED')", name="status_enum"
        ),
    )

    def __init__(
        self,
        *,
        name: str,
        year: int,
        status: str = "UPCOMING",
        created_at: Optional[datetime] = None,
    ) -> None:
        self.name = name
        self.year = year
        self.status = status
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<RumbleEvent(id={self.id}, name={self.name!r}, year={self.year})>"
