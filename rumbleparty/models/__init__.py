from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .user import User  # noqa: F401
from .event import RumbleEvent  # noqa: F401
from .party import Party, PartyParticipant, PartyStatus  # noqa: F401
from .assignment import NumberAssignment  # noqa: F401
from .entry import RumbleEntry  # noqa: F401

__all__ = [
    "Base",
    "User",
    "RumbleEvent",
    "Party",
    "PartyParticipant",
    "PartyStatus",
    "NumberAssignment",
    "RumbleEntry",
]
