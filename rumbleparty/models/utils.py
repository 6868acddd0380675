"""Utility helpers for the models package."""

from __future__ import annotations

import secrets
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

# Excludes look-alike characters (0/O, 1/I).
INVITE_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def generate_invite_code(
    session: Optional[Session] = None,
    length: int = 6,
    max_attempts: int = 10,
) -> str:
    """Return a random invite code drawn from :data:`INVITE_CODE_ALPHABET`.

    When a session is provided, the helper retries if the generated value is
    already present (or pending) in ``Party.invite_code``.
    """

    from .party import Party

    for _ in range(max_attempts):
        candidate = "".join(
            secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length)
        )
        if session is None:
            return candidate

        if any(
            isinstance(obj, Party) and obj.invite_code == candidate
            for obj in session.new
        ):
            continue
        with session.no_autoflush:
            exists = session.scalar(
                select(Party.id).where(Party.invite_code == candidate)
            )
        if exists is None:
            return candidate

    raise RuntimeError("Unable to generate a unique invite code after multiple attempts")
