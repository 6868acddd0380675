from __future__ import annotations

import logging
import random

from rumbleparty.db.engine import get_sessionmaker, make_engine
from rumbleparty.distribution import DistributionMode
from rumbleparty.models import Base, RumbleEvent, User
from rumbleparty.workflows import (
    create_party,
    distribute_party_numbers,
    join_party,
    participant_numbers,
)

logger = logging.getLogger(__name__)

GUESTS = ("Alice", "Bob", "Carol", "Dave", "Erin", "Frank")


def main(seed: int | None = None) -> None:
    """Seed the development database with a party whose numbers are drawn."""
    logging.basicConfig(level=logging.INFO)
    engine = make_engine()

    # Drop and recreate all tables.
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    Session = get_sessionmaker(engine)

    with Session.begin() as session:
        event = RumbleEvent(name="Royal Rumble", year=2025, status="UPCOMING")
        host = User(email="host@example.com", name="Host")
        session.add_all([event, host])
        session.flush()

        party = create_party(
            session,
            host,
            event,
            "Living Room Rumble",
            distribution_mode=DistributionMode.SHARED,
        )
        for name in GUESTS:
            guest = User(email=f"{name.lower()}@example.com", name=name)
            session.add(guest)
            session.flush()
            join_party(session, guest, party.invite_code)

        distribute_party_numbers(
            session,
            party,
            acting_user=host,
            rng=random.Random(seed) if seed is not None else None,
        )

        for participant in party.participants:
            numbers = participant_numbers(party, participant)
            logger.info(
                "%s owns %s, shares %s",
                participant.user.name,
                numbers.owned,
                sorted(numbers.shared),
            )
        logger.info("Invite code: %s", party.invite_code)

    engine.dispose()


if __name__ == "__main__":
    main()
