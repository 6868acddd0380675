"""Party lifecycle workflows built on top of the distribution engine.

Every function works inside the caller's session and only ``flush()``es; the
surrounding ``Session.begin()`` block decides whether the changes are
committed, which keeps multi-row writes such as number distribution
all-or-nothing.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from .distribution import (
    TOTAL_NUMBERS,
    DistributionMode,
    DistributionResult,
    distribute_numbers,
)
from .models import (
    NumberAssignment,
    Party,
    PartyParticipant,
    PartyStatus,
    RumbleEntry,
    RumbleEvent,
    User,
)
from .models.utils import generate_invite_code

logger = logging.getLogger(__name__)


@dataclass
class ParticipantNumbers:
    """Entry numbers a participant holds, read back from persisted rows.

    Attributes
    ----------
    participant : PartyParticipant
        The participant the numbers belong to.
    owned : list[int]
        Numbers held exclusively, ascending.
    shared : dict[int, list[int]]
        Shared entry number mapped to the ids of every participant in the
        group (including ``participant``).
    """

    participant: PartyParticipant
    owned: list[int] = field(default_factory=list)
    shared: dict[int, list[int]] = field(default_factory=dict)

    @property
    def all_numbers(self) -> list[int]:
        return sorted(self.owned + list(self.shared))


def _require_host(party: Party, acting_user: Optional[User], action: str) -> None:
    if acting_user is None:
        return
    if party.host_id != acting_user.id:
        raise PermissionError(f"Only the host can {action}")


def _require_status(party: Party, status: PartyStatus, message: str) -> None:
    if party.status != status.value:
        raise ValueError(message)


def _require_entry_number(entry_number: int) -> None:
    if not 1 <= entry_number <= TOTAL_NUMBERS:
        raise ValueError(f"Entry number must be between 1 and {TOTAL_NUMBERS}")


def create_party(
    session: Session,
    host: User,
    event: RumbleEvent,
    name: str,
    *,
    host_participates: bool = True,
    entry_fee: Optional[float] = None,
    distribution_mode: DistributionMode | str = DistributionMode.EXCLUDE,
) -> Party:
    """Create a party in the ``LOBBY`` state with a fresh invite code.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session.
    host : User
        Persisted user who administers the party.
    event : RumbleEvent
        Persisted event being watched.
    name : str
        Display name of the party; must not be blank.
    host_participates : bool, default: True
        When ``True`` the host also joins as a participant and receives numbers.
    entry_fee : Optional[float], default: None
        Buy-in amount. When set, only participants marked as paid are
        included in the distribution.
    distribution_mode : DistributionMode | str, default: DistributionMode.EXCLUDE
        How leftover numbers are handled.

    Returns
    -------
    Party
        The flushed party with ``id`` and ``invite_code`` populated.

    Raises
    ------
    ValueError
        If the name is blank, the fee is negative, or host/event are not
        persisted.
    """

    if not name or not name.strip():
        raise ValueError("Party name is required")
    if host.id is None:
        raise ValueError("Host must be persisted before creating a party")
    if event.id is None:
        raise ValueError("Event must be persisted before creating a party")
    if entry_fee is not None and entry_fee < 0:
        raise ValueError("entry_fee must be non-negative")

    party = Party(
        name=name.strip(),
        invite_code=generate_invite_code(session),
        host=host,
        event=event,
        distribution_mode=distribution_mode,
        entry_fee=entry_fee,
    )
    session.add(party)
    if host_participates:
        party.participants.append(PartyParticipant(user=host))
    session.flush()

    logger.info(
        "Created party id=%s mode=%s host_participates=%s",
        party.id,
        party.distribution_mode,
        host_participates,
    )
    return party


def join_party(
    session: Session, user: User, invite_code: str
) -> tuple[PartyParticipant, bool]:
    """Add ``user`` to the party identified by ``invite_code``.

    Returns
    -------
    tuple[PartyParticipant, bool]
        The participant record and ``True`` when it was newly created, or
        ``False`` when the user had already joined.

    Raises
    ------
    ValueError
        If the code is blank or unknown, or numbers were already assigned.
    """

    if not invite_code or not invite_code.strip():
        raise ValueError("Invite code is required")

    party = Party.get_by_invite_code(session, invite_code)
    if party is None:
        raise ValueError("Invalid invite code")

    existing = party.participant_for_user(user)
    if existing is not None:
        return existing, False

    _require_status(
        party,
        PartyStatus.LOBBY,
        "This party has already started. Numbers have been assigned.",
    )

    participant = PartyParticipant(user=user)
    party.participants.append(participant)
    session.flush()
    logger.info("User id=%s joined party id=%s", user.id, party.id)
    return participant, True


def leave_party(session: Session, party: Party, user: User) -> None:
    """Remove ``user`` from ``party`` while it is still in the lobby."""

    if party.host_id == user.id:
        raise ValueError("Host cannot leave the party. Delete it instead.")
    _require_status(
        party,
        PartyStatus.LOBBY,
        "Cannot leave after numbers have been distributed",
    )
    participant = party.participant_for_user(user)
    if participant is None:
        raise ValueError("You are not a participant in this party")

    party.participants.remove(participant)
    session.flush()
    logger.info("User id=%s left party id=%s", user.id, party.id)


def delete_party(session: Session, party: Party, *, acting_user: User) -> None:
    """Delete ``party`` together with its participants, assignments and entries.

    Raises
    ------
    PermissionError
        If ``acting_user`` is not the host.
    """

    _require_host(party, acting_user, "delete the party")
    party_id = party.id
    session.delete(party)
    session.flush()
    logger.info("Party id=%s deleted by user id=%s", party_id, acting_user.id)


def remove_participant(
    session: Session,
    party: Party,
    participant: PartyParticipant,
    *,
    acting_user: User,
) -> None:
    """Let the host remove ``participant`` before numbers are distributed."""

    _require_host(party, acting_user, "remove participants")
    _require_status(
        party,
        PartyStatus.LOBBY,
        "Can only remove participants before numbers are distributed",
    )
    if participant not in party.participants:
        raise ValueError("Participant not found")
    if participant.user_id == acting_user.id:
        raise ValueError("Cannot remove yourself from the party")

    party.participants.remove(participant)
    session.flush()


def set_participant_paid(
    session: Session,
    party: Party,
    participant: PartyParticipant,
    has_paid: bool,
    *,
    acting_user: Optional[User] = None,
) -> PartyParticipant:
    """Record whether ``participant`` paid the party's entry fee."""

    _require_host(party, acting_user, "update payment status")
    if participant not in party.participants:
        raise ValueError("Participant not found")
    participant.has_paid = has_paid
    session.flush()
    return participant


def eligible_participants(party: Party) -> list[PartyParticipant]:
    """Return participants that take part in the distribution, in join order.

    When the party charges an entry fee, unpaid participants are skipped.
    """

    participants = sorted(party.participants, key=lambda p: p.id or 0)
    if party.entry_fee:
        return [p for p in participants if p.has_paid]
    return participants


def distribute_party_numbers(
    session: Session,
    party: Party,
    *,
    acting_user: Optional[User] = None,
    rng: Optional[random.Random] = None,
) -> DistributionResult:
    """Distribute the 30 entry numbers and persist the assignment.

    This function performs the following steps:

    1. Collect the eligible participants (paid ones, when there is a fee).
    2. Run :func:`distribute_numbers` once with the party's mode.
    3. Create one :class:`RumbleEntry` per entry number.
    4. Store exclusive numbers as single rows, and shared numbers as one row
       per group member with ``share_group`` set to the index of the number
       among the shared numbers (ascending).
    5. Move the party to ``NUMBERS_ASSIGNED``.

    The engine runs before anything is added to the session, so an invalid
    participant count leaves the database untouched.

    Parameters
    ----------
    session : Session
        Active session; commit/rollback is left to the caller.
    party : Party
        Persisted party in the ``LOBBY`` state.
    acting_user : Optional[User], default: None
        When given, must be the host.
    rng : Optional[random.Random], default: None
        Random source forwarded to the engine.

    Returns
    -------
    DistributionResult
        The engine output, keyed by ``str(participant.id)``.

    Raises
    ------
    PermissionError
        If ``acting_user`` is not the host.
    ValueError
        If the party already left the lobby, or
        :class:`~rumbleparty.distribution.InvalidInputError` when there are no
        eligible participants.
    """

    _require_host(party, acting_user, "distribute numbers")
    if party.id is None:
        raise ValueError("Party must be persisted before distributing numbers")
    _require_status(party, PartyStatus.LOBBY, "Numbers have already been distributed")
    session.flush()

    participants = eligible_participants(party)
    by_key = {str(p.id): p for p in participants}
    result = distribute_numbers(list(by_key), party.mode, rng=rng)

    for number in range(1, TOTAL_NUMBERS + 1):
        party.entries.append(RumbleEntry(entry_number=number))

    for key, numbers in result.owned.items():
        participant = by_key[key]
        for number in numbers:
            party.assignments.append(
                NumberAssignment(entry_number=number, participant=participant)
            )

    for group_index, number in enumerate(sorted(result.shared)):
        for key in result.shared[number]:
            party.assignments.append(
                NumberAssignment(
                    entry_number=number,
                    participant=by_key[key],
                    is_shared=True,
                    share_group=group_index,
                )
            )

    party.status = PartyStatus.NUMBERS_ASSIGNED.value
    session.flush()

    logger.info(
        "Distributed numbers for party id=%s: participants=%d shared=%d unassigned=%d",
        party.id,
        len(participants),
        len(result.shared),
        len(result.unassigned),
    )
    return result


def unassigned_numbers(party: Party, *, acting_user: Optional[User] = None) -> list[int]:
    """Return numbers nobody holds, for hosts handing out extras."""

    _require_host(party, acting_user, "view extra numbers")
    return party.unassigned_numbers()


def _require_buy_extra(party: Party) -> None:
    if party.mode is not DistributionMode.BUY_EXTRA:
        raise ValueError("This party does not use BUY_EXTRA mode")


def assign_extra_number(
    session: Session,
    party: Party,
    participant: PartyParticipant,
    entry_number: int,
    *,
    acting_user: Optional[User] = None,
) -> NumberAssignment:
    """Give an unassigned number to ``participant`` in a ``BUY_EXTRA`` party.

    Raises
    ------
    PermissionError
        If ``acting_user`` is not the host.
    ValueError
        If the party is not in ``BUY_EXTRA`` mode or has not had numbers
        distributed, the number is out of range or already held, or the
        participant belongs to another party.
    """

    _require_host(party, acting_user, "assign extra numbers")
    _require_buy_extra(party)
    _require_status(
        party, PartyStatus.NUMBERS_ASSIGNED, "Numbers must be distributed first"
    )
    _require_entry_number(entry_number)
    if entry_number in party.assigned_numbers():
        raise ValueError("This number is already assigned")
    if participant not in party.participants:
        raise ValueError("Participant not found in this party")

    assignment = NumberAssignment(entry_number=entry_number, participant=participant)
    party.assignments.append(assignment)
    session.flush()
    logger.info(
        "Assigned extra number %d to participant id=%s in party id=%s",
        entry_number,
        participant.id,
        party.id,
    )
    return assignment


def remove_extra_number(
    session: Session,
    party: Party,
    entry_number: int,
    *,
    acting_user: Optional[User] = None,
) -> None:
    """Release ``entry_number`` back to the unassigned pool of a ``BUY_EXTRA`` party.

    Only allowed once numbers are distributed and before a winner is declared.
    """

    _require_host(party, acting_user, "remove extra number assignments")
    _require_buy_extra(party)
    if party.status not in (
        PartyStatus.NUMBERS_ASSIGNED.value,
        PartyStatus.IN_PROGRESS.value,
    ):
        raise ValueError(
            "Extra numbers can only be removed between distribution and the end "
            "of the match"
        )
    # TODO: track which rows were handed out as extras so only those can be removed.
    assignment = next(
        (a for a in party.assignments if a.entry_number == entry_number), None
    )
    if assignment is None:
        raise ValueError("Assignment not found")

    party.assignments.remove(assignment)
    assignment.participant.assignments.remove(assignment)
    session.flush()


def _entry_or_raise(party: Party, entry_number: int) -> RumbleEntry:
    _require_entry_number(entry_number)
    entry = party.entry(entry_number)
    if entry is None:
        raise ValueError("Entry not found")
    return entry


def record_entrance(
    session: Session,
    party: Party,
    entry_number: int,
    wrestler_name: str,
    *,
    acting_user: Optional[User] = None,
    now: Optional[datetime] = None,
) -> RumbleEntry:
    """Set the wrestler for ``entry_number`` as they enter the ring.

    The entrance time is recorded once; renaming the wrestler later keeps
    it. The first entrance moves the party from ``NUMBERS_ASSIGNED`` to
    ``IN_PROGRESS``.
    """

    _require_host(party, acting_user, "update entries")
    if not wrestler_name or not wrestler_name.strip():
        raise ValueError("wrestler_name is required")
    entry = _entry_or_raise(party, entry_number)

    entry.wrestler_name = wrestler_name.strip()
    if entry.entered_at is None:
        entry.entered_at = now or datetime.now(timezone.utc)
    if party.status == PartyStatus.NUMBERS_ASSIGNED.value:
        party.status = PartyStatus.IN_PROGRESS.value
        logger.info("Party id=%s is now in progress", party.id)
    session.flush()
    return entry


def record_elimination(
    session: Session,
    party: Party,
    entry_number: int,
    eliminated_by: Optional[str],
    *,
    acting_user: Optional[User] = None,
    now: Optional[datetime] = None,
) -> RumbleEntry:
    """Mark ``entry_number`` as eliminated; ``eliminated_by=None`` undoes it."""

    _require_host(party, acting_user, "update entries")
    entry = _entry_or_raise(party, entry_number)

    if eliminated_by:
        if entry.entered_at is None:
            raise ValueError("Cannot eliminate an entrant who has not entered")
        if entry.is_winner:
            raise ValueError("The winner cannot be eliminated")
        entry.eliminated_at = now or datetime.now(timezone.utc)
        entry.eliminated_by = eliminated_by
    else:
        entry.eliminated_at = None
        entry.eliminated_by = None
    session.flush()
    return entry


def declare_winner(
    session: Session,
    party: Party,
    entry_number: int,
    *,
    acting_user: Optional[User] = None,
) -> RumbleEntry:
    """Crown ``entry_number`` as the winner and complete the party."""

    _require_host(party, acting_user, "update entries")
    entry = _entry_or_raise(party, entry_number)
    if entry.is_eliminated:
        raise ValueError("An eliminated entrant cannot win")
    for other in party.entries:
        if other.is_winner and other is not entry:
            raise ValueError("A winner has already been declared")

    entry.is_winner = True
    party.status = PartyStatus.COMPLETED.value
    session.flush()
    logger.info("Party id=%s completed; winner is entry %d", party.id, entry_number)
    return entry


def participant_numbers(party: Party, participant: PartyParticipant) -> ParticipantNumbers:
    """Read back the numbers ``participant`` holds in ``party``."""

    if participant not in party.participants:
        raise ValueError("Participant not found in this party")

    owned: list[int] = []
    shared: dict[int, list[int]] = {}
    for assignment in participant.assignments:
        if assignment.is_shared:
            shared[assignment.entry_number] = sorted(
                a.participant_id
                for a in party.assignments
                if a.is_shared and a.entry_number == assignment.entry_number
            )
        else:
            owned.append(assignment.entry_number)
    return ParticipantNumbers(participant=participant, owned=sorted(owned), shared=shared)


@dataclass
class SpectatorParticipant:
    """Participant as shown to spectators: no email, only a display name."""

    participant_id: int
    display_name: str
    has_paid: bool
    numbers: list[int] = field(default_factory=list)


@dataclass
class PublicPartyView:
    """Read-only snapshot of a party for spectators holding its invite code."""

    party_id: int
    name: str
    status: str
    entry_fee: Optional[float]
    host_name: Optional[str]
    event_name: str
    event_year: int
    participants: list[SpectatorParticipant] = field(default_factory=list)
    entries: list[RumbleEntry] = field(default_factory=list)


def _display_name(user: User) -> str:
    return user.name or user.email.split("@")[0]


def public_party_view(
    session: Session, party_id: int, invite_code: Optional[str]
) -> PublicPartyView:
    """Build the spectator view of a party, gated by its invite code.

    Spectators need no account, so the invite code is the only credential.
    Participant emails are reduced to a display name.

    Raises
    ------
    ValueError
        If the code is missing, the party does not exist, or the code does
        not match the party.
    """

    if not invite_code or not invite_code.strip():
        raise ValueError("Invite code required")
    party = session.get(Party, party_id)
    if party is None:
        raise ValueError("Party not found")
    if party.invite_code != invite_code.strip().upper():
        raise ValueError("Invalid invite code")

    participants = [
        SpectatorParticipant(
            participant_id=p.id,
            display_name=_display_name(p.user),
            has_paid=p.has_paid,
            numbers=sorted(a.entry_number for a in p.assignments),
        )
        for p in party.participants
    ]
    return PublicPartyView(
        party_id=party.id,
        name=party.name,
        status=party.status,
        entry_fee=party.entry_fee,
        host_name=party.host.name,
        event_name=party.event.name,
        event_year=party.event.year,
        participants=participants,
        entries=list(party.entries),
    )


__all__ = [
    "ParticipantNumbers",
    "PublicPartyView",
    "SpectatorParticipant",
    "assign_extra_number",
    "create_party",
    "declare_winner",
    "delete_party",
    "distribute_party_numbers",
    "eligible_participants",
    "join_party",
    "leave_party",
    "participant_numbers",
    "public_party_view",
    "record_elimination",
    "record_entrance",
    "remove_extra_number",
    "remove_participant",
    "set_participant_paid",
    "unassigned_numbers",
]
