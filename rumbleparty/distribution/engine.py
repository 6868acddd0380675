"""Stratified distribution of the 30 Royal Rumble entry numbers."""

from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from .tiers import assign_tier, chunk_into_tiers, shared_group_sizes, shuffled

logger = logging.getLogger(__name__)

TOTAL_NUMBERS = 30
"""Size of the entry-number pool (a Royal Rumble has 30 entrants)."""


class InvalidInputError(ValueError):
    """Raised when the participant list violates the distribution contract."""


class DistributionMode(str, enum.Enum):
    """How numbers left over after an even split are handled.

    ``EXCLUDE`` and ``BUY_EXTRA`` distribute identically and leave the
    remainder unassigned; with ``BUY_EXTRA`` the host may later hand those
    numbers out manually. ``SHARED`` splits the remainder between groups of
    participants who hold a number jointly.
    """

    EXCLUDE = "EXCLUDE"
    BUY_EXTRA = "BUY_EXTRA"
    SHARED = "SHARED"

    @classmethod
    def coerce(cls, value: Union["DistributionMode", str, None]) -> "DistributionMode":
        """Return the mode for ``value``; ``None`` maps to :data:`DEFAULT_MODE`."""
        if value is None:
            return DEFAULT_MODE
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError as exc:
            raise InvalidInputError(f"Unknown distribution mode '{value}'") from exc


DEFAULT_MODE = DistributionMode.EXCLUDE


@dataclass(frozen=True)
class DistributionResult:
    """Outcome of a single call to :func:`distribute_numbers`.

    Attributes
    ----------
    owned : dict[str, list[int]]
        Numbers each participant holds exclusively, ascending. Every
        participant has a key, even if the list is empty.
    shared : dict[int, list[str]]
        Shared entry number mapped to the participants that hold it jointly.
        Only populated in ``SHARED`` mode.
    unassigned : list[int]
        Numbers held by nobody, ascending. Only populated in ``EXCLUDE`` and
        ``BUY_EXTRA`` modes when 30 is not divisible by the participant count.
    mode : DistributionMode
        Mode the result was produced with.
    """

    owned: dict[str, list[int]]
    shared: dict[int, list[str]] = field(default_factory=dict)
    unassigned: list[int] = field(default_factory=list)
    mode: DistributionMode = DEFAULT_MODE

    @property
    def participant_count(self) -> int:
        return len(self.owned)

    def owned_numbers(self) -> list[int]:
        """Return every exclusively owned number, ascending."""
        return sorted(n for numbers in self.owned.values() for n in numbers)

    def shared_groups_for(self, participant_id: str) -> list[int]:
        """Return the shared numbers ``participant_id`` belongs to."""
        return sorted(
            number
            for number, members in self.shared.items()
            if participant_id in members
        )

    def numbers_for(self, participant_id: str) -> list[int]:
        """Return owned and shared numbers for ``participant_id``, ascending."""
        return sorted(
            list(self.owned.get(participant_id, []))
            + self.shared_groups_for(participant_id)
        )


def distribute_numbers(
    participant_ids: Sequence[str],
    mode: Union[DistributionMode, str, None] = DEFAULT_MODE,
    *,
    rng: Optional[random.Random] = None,
) -> DistributionResult:
    """Partition entry numbers 1-30 among ``participant_ids``.

    Every participant receives ``floor(30 / N)`` numbers, exactly one from each
    tier of ``N`` consecutive numbers, so nobody ends up with all of the late
    entrants. The ``30 mod N`` remainder is handled according to ``mode``.

    Parameters
    ----------
    participant_ids : Sequence[str]
        Distinct participant identifiers. The sequence is copied, never
        mutated, and is not deduplicated.
    mode : DistributionMode | str, default: DistributionMode.EXCLUDE
        Remainder policy. Strings matching a mode value are accepted.
    rng : Optional[random.Random], default: None
        Random source. A fresh, OS-seeded generator is created when omitted;
        pass a seeded instance for reproducible output.

    Returns
    -------
    DistributionResult
        Owned, shared and unassigned numbers. Together they cover 1-30
        exactly once.

    Raises
    ------
    InvalidInputError
        If there are no participants or more than 30.
    """

    participants = list(participant_ids)
    count = len(participants)
    if count == 0:
        raise InvalidInputError("Cannot distribute numbers with no participants")
    if count > TOTAL_NUMBERS:
        raise InvalidInputError("Too many participants for available numbers")
    resolved_mode = DistributionMode.coerce(mode)

    if rng is None:
        rng = random.Random()

    per_participant, remainder = divmod(TOTAL_NUMBERS, count)
    logger.debug(
        "Distributing %d numbers: participants=%d per_participant=%d remainder=%d mode=%s",
        TOTAL_NUMBERS,
        count,
        per_participant,
        remainder,
        resolved_mode.value,
    )

    pool = list(range(1, TOTAL_NUMBERS + 1))
    # Leftovers are drawn from the whole range, not from the last tier.
    leftovers = rng.sample(pool, remainder) if remainder else []
    leftover_set = set(leftovers)
    tiered_pool = [n for n in pool if n not in leftover_set]

    owned: dict[str, list[int]] = {pid: [] for pid in participants}
    for tier in chunk_into_tiers(tiered_pool, count):
        assign_tier(tier, participants, owned, rng)
    for numbers in owned.values():
        numbers.sort()

    shared: dict[int, list[str]] = {}
    unassigned: list[int] = []
    if resolved_mode is DistributionMode.SHARED:
        shared = _split_shared(leftovers, participants, rng)
    elif resolved_mode in (DistributionMode.EXCLUDE, DistributionMode.BUY_EXTRA):
        unassigned = sorted(leftovers)
    else:  # pragma: no cover - exhaustive over DistributionMode
        raise InvalidInputError(f"Unsupported distribution mode '{resolved_mode}'")

    return DistributionResult(
        owned=owned,
        shared=shared,
        unassigned=unassigned,
        mode=resolved_mode,
    )


def _split_shared(
    shared_numbers: Sequence[int],
    participant_ids: Sequence[str],
    rng: random.Random,
) -> dict[int, list[str]]:
    """Spread every participant over ``shared_numbers``, one group each.

    Group sizes follow the draw order of ``shared_numbers``, so which number
    gets the larger group is itself random.
    """

    if not shared_numbers:
        return {}
    participants = shuffled(participant_ids, rng)
    groups: dict[int, list[str]] = {}
    start = 0
    for number, size in zip(
        shared_numbers, shared_group_sizes(len(participants), len(shared_numbers))
    ):
        groups[number] = participants[start : start + size]
        start += size
    return groups


__all__ = [
    "DEFAULT_MODE",
    "DistributionMode",
    "DistributionResult",
    "InvalidInputError",
    "TOTAL_NUMBERS",
    "distribute_numbers",
]
