"""Helpers for stratified tiering of entry numbers."""

from __future__ import annotations

import math
import random
from typing import Sequence, TypeVar

T = TypeVar("T")


def shuffled(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a shuffled copy of ``items``; the input is never mutated.

    ``random.Random.shuffle`` is a Fisher-Yates shuffle, so every permutation
    is equally likely.
    """

    copy = list(items)
    rng.shuffle(copy)
    return copy


def chunk_into_tiers(numbers: Sequence[int], tier_size: int) -> list[list[int]]:
    """Split ``numbers`` (in ascending order) into contiguous tiers of ``tier_size``.

    Parameters
    ----------
    numbers : Sequence[int]
        Entry numbers to stratify. They are sorted before chunking.
    tier_size : int
        Width of a tier, which equals the participant count.

    Returns
    -------
    list[list[int]]
        ``ceil(len(numbers) / tier_size)`` tiers; only the last may be short.
    """

    if tier_size <= 0:
        raise ValueError("tier_size must be a positive integer")
    ordered = sorted(numbers)
    return [
        ordered[start : start + tier_size]
        for start in range(0, len(ordered), tier_size)
    ]


def assign_tier(
    tier: Sequence[int],
    participant_ids: Sequence[str],
    owned: dict[str, list[int]],
    rng: random.Random,
) -> None:
    """Randomly pair each number of ``tier`` with a distinct participant.

    Both the tier and the participant order are shuffled, and ``tier[i]`` goes
    to ``participants[i]``. A short tier leaves the surplus participants empty
    handed for that tier.
    """

    numbers = shuffled(tier, rng)
    participants = shuffled(participant_ids, rng)
    for number, participant_id in zip(numbers, participants):
        owned[participant_id].append(number)


def shared_group_sizes(participant_count: int, shared_count: int) -> list[int]:
    """Return the size of each shared group, in draw order.

    Sizes are computed greedily as ``ceil(remaining_participants /
    remaining_numbers)``, so they differ by at most one and sum to
    ``participant_count``. For example 7 participants over 3 numbers yields
    ``[3, 2, 2]``.
    """

    if shared_count <= 0:
        return []
    sizes: list[int] = []
    remaining_participants = participant_count
    for remaining_numbers in range(shared_count, 0, -1):
        size = math.ceil(remaining_participants / remaining_numbers)
        sizes.append(size)
        remaining_participants -= size
    return sizes


__all__ = [
    "assign_tier",
    "chunk_into_tiers",
    "shared_group_sizes",
    "shuffled",
]
