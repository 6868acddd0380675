"""Pre mode-aware distribution API, kept for older callers."""

from __future__ import annotations

import random
import warnings
from typing import Mapping, Optional, Sequence

from .engine import TOTAL_NUMBERS, DistributionMode, distribute_numbers


def distribute_numbers_legacy(
    participant_ids: Sequence[str],
    *,
    rng: Optional[random.Random] = None,
) -> dict[str, list[int]]:
    """Hand out all 30 numbers, folding shared numbers into each member's list.

    Shared numbers therefore appear under several participants.

    .. deprecated::
        Use :func:`distribute_numbers` with :attr:`DistributionMode.SHARED`.
    """

    warnings.warn(
        "distribute_numbers_legacy is deprecated; use distribute_numbers "
        "with DistributionMode.SHARED",
        DeprecationWarning,
        stacklevel=2,
    )
    result = distribute_numbers(participant_ids, DistributionMode.SHARED, rng=rng)
    return {pid: result.numbers_for(pid) for pid in result.owned}


def validate_legacy_distribution(distribution: Mapping[str, Sequence[int]]) -> bool:
    """Return ``True`` when every number 1-30 appears in at least one list."""

    seen: set[int] = set()
    for numbers in distribution.values():
        seen.update(numbers)
    return seen == set(range(1, TOTAL_NUMBERS + 1))


__all__ = ["distribute_numbers_legacy", "validate_legacy_distribution"]
