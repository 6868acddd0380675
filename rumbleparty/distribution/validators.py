"""Read-only checks over a :class:`DistributionResult`.

The validators never raise; they return ``False`` when an invariant does not
hold and are meant for test assertions rather than user-facing errors.
"""

from __future__ import annotations

from .engine import TOTAL_NUMBERS, DistributionMode, DistributionResult

_FULL_RANGE = frozenset(range(1, TOTAL_NUMBERS + 1))


def _owned_flat(result: DistributionResult) -> list[int]:
    return [n for numbers in result.owned.values() for n in numbers]


def validate_exclude_distribution(
    result: DistributionResult, participant_count: int
) -> bool:
    """Check a distribution that leaves the remainder unassigned.

    Verifies that owned plus unassigned numbers add up to 30, that exactly
    ``floor(30 / participant_count) * participant_count`` distinct numbers are
    owned, and that no owned number is also unassigned.
    """

    try:
        if not 1 <= participant_count <= TOTAL_NUMBERS:
            return False
        expected_owned = (TOTAL_NUMBERS // participant_count) * participant_count

        owned = _owned_flat(result)
        owned_set = set(owned)
        unassigned_set = set(result.unassigned)

        if len(owned) != len(owned_set):
            return False
        if len(result.unassigned) != len(unassigned_set):
            return False
        if len(owned) + len(result.unassigned) != TOTAL_NUMBERS:
            return False
        if len(owned_set) != expected_owned:
            return False
        if owned_set & unassigned_set:
            return False
        return (owned_set | unassigned_set) == _FULL_RANGE
    except (AttributeError, TypeError):
        return False


def validate_shared_distribution(result: DistributionResult) -> bool:
    """Check that owned numbers plus shared keys are exactly ``{1..30}``."""

    try:
        covered = _owned_flat(result) + list(result.shared.keys())
        if len(covered) != TOTAL_NUMBERS:
            return False
        if set(covered) != _FULL_RANGE:
            return False
        return all(
            members and len(members) == len(set(members))
            for members in result.shared.values()
        )
    except (AttributeError, TypeError):
        return False


def validate_distribution(result: DistributionResult) -> bool:
    """Run the validator matching ``result.mode``."""

    if result.mode is DistributionMode.SHARED:
        return validate_shared_distribution(result)
    return validate_exclude_distribution(result, result.participant_count)


__all__ = [
    "validate_distribution",
    "validate_exclude_distribution",
    "validate_shared_distribution",
]
