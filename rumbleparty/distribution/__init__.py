"""Entry-number distribution for Royal Rumble parties."""

from .engine import (
    DEFAULT_MODE,
    TOTAL_NUMBERS,
    DistributionMode,
    DistributionResult,
    InvalidInputError,
    distribute_numbers,
)
from .legacy import distribute_numbers_legacy, validate_legacy_distribution
from .validators import (
    validate_distribution,
    validate_exclude_distribution,
    validate_shared_distribution,
)

__all__ = [
    "DEFAULT_MODE",
    "TOTAL_NUMBERS",
    "DistributionMode",
    "DistributionResult",
    "InvalidInputError",
    "distribute_numbers",
    "distribute_numbers_legacy",
    "validate_distribution",
    "validate_exclude_distribution",
    "validate_legacy_distribution",
    "validate_shared_distribution",
]
