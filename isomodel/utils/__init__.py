"""Utility modules."""

from .logging_config import (
    setup_logging,
    IsoModelFormatter,
    CONTEXT_KEYS,
)
from .validation import (
    validate_coordinates,
    ValidationError,
    Violation,
    ViolationCollector,
)

__all__ = [
    # Logging
    "setup_logging",
    "IsoModelFormatter",
    "CONTEXT_KEYS",
    # Validation
    "validate_coordinates",
    "ValidationError",
    "Violation",
    "ViolationCollector",
]
