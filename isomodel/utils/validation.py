"""
Input validation utilities for isomodel.

Two styles live here:

- ``validate_coordinates``, which raises ``ValidationError`` on the first
  problem and guards the climate library;
- ``ViolationCollector``, which gathers every problem found while checking a
  whole ``UserModel`` so that the compile step can report them all at once.

Usage:
    from isomodel.utils.validation import ViolationCollector, ValidationError

    checks = ViolationCollector()
    checks.non_negative("wall_u", model.wall_u)
    checks.fraction("window_to_wall_ratio.south", 1.3)
    checks.raise_if_any()   # ValidationError naming both fields
"""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Violation:
    """One broken invariant: the offending field and what is wrong with it."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(ValueError):
    """Raised when input validation fails.

    ``violations`` lists every problem found; ``field`` is the first one so
    single-value validators and the collector expose the same shape.
    """

    def __init__(
        self,
        message: str,
        field: str = "",
        suggestions: Optional[List[str]] = None,
        violations: Optional[Sequence[Violation]] = None,
    ):
        super().__init__(message)
        self.violations: List[Violation] = list(violations or [])
        if not self.violations and field:
            self.violations.append(Violation(field, message))
        self.field = field or (self.violations[0].field if self.violations else "")
        self.suggestions = suggestions or []

    @property
    def fields(self) -> List[str]:
        """Names of all offending fields, in the order they were found."""
        return [v.field for v in self.violations]


class ViolationCollector:
    """
    Collect-all checker.

    Each check records a ``Violation`` instead of raising, so one pass over a
    model reports every broken invariant.
    """

    def __init__(self, context: str = "model"):
        self.context = context
        self.violations: List[Violation] = []

    def __len__(self) -> int:
        return len(self.violations)

    def __bool__(self) -> bool:
        return bool(self.violations)

    def add(self, field: str, message: str) -> None:
        self.violations.append(Violation(field, message))

    def require(self, condition: bool, field: str, message: str) -> bool:
        if not condition:
            self.add(field, message)
        return condition

    def finite(self, field: str, value: Optional[float]) -> bool:
        if value is None:
            self.add(field, "is required")
            return False
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            self.add(field, f"must be a number, got {value!r}")
            return False
        if not math.isfinite(value):
            self.add(field, f"must be finite, got {value}")
            return False
        return True

    def non_negative(self, field: str, value: Optional[float]) -> bool:
        if not self.finite(field, value):
            return False
        return self.require(value >= 0, field, f"must be non-negative, got {value}")

    def positive(self, field: str, value: Optional[float]) -> bool:
        if not self.finite(field, value):
            return False
        return self.require(value > 0, field, f"must be greater than zero, got {value}")

    def fraction(self, field: str, value: Optional[float]) -> bool:
        if not self.finite(field, value):
            return False
        return self.require(
            0.0 <= value <= 1.0, field, f"must be between 0 and 1, got {value}"
        )

    def efficiency(self, field: str, value: Optional[float]) -> bool:
        """Efficiency in (0, 1]."""
        if not self.finite(field, value):
            return False
        return self.require(
            0.0 < value <= 1.0, field, f"must be in (0, 1], got {value}"
        )

    def fractions(self, field: str, values: Iterable[float], length: int) -> bool:
        values = list(values)
        if not self.require(
            len(values) == length, field, f"must have {length} values, got {len(values)}"
        ):
            return False
        ok = True
        for i, value in enumerate(values, start=1):
            ok = self.fraction(f"{field}[{i}]", value) and ok
        return ok

    def raise_if_any(self) -> None:
        """Raise a single ``ValidationError`` listing every violation."""
        if not self.violations:
            return
        lines = "\n".join(f"  - {v}" for v in self.violations)
        message = (
            f"{self.context} failed validation with "
            f"{len(self.violations)} violation(s):\n{lines}"
        )
        logger.warning(
            f"{self.context} failed validation ({len(self.violations)} violations)"
        )
        raise ValidationError(message, violations=self.violations)


def validate_coordinates(latitude: float, longitude: float) -> Tuple[float, float]:
    """
    Validate geographic coordinates.

    Args:
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees

    Returns:
        Tuple of (latitude, longitude)

    Raises:
        ValidationError: If coordinates are out of range
    """
    if not (-90 <= latitude <= 90):
        raise ValidationError(
            f"Invalid latitude {latitude}: must be between -90 and 90",
            field="latitude",
        )

    if not (-180 <= longitude <= 180):
        raise ValidationError(
            f"Invalid longitude {longitude}: must be between -180 and 180",
            field="longitude",
        )

    return (latitude, longitude)

