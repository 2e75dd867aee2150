"""Validators for decoded parameter values.

A validator accepts a decoded value silently or raises ValidationError
with a human-readable reason. Validators compose with And: every one of
them must accept, and the first rejection is reported.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, Tuple, TypeVar

from ..exceptions import ValidationError

T_contra = TypeVar("T_contra", contravariant=True)


class Validator(Protocol[T_contra]):
    """Protocol for value checks."""

    def validate(self, value: T_contra) -> None:
        """Check a decoded value.

        Args:
            value: The decoded value

        Raises:
            ValidationError: If the value is rejected
        """
        ...


@dataclass(frozen=True)
class AlwaysValid:
    """Accepts every value."""

    def validate(self, value: Any) -> None:
        return None


@dataclass(frozen=True)
class IsPositive:
    """Requires value > 0."""

    def validate(self, value: Any) -> None:
        if not value > 0:
            raise ValidationError(f"{value} is not positive")


@dataclass(frozen=True)
class IsNonNegative:
    """Requires value >= 0."""

    def validate(self, value: Any) -> None:
        if not value >= 0:
            raise ValidationError(f"{value} is negative")


@dataclass(frozen=True)
class IsInRange:
    """Requires lower <= value <= upper (closed interval).

    Attributes:
        lower: Inclusive lower bound
        upper: Inclusive upper bound
    """
    lower: float
    upper: float

    def __post_init__(self):
        if self.lower > self.upper:
            raise ValueError(f"Empty range: lower ({self.lower}) > upper ({self.upper})")

    def validate(self, value: Any) -> None:
        # NaN fails both comparisons and is rejected
        if not (self.lower <= value <= self.upper):
            raise ValidationError(f"{value} is not in range [{self.lower}, {self.upper}]")


@dataclass(frozen=True)
class FileExists:
    """Requires the path to exist, as a file or a directory."""

    def validate(self, value: Path) -> None:
        if not Path(value).exists():
            raise ValidationError(f"{value} does not exist")


@dataclass(frozen=True)
class IsFile:
    """Requires the path to be an existing regular file."""

    def validate(self, value: Path) -> None:
        if not Path(value).is_file():
            raise ValidationError(f"{value} is not a file")


@dataclass(frozen=True)
class IsDirectory:
    """Requires the path to be an existing directory."""

    def validate(self, value: Path) -> None:
        if not Path(value).is_dir():
            raise ValidationError(f"{value} is not a directory")


class And:
    """Conjunction of validators, checked in order."""

    def __init__(self, *validators: Validator):
        if not validators:
            raise ValueError("And requires at least one validator")
        self.validators: Tuple[Validator, ...] = tuple(validators)

    def validate(self, value: Any) -> None:
        for validator in self.validators:
            validator.validate(value)

    def __repr__(self) -> str:
        inner = ", ".join(repr(v) for v in self.validators)
        return f"And({inner})"
