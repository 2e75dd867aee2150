"""Converters from raw parameter strings to typed values.

A converter decodes the raw string stored under a key. It signals
failure by raising any exception; the store wraps that into a
ParameterConversionException naming the key. Converters never return
None for a value they accept.

Plain callables ``str -> T`` are accepted wherever a Converter is.
"""

import os
import re
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Protocol, Tuple, TypeVar

from ..constants import LIST_SEPARATOR

T_co = TypeVar("T_co", covariant=True)

# Interned string standing in for a symbol
Symbol = str

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


class Converter(Protocol[T_co]):
    """Protocol for raw-string decoders."""

    def decode(self, value: str) -> T_co:
        """Decode a raw parameter string.

        Args:
            value: Raw string as stored in the parameter set

        Returns:
            The decoded value (never None)

        Raises:
            Exception: Any exception if the string cannot be decoded
        """
        ...


def split_list(value: str, separator: str = LIST_SEPARATOR) -> Tuple[str, ...]:
    """Split a list-valued parameter into trimmed, non-empty elements.

    There is no escaping: every separator splits. An empty or
    whitespace-only value yields an empty tuple.
    """
    return tuple(
        piece.strip() for piece in value.split(separator) if piece.strip()
    )


@dataclass(frozen=True)
class StringToInteger:
    """Base-10 integer; rejects floats, hex and embedded whitespace."""

    def decode(self, value: str) -> int:
        if not _INTEGER_PATTERN.fullmatch(value):
            raise ValueError(f"not a base-10 integer: '{value}'")
        return int(value)


@dataclass(frozen=True)
class StringToDouble:
    """Floating point number, as accepted by float()."""

    def decode(self, value: str) -> float:
        return float(value)


@dataclass(frozen=True)
class StrictStringToBoolean:
    """Accepts exactly "true" or "false" (case-sensitive)."""

    def decode(self, value: str) -> bool:
        if value == "true":
            return True
        if value == "false":
            return False
        raise ValueError(f"expected 'true' or 'false', got '{value}'")


@dataclass(frozen=True)
class StringToPath:
    """Path taken literally from the raw string."""

    def decode(self, value: str) -> Path:
        return Path(value)


@dataclass(frozen=True)
class StringToOSPath:
    """Path with both '/' and '\\' rewritten to the local separator.

    Lets a parameter file written on one platform name paths on another.
    """

    def decode(self, value: str) -> Path:
        return Path(value.replace("\\", os.sep).replace("/", os.sep))


@dataclass(frozen=True)
class StringToStringList:
    """Separator-delimited list of trimmed strings."""
    separator: str = LIST_SEPARATOR

    def decode(self, value: str) -> Tuple[str, ...]:
        return split_list(value, self.separator)


@dataclass(frozen=True)
class StringToStringSet:
    """Separator-delimited set of trimmed strings."""
    separator: str = LIST_SEPARATOR

    def decode(self, value: str) -> FrozenSet[str]:
        return frozenset(split_list(value, self.separator))


@dataclass(frozen=True)
class StringToSymbolList:
    """Like StringToStringList, but every element is interned."""
    separator: str = LIST_SEPARATOR

    def decode(self, value: str) -> Tuple[Symbol, ...]:
        return tuple(sys.intern(s) for s in split_list(value, self.separator))


@dataclass(frozen=True)
class StringToSymbolSet:
    """Like StringToStringSet, but every element is interned."""
    separator: str = LIST_SEPARATOR

    def decode(self, value: str) -> FrozenSet[Symbol]:
        return frozenset(sys.intern(s) for s in split_list(value, self.separator))
