"""Loader for line-oriented parameter files.

File syntax::

    # comment
    corpus.dir: /data/corpus
    corpus.files = %corpus.dir%/files.list
    INCLUDE common/defaults.params

- blank lines and lines starting with ``#`` are ignored
- ``key: value`` and ``key=value`` are both accepted; whichever
  separator comes first splits the line
- ``%name%`` is replaced by the value of a previously defined key and
  ``%%`` stands for a literal ``%``
- parameter names cannot contain whitespace, ``:``, ``=`` or ``#``
- ``INCLUDE path`` splices in another file, relative to the including
  file; later definitions override earlier ones

The result is a plain dict; wrap it with Parameters.from_mapping() or
use Parameters.load().
"""

import logging
import re
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from .constants import (
    COMMENT_PREFIX,
    INCLUDE_DIRECTIVE,
    PARAMETER_NAME_PATTERN,
    REFERENCE_MARKER,
)
from .exceptions import ParameterFileError

logger = logging.getLogger(__name__)

_INCLUDE_PATTERN = re.compile(rf"{INCLUDE_DIRECTIVE}\s+(?P<target>.+)")
_REFERENCE_PATTERN = re.compile(r"%%|%(?P<name>[^%\s]+)%")


def _interpolate(value: str, entries: Dict[str, str], source: str, line_number: int) -> str:
    def replace(match: "re.Match[str]") -> str:
        name = match.group("name")
        if name is None:
            return REFERENCE_MARKER
        if name not in entries:
            raise ParameterFileError(source, line_number, f"undefined reference %{name}%")
        return entries[name]

    return _REFERENCE_PATTERN.sub(replace, value)


def _split_assignment(line: str) -> Tuple[str, str]:
    positions = [i for i in (line.find(":"), line.find("=")) if i >= 0]
    if not positions:
        raise ValueError("expected 'key: value' or 'key=value'")
    split = min(positions)
    key, value = line[:split].strip(), line[split + 1:].strip()
    if not key:
        raise ValueError("empty parameter name")
    if not PARAMETER_NAME_PATTERN.fullmatch(key):
        raise ValueError(f"invalid parameter name '{key}'")
    return key, value


def _parse_into(
    text: str,
    entries: Dict[str, str],
    source: str,
    base_dir: Path,
    stack: Tuple[Path, ...],
) -> None:
    for line_number, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue

        include = _INCLUDE_PATTERN.fullmatch(line)
        if include:
            target = Path(_interpolate(include.group("target").strip(), entries, source, line_number))
            if not target.is_absolute():
                target = base_dir / target
            _load_into(target, entries, stack, origin=(source, line_number))
            continue

        try:
            key, value = _split_assignment(line)
        except ValueError as e:
            raise ParameterFileError(source, line_number, f"{e}: {line!r}") from e

        value = _interpolate(value, entries, source, line_number)
        if key in entries and entries[key] != value:
            logger.debug(f"{source}:{line_number}: {key} overrides '{entries[key]}' with '{value}'")
        entries[key] = value


def _load_into(
    path: Path,
    entries: Dict[str, str],
    stack: Tuple[Path, ...],
    origin: Optional[Tuple[str, int]] = None,
) -> None:
    resolved = path.resolve()
    if resolved in stack:
        cycle = " -> ".join(str(p) for p in stack + (resolved,))
        raise ParameterFileError(path, None, f"include cycle: {cycle}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        if origin is not None:
            raise ParameterFileError(origin[0], origin[1], f"cannot include {path}: {e}") from e
        raise ParameterFileError(path, None, f"cannot read parameter file: {e}") from e

    logger.debug(f"Loading parameters from {resolved}")
    _parse_into(text, entries, str(path), resolved.parent, stack + (resolved,))


def parse_parameter_text(text: str, source: str = "<string>", base_dir: Union[str, Path] = ".") -> Dict[str, str]:
    """Parse parameter file syntax from a string.

    Args:
        text: Parameter file contents
        source: Name used in error messages
        base_dir: Directory INCLUDE paths are resolved against

    Returns:
        Flat mapping of parameter names to raw values

    Raises:
        ParameterFileError: On syntax errors, undefined references,
            unreadable includes or include cycles
    """
    entries: Dict[str, str] = {}
    _parse_into(text, entries, source, Path(base_dir), ())
    return entries


def load_parameter_file(path: Union[str, Path]) -> Dict[str, str]:
    """Load a parameter file into a flat mapping.

    Raises:
        ParameterFileError: If the file (or an included one) cannot be
            read or parsed
    """
    entries: Dict[str, str] = {}
    _load_into(Path(path), entries, ())
    return entries
