"""Immutable, namespaced parameter store with typed accessors.

Parameters wraps a flat mapping of string keys to raw string values.
Every accessor fetches a raw value, decodes it with a converter, checks
it with a validator and reports failures with the fully-qualified key:

    >>> params = Parameters.from_mapping({"model.beta": "0.3", "seed": "7"})
    >>> params.get_positive_integer("seed")
    7
    >>> model = params.copy_namespace("model")
    >>> model.get_probability("beta")
    0.3
    >>> model.full_name("beta")
    'model.beta'

The store is never modified in place. Scoping to a namespace, copying
and loading all produce new instances.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from types import MappingProxyType
import logging
from typing import (
    Any,
    Callable,
    FrozenSet,
    Iterable,
    KeysView,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from ..constants import (
    DUMP_TIMESTAMP_FORMAT,
    NAMESPACE_SEPARATOR,
    OS_FILEPATH_CONVERSION_PARAM,
    PARAMETER_NAME_PATTERN,
    REFERENCE_MARKER,
)
from ..exceptions import (
    ConverterContractError,
    InvalidConfiguration,
    InvalidEnumeratedPropertyException,
    MissingRequiredParameter,
    ParameterConversionException,
    ParameterException,
    ParameterValidationException,
    ValidationError,
)
from .converters import (
    Converter,
    StrictStringToBoolean,
    StringToDouble,
    StringToInteger,
    StringToOSPath,
    StringToPath,
    StringToStringList,
    StringToStringSet,
    StringToSymbolList,
    StringToSymbolSet,
    Symbol,
    split_list,
)
from .validators import (
    AlwaysValid,
    And,
    FileExists,
    IsDirectory,
    IsFile,
    IsInRange,
    IsNonNegative,
    IsPositive,
    Validator,
)
from . import factory

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class Parameters:
    """Immutable set of raw string parameters within a namespace.

    Keys are non-empty and free of whitespace, ``:``, ``=`` and ``#``.
    Values are single-line strings without surrounding whitespace, the
    same shape the loader produces.

    The namespace is the sequence of segments this set was scoped
    through; it only affects the names printed in errors and dumps,
    never lookup.

    Looking up a missing key through any required accessor raises
    MissingRequiredParameter. The get_optional_* accessors return None
    instead.

    Attributes:
        entries: Read-only mapping of local key to raw value
        namespace: Namespace segments, outermost first
    """
    entries: Mapping[str, str] = field(default_factory=dict)
    namespace: Tuple[str, ...] = ()

    def __post_init__(self):
        """Validate and freeze entries and namespace."""
        frozen = {}
        for key, value in dict(self.entries).items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise InvalidConfiguration(
                    f"Parameter keys and values must be strings, got {key!r}: {value!r}"
                )
            if not key:
                raise InvalidConfiguration(f"Parameter keys cannot be empty (value {value!r})")
            if not PARAMETER_NAME_PATTERN.fullmatch(key):
                raise InvalidConfiguration(
                    f"Invalid parameter key {key!r}: keys cannot contain whitespace, ':', '=' or '#'"
                )
            if value != value.strip() or len(value.splitlines()) > 1:
                raise InvalidConfiguration(
                    f"Invalid value for parameter {key}: {value!r} has surrounding whitespace "
                    f"or a line break"
                )
            frozen[key] = value

        namespace = tuple(self.namespace)
        for segment in namespace:
            if not isinstance(segment, str) or not segment:
                raise InvalidConfiguration(f"Invalid namespace segment {segment!r} in {namespace}")

        object.__setattr__(self, 'entries', MappingProxyType(frozen))
        object.__setattr__(self, 'namespace', namespace)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_mapping(cls, raw: Mapping[str, str]) -> "Parameters":
        """Create a root-namespace parameter set from a flat mapping.

        Raises:
            InvalidConfiguration: On non-string keys or values, keys that
                are empty or contain whitespace, ':', '=' or '#', and
                values with surrounding whitespace or line breaks
        """
        return cls(entries=raw)

    @classmethod
    def from_properties(cls, properties: Mapping[Any, Any]) -> "Parameters":
        """Create a parameter set by stringifying every key and value.

        Raises:
            InvalidConfiguration: If two keys share a string form, or a
                key or value is None
        """
        converted = {}
        for key, value in properties.items():
            if key is None or value is None:
                raise InvalidConfiguration(f"Properties may not contain None: {key!r}: {value!r}")
            str_key = str(key)
            if str_key in converted:
                raise InvalidConfiguration(f"Duplicate property key after conversion: {str_key}")
            converted[str_key] = str(value)
        return cls.from_mapping(converted)

    @classmethod
    def load(cls, path: PathLike) -> "Parameters":
        """Load a parameter file (see paramkit.loader for the syntax)."""
        from ..loader import load_parameter_file
        return cls.from_mapping(load_parameter_file(path))

    def copy(self) -> "Parameters":
        """Return an equal, independent parameter set."""
        return Parameters(dict(self.entries), self.namespace)

    # ------------------------------------------------------------------
    # Presence, raw values and names
    # ------------------------------------------------------------------

    def is_present(self, key: str) -> bool:
        """True iff key is assigned a value."""
        return key in self.entries

    def __contains__(self, key: str) -> bool:
        return self.is_present(key)

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> KeysView[str]:
        return self.entries.keys()

    def get_string(self, key: str) -> str:
        """Get the raw string value of a parameter.

        Raises:
            ValueError: If key is empty
            MissingRequiredParameter: If key is absent
        """
        if not key:
            raise ValueError("Parameter name cannot be empty")
        try:
            return self.entries[key]
        except KeyError:
            raise MissingRequiredParameter(self.full_name(key)) from None

    def full_name(self, key: str) -> str:
        """Fully-qualified name of key, for diagnostics only."""
        if not self.namespace:
            return key
        return NAMESPACE_SEPARATOR.join(self.namespace + (key,))

    # ------------------------------------------------------------------
    # Namespaces
    # ------------------------------------------------------------------

    def is_namespace_present(self, namespace: str) -> bool:
        """True if any key starts with ``namespace + "."``."""
        if not namespace:
            raise ValueError("Namespace cannot be empty")
        prefix = namespace + NAMESPACE_SEPARATOR
        return any(key.startswith(prefix) for key in self.entries)

    def copy_namespace(self, namespace: str) -> "Parameters":
        """New parameter set holding only the keys under namespace.

        The ``namespace.`` prefix is stripped from each retained key and
        namespace is appended to the namespace path. If no key is under
        the namespace the result is empty; use is_namespace_present()
        first to tell "absent" from "present but empty".
        """
        if not namespace:
            raise ValueError("Namespace cannot be empty")
        prefix = namespace + NAMESPACE_SEPARATOR
        scoped = {
            key[len(prefix):]: value
            for key, value in self.entries.items()
            if key.startswith(prefix) and len(key) > len(prefix)
        }
        logger.debug(
            f"Scoped {self.full_name(namespace)}: {len(scoped)} of {len(self.entries)} parameters"
        )
        return Parameters(scoped, self.namespace + (namespace,))

    def copy_namespace_if_present(self, namespace: str) -> "Parameters":
        """copy_namespace() if the namespace is present, else copy()."""
        if self.is_namespace_present(namespace):
            return self.copy_namespace(namespace)
        return self.copy()

    # ------------------------------------------------------------------
    # Dumping
    # ------------------------------------------------------------------

    def dump(self, include_timestamp: bool = True, include_namespace_prefix: bool = True) -> str:
        """Serialize as sorted ``key: value`` lines.

        Args:
            include_timestamp: Start with a ``#YYYY-MM-DD HH:MM:SS`` comment
            include_namespace_prefix: Print fully-qualified keys instead
                of keys relative to this namespace

        Returns:
            One line per parameter, each terminated by a newline. Literal
            ``%`` in values is written as ``%%`` so the text loads back
            unchanged.
        """
        lines = []
        if include_timestamp:
            lines.append(f"#{datetime.now().strftime(DUMP_TIMESTAMP_FORMAT)}")
        printed = sorted(
            (
                self.full_name(key) if include_namespace_prefix else key,
                value.replace(REFERENCE_MARKER, REFERENCE_MARKER * 2),
            )
            for key, value in self.entries.items()
        )
        lines.extend(f"{key}: {value}" for key, value in printed)
        return "".join(line + "\n" for line in lines)

    def dump_without_namespace_prefix(self) -> str:
        return self.dump(True, False)

    # ------------------------------------------------------------------
    # Conversion & validation pipeline
    # ------------------------------------------------------------------

    def _convert_and_validate(
        self,
        key: str,
        value: str,
        converter: Union[Converter[T], Callable[[str], T]],
        validator: Validator[T],
        expectation: str,
    ) -> T:
        decode = getattr(converter, "decode", converter)
        try:
            ret = decode(value)
        except Exception as e:
            raise ParameterConversionException(self.full_name(key), value, expectation, e) from e

        if ret is None:
            raise ConverterContractError(
                f"Converter {converter!r} returned None for {self.full_name(key)}='{value}'; "
                f"converters may not return None for non-null input"
            )

        try:
            validator.validate(ret)
        except ValidationError as e:
            raise ParameterValidationException(self.full_name(key), value, e) from e
        return ret

    def get(
        self,
        key: str,
        converter: Union[Converter[T], Callable[[str], T]],
        validator: Validator[T],
        expectation: str,
    ) -> T:
        """Fetch key, decode it with converter and check it with validator.

        Args:
            key: Parameter name, relative to this namespace
            converter: Decoder for the raw string
            validator: Check applied to the decoded value
            expectation: What we expected to see, for error messages,
                e.g. "integer" or "comma-separated list of strings"

        Returns:
            The decoded, validated value

        Raises:
            MissingRequiredParameter: If key is absent
            ParameterConversionException: If decoding fails
            ParameterValidationException: If the validator rejects the value
            ConverterContractError: If the converter returns None
        """
        value = self.get_string(key)
        return self._convert_and_validate(key, value, converter, validator, expectation)

    def get_list(
        self,
        key: str,
        converter: Union[Converter[T], Callable[[str], T]],
        validator: Validator[T],
        expectation: str,
    ) -> Tuple[T, ...]:
        """Like get(), applied to each element of a comma-separated value.

        Elements are trimmed and empty elements dropped; the first element
        that fails aborts the whole list, and the error carries that
        element's text.
        """
        return tuple(
            self._convert_and_validate(key, element, converter, validator, expectation)
            for element in split_list(self.get_string(key))
        )

    def optional(self, key: str, accessor: Callable[[str], T]) -> Optional[T]:
        """Run accessor(key) if key is present, else return None.

        Example:
            >>> params.optional("max_iterations", params.get_positive_integer)
        """
        if self.is_present(key):
            return accessor(key)
        return None

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def get_boolean(self, key: str) -> bool:
        """Gets a "true"/"false" parameter."""
        return self.get(key, StrictStringToBoolean(), AlwaysValid(), "boolean")

    def get_integer(self, key: str) -> int:
        return self.get(key, StringToInteger(), AlwaysValid(), "integer")

    def get_positive_integer(self, key: str) -> int:
        return self.get(key, StringToInteger(), IsPositive(), "positive integer")

    def get_non_negative_integer(self, key: str) -> int:
        return self.get(key, StringToInteger(), IsNonNegative(), "non-negative integer")

    def get_double(self, key: str) -> float:
        return self.get(key, StringToDouble(), AlwaysValid(), "double")

    def get_positive_double(self, key: str) -> float:
        return self.get(key, StringToDouble(), IsPositive(), "positive double")

    def get_non_negative_double(self, key: str) -> float:
        return self.get(key, StringToDouble(), IsNonNegative(), "non-negative double")

    def get_probability(self, key: str) -> float:
        """Gets a double between 0.0 and 1.0, inclusive."""
        return self.get(key, StringToDouble(), IsInRange(0.0, 1.0), "probability")

    # ------------------------------------------------------------------
    # Lists and sets
    # ------------------------------------------------------------------

    def get_integer_list(self, key: str) -> Tuple[int, ...]:
        return self.get_list(key, StringToInteger(), AlwaysValid(), "integer")

    def get_positive_integer_list(self, key: str) -> Tuple[int, ...]:
        return self.get_list(key, StringToInteger(), IsPositive(), "positive integer")

    def get_positive_double_list(self, key: str) -> Tuple[float, ...]:
        return self.get_list(key, StringToDouble(), IsPositive(), "positive double")

    def get_non_negative_double_list(self, key: str) -> Tuple[float, ...]:
        return self.get_list(key, StringToDouble(), IsNonNegative(), "non-negative double")

    def get_string_list(self, key: str) -> Tuple[str, ...]:
        """Gets a ,-separated list of strings."""
        return self.get(key, StringToStringList(), AlwaysValid(), "comma-separated list of strings")

    def get_string_set(self, key: str) -> FrozenSet[str]:
        """Gets a ,-separated set of strings."""
        return self.get(key, StringToStringSet(), AlwaysValid(), "comma-separated list of strings")

    def get_symbol_list(self, key: str) -> Tuple[Symbol, ...]:
        return self.get(key, StringToSymbolList(), AlwaysValid(), "comma-separated list of strings")

    def get_symbol_set(self, key: str) -> FrozenSet[Symbol]:
        return self.get(key, StringToSymbolSet(), AlwaysValid(), "comma-separated list of strings")

    # ------------------------------------------------------------------
    # Enumerations
    # ------------------------------------------------------------------

    def get_string_of(self, key: str, possible_values: Iterable[str]) -> str:
        """Gets a parameter whose value must be one of possible_values.

        Raises:
            ValueError: If possible_values is empty
            InvalidEnumeratedPropertyException: If the value is not allowed
        """
        allowed = list(possible_values)
        if not allowed:
            raise ValueError("possible_values cannot be empty")
        value = self.get_string(key)
        if value not in allowed:
            raise InvalidEnumeratedPropertyException(self.full_name(key), value, allowed)
        return value

    def get_mapped(self, key: str, possible_values: Mapping[str, T]) -> T:
        """Looks up the parameter's value as a key in possible_values.

        Raises:
            ValueError: If possible_values is empty
            InvalidEnumeratedPropertyException: If the value is not a key
                of possible_values
        """
        if not possible_values:
            raise ValueError("possible_values cannot be empty")
        value = self.get_string(key)
        if value not in possible_values:
            raise InvalidEnumeratedPropertyException(
                self.full_name(key), value, possible_values.keys()
            )
        return possible_values[value]

    def get_enum(self, key: str, enum_cls: Type[E]) -> E:
        """Gets an enum member by name."""
        return self.get_mapped(key, enum_cls.__members__)

    def get_enum_list(self, key: str, enum_cls: Type[E]) -> Tuple[E, ...]:
        """Gets a comma-separated list of enum members by name."""
        members = enum_cls.__members__
        ret = []
        for name in self.get_string_list(key):
            if name not in members:
                raise InvalidEnumeratedPropertyException(self.full_name(key), name, members.keys())
            ret.append(members[name])
        return tuple(ret)

    # ------------------------------------------------------------------
    # Files and directories
    # ------------------------------------------------------------------

    def _path_converter(self) -> Converter[Path]:
        if self.is_present(OS_FILEPATH_CONVERSION_PARAM) and self.get_boolean(
            OS_FILEPATH_CONVERSION_PARAM
        ):
            return StringToOSPath()
        return StringToPath()

    def get_existing_file(self, key: str) -> Path:
        """Gets a file, which is required to exist."""
        return self.get(key, self._path_converter(), And(FileExists(), IsFile()), "existing file")

    def get_existing_directory(self, key: str) -> Path:
        """Gets a directory which already exists."""
        return self.get(
            key, self._path_converter(), And(FileExists(), IsDirectory()), "existing directory"
        )

    def get_existing_file_or_directory(self, key: str) -> Path:
        return self.get(key, self._path_converter(), FileExists(), "existing file or directory")

    def get_file_or_directory(self, key: str) -> Path:
        """Gets a path without checking whether it exists.

        Prefer a more specific accessor when possible.
        """
        return self.get(key, self._path_converter(), AlwaysValid(), "file or directory")

    def get_possibly_nonexistent_file(self, key: str) -> Path:
        return self.get(key, self._path_converter(), AlwaysValid(), "file")

    def get_existing_directories(self, key: str) -> Tuple[Path, ...]:
        """Gets a (possibly empty) list of directories which must all exist."""
        return self.get_list(
            key, self._path_converter(), And(FileExists(), IsDirectory()), "existing directory"
        )

    def _first_existing(self, key: str, predicate: Callable[[Path], bool], kind: str) -> Path:
        converter = self._path_converter()
        for candidate in split_list(self.get_string(key)):
            path = converter.decode(candidate)
            if predicate(path):
                return path
        raise ParameterConversionException(
            self.full_name(key),
            self.get_string(key),
            f"existing {kind}",
            FileNotFoundError(f"No provided path is an existing {kind}"),
        )

    def get_first_existing_file(self, key: str) -> Path:
        """First path of a comma-separated list that is an existing file."""
        return self._first_existing(key, Path.is_file, "file")

    def get_first_existing_directory(self, key: str) -> Path:
        """First path of a comma-separated list that is an existing directory."""
        return self._first_existing(key, Path.is_dir, "directory")

    def _make_directories(self, key: str, path: Path, directory: Path) -> None:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ParameterValidationException(
                self.full_name(key), str(path), f"Cannot create directory {directory}: {e}"
            ) from e

    def get_creatable_file(self, key: str) -> Path:
        """Gets a file path that is either an existing file or can be created.

        The parent directory is created if necessary. Fails only if a
        directory already exists at the path.
        """
        path = self.get(key, self._path_converter(), AlwaysValid(), "creatable file")
        if path.exists():
            if path.is_dir():
                raise ParameterValidationException(
                    self.full_name(key), str(path),
                    "Requested a file, but directory exists with that filename",
                )
        else:
            self._make_directories(key, path, path.absolute().parent)
        return path

    def get_creatable_directory(self, key: str) -> Path:
        """Gets a directory, creating it (and its parents) if necessary.

        Fails only if something other than a directory exists at the path.
        """
        path = self.get(key, self._path_converter(), AlwaysValid(), "creatable directory")
        if path.exists():
            if not path.is_dir():
                raise ParameterValidationException(
                    self.full_name(key), str(path),
                    "Requested a directory, but a file exists with that filename",
                )
        else:
            self._make_directories(key, path, path)
        return path

    def get_and_make_directory(self, key: str) -> Path:
        """Like get_creatable_directory(), but returns an absolute path."""
        return self.get_creatable_directory(key).absolute()

    def get_empty_directory(self, key: str) -> Path:
        """Gets a creatable directory which must contain no entries."""
        path = self.get_creatable_directory(key)
        count = sum(1 for _ in path.iterdir())
        if count:
            raise ParameterValidationException(
                self.full_name(key), self.get_string(key),
                f"Requested an empty directory, but directory contains {count} files.",
            )
        return path

    def get_existing_file_relative_to(self, root: PathLike, key: str) -> Path:
        """Gets an existing file whose path is relative to root.

        Raises:
            ParameterException: If root does not exist
            ParameterValidationException: If the resolved file does not exist
        """
        root = Path(root)
        if not root.exists():
            raise ParameterException(
                f"Cannot resolve parameter {self.full_name(key)} relative to "
                f"non-existent directory {root}"
            )
        path = root / self._path_converter().decode(self.get_string(key))
        if not path.exists():
            raise ParameterValidationException(
                self.full_name(key), str(path.absolute()),
                "Requested existing file, but the file does not exist",
            )
        if not path.is_file():
            raise ParameterValidationException(
                self.full_name(key), str(path.absolute()),
                "Requested existing file, but the path is not a file",
            )
        return path

    def get_sub_parameters(self, key: str) -> "Parameters":
        """Loads the parameter file named by key as a new root parameter set."""
        return Parameters.load(self.get_existing_file(key))

    # ------------------------------------------------------------------
    # Optional variants
    # ------------------------------------------------------------------

    def get_optional_string(self, key: str) -> Optional[str]:
        return self.optional(key, self.get_string)

    def get_optional_boolean(self, key: str) -> Optional[bool]:
        return self.optional(key, self.get_boolean)

    def get_optional_integer(self, key: str) -> Optional[int]:
        return self.optional(key, self.get_integer)

    def get_optional_positive_double(self, key: str) -> Optional[float]:
        return self.optional(key, self.get_positive_double)

    def get_optional_string_list(self, key: str) -> Optional[Tuple[str, ...]]:
        return self.optional(key, self.get_string_list)

    def get_optional_existing_file(self, key: str) -> Optional[Path]:
        return self.optional(key, self.get_existing_file)

    def get_optional_existing_directory(self, key: str) -> Optional[Path]:
        return self.optional(key, self.get_existing_directory)

    def get_optional_creatable_file(self, key: str) -> Optional[Path]:
        return self.optional(key, self.get_creatable_file)

    # ------------------------------------------------------------------
    # Configured instances
    # ------------------------------------------------------------------

    def get_configured_instance(
        self,
        key: str,
        expected: Type[T],
        registry: Optional["factory.TypeRegistry"] = None,
    ) -> T:
        """Build the object whose type identifier is stored under key.

        See paramkit.parameters.factory for resolution and construction rules.
        """
        return factory.construct_configured_instance(self, key, expected, registry)

    def get_configured_instances(
        self,
        key: str,
        expected: Type[T],
        registry: Optional["factory.TypeRegistry"] = None,
    ) -> Tuple[T, ...]:
        return factory.construct_configured_instances(self, key, expected, registry)

    def get_optional_configured_instance(
        self,
        key: str,
        expected: Type[T],
        registry: Optional["factory.TypeRegistry"] = None,
    ) -> Optional[T]:
        if self.is_present(key):
            return self.get_configured_instance(key, expected, registry)
        return None

    # ------------------------------------------------------------------
    # Cross-parameter checks
    # ------------------------------------------------------------------

    def assert_at_least_one_defined(self, first: str, second: str) -> None:
        """Raises ParameterException if neither parameter is defined."""
        if not self.is_present(first) and not self.is_present(second):
            raise ParameterException(
                f"At least one of {self.full_name(first)} and {self.full_name(second)} "
                f"must be defined."
            )

    def __hash__(self) -> int:
        return hash((frozenset(self.entries.items()), self.namespace))

    def __repr__(self) -> str:
        """Compact representation for debugging."""
        where = NAMESPACE_SEPARATOR.join(self.namespace) or "<root>"
        preview = sorted(self.entries)[:3]
        if len(self.entries) > 3:
            preview.append("...")
        return f"Parameters({where}: {len(self.entries)} entries{preview})"
