"""Parameter system for paramkit.

This module provides the immutable parameter store, the converter and
validator building blocks its accessors are made of, and the factory for
configuration-selected objects.
"""

from .store import Parameters
from .converters import (
    Converter,
    Symbol,
    StringToInteger,
    StringToDouble,
    StrictStringToBoolean,
    StringToPath,
    StringToOSPath,
    StringToStringList,
    StringToStringSet,
    StringToSymbolList,
    StringToSymbolSet,
    split_list,
)
from .validators import (
    Validator,
    AlwaysValid,
    IsPositive,
    IsNonNegative,
    IsInRange,
    FileExists,
    IsFile,
    IsDirectory,
    And,
)
from .factory import (
    TypeRegistry,
    default_registry,
    configurable,
    construct_configured_instance,
    construct_configured_instances,
)

__all__ = [
    # Store
    "Parameters",
    # Converters
    "Converter",
    "Symbol",
    "StringToInteger",
    "StringToDouble",
    "StrictStringToBoolean",
    "StringToPath",
    "StringToOSPath",
    "StringToStringList",
    "StringToStringSet",
    "StringToSymbolList",
    "StringToSymbolSet",
    "split_list",
    # Validators
    "Validator",
    "AlwaysValid",
    "IsPositive",
    "IsNonNegative",
    "IsInRange",
    "FileExists",
    "IsFile",
    "IsDirectory",
    "And",
    # Factory
    "TypeRegistry",
    "default_registry",
    "configurable",
    "construct_configured_instance",
    "construct_configured_instances",
]
