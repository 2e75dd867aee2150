"""Public API for paramkit.

This module provides the complete public API: the parameter store, its
building blocks, the configured-instance factory, the file loader and
the error taxonomy.
"""

# Store
from .parameters import (
    Parameters,
    # Converters
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
    # Validators
    Validator,
    AlwaysValid,
    IsPositive,
    IsNonNegative,
    IsInRange,
    FileExists,
    IsFile,
    IsDirectory,
    And,
    # Factory
    TypeRegistry,
    default_registry,
    configurable,
    construct_configured_instance,
    construct_configured_instances,
)

# Errors
from .exceptions import (
    ParameterException,
    InvalidConfiguration,
    MissingRequiredParameter,
    ParameterConversionException,
    ParameterValidationException,
    InvalidEnumeratedPropertyException,
    ParameterFileError,
    ValidationError,
    ConverterContractError,
)

# Loading
from .loader import load_parameter_file, parse_parameter_text

# Constants
from .constants import OS_FILEPATH_CONVERSION_PARAM

# Import utilities
from .utils.imports import load_symbol

# Version
try:
    from importlib.metadata import PackageNotFoundError, version
    __version__ = version("paramkit")
except PackageNotFoundError:
    __version__ = "0.1.0"

# Public API Export List
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

    # Errors
    "ParameterException",
    "InvalidConfiguration",
    "MissingRequiredParameter",
    "ParameterConversionException",
    "ParameterValidationException",
    "InvalidEnumeratedPropertyException",
    "ParameterFileError",
    "ValidationError",
    "ConverterContractError",

    # Loading
    "load_parameter_file",
    "parse_parameter_text",

    # Constants
    "OS_FILEPATH_CONVERSION_PARAM",

    # Utilities
    "load_symbol",

    # Version
    "__version__",
]
