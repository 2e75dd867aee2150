"""Error taxonomy for parameter resolution.

Every user-facing failure is a ParameterException carrying the
fully-qualified key and, where there is one, the offending raw value.
ValidationError is what individual validators raise; the store wraps it
into a ParameterValidationException with the key attached.
"""

from typing import Any, Iterable, Optional, Tuple


class ParameterException(Exception):
    """Base class for all parameter errors.

    Also raised directly for cross-parameter constraint violations,
    e.g. "at least one of A and B must be defined".
    """


class InvalidConfiguration(ParameterException):
    """The raw mapping handed to the store violates its invariants."""


class MissingRequiredParameter(ParameterException):
    """A mandatory key is absent."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Missing required parameter: {key}")


class ParameterConversionException(ParameterException):
    """A raw value could not be decoded into the requested type.

    Attributes:
        key: Fully-qualified parameter name
        value: Raw string that failed to decode
        expectation: What the accessor expected, e.g. "positive integer"
        cause: Underlying decode failure, if any
    """

    def __init__(
        self,
        key: str,
        value: str,
        expectation: str,
        cause: Optional[BaseException] = None,
    ):
        self.key = key
        self.value = value
        self.expectation = expectation
        self.cause = cause
        message = f"Parameter {key}: could not convert '{value}' to {expectation}"
        if cause is not None:
            message += f" ({cause})"
        super().__init__(message)


class ParameterValidationException(ParameterException):
    """A decoded value was rejected by a validator."""

    def __init__(self, key: str, value: str, reason: Any):
        self.key = key
        self.value = value
        self.reason = str(reason)
        super().__init__(f"Parameter {key}: invalid value '{value}': {self.reason}")


class InvalidEnumeratedPropertyException(ParameterException):
    """A value is not among an explicit set of allowed values."""

    def __init__(self, key: str, value: str, allowed: Iterable[str]):
        self.key = key
        self.value = value
        self.allowed: Tuple[str, ...] = tuple(allowed)
        super().__init__(
            f"Parameter {key}: '{value}' is not one of the allowed values "
            f"{list(self.allowed)}"
        )


class ParameterFileError(ParameterException):
    """A parameter file could not be parsed."""

    def __init__(self, path: Any, line_number: Optional[int], message: str):
        self.path = str(path)
        self.line_number = line_number
        location = self.path if line_number is None else f"{self.path}:{line_number}"
        super().__init__(f"{location}: {message}")


class ValidationError(Exception):
    """Raised by a Validator to reject a decoded value."""


class ConverterContractError(RuntimeError):
    """A converter returned None for a present value.

    Signals a bug in the converter rather than in the user's parameters,
    and is therefore not a ParameterException.
    """
