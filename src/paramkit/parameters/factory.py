"""Factory for objects whose concrete type is named by a parameter.

A parameter such as ``scorer: f1`` or ``scorer: mypkg.scoring:F1Scorer``
selects behaviour, not just a value. The factory resolves the identifier
to a type, builds it from the same parameter set and checks the result
against the capability the caller expects.

Resolution order for an identifier:
1. an explicit TypeRegistry entry
2. an import by ``module:Symbol`` / ``module.Symbol`` path, unless the
   registry was created with ``allow_imports=False``

Construction order for a resolved class:
1. the class itself, when its constructor takes the parameter set as its
   single argument (annotated as Parameters, or named ``params``)
2. its ``from_parameters(params)`` static or class method

Resolved functions and other non-class callables are factories and are
called with the parameter set directly.

Nothing is cached; every call constructs a new object.
"""

import inspect
import logging
import types
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from ..exceptions import ParameterConversionException, ParameterValidationException
from ..utils.imports import load_symbol

logger = logging.getLogger(__name__)

T = TypeVar("T")

FACTORY_METHOD: str = "from_parameters"
PARAMETER_ARGUMENT_NAMES: Tuple[str, ...] = ("params", "parameters")
RESOLVABLE_TYPE_EXPECTATION: str = "a resolvable type identifier"

_UNION_TYPES = (Union, types.UnionType)


class TypeRegistry:
    """Explicit mapping from type identifiers to types or factory callables.

    Registration normally happens at import time through the
    ``configurable`` decorator on the default registry.

    Example:
        >>> registry = TypeRegistry()
        >>> @registry.register_as("f1")
        ... class F1Scorer:
        ...     def __init__(self, params):
        ...         self.beta = params.get_positive_double("beta")
    """

    def __init__(self, allow_imports: bool = True):
        self.allow_imports = allow_imports
        self._entries: Dict[str, Any] = {}

    def register(self, identifier: str, target: Any) -> None:
        """Register a type or factory callable under an identifier.

        Raises:
            ValueError: If the identifier is empty or already bound to
                a different target
        """
        identifier = identifier.strip()
        if not identifier:
            raise ValueError("Type identifier cannot be empty")
        if not callable(target):
            raise TypeError(f"Registered target for '{identifier}' must be callable")
        existing = self._entries.get(identifier)
        if existing is not None and existing is not target:
            raise ValueError(
                f"Type identifier '{identifier}' already registered to {_qualified_name(existing)}"
            )
        self._entries[identifier] = target

    def register_as(self, identifier: str) -> Callable[[T], T]:
        """Decorator form of register()."""
        def decorator(target: T) -> T:
            self.register(identifier, target)
            return target
        return decorator

    def unregister(self, identifier: str) -> None:
        self._entries.pop(identifier, None)

    def identifiers(self) -> List[str]:
        """Sorted list of registered identifiers."""
        return sorted(self._entries)

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._entries

    def resolve(self, identifier: str) -> Any:
        """Resolve an identifier to a type or factory callable.

        Raises:
            LookupError: If the identifier is not registered and cannot
                be imported (or imports are disabled)
        """
        identifier = identifier.strip()
        if identifier in self._entries:
            return self._entries[identifier]
        if not self.allow_imports:
            raise LookupError(
                f"Unknown type identifier '{identifier}'. Registered: {self.identifiers()}"
            )
        try:
            return load_symbol(identifier)
        except (ValueError, ImportError, AttributeError) as e:
            raise LookupError(f"Cannot resolve type identifier '{identifier}': {e}") from e


default_registry = TypeRegistry()


def configurable(identifier: str) -> Callable[[T], T]:
    """Register a class or factory in the default registry.

    Example:
        >>> @configurable("whitespace")
        ... class WhitespaceTokenizer:
        ...     @classmethod
        ...     def from_parameters(cls, params):
        ...         return cls()
    """
    return default_registry.register_as(identifier)


def _qualified_name(obj: Any) -> str:
    module = getattr(obj, "__module__", None)
    name = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None) or repr(obj)
    return f"{module}.{name}" if module else name


def _type_hints(function: Any) -> Dict[str, Any]:
    try:
        return get_type_hints(function)
    except (NameError, TypeError, AttributeError):
        # Unresolvable forward references fall back to the raw annotations
        return {}


def _is_parameters_annotation(annotation: Any, params_type: type) -> bool:
    if isinstance(annotation, str):
        return annotation.strip("'\"").rpartition(".")[2] == params_type.__name__
    if isinstance(annotation, type):
        return issubclass(params_type, annotation)
    if get_origin(annotation) in _UNION_TYPES:
        return any(
            _is_parameters_annotation(arg, params_type)
            for arg in get_args(annotation)
            if arg is not type(None)
        )
    return False


def _takes_parameters(argument: inspect.Parameter, hints: Dict[str, Any], params_type: type) -> bool:
    annotation = hints.get(argument.name, argument.annotation)
    if annotation is inspect.Parameter.empty or annotation is Any:
        return argument.name in PARAMETER_ARGUMENT_NAMES
    return _is_parameters_annotation(annotation, params_type)


def _accepts_parameters(cls: type, params_type: type) -> bool:
    """Whether cls can be constructed with a parameter set as its only argument.

    The single argument must be annotated with the parameter set's type
    or, when unannotated, be named ``params`` or ``parameters``.
    """
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return False
    try:
        bound = signature.bind(object())
    except TypeError:
        return False
    hints = _type_hints(cls.__init__)
    return all(
        _takes_parameters(signature.parameters[name], hints, params_type)
        for name in bound.arguments
    )


def _construction_path(target: Any, params_type: type) -> Optional[Callable[[Any], Any]]:
    if not isinstance(target, type):
        # Factory functions and closures are called with the parameter set as-is
        return target
    if _accepts_parameters(target, params_type):
        return target
    factory = getattr(target, FACTORY_METHOD, None)
    if factory is not None and callable(factory):
        return factory
    return None


def _resolve_identifier(params, key: str, identifier: str, registry: TypeRegistry) -> Any:
    try:
        return registry.resolve(identifier)
    except LookupError as e:
        raise ParameterConversionException(
            params.full_name(key), identifier, RESOLVABLE_TYPE_EXPECTATION, e
        ) from e


def _instantiate(params, key: str, identifier: str, target: Any, expected: Type[T]) -> T:
    builder = _construction_path(target, type(params))
    if builder is None:
        raise ParameterValidationException(
            params.full_name(key),
            identifier,
            f"{_qualified_name(target)} has neither a {FACTORY_METHOD}(params) factory "
            f"method nor a constructor which takes params",
        )

    # Errors raised while the target configures itself propagate unchanged
    instance = builder(params)

    if not isinstance(instance, expected):
        raise ParameterValidationException(
            params.full_name(key),
            identifier,
            f"Can't cast {_qualified_name(type(instance))} to {_qualified_name(expected)}",
        )
    logger.info(f"Constructed {_qualified_name(type(instance))} for {params.full_name(key)}")
    return instance


def construct_configured_instance(
    params,
    key: str,
    expected: Type[T],
    registry: Optional[TypeRegistry] = None,
) -> T:
    """Build the object whose type identifier is stored under key.

    Args:
        params: Parameter set supplying the identifier and passed on to
            the constructed type
        key: Parameter holding the type identifier
        expected: Type (or runtime-checkable protocol) the result must satisfy
        registry: Registry to resolve identifiers with (default registry if None)

    Returns:
        A newly constructed instance of expected

    Raises:
        MissingRequiredParameter: If key is absent
        ParameterConversionException: If the identifier cannot be resolved
        ParameterValidationException: If the type has no construction path
            or the result does not satisfy expected
    """
    registry = registry if registry is not None else default_registry
    identifier = params.get_string(key).strip()
    target = _resolve_identifier(params, key, identifier, registry)
    return _instantiate(params, key, identifier, target, expected)


def construct_configured_instances(
    params,
    key: str,
    expected: Type[T],
    registry: Optional[TypeRegistry] = None,
) -> Tuple[T, ...]:
    """Build one object per comma-separated identifier under key, in order.

    The first failing identifier aborts the whole list.
    """
    registry = registry if registry is not None else default_registry
    instances = []
    for identifier in params.get_string_list(key):
        target = _resolve_identifier(params, key, identifier, registry)
        instances.append(_instantiate(params, key, identifier, target, expected))
    return tuple(instances)
