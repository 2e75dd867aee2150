"""paramkit: namespaced, typed, validated parameters.

This package provides an immutable parameter store with typed accessors,
namespace scoping, and a factory for objects whose type is chosen by the
parameters themselves.
"""

# Export the public API
from .api import *  # noqa: F403, F401
from .api import __all__, __version__  # noqa: F401
