from __future__ import annotations

import types
from typing import Any, TypeGuard

_SCALAR_TYPES: tuple[type[Any], ...] = (bool, int, float, complex, str, bytes)


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_primitive_type(candidate: object) -> bool:
    """Return true when candidate cannot be built by the container.

    Builtin classes (``int``, ``str``, ``list`` ...) and anything that is not a
    runtime class (generic aliases, ``Callable``, ``Literal`` ...) are primitive.

    Args:
        candidate: Declared parameter type to check.

    """
    # typing.Any is a class on Python 3.11+.
    if candidate is Any or not is_runtime_class(candidate):
        return True
    return candidate.__module__ == "builtins"


def is_service_object(value: object) -> bool:
    """Return true when value can be cached and proxied as a service instance.

    ``None`` and builtin scalars are rejected.

    Args:
        value: Value returned by a factory or a container lookup.

    """
    if value is None:
        return False
    return not isinstance(value, _SCALAR_TYPES)


__all__ = ["is_primitive_type", "is_runtime_class", "is_service_object"]
