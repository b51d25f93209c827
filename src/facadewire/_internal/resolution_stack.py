from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from facadewire.exceptions import FacadeWireCircularDependencyError

# Immutable tuples keep each asyncio task's copy of the stack isolated.
_resolution_stack: ContextVar[tuple[Any, ...]] = ContextVar(
    "facadewire_resolution_stack",
    default=(),
)


def current_resolution_stack() -> tuple[Any, ...]:
    """Return the abstract keys currently being built, outermost first."""
    return _resolution_stack.get()


@contextmanager
def track_resolution(key: Any) -> Iterator[None]:
    """Push ``key`` on the resolution stack for the duration of the block.

    Raises:
        FacadeWireCircularDependencyError: If ``key`` is already being built.

    """
    stack = _resolution_stack.get()
    if _contains(stack, key):
        raise FacadeWireCircularDependencyError((*stack, key))
    token = _resolution_stack.set((*stack, key))
    try:
        yield
    finally:
        _resolution_stack.reset(token)


def _contains(stack: tuple[Any, ...], key: Any) -> bool:
    try:
        return key in stack
    except TypeError:
        return any(item is key for item in stack)
