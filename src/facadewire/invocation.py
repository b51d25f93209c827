from __future__ import annotations

import inspect
from collections.abc import Callable, Coroutine, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from facadewire.exceptions import FacadeWireInvocationError, FacadeWireUndefinedMethodError

if TYPE_CHECKING:
    from typing_extensions import Self


@dataclass(frozen=True, slots=True)
class MethodHandle:
    """Invocable handle for one public method of a resolved instance."""

    facade: str
    name: str
    target: Any
    method: Callable[..., Any]

    @classmethod
    def build(cls, *, facade: str, target: Any, name: str) -> Self:
        """Verify that ``target`` exposes a callable ``name`` and bind a handle to it.

        Raises:
            FacadeWireUndefinedMethodError: If the attribute is missing, private
                or not callable.

        """
        if name.startswith("_"):
            raise FacadeWireUndefinedMethodError(facade, name)
        try:
            method = getattr(target, name)
        except AttributeError:
            raise FacadeWireUndefinedMethodError(facade, name) from None
        if not callable(method):
            raise FacadeWireUndefinedMethodError(facade, name)
        return cls(facade=facade, name=name, target=target, method=method)

    def invoke(self, args: Sequence[Any] = (), kwargs: Mapping[str, Any] | None = None) -> Any:
        """Call the method, wrapping any failure in ``FacadeWireInvocationError``.

        A coroutine result is returned as a coroutine that applies the same
        wrapping when awaited.
        """
        try:
            result = self.method(*args, **(kwargs or {}))
        except Exception as error:
            raise FacadeWireInvocationError(self.facade, self.name, error) from error
        if inspect.iscoroutine(result):
            return self._await(result)
        return result

    async def _await(self, coroutine: Coroutine[Any, Any, Any]) -> Any:
        try:
            return await coroutine
        except Exception as error:
            raise FacadeWireInvocationError(self.facade, self.name, error) from error


def has_public_method(target: Any, name: str) -> bool:
    """Return whether ``target`` exposes a callable public attribute ``name``."""
    if name.startswith("_"):
        return False
    return callable(getattr(target, name, None))


@dataclass(slots=True)
class ResolvedFacade:
    """A resolved facade instance together with its method handle cache."""

    facade: str
    instance: Any
    handles: dict[str, MethodHandle] = field(default_factory=dict)

    def handle(self, name: str) -> MethodHandle:
        """Return the cached handle for ``name``, building and caching it on first use."""
        handle = self.handles.get(name)
        if handle is None:
            handle = MethodHandle.build(facade=self.facade, target=self.instance, name=name)
            self.handles[name] = handle
        return handle


__all__ = ["MethodHandle", "ResolvedFacade", "has_public_method"]
