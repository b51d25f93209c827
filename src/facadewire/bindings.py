from __future__ import annotations

import functools
import types
from typing import Any

from facadewire.exceptions import FacadeWireUnknownFacadeError

_MOCK_FACTORY_TYPES: tuple[type[Any], ...] = (
    types.FunctionType,
    types.MethodType,
    types.BuiltinFunctionType,
    functools.partial,
)


def facade_name(facade: Any) -> str:
    """Return the display name used for a facade class in errors and logs."""
    module = getattr(facade, "__module__", None)
    qualname = getattr(facade, "__qualname__", None)
    if module and qualname:
        return f"{module}.{qualname}"
    return repr(facade)


def is_mock_factory(mock: object) -> bool:
    """Return true when a mock is a factory to call rather than an instance to return.

    Functions, lambdas, bound methods and ``functools.partial`` objects are
    factories. Any other object, including callable test doubles such as
    ``unittest.mock.Mock``, is returned as-is.
    """
    return isinstance(mock, _MOCK_FACTORY_TYPES)


class FacadeBindingRegistry:
    """Map facade classes to service ids and hold per-facade mock overrides.

    One service id per facade: binding an already bound facade overwrites the
    previous id. Mocks take precedence over bindings until removed.
    """

    def __init__(self) -> None:
        self._bindings: dict[type[Any], Any] = {}
        self._mocks: dict[type[Any], Any] = {}

    def bind(self, facade: type[Any], service_id: Any) -> None:
        self._bindings[facade] = service_id

    def is_bound(self, facade: type[Any]) -> bool:
        return facade in self._bindings

    def get_service_id(self, facade: type[Any]) -> Any:
        """Return the service id bound to ``facade``.

        Raises:
            FacadeWireUnknownFacadeError: If ``facade`` has no binding.

        """
        try:
            return self._bindings[facade]
        except KeyError:
            raise FacadeWireUnknownFacadeError(facade_name(facade)) from None

    def get_bindings(self) -> dict[type[Any], Any]:
        return dict(self._bindings)

    def unbind(self, facade: type[Any]) -> None:
        self._bindings.pop(facade, None)

    def clear_bindings(self) -> None:
        self._bindings.clear()

    def mock(self, facade: type[Any], mock: Any) -> None:
        """Register a mock instance or factory for ``facade``.

        Args:
            facade: Facade class to override.
            mock: Instance returned by every resolution, or a factory called on
                every resolution (see ``is_mock_factory``).

        """
        self._mocks[facade] = mock

    def has_mock(self, facade: type[Any]) -> bool:
        return facade in self._mocks

    def get_mock(self, facade: type[Any]) -> Any:
        return self._mocks.get(facade)

    def unmock(self, facade: type[Any]) -> None:
        self._mocks.pop(facade, None)

    def clear_mocks(self) -> None:
        self._mocks.clear()


__all__ = ["FacadeBindingRegistry", "facade_name", "is_mock_factory"]
