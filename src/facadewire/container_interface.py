from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, Protocol, TypeAlias, TypeVar, overload, runtime_checkable

T = TypeVar("T")

Strategy: TypeAlias = Callable[..., Any] | type[Any] | str
"""A factory callable, a class, or a dotted import path naming a class."""


@runtime_checkable
class ServiceContainerProtocol(Protocol):
    """Minimal container contract consumed by facades.

    Any object exposing ``get``/``has`` works: ``Container``, ``SimpleContainer``
    or a third-party container adapter.
    """

    def get(self, service_id: Any) -> Any: ...

    def has(self, service_id: Any) -> bool: ...


class IContainer(ABC):
    """Interface for the reflective service container."""

    @abstractmethod
    def bind(
        self,
        abstract: Any,
        concrete: Strategy | None = None,
        *,
        singleton: bool = False,
    ) -> None:
        """Register or overwrite a construction strategy for ``abstract``."""

    @abstractmethod
    def singleton(self, abstract: Any, concrete: Strategy | None = None) -> None:
        """Register a strategy whose result is cached after the first ``make``."""

    @abstractmethod
    def instance(self, abstract: Any, instance: Any) -> None:
        """Register an already built object for ``abstract``."""

    @overload
    @abstractmethod
    def make(self, abstract: type[T], parameters: Mapping[str, Any] | None = None) -> T: ...

    @overload
    @abstractmethod
    def make(self, abstract: Any, parameters: Mapping[str, Any] | None = None) -> Any: ...

    @abstractmethod
    def make(self, abstract: Any, parameters: Mapping[str, Any] | None = None) -> Any:
        """Resolve ``abstract`` into an object."""

    @abstractmethod
    def has(self, abstract: Any) -> bool:
        """Return whether ``abstract`` is bound or has a cached instance."""

    @abstractmethod
    def get(self, abstract: Any) -> Any:
        """Resolve ``abstract`` without parameter overrides."""


__all__ = ["IContainer", "ServiceContainerProtocol", "Strategy"]
