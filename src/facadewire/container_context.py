from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias, TypeVar, cast, overload

from facadewire.container import Container
from facadewire.container_interface import Strategy
from facadewire.exceptions import FacadeWireContainerNotSetError

T = TypeVar("T")

_RegistrationMethod: TypeAlias = Literal["bind", "singleton", "instance"]


@dataclass(frozen=True, slots=True)
class _RegistrationOperation:
    """Container registration operation replayed by ContainerContext."""

    method_name: _RegistrationMethod
    args: tuple[Any, ...]
    kwargs: dict[str, Any]

    def apply(self, container: Container) -> None:
        registration_method = cast("Callable[..., Any]", getattr(container, self.method_name))
        registration_method(*self.args, **self.kwargs)


class ContainerContext:
    """Deferred-registration holder for one shared application container.

    Registrations made before ``set_current`` are recorded and replayed on the
    container once it is bound, so modules can register services at import
    time. The active container binding is process-global for this
    ``ContainerContext`` instance. It is not task-local or thread-local.
    """

    def __init__(self) -> None:
        self._container: Container | None = None
        self._operations: list[_RegistrationOperation] = []

    def set_current(self, container: Container) -> None:
        """Set the shared container and replay deferred registrations.

        This method is expected to be called once during application bootstrap.
        """
        self._container = container
        for operation in self._operations:
            operation.apply(container)

    def get_current(self) -> Container:
        """Return the shared container or raise when not bound."""
        if self._container is None:
            msg = (
                "Container is not set for container_context. "
                "Call container_context.set_current(container) before using container_context."
            )
            raise FacadeWireContainerNotSetError(msg)
        return self._container

    def reset(self) -> None:
        """Forget the bound container and every recorded registration."""
        self._container = None
        self._operations.clear()

    def _record_operation(self, operation: _RegistrationOperation) -> None:
        self._operations.append(operation)
        if self._container is not None:
            operation.apply(self._container)

    def bind(
        self,
        abstract: Any,
        concrete: Strategy | None = None,
        *,
        singleton: bool = False,
    ) -> None:
        """Record a ``Container.bind`` call for replay and apply it when bound."""
        self._record_operation(
            _RegistrationOperation(
                method_name="bind",
                args=(abstract, concrete),
                kwargs={"singleton": singleton},
            ),
        )

    def singleton(self, abstract: Any, concrete: Strategy | None = None) -> None:
        """Record a ``Container.singleton`` call for replay and apply it when bound."""
        self._record_operation(
            _RegistrationOperation(method_name="singleton", args=(abstract, concrete), kwargs={}),
        )

    def instance(self, abstract: Any, instance: Any) -> None:
        """Record a ``Container.instance`` call for replay and apply it when bound."""
        self._record_operation(
            _RegistrationOperation(method_name="instance", args=(abstract, instance), kwargs={}),
        )

    @overload
    def make(self, abstract: type[T], parameters: Mapping[str, Any] | None = None) -> T: ...

    @overload
    def make(self, abstract: Any, parameters: Mapping[str, Any] | None = None) -> Any: ...

    def make(self, abstract: Any, parameters: Mapping[str, Any] | None = None) -> Any:
        """Resolve ``abstract`` via the current bound container."""
        return self.get_current().make(abstract, parameters)

    def has(self, abstract: Any) -> bool:
        return self.get_current().has(abstract)


container_context = ContainerContext()


def app(abstract: Any = None) -> Any:
    """Return the current container, or resolve ``abstract`` through it.

    Examples:
        .. code-block:: python

            container_context.set_current(Container())
            app()  # the container
            app(GreeterService)  # an autowired GreeterService

    """
    container = container_context.get_current()
    if abstract is None:
        return container
    return container.make(abstract)


__all__ = ["ContainerContext", "app", "container_context"]
