from __future__ import annotations

from typing import Any

from facadewire._internal.type_checks import is_service_object
from facadewire.bindings import FacadeBindingRegistry, facade_name, is_mock_factory
from facadewire.container_interface import ServiceContainerProtocol
from facadewire.context_store import ContextScopedStore
from facadewire.contextual import ContextualFacadeManager
from facadewire.exceptions import FacadeWireContainerNotSetError, FacadeWireNotAnObjectError
from facadewire.invocation import ResolvedFacade
from facadewire.proxy import FacadeProxy


class FacadeRegistry:
    """Own every piece of facade state for one application.

    The registry holds the container facades resolve from, the facade to
    service id bindings, mock overrides, the process-wide resolved instances
    (``proxy``) and the per-context store (``contextual``). Applications
    normally use the module-level ``facade_registry``; tests create a fresh
    registry and install it with ``Facade.use_registry``.

    Examples:
        .. code-block:: python

            registry = FacadeRegistry(container)
            registry.bindings.bind(Mail, "mailer")
            Facade.use_registry(registry)

            Mail.send("a@b.com", "subject", "body")

    """

    def __init__(
        self,
        container: ServiceContainerProtocol | None = None,
        *,
        bindings: FacadeBindingRegistry | None = None,
        store: ContextScopedStore | None = None,
    ) -> None:
        self._container = container
        self.bindings = bindings if bindings is not None else FacadeBindingRegistry()
        self.store = store if store is not None else ContextScopedStore()
        self.proxy = FacadeProxy(self)
        self.contextual = ContextualFacadeManager(self)

    @property
    def container(self) -> ServiceContainerProtocol | None:
        return self._container

    def set_container(self, container: ServiceContainerProtocol) -> None:
        self._container = container

    def get_container(self) -> ServiceContainerProtocol:
        """Return the container or raise when none was set."""
        if self._container is None:
            msg = "Container not set. Call Facade.set_container(container) during bootstrap."
            raise FacadeWireContainerNotSetError(msg)
        return self._container

    def resolve_mock(self, facade: type[Any]) -> ResolvedFacade | None:
        """Return a fresh resolution of ``facade``'s mock, or ``None`` when not mocked.

        Mock factories are called on every resolution and never cached.
        """
        if not self.bindings.has_mock(facade):
            return None
        mock = self.bindings.get_mock(facade)
        instance = mock() if is_mock_factory(mock) else mock
        name = facade_name(facade)
        if not is_service_object(instance):
            raise FacadeWireNotAnObjectError(name, instance)
        return ResolvedFacade(facade=name, instance=instance)

    def reset(self) -> None:
        """Forget the container, bindings, mocks and every cached instance.

        Context slices of other execution contexts are dropped as well.
        """
        self._container = None
        self.proxy.clear_all()
        self.bindings.clear_bindings()
        self.bindings.clear_mocks()
        for context_id in self.store.contexts():
            self.store.discard(context_id)


facade_registry = FacadeRegistry()
"""Default registry used by ``Facade`` subclasses until ``use_registry`` is called."""


__all__ = ["FacadeRegistry", "facade_registry"]
