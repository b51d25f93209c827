from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from facadewire._internal.type_checks import is_service_object
from facadewire.bindings import facade_name
from facadewire.exceptions import (
    FacadeWireContainerNotSetError,
    FacadeWireNotAnObjectError,
    FacadeWireUnknownFacadeError,
)
from facadewire.invocation import ResolvedFacade

if TYPE_CHECKING:
    from facadewire.registry import FacadeRegistry

logger = logging.getLogger(__name__)

CONTEXT_KEY_PREFIX = "facade.resolved."


def context_key(facade: type[Any]) -> str:
    """Return the context store key holding ``facade``'s resolved instance."""
    return f"{CONTEXT_KEY_PREFIX}{facade_name(facade)}"


class ContextualFacadeManager:
    """Resolve facades per execution context.

    Every task, greenlet, worker thread (or the process itself) gets its own
    resolved instance and method handles for a facade class, stored in the
    registry's ``ContextScopedStore``. Clearing a facade only affects the
    current context.
    """

    def __init__(self, registry: FacadeRegistry) -> None:
        self._registry = registry

    def get_instance(self, facade: type[Any], service_id: Any) -> Any:
        return self.resolve(facade, service_id).instance

    def resolve(self, facade: type[Any], service_id: Any) -> ResolvedFacade:
        """Return the current context's resolved instance for ``facade``.

        Args:
            facade: Facade class being resolved.
            service_id: Id fetched from the container on a cache miss.

        Raises:
            FacadeWireUnknownFacadeError: ``service_id`` is ``None``.
            FacadeWireContainerNotSetError: The registry has no container.
            FacadeWireNotAnObjectError: The container returned ``None`` or a
                builtin scalar.

        """
        mocked = self._registry.resolve_mock(facade)
        if mocked is not None:
            return mocked

        store = self._registry.store
        key = context_key(facade)
        cached = store.get(key)
        if cached is not None:
            return cached

        name = facade_name(facade)
        if service_id is None:
            raise FacadeWireUnknownFacadeError(name)
        container = self._registry.container
        if container is None:
            raise FacadeWireContainerNotSetError(facade=name)

        instance = container.get(service_id)
        if not is_service_object(instance):
            raise FacadeWireNotAnObjectError(name, instance)

        resolved = ResolvedFacade(facade=name, instance=instance)
        store.set(key, resolved)
        logger.debug(
            "Resolved facade %s from service %r in context %s",
            name,
            service_id,
            store.context_id(),
        )
        return resolved

    def is_resolved(self, facade: type[Any]) -> bool:
        return self._registry.store.has(context_key(facade))

    def clear(self, facade: type[Any]) -> None:
        """Drop ``facade``'s instance in the current context only."""
        self._registry.store.delete(context_key(facade))

    def clear_instances(self) -> None:
        """Drop every facade instance of the current context, keeping other keys."""
        self._registry.store.clear_by_prefix(CONTEXT_KEY_PREFIX)


__all__ = ["CONTEXT_KEY_PREFIX", "ContextualFacadeManager", "context_key"]
