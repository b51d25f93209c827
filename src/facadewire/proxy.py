from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from facadewire._internal.type_checks import is_service_object
from facadewire.bindings import facade_name
from facadewire.exceptions import (
    FacadeWireContainerNotSetError,
    FacadeWireNoResolvedInstanceError,
    FacadeWireNotAnObjectError,
)
from facadewire.invocation import ResolvedFacade

if TYPE_CHECKING:
    from facadewire.registry import FacadeRegistry

logger = logging.getLogger(__name__)


class FacadeProxy:
    """Resolve facades through the binding registry and cache them process-wide.

    Resolution order for a facade class:

    1. a registered mock (never cached);
    2. the cached instance of an earlier resolution;
    3. the service id bound in ``FacadeBindingRegistry``, fetched from the
       registry's container after checking ``container.has(service_id)``.

    The cache holds one slot per facade class, shared by every execution
    context, together with that instance's method handles.
    """

    def __init__(self, registry: FacadeRegistry) -> None:
        self._registry = registry
        self._resolved: dict[type[Any], ResolvedFacade] = {}

    def get_instance(self, facade: type[Any]) -> Any:
        return self.resolve(facade).instance

    def resolve(self, facade: type[Any]) -> ResolvedFacade:
        """Return the resolved instance and method handles for ``facade``.

        Raises:
            FacadeWireUnknownFacadeError: No mock and no binding for ``facade``.
            FacadeWireContainerNotSetError: The registry has no container.
            FacadeWireNoResolvedInstanceError: The container does not know the
                bound service id.
            FacadeWireNotAnObjectError: The container returned ``None`` or a
                builtin scalar.

        """
        mocked = self._registry.resolve_mock(facade)
        if mocked is not None:
            return mocked

        cached = self._resolved.get(facade)
        if cached is not None:
            return cached

        name = facade_name(facade)
        service_id = self._registry.bindings.get_service_id(facade)
        container = self._registry.container
        if container is None:
            raise FacadeWireContainerNotSetError(facade=name)
        if not container.has(service_id):
            raise FacadeWireNoResolvedInstanceError(name, service_id)

        instance = container.get(service_id)
        if not is_service_object(instance):
            raise FacadeWireNotAnObjectError(name, instance)

        resolved = ResolvedFacade(facade=name, instance=instance)
        self._resolved[facade] = resolved
        logger.debug("Resolved facade %s from service %r", name, service_id)
        return resolved

    def is_resolved(self, facade: type[Any]) -> bool:
        return facade in self._resolved

    def clear(self, facade: type[Any]) -> None:
        """Drop the cached instance and method handles of ``facade``."""
        self._resolved.pop(facade, None)

    def clear_all(self) -> None:
        """Drop the cached instances of every facade class."""
        self._resolved.clear()

    def resolved_instances(self) -> dict[type[Any], Any]:
        return {facade: resolved.instance for facade, resolved in self._resolved.items()}


__all__ = ["FacadeProxy"]
