from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, ClassVar

from facadewire.container_interface import ServiceContainerProtocol
from facadewire.invocation import ResolvedFacade, has_public_method
from facadewire.registry import FacadeRegistry, facade_registry


class FacadeMeta(type):
    """Metaclass forwarding unknown public class attributes to the resolved service.

    ``Mail.send(...)`` on a ``Facade`` subclass without a ``send`` attribute
    becomes ``Mail.call("send", args, kwargs)``. Resolution and method lookup
    happen when the forwarder is called, not when the attribute is read.
    """

    def __getattr__(cls, name: str) -> Callable[..., Any]:
        if name.startswith("_"):
            msg = f"type object {cls.__name__!r} has no attribute {name!r}"
            raise AttributeError(msg)

        facade = cls

        def forward(*args: Any, **kwargs: Any) -> Any:
            return facade.call(name, args, kwargs)

        forward.__name__ = name
        forward.__qualname__ = f"{cls.__qualname__}.{name}"
        return forward


class Facade(metaclass=FacadeMeta):
    """Static proxy to a lazily resolved service.

    Subclasses name their service with ``accessor`` and are called like the
    service itself: ``Mail.send(...)`` resolves the service, checks that
    ``send`` exists, caches a handle to it and forwards the call. Failures
    raised by the service surface as ``FacadeWireInvocationError``.

    Two caching policies are available per facade class:

    - proxy mode (default): the service id comes from the registry's
      ``FacadeBindingRegistry`` and the instance is cached once per process;
    - context-safe mode (``enable_context_safe_mode``): the ``accessor`` is
      resolved from the container and cached per execution context, so every
      asyncio task, greenlet or worker thread sees its own instance.

    Mocks registered with ``mock`` win over both policies until ``clear_mock``.

    Examples:
        .. code-block:: python

            class Mail(Facade):
                accessor = "mailer"


            container = Container()
            container.bind("mailer", lambda: SmtpMailer())
            Mail.set_container(container)
            Mail.get_registry().bindings.bind(Mail, "mailer")

            Mail.send("a@b.com", "subject", "body")

    """

    accessor: ClassVar[Any] = None
    """Service id resolved by this facade; falls back to the registry binding."""

    context_safe: ClassVar[bool] = False
    """Cache resolved instances per execution context instead of per process."""

    _registry: ClassVar[FacadeRegistry] = facade_registry

    # region Registry Methods
    @classmethod
    def use_registry(cls, registry: FacadeRegistry) -> None:
        """Install ``registry`` for this facade class and subclasses that do not override it."""
        cls._registry = registry

    @classmethod
    def get_registry(cls) -> FacadeRegistry:
        return cls._registry

    @classmethod
    def set_container(cls, container: ServiceContainerProtocol) -> None:
        """Set the container every facade sharing this registry resolves from."""
        cls._registry.set_container(container)

    @classmethod
    def get_service_id(cls) -> Any:
        """Return the ``accessor`` or, when unset, the id bound in the registry.

        Raises:
            FacadeWireUnknownFacadeError: If neither is available.

        """
        if cls.accessor is not None:
            return cls.accessor
        return cls._registry.bindings.get_service_id(cls)

    # endregion Registry Methods

    # region Resolution Methods
    @classmethod
    def get_instance(cls) -> Any:
        """Return the resolved service instance, resolving it on first use."""
        return cls._resolve().instance

    @classmethod
    def is_resolved(cls) -> bool:
        """Return whether an instance is cached for the current policy.

        Never resolves and never raises.
        """
        try:
            if cls.context_safe:
                return cls._registry.contextual.is_resolved(cls)
            return cls._registry.proxy.is_resolved(cls)
        except Exception:
            return False

    @classmethod
    def has_method(cls, name: str) -> bool:
        """Return whether the resolved service exposes a public method ``name``.

        Resolves the service if needed. Any failure yields ``False``.
        """
        try:
            return has_public_method(cls.get_instance(), name)
        except Exception:
            return False

    @classmethod
    def call(
        cls,
        name: str,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
    ) -> Any:
        """Call ``name`` on the resolved service.

        Raises:
            FacadeWireUndefinedMethodError: The service has no public method ``name``.
            FacadeWireInvocationError: The method raised; the original error is
                the ``__cause__``.

        """
        return cls._resolve().handle(name).invoke(args, kwargs)

    @classmethod
    def _resolve(cls) -> ResolvedFacade:
        if cls.context_safe:
            return cls._registry.contextual.resolve(cls, cls._contextual_service_id())
        return cls._registry.proxy.resolve(cls)

    @classmethod
    def _contextual_service_id(cls) -> Any:
        if cls.accessor is not None:
            return cls.accessor
        bindings = cls._registry.bindings
        if bindings.is_bound(cls):
            return bindings.get_service_id(cls)
        return None

    # endregion Resolution Methods

    # region Invalidation Methods
    @classmethod
    def clear(cls) -> None:
        """Drop this facade's cached instance so the next call resolves again.

        In context-safe mode only the current execution context is affected.
        """
        if cls.context_safe:
            cls._registry.contextual.clear(cls)
        else:
            cls._registry.proxy.clear(cls)

    @classmethod
    def clear_all(cls) -> None:
        """Drop cached instances beyond this facade.

        Proxy mode drops every facade class's process-wide instance. Context-safe
        mode drops the whole slice of the current execution context.
        """
        if cls.context_safe:
            cls._registry.store.clear()
        else:
            cls._registry.proxy.clear_all()

    @classmethod
    def resolved_instances(cls) -> dict[type[Any], Any]:
        """Return the process-wide resolved instances; empty in context-safe mode."""
        if cls.context_safe:
            return {}
        return cls._registry.proxy.resolved_instances()

    # endregion Invalidation Methods

    # region Mocking Methods
    @classmethod
    def mock(cls, mock: Any) -> None:
        """Replace the service with ``mock`` (an instance or a factory) for every context."""
        cls._registry.bindings.mock(cls, mock)

    @classmethod
    def clear_mock(cls) -> None:
        cls._registry.bindings.unmock(cls)

    # endregion Mocking Methods

    # region Mode Methods
    @classmethod
    def enable_context_safe_mode(cls) -> None:
        cls.context_safe = True

    @classmethod
    def disable_context_safe_mode(cls) -> None:
        cls.context_safe = False

    @classmethod
    def is_context_safe_mode(cls) -> bool:
        return cls.context_safe

    # endregion Mode Methods


__all__ = ["Facade", "FacadeMeta"]
