from __future__ import annotations

from typing import Any


class FacadeWireError(Exception):
    """Represent a base class for all FacadeWire-specific failures.

    Catch this type when you want to handle any FacadeWire error path without
    matching each concrete exception class individually.
    """


class FacadeWireContainerError(FacadeWireError):
    """Represent a failure raised while the container builds an object graph."""


class FacadeWireUnresolvedDependencyError(FacadeWireContainerError):
    """Signal that a constructor or factory parameter cannot be satisfied.

    Raised by ``Container.make`` when a required parameter has no override, no
    injectable class annotation, no default, does not accept ``None`` and is
    not named ``app``/``container``.

    Typical fixes include annotating the parameter with a concrete class,
    adding a default value, or passing an explicit override through
    ``make(..., parameters={"name": value})``.
    """

    def __init__(self, message: str, *, parameter: str, owner: str) -> None:
        super().__init__(message)
        self.parameter = parameter
        self.owner = owner


class FacadeWireCircularDependencyError(FacadeWireUnresolvedDependencyError):
    """Signal a dependency cycle such as ``A -> B -> A``.

    The ``chain`` attribute holds the abstract keys in resolution order, ending
    with the key that closed the cycle.
    """

    def __init__(self, chain: tuple[Any, ...]) -> None:
        rendered_chain = " -> ".join(_key_name(key) for key in chain)
        super().__init__(
            f"Circular dependency detected: {rendered_chain}.",
            parameter="",
            owner=_key_name(chain[0]) if chain else "",
        )
        self.chain = chain


class FacadeWireUnknownTypeError(FacadeWireContainerError):
    """Signal that an abstract key does not name an importable class.

    Raised by ``Container.make`` for unbound string keys that are not dotted
    import paths, for import paths that do not exist, and for strategies that
    are neither classes nor callables.

    Typical fix is binding the key explicitly with ``Container.bind``.
    """

    def __init__(self, message: str, *, abstract: Any) -> None:
        super().__init__(message)
        self.abstract = abstract


class FacadeWireNotInstantiableError(FacadeWireContainerError):
    """Signal resolution of an abstract class or protocol without a binding.

    Typical fix is binding the abstract type to a concrete implementation, for
    example ``container.bind(MailerInterface, SmtpMailer)``.
    """

    def __init__(self, message: str, *, abstract: Any) -> None:
        super().__init__(message)
        self.abstract = abstract


class FacadeWireInvalidFactoryResultError(FacadeWireContainerError):
    """Signal that a factory returned ``None`` or a builtin scalar.

    Factories bound with ``Container.bind`` must return a service object.
    """

    def __init__(self, message: str, *, abstract: Any, result: Any) -> None:
        super().__init__(message)
        self.abstract = abstract
        self.result = result


class FacadeWireServiceNotFoundError(FacadeWireError):
    """Signal a ``SimpleContainer.get`` call for an id that was never set."""

    def __init__(self, service_id: Any) -> None:
        super().__init__(f"Service not found: {_key_name(service_id)}")
        self.service_id = service_id


class FacadeWireFacadeError(FacadeWireError):
    """Represent a failure raised while a facade resolves or forwards a call.

    The ``facade`` attribute holds the facade class name (or ``""`` when the
    failure is not tied to a single facade).
    """

    def __init__(self, message: str, *, facade: str = "") -> None:
        super().__init__(message)
        self.facade = facade


class FacadeWireUnknownFacadeError(FacadeWireFacadeError):
    """Signal a facade that has no service binding.

    Raised in proxy mode when ``FacadeBindingRegistry`` has no entry for the
    facade class and no mock is registered, and in context-safe mode when the
    facade declares no ``accessor``.

    Typical fix is ``registry.bindings.bind(MyFacade, "service.id")``.
    """

    def __init__(self, facade: str) -> None:
        super().__init__(f"Unknown facade: {facade}", facade=facade)


class FacadeWireContainerNotSetError(FacadeWireFacadeError):
    """Signal facade resolution or ``container_context`` use before a container is set.

    Typical fix is calling ``Facade.set_container(container)`` (or
    ``container_context.set_current(container)``) during application startup.
    """

    def __init__(self, message: str = "Container not set", *, facade: str = "") -> None:
        super().__init__(message, facade=facade)


class FacadeWireNoResolvedInstanceError(FacadeWireFacadeError):
    """Signal that the container does not know the facade's service id."""

    def __init__(self, facade: str, service_id: Any) -> None:
        super().__init__(
            f"No resolved instance for facade: {facade} (service id {_key_name(service_id)})",
            facade=facade,
        )
        self.service_id = service_id


class FacadeWireNotAnObjectError(FacadeWireFacadeError):
    """Signal that the container returned ``None`` or a builtin scalar for a facade."""

    def __init__(self, facade: str, value: Any) -> None:
        super().__init__(
            f"Resolved instance for {facade} is not an object: {value!r}",
            facade=facade,
        )
        self.value = value


class FacadeWireUndefinedMethodError(FacadeWireFacadeError):
    """Signal a forwarded call to a method the resolved instance does not expose."""

    def __init__(self, facade: str, method: str) -> None:
        super().__init__(f"Undefined method {method} for facade {facade}", facade=facade)
        self.method = method


class FacadeWireInvocationError(FacadeWireFacadeError):
    """Signal that a forwarded method raised.

    The original exception is available as ``original`` and as ``__cause__``.
    """

    def __init__(self, facade: str, method: str, original: BaseException) -> None:
        super().__init__(
            f"Error invoking method {method} on facade {facade}: {original}",
            facade=facade,
        )
        self.method = method
        self.original = original


def _key_name(key: Any) -> str:
    if isinstance(key, str):
        return key
    return getattr(key, "__qualname__", repr(key))
