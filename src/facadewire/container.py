from __future__ import annotations

import inspect
import logging
import pkgutil
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar, overload

from facadewire._internal.parameters import ParameterDescriptor, ParametersInspector
from facadewire._internal.resolution_stack import track_resolution
from facadewire._internal.type_checks import is_service_object
from facadewire.container_interface import IContainer, ServiceContainerProtocol, Strategy
from facadewire.exceptions import (
    FacadeWireInvalidFactoryResultError,
    FacadeWireNotInstantiableError,
    FacadeWireUnknownTypeError,
    FacadeWireUnresolvedDependencyError,
)
from facadewire.markers import SingletonPolicy, is_settings_model

T = TypeVar("T")

logger = logging.getLogger(__name__)

_CONTAINER_PARAMETER_NAMES = frozenset({"app", "container"})
_USE_DEFAULT: Any = object()


@dataclass(frozen=True, slots=True)
class ServiceDescriptor:
    """Describe how an abstract key is built and whether the result is cached."""

    abstract: Any
    concrete: Strategy
    singleton: bool = False


class Container(IContainer):
    """Resolve abstract keys into object graphs through reflective autowiring.

    Keys are usually classes or plain string ids. A key is bound to a factory
    callable, a concrete class, or a dotted import path naming a class. Unbound
    class keys (and unbound import paths) are built directly.

    Constructor and factory parameters are resolved in this order: explicit
    ``parameters`` override by name, the container itself for parameters typed
    as one of its classes or ``ServiceContainerProtocol`` (unless that type is
    bound), a recursive ``make`` of the declared class (or the first class of a
    union), the parameter default, ``None`` when the annotation admits it, and
    the container itself for parameters named ``app`` or ``container``.

    Singletons are process-global: they are cached by the container, not per
    execution context. A result is cached when its binding is a singleton or
    when its class is always-singleton (see ``facadewire.markers.singleton``).

    Examples:
        .. code-block:: python

            container = Container()
            container.singleton("mailer", lambda: SmtpMailer())
            container.bind(MailerInterface, SmtpMailer)

            mailer = container.make("mailer")
            assert container.make("mailer") is mailer

    """

    def __init__(self, *, singleton_policy: SingletonPolicy | None = None) -> None:
        """Initialize an empty container.

        Args:
            singleton_policy: Policy deciding which classes are always cached.
                Defaults to ``SingletonPolicy()``, which honors the
                ``@singleton`` marker and pydantic-settings models.

        """
        self._singleton_policy = (
            singleton_policy if singleton_policy is not None else SingletonPolicy()
        )
        self._parameters_inspector = ParametersInspector()
        self._bindings: dict[Any, ServiceDescriptor] = {}
        self._instances: dict[Any, Any] = {}

    # region Registration Methods
    def bind(
        self,
        abstract: Any,
        concrete: Strategy | None = None,
        *,
        singleton: bool = False,
    ) -> None:
        """Register or overwrite a construction strategy.

        Nothing is built at bind time. Re-binding a key replaces the previous
        descriptor but keeps an already cached singleton until
        ``forget_instance`` is called.

        Args:
            abstract: Key used by ``make``; a class or a string id.
            concrete: Factory callable, class, or dotted import path. ``None``
                builds ``abstract`` itself.
            singleton: Cache the first built object for later ``make`` calls.

        """
        self._bindings[abstract] = ServiceDescriptor(
            abstract=abstract,
            concrete=abstract if concrete is None else concrete,
            singleton=singleton,
        )

    def singleton(self, abstract: Any, concrete: Strategy | None = None) -> None:
        """Register a strategy whose first result is cached.

        Args:
            abstract: Key used by ``make``.
            concrete: Factory callable, class, or dotted import path.

        """
        self.bind(abstract, concrete, singleton=True)

    def instance(self, abstract: Any, instance: Any) -> None:
        """Register an already built object, bypassing strategy resolution.

        Args:
            abstract: Key used by ``make``.
            instance: Object returned by every later ``make(abstract)``.

        """
        self._instances[abstract] = instance

    # endregion Registration Methods

    # region Resolution Methods
    @overload
    def make(self, abstract: type[T], parameters: Mapping[str, Any] | None = None) -> T: ...

    @overload
    def make(self, abstract: Any, parameters: Mapping[str, Any] | None = None) -> Any: ...

    def make(self, abstract: Any, parameters: Mapping[str, Any] | None = None) -> Any:
        """Resolve ``abstract`` into an object.

        Args:
            abstract: Bound key, class, or dotted import path.
            parameters: Overrides for the top-level constructor or factory,
                keyed by parameter name. Nested dependencies do not see them.

        Raises:
            FacadeWireUnknownTypeError: ``abstract`` is unbound and does not
                name a class.
            FacadeWireNotInstantiableError: The class is abstract or a protocol.
            FacadeWireUnresolvedDependencyError: A parameter cannot be satisfied.
            FacadeWireInvalidFactoryResultError: A factory returned ``None`` or
                a builtin scalar.

        """
        if abstract in self._instances:
            return self._instances[abstract]

        descriptor = self._bindings.get(abstract)
        concrete = abstract if descriptor is None else descriptor.concrete
        with track_resolution(abstract):
            built = self._build_strategy(abstract, concrete, parameters or {})

        if (descriptor is not None and descriptor.singleton) or (
            self._singleton_policy.is_always_singleton(type(built))
        ):
            self._instances[abstract] = built
            logger.debug("Cached %s as a singleton", _describe_key(abstract))
        return built

    def get(self, abstract: Any) -> Any:
        """Resolve ``abstract`` without overrides (``ServiceContainerProtocol``)."""
        return self.make(abstract)

    def has(self, abstract: Any) -> bool:
        return abstract in self._instances or abstract in self._bindings

    def bound(self, abstract: Any) -> bool:
        """Return whether ``abstract`` has a registered strategy."""
        return abstract in self._bindings

    def get_bindings(self) -> dict[Any, ServiceDescriptor]:
        return dict(self._bindings)

    # endregion Resolution Methods

    # region Lifecycle Methods
    def forget_instance(self, abstract: Any) -> None:
        """Drop the cached instance of ``abstract``; the next ``make`` rebuilds it."""
        self._instances.pop(abstract, None)

    def flush(self) -> None:
        """Drop every binding and cached instance."""
        self._bindings.clear()
        self._instances.clear()

    # endregion Lifecycle Methods

    def _build_strategy(
        self,
        abstract: Any,
        concrete: Strategy,
        parameters: Mapping[str, Any],
    ) -> Any:
        if isinstance(concrete, str):
            concrete = self._import_class(abstract, concrete)
        if inspect.isclass(concrete):
            return self._build_class(abstract, concrete, parameters)
        if callable(concrete):
            return self._invoke_factory(abstract, concrete, parameters)
        msg = f"Class {_describe_key(concrete)} not found"
        raise FacadeWireUnknownTypeError(msg, abstract=abstract)

    def _import_class(self, abstract: Any, path: str) -> Any:
        try:
            resolved = pkgutil.resolve_name(path)
        except (ImportError, AttributeError, ValueError) as error:
            msg = f"Class {path} not found"
            raise FacadeWireUnknownTypeError(msg, abstract=abstract) from error
        if not callable(resolved):
            msg = f"Class {path} not found"
            raise FacadeWireUnknownTypeError(msg, abstract=abstract)
        return resolved

    def _build_class(
        self,
        abstract: Any,
        concrete_type: type[Any],
        parameters: Mapping[str, Any],
    ) -> Any:
        if inspect.isabstract(concrete_type) or getattr(concrete_type, "_is_protocol", False):
            msg = f"Class {concrete_type.__qualname__} is not instantiable"
            raise FacadeWireNotInstantiableError(msg, abstract=abstract)

        if is_settings_model(concrete_type):
            # Settings load their values from the environment; only overrides are passed.
            return concrete_type(**parameters)

        args, kwargs = self._resolve_arguments(
            target=concrete_type,
            owner=concrete_type.__qualname__,
            parameters=parameters,
        )
        return concrete_type(*args, **kwargs)

    def _invoke_factory(
        self,
        abstract: Any,
        factory: Callable[..., Any],
        parameters: Mapping[str, Any],
    ) -> Any:
        args, kwargs = self._resolve_arguments(
            target=factory,
            owner=_describe_key(factory),
            parameters=parameters,
        )
        result = factory(*args, **kwargs)
        if not is_service_object(result):
            msg = (
                f"Factory for {_describe_key(abstract)} must return an object, "
                f"got {type(result).__name__}"
            )
            raise FacadeWireInvalidFactoryResultError(msg, abstract=abstract, result=result)
        return result

    def _resolve_arguments(
        self,
        *,
        target: Callable[..., Any],
        owner: str,
        parameters: Mapping[str, Any],
    ) -> tuple[list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        for parameter in self._parameters_inspector.describe(target):
            if parameter.is_variadic:
                continue
            value = self._resolve_parameter(parameter, owner=owner, parameters=parameters)
            if value is _USE_DEFAULT:
                # Later positional-only arguments need this slot filled.
                if parameter.is_positional_only:
                    args.append(parameter.default)
                continue
            if parameter.is_positional_only:
                args.append(value)
            else:
                kwargs[parameter.name] = value
        return args, kwargs

    def _resolve_parameter(
        self,
        parameter: ParameterDescriptor,
        *,
        owner: str,
        parameters: Mapping[str, Any],
    ) -> Any:
        if parameter.name in parameters:
            return parameters[parameter.name]

        injectable_type = parameter.injectable_type
        if injectable_type is not None:
            if not self.has(injectable_type) and self._is_container_type(injectable_type):
                return self
            return self.make(injectable_type)

        if parameter.has_default:
            return _USE_DEFAULT
        if parameter.accepts_none:
            return None
        if parameter.name in _CONTAINER_PARAMETER_NAMES:
            return self

        msg = f"Unable to resolve parameter '{parameter.name}' of {owner}"
        raise FacadeWireUnresolvedDependencyError(msg, parameter=parameter.name, owner=owner)

    def _is_container_type(self, candidate: type[Any]) -> bool:
        return candidate in type(self).__mro__ or candidate is ServiceContainerProtocol


def _describe_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    return getattr(key, "__qualname__", repr(key))


__all__ = ["Container", "ServiceDescriptor"]
