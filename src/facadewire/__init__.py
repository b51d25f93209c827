from facadewire.bindings import FacadeBindingRegistry
from facadewire.container import Container, ServiceDescriptor
from facadewire.container_context import ContainerContext, app, container_context
from facadewire.container_interface import IContainer, ServiceContainerProtocol
from facadewire.context_store import ContextScopedStore
from facadewire.contextual import ContextualFacadeManager
from facadewire.exceptions import (
    FacadeWireCircularDependencyError,
    FacadeWireContainerError,
    FacadeWireContainerNotSetError,
    FacadeWireError,
    FacadeWireFacadeError,
    FacadeWireInvalidFactoryResultError,
    FacadeWireInvocationError,
    FacadeWireNoResolvedInstanceError,
    FacadeWireNotAnObjectError,
    FacadeWireNotInstantiableError,
    FacadeWireServiceNotFoundError,
    FacadeWireUndefinedMethodError,
    FacadeWireUnknownFacadeError,
    FacadeWireUnknownTypeError,
    FacadeWireUnresolvedDependencyError,
)
from facadewire.execution_context import ExecutionContext, ExecutionContextResolver
from facadewire.facade import Facade
from facadewire.markers import SingletonPolicy, singleton
from facadewire.proxy import FacadeProxy
from facadewire.registry import FacadeRegistry, facade_registry
from facadewire.runtime import Runtime, detect_runtime
from facadewire.simple_container import SimpleContainer

__all__ = [
    "Container",
    "ContainerContext",
    "ContextScopedStore",
    "ContextualFacadeManager",
    "ExecutionContext",
    "ExecutionContextResolver",
    "Facade",
    "FacadeBindingRegistry",
    "FacadeProxy",
    "FacadeRegistry",
    "FacadeWireCircularDependencyError",
    "FacadeWireContainerError",
    "FacadeWireContainerNotSetError",
    "FacadeWireError",
    "FacadeWireFacadeError",
    "FacadeWireInvalidFactoryResultError",
    "FacadeWireInvocationError",
    "FacadeWireNoResolvedInstanceError",
    "FacadeWireNotAnObjectError",
    "FacadeWireNotInstantiableError",
    "FacadeWireServiceNotFoundError",
    "FacadeWireUndefinedMethodError",
    "FacadeWireUnknownFacadeError",
    "FacadeWireUnknownTypeError",
    "FacadeWireUnresolvedDependencyError",
    "IContainer",
    "Runtime",
    "ServiceContainerProtocol",
    "ServiceDescriptor",
    "SimpleContainer",
    "SingletonPolicy",
    "app",
    "container_context",
    "detect_runtime",
    "facade_registry",
    "singleton",
]
