from __future__ import annotations

import inspect
import types
from collections.abc import Callable
from dataclasses import dataclass
from inspect import Parameter
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from facadewire._internal.type_checks import is_primitive_type

NO_ANNOTATION: Any = object()
_NONE_ADMITTING_ANNOTATIONS: tuple[Any, ...] = (None, type(None), Any, object)
_UNION_ORIGINS: tuple[Any, ...] = (Union, types.UnionType)


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """Describe one constructor or factory parameter for reflective injection."""

    name: str
    kind: Any
    annotation: Any
    """Declared type with ``Annotated`` metadata stripped, or ``NO_ANNOTATION``."""
    default: Any
    """Default value, or ``inspect.Parameter.empty``."""
    injectable_type: type[Any] | None
    """First non-primitive class among the declared alternatives, if any."""
    is_union: bool
    accepts_none: bool

    @property
    def has_default(self) -> bool:
        return self.default is not Parameter.empty

    @property
    def is_variadic(self) -> bool:
        return self.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD)

    @property
    def is_positional_only(self) -> bool:
        return self.kind is Parameter.POSITIONAL_ONLY


class ParametersInspector:
    """List constructor and factory parameters with their declared types.

    Results are cached per inspected callable.
    """

    def __init__(self) -> None:
        self._cache: dict[Any, tuple[ParameterDescriptor, ...]] = {}

    def describe(self, target: Callable[..., Any]) -> tuple[ParameterDescriptor, ...]:
        """Return parameter descriptors for a class constructor or a factory callable.

        Args:
            target: Class to build or factory to call.

        """
        try:
            return self._cache[target]
        except KeyError:
            pass
        except TypeError:
            return self._describe(target)

        descriptors = self._describe(target)
        self._cache[target] = descriptors
        return descriptors

    def _describe(self, target: Callable[..., Any]) -> tuple[ParameterDescriptor, ...]:
        parameters = self._signature_parameters(target)
        if not parameters:
            return ()
        hints = self._resolved_type_hints(target)
        return tuple(
            self._describe_parameter(parameter, hints.get(parameter.name, NO_ANNOTATION))
            for parameter in parameters
        )

    def _signature_parameters(self, target: Callable[..., Any]) -> tuple[Parameter, ...]:
        if inspect.isclass(target) and (
            target.__init__ is object.__init__ and target.__new__ is object.__new__
        ):
            return ()
        try:
            signature = inspect.signature(target)
        except (TypeError, ValueError):
            return ()
        return tuple(signature.parameters.values())

    def _resolved_type_hints(self, target: Callable[..., Any]) -> dict[str, Any]:
        hint_sources: list[Any] = [target]
        if inspect.isclass(target):
            hint_sources = [target.__init__, target.__new__]

        hints: dict[str, Any] = {}
        for source in hint_sources:
            try:
                source_hints = get_type_hints(source, include_extras=True)
            except (AttributeError, NameError, TypeError):
                continue
            for name, hint in source_hints.items():
                hints.setdefault(name, hint)
        return hints

    def _describe_parameter(self, parameter: Parameter, hint: Any) -> ParameterDescriptor:
        annotation = hint
        if annotation is NO_ANNOTATION:
            raw_annotation = parameter.annotation
            if raw_annotation is not Parameter.empty and not isinstance(raw_annotation, str):
                annotation = raw_annotation
        annotation = self._strip_annotated(annotation)

        alternatives = self._alternatives(annotation)
        is_union = len(alternatives) > 1
        injectable_type = next(
            (alternative for alternative in alternatives if not is_primitive_type(alternative)),
            None,
        )
        accepts_none = annotation is not NO_ANNOTATION and any(
            alternative in _NONE_ADMITTING_ANNOTATIONS for alternative in alternatives
        )
        return ParameterDescriptor(
            name=parameter.name,
            kind=parameter.kind,
            annotation=annotation,
            default=parameter.default,
            injectable_type=injectable_type,
            is_union=is_union,
            accepts_none=accepts_none,
        )

    def _alternatives(self, annotation: Any) -> tuple[Any, ...]:
        if annotation is NO_ANNOTATION:
            return ()
        if get_origin(annotation) in _UNION_ORIGINS:
            return tuple(self._strip_annotated(arg) for arg in get_args(annotation))
        return (annotation,)

    def _strip_annotated(self, annotation: Any) -> Any:
        while get_origin(annotation) is Annotated:
            annotation = get_args(annotation)[0]
        return annotation


__all__ = ["NO_ANNOTATION", "ParameterDescriptor", "ParametersInspector"]
