from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, TypeVar

from facadewire._internal.type_checks import is_runtime_class

C = TypeVar("C", bound=type[Any])

SINGLETON_MARKER_ATTR = "__facadewire_singleton__"


def singleton(cls: C) -> C:
    """Mark a class as always-singleton.

    The container caches every object of a marked class under the abstract key
    it was resolved for, even when the binding itself is transient. The marker
    is not inherited by subclasses.

    Examples:
        .. code-block:: python

            @singleton
            class HttpClient:
                def __init__(self, logger: Logger) -> None:
                    self.logger = logger


            container = Container()
            assert container.make(HttpClient) is container.make(HttpClient)

    """
    setattr(cls, SINGLETON_MARKER_ATTR, cls)
    return cls


def is_marked_singleton(candidate: object) -> bool:
    """Return true when ``candidate`` itself was decorated with ``@singleton``."""
    if not is_runtime_class(candidate):
        return False
    return vars(candidate).get(SINGLETON_MARKER_ATTR) is candidate


def is_settings_model(candidate: object) -> bool:
    """Return true when ``candidate`` is a pydantic-settings ``BaseSettings`` subclass.

    Settings models load their values from the environment, so the container
    builds them without autowiring and caches them by default. pydantic-settings
    is never imported here: a model can only exist once its module is loaded.
    """
    base = getattr(sys.modules.get("pydantic_settings"), "BaseSettings", None)
    if not isinstance(base, type) or not is_runtime_class(candidate):
        return False
    return candidate is not base and issubclass(candidate, base)


@dataclass(frozen=True, slots=True)
class SingletonPolicy:
    """Decide whether objects of a type are always cached by the container.

    A type is always-singleton when it carries the ``@singleton`` marker, when
    it is listed in ``always_singleton_types`` (subclasses included), or when it
    is a pydantic-settings model and ``settings_are_singletons`` is enabled.
    """

    always_singleton_types: tuple[type[Any], ...] = field(default=())
    settings_are_singletons: bool = True

    def is_always_singleton(self, candidate: object) -> bool:
        """Return true when objects of ``candidate`` must be promoted to singletons.

        Args:
            candidate: Runtime class of a freshly built object.

        """
        if not is_runtime_class(candidate):
            return False
        if is_marked_singleton(candidate):
            return True
        if self.always_singleton_types and issubclass(candidate, self.always_singleton_types):
            return True
        return self.settings_are_singletons and is_settings_model(candidate)


__all__ = [
    "SINGLETON_MARKER_ATTR",
    "SingletonPolicy",
    "is_marked_singleton",
    "is_settings_model",
    "singleton",
]
