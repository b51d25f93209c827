from __future__ import annotations

from collections.abc import Iterator

import pytest

from facadewire.container import Container
from facadewire.facade import Facade
from facadewire.registry import FacadeRegistry


@pytest.fixture()
def facadewire_container() -> Container:
    """Create a per-test container the ``facadewire_registry`` fixture resolves from.

    Override this fixture in a test suite to register the services its facades
    need, or to return any other ``ServiceContainerProtocol`` implementation.

    Returns:
        A new, empty ``Container`` instance.

    """
    return Container()


@pytest.fixture()
def facadewire_registry(facadewire_container: Container) -> Iterator[FacadeRegistry]:
    """Install a fresh ``FacadeRegistry`` on ``Facade`` for the duration of a test.

    Bindings, mocks and resolved instances created by the test never leak into
    other tests. The previously installed registry is restored on teardown.

    Yields:
        The registry every ``Facade`` subclass resolves through during the test.

    """
    registry = FacadeRegistry(facadewire_container)
    previous = Facade.get_registry()
    Facade.use_registry(registry)
    try:
        yield registry
    finally:
        registry.reset()
        Facade.use_registry(previous)


__all__ = ["facadewire_container", "facadewire_registry"]
