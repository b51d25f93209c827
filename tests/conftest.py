"""Shared pytest fixtures for facadewire tests."""

from collections.abc import Iterator

import pytest

from facadewire.container import Container
from facadewire.container_context import container_context
from facadewire.facade import Facade
from facadewire.registry import FacadeRegistry


@pytest.fixture()
def container() -> Container:
    """Empty container with the default singleton policy."""
    return Container()


@pytest.fixture()
def registry(container: Container) -> Iterator[FacadeRegistry]:
    """Fresh registry installed on every Facade subclass for one test."""
    fresh = FacadeRegistry(container)
    previous = Facade.get_registry()
    Facade.use_registry(fresh)
    try:
        yield fresh
    finally:
        fresh.reset()
        Facade.use_registry(previous)


@pytest.fixture(autouse=True)
def _reset_container_context() -> Iterator[None]:
    yield
    container_context.reset()
