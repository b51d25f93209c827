from __future__ import annotations

import asyncio
import sys
import threading
from enum import Enum
from types import ModuleType
from typing import Any


class Runtime(str, Enum):
    """Name the concurrency backend that drives the current logical unit."""

    GEVENT = "gevent"
    """A ``gevent.Greenlet`` scheduled by the gevent hub."""

    GREENLET = "greenlet"
    """A raw ``greenlet.greenlet`` other than the root greenlet of its thread."""

    ASYNCIO = "asyncio"
    """An ``asyncio.Task`` running on an event loop."""

    THREAD = "thread"
    """A non-main OS thread outside any of the cooperative backends above."""

    PROCESS = "process"
    """Plain sequential code on the main thread."""


def loaded_module(name: str) -> ModuleType | None:
    """Return an already imported module without importing it.

    Backends are only considered active when the application imported them.
    """
    return sys.modules.get(name)


def current_gevent_greenlet() -> Any | None:
    """Return the running ``gevent.Greenlet`` or ``None`` outside one."""
    gevent = loaded_module("gevent")
    if gevent is None:
        return None
    current = gevent.getcurrent()
    if isinstance(current, gevent.Greenlet):
        return current
    return None


def current_raw_greenlet() -> Any | None:
    """Return the running greenlet unless it is the root greenlet of its thread."""
    greenlet_module = loaded_module("greenlet")
    if greenlet_module is None:
        return None
    current = greenlet_module.getcurrent()
    if current.parent is None:
        return None
    return current


def current_asyncio_task() -> asyncio.Task[Any] | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


def current_worker_thread() -> threading.Thread | None:
    """Return the current thread unless it is the main thread."""
    thread = threading.current_thread()
    if thread is threading.main_thread():
        return None
    return thread


def detect_runtime() -> Runtime:
    """Return the innermost backend currently driving execution.

    The order matches ``ExecutionContextResolver``: stackful coroutine runtimes
    take precedence over asyncio tasks, which take precedence over threads.
    """
    if current_gevent_greenlet() is not None:
        return Runtime.GEVENT
    if current_raw_greenlet() is not None:
        return Runtime.GREENLET
    if current_asyncio_task() is not None:
        return Runtime.ASYNCIO
    if current_worker_thread() is not None:
        return Runtime.THREAD
    return Runtime.PROCESS


__all__ = [
    "Runtime",
    "current_asyncio_task",
    "current_gevent_greenlet",
    "current_raw_greenlet",
    "current_worker_thread",
    "detect_runtime",
    "loaded_module",
]
