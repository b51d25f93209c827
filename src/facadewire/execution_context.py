from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from facadewire.runtime import (
    Runtime,
    current_asyncio_task,
    current_gevent_greenlet,
    current_raw_greenlet,
    current_worker_thread,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExecutionContext:
    """Identity of the logical unit that is currently running.

    ``owner`` is the live backend handle (task, greenlet or thread). It is
    ``None`` for the process fallback, which never terminates while code runs.
    """

    id: str
    runtime: Runtime
    owner: Any = None


class ContextProbe(Protocol):
    """Capability probe for one concurrency backend."""

    def try_resolve(self) -> ExecutionContext | None:
        """Return the current unit for this backend, or ``None`` when inactive."""
        ...


class GeventProbe:
    """Identify the running ``gevent.Greenlet``.

    ``minimal_ident`` is numbered per hub and every thread has its own hub, so
    the object id is used instead.
    """

    def try_resolve(self) -> ExecutionContext | None:
        current = current_gevent_greenlet()
        if current is None:
            return None
        return ExecutionContext(id=f"gevent:{id(current)}", runtime=Runtime.GEVENT, owner=current)


class GreenletProbe:
    """Identify the running non-root greenlet."""

    def try_resolve(self) -> ExecutionContext | None:
        current = current_raw_greenlet()
        if current is None:
            return None
        return ExecutionContext(id=f"greenlet:{id(current)}", runtime=Runtime.GREENLET, owner=current)


class AsyncioTaskProbe:
    """Identify the running ``asyncio.Task``."""

    def try_resolve(self) -> ExecutionContext | None:
        task = current_asyncio_task()
        if task is None:
            return None
        return ExecutionContext(id=f"task:{id(task)}", runtime=Runtime.ASYNCIO, owner=task)


class ThreadProbe:
    """Identify a worker thread; the main thread falls through to the process id."""

    def try_resolve(self) -> ExecutionContext | None:
        thread = current_worker_thread()
        if thread is None:
            return None
        return ExecutionContext(id=f"thread:{id(thread)}", runtime=Runtime.THREAD, owner=thread)


DEFAULT_PROBES: tuple[ContextProbe, ...] = (
    GeventProbe(),
    GreenletProbe(),
    AsyncioTaskProbe(),
    ThreadProbe(),
)


class ExecutionContextResolver:
    """Derive a stable identity for the currently running logical unit.

    Probes are evaluated in order and the first one that reports an active unit
    wins. A probe that raises is treated as inactive. When no probe matches, the
    identity is ``"proc:<pid>"``, so ``current`` never raises.

    The default order puts stackful coroutine runtimes (gevent, greenlet) before
    asyncio tasks and threads, so the id reflects the innermost scheduling unit
    that actually drives execution.

    Examples:
        .. code-block:: python

            resolver = ExecutionContextResolver()
            resolver.current_id()  # "proc:4242" in plain sequential code


            async def handler() -> str:
                return resolver.current_id()  # "task:140237..." inside a task

    """

    def __init__(self, probes: Sequence[ContextProbe] | None = None) -> None:
        self._probes: tuple[ContextProbe, ...] = (
            DEFAULT_PROBES if probes is None else tuple(probes)
        )

    @property
    def probes(self) -> tuple[ContextProbe, ...]:
        return self._probes

    def current(self) -> ExecutionContext:
        """Return the current execution context."""
        for probe in self._probes:
            try:
                context = probe.try_resolve()
            except Exception:
                logger.debug(
                    "Execution context probe %s failed, trying the next one",
                    type(probe).__name__,
                    exc_info=True,
                )
                continue
            if context is not None:
                return context
        return ExecutionContext(id=f"proc:{os.getpid()}", runtime=Runtime.PROCESS)

    def current_id(self) -> str:
        """Return the current execution context id."""
        return self.current().id


__all__ = [
    "DEFAULT_PROBES",
    "AsyncioTaskProbe",
    "ContextProbe",
    "ExecutionContext",
    "ExecutionContextResolver",
    "GeventProbe",
    "GreenletProbe",
    "ThreadProbe",
]
