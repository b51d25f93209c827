from __future__ import annotations

import logging
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from facadewire.execution_context import ExecutionContext, ExecutionContextResolver

logger = logging.getLogger(__name__)


class ContextScopedStore:
    """Key/value storage partitioned by execution context.

    Every operation works on the slice that belongs to the logical unit that is
    running at call time, as reported by ``ExecutionContextResolver``. A unit
    can never read or mutate another unit's slice.

    When ``evict_finished`` is enabled (the default), a slice created for a
    task, greenlet or thread is dropped automatically once that handle is
    garbage collected, so identities recycled by the runtime never observe
    stale entries.

    Examples:
        .. code-block:: python

            store = ContextScopedStore()
            store.set("facade.resolved.Mail", mailer)


            async def other_request() -> None:
                assert store.get("facade.resolved.Mail") is None

    """

    def __init__(
        self,
        resolver: ExecutionContextResolver | None = None,
        *,
        evict_finished: bool = True,
    ) -> None:
        self._resolver = resolver if resolver is not None else ExecutionContextResolver()
        self._evict_finished = evict_finished
        self._slices: dict[str, dict[str, Any]] = {}
        self._finalizers: dict[str, weakref.finalize] = {}

    @property
    def resolver(self) -> ExecutionContextResolver:
        return self._resolver

    def context_id(self) -> str:
        """Return the id of the slice the next operation will use."""
        return self._resolver.current_id()

    def get(self, key: str, default: Any = None) -> Any:
        slice_ = self._slices.get(self._resolver.current_id())
        if slice_ is None:
            return default
        return slice_.get(key, default)

    def has(self, key: str) -> bool:
        slice_ = self._slices.get(self._resolver.current_id())
        return slice_ is not None and key in slice_

    def set(self, key: str, value: Any) -> None:
        context = self._resolver.current()
        slice_ = self._slices.get(context.id)
        if slice_ is None:
            slice_ = self._slices.setdefault(context.id, {})
            self._track_owner(context)
        slice_[key] = value

    def delete(self, key: str) -> None:
        slice_ = self._slices.get(self._resolver.current_id())
        if slice_ is not None:
            slice_.pop(key, None)

    def clear_by_prefix(self, prefix: str) -> None:
        """Remove every key of the current slice that starts with ``prefix``."""
        slice_ = self._slices.get(self._resolver.current_id())
        if slice_ is None:
            return
        for key in [key for key in slice_ if key.startswith(prefix)]:
            del slice_[key]

    def clear(self) -> None:
        """Drop the whole slice of the current execution context."""
        self.discard(self._resolver.current_id())

    def keys(self) -> list[str]:
        """Return the keys of the current slice."""
        return list(self._slices.get(self._resolver.current_id(), ()))

    def contexts(self) -> list[str]:
        """Return the ids of every context that currently owns a slice."""
        return list(self._slices)

    def discard(self, context_id: str) -> None:
        """Drop the slice of ``context_id`` regardless of the current context.

        Intended for owners of a unit's lifecycle (a server loop or middleware)
        that reclaim state after the unit finished.
        """
        self._slices.pop(context_id, None)
        finalizer = self._finalizers.pop(context_id, None)
        if finalizer is not None:
            finalizer.detach()

    @contextmanager
    def scoped(self) -> Iterator[str]:
        """Clear the current slice when the block exits.

        Yields:
            The id of the execution context the block runs in.

        """
        context_id = self._resolver.current_id()
        try:
            yield context_id
        finally:
            self.discard(context_id)

    def _track_owner(self, context: ExecutionContext) -> None:
        if not self._evict_finished or context.owner is None:
            return
        try:
            finalizer = weakref.finalize(context.owner, self._evict, context.id)
        except TypeError:
            return
        finalizer.atexit = False
        self._finalizers[context.id] = finalizer

    def _evict(self, context_id: str) -> None:
        self._finalizers.pop(context_id, None)
        if self._slices.pop(context_id, None) is not None:
            logger.debug("Evicted context slice %s after its owner finished", context_id)

    def __len__(self) -> int:
        return len(self._slices)


__all__ = ["ContextScopedStore"]
