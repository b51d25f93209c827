from __future__ import annotations

import logging

from facadewire.facade import Facade
from facadewire.registry import FacadeRegistry

try:
    from fastapi import FastAPI
    from starlette.types import ASGIApp, Receive, Scope, Send
except ModuleNotFoundError as exc:  # pragma: no cover - exercised in optional import scenarios
    message = "FastAPI integration requires fastapi. Install with 'fastapi'."
    raise ModuleNotFoundError(message) from exc

logger = logging.getLogger(__name__)

_SCOPED_TYPES = frozenset({"http", "websocket"})


class FacadeContextMiddleware:
    """Drop the request's context slice once the response is sent.

    Context-safe facades resolved while handling a request are cached in the
    slice of the task serving it. This pure ASGI middleware discards that slice
    when the request finishes, so a task id recycled by the event loop never
    sees instances of an earlier request.

    Sync endpoints run in a threadpool and resolve in the worker thread's slice,
    which outlives the request; call ``Facade.clear()`` there when the service
    holds request state.
    """

    def __init__(self, app: ASGIApp, *, registry: FacadeRegistry | None = None) -> None:
        self.app = app
        self._registry = registry

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in _SCOPED_TYPES:
            await self.app(scope, receive, send)
            return

        registry = self._registry if self._registry is not None else Facade.get_registry()
        store = registry.store
        with store.scoped() as context_id:
            logger.debug("Serving %s request in context %s", scope["type"], context_id)
            await self.app(scope, receive, send)


def setup_facadewire(app: FastAPI, *, registry: FacadeRegistry | None = None) -> None:
    """Install ``FacadeContextMiddleware`` on a FastAPI application.

    Args:
        app: Application to configure.
        registry: Registry whose store is cleared per request. Defaults to the
            registry installed on ``Facade`` at request time.

    Examples:
        .. code-block:: python

            app = FastAPI()
            setup_facadewire(app)

    """
    app.add_middleware(FacadeContextMiddleware, registry=registry)


__all__ = ["FacadeContextMiddleware", "setup_facadewire"]
