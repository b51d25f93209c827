from __future__ import annotations

from typing import Any

from facadewire.exceptions import FacadeWireServiceNotFoundError


class SimpleContainer:
    """Store ready-made services by id.

    A minimal ``ServiceContainerProtocol`` implementation for applications that
    wire services by hand and only need facades for dispatch.
    """

    def __init__(self) -> None:
        self._entries: dict[Any, Any] = {}

    def set(self, service_id: Any, value: Any) -> None:
        self._entries[service_id] = value

    def get(self, service_id: Any) -> Any:
        """Return the service stored under ``service_id``.

        Raises:
            FacadeWireServiceNotFoundError: If nothing was stored under the id.

        """
        if not self.has(service_id):
            raise FacadeWireServiceNotFoundError(service_id)
        return self._entries[service_id]

    def has(self, service_id: Any) -> bool:
        return service_id in self._entries

    def remove(self, service_id: Any) -> None:
        self._entries.pop(service_id, None)


__all__ = ["SimpleContainer"]
