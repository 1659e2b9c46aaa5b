from __future__ import annotations
from typing import Any, Dict, Optional


class ConnectionRegistry:
    """Live connections: connection id -> send handle.

    A handle is whatever the transport sends through (the connection's
    outbox in production, a recorder in tests). The registry never sends itself.
    """

    def __init__(self) -> None:
        self._handles: Dict[str, Any] = {}

    def attach(self, conn_id: str, handle: Any) -> None:
        self._handles[conn_id] = handle

    def detach(self, conn_id: str) -> Optional[Any]:
        return self._handles.pop(conn_id, None)

    def get(self, conn_id: Optional[str]) -> Optional[Any]:
        if conn_id is None:
            return None
        return self._handles.get(conn_id)

    def online(self) -> list[str]:
        return sorted(self._handles.keys())

    def __contains__(self, conn_id: object) -> bool:
        return conn_id in self._handles

    def __len__(self) -> int:
        return len(self._handles)
