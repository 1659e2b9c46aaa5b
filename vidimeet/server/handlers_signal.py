from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List

from vidimeet.protocol.rpc import evt_error
from vidimeet.protocol.types import (
    ERR_UNKNOWN_EVENT, JOIN_POOL, LEAVE_ROOM, REPORT, SIGNAL_BODY_KEY, SIGNAL_KINDS,
)
from vidimeet.server.matchmaker import Matchmaker, Outbound

logger = logging.getLogger(__name__)

Handler = Callable[[Matchmaker, str, Dict[str, Any]], List[Outbound]]


def _room_id(payload: Dict[str, Any]) -> str | None:
    room_id = payload.get("roomId")
    if isinstance(room_id, str) and room_id:
        return room_id
    return None


def handle_join_pool(mm: Matchmaker, conn_id: str, payload: Dict[str, Any]) -> List[Outbound]:
    return mm.join_pool(conn_id)


def _make_signal_handler(kind: str) -> Handler:
    body_key = SIGNAL_BODY_KEY[kind]

    def _handle(mm: Matchmaker, conn_id: str, payload: Dict[str, Any]) -> List[Outbound]:
        room_id = _room_id(payload)
        if room_id is None:
            logger.debug("drop %s from %s: missing roomId", kind, conn_id)
            return []
        return mm.relay_signal(kind, conn_id, room_id, payload.get(body_key))

    _handle.__name__ = f"handle_{kind.replace('-', '_')}"
    return _handle


def handle_leave_room(mm: Matchmaker, conn_id: str, payload: Dict[str, Any]) -> List[Outbound]:
    room_id = _room_id(payload)
    if room_id is None:
        logger.debug("drop leave-room from %s: missing roomId", conn_id)
        return []
    return mm.leave(conn_id, room_id)


def handle_report(mm: Matchmaker, conn_id: str, payload: Dict[str, Any]) -> List[Outbound]:
    return mm.report(conn_id, payload.get("userId"))


ROUTES: Dict[str, Handler] = {
    JOIN_POOL: handle_join_pool,
    LEAVE_ROOM: handle_leave_room,
    REPORT: handle_report,
    **{kind: _make_signal_handler(kind) for kind in SIGNAL_KINDS},
}


def handle_event(mm: Matchmaker, conn_id: str, type_: str, payload: Any) -> List[Outbound]:
    """Validate one inbound event and apply it to the matchmaker.

    Unknown types answer the sender with an error frame. Payloads that are
    not objects are malformed and ignored without touching any state.
    """
    route = ROUTES.get(type_)
    if route is None:
        handle = mm.registry.get(conn_id)
        if handle is None:
            return []
        return [Outbound(conn_id, handle, evt_error(f"{ERR_UNKNOWN_EVENT}: {type_}"))]

    if not isinstance(payload, dict):
        logger.debug("drop %s from %s: payload is not an object", type_, conn_id)
        return []
    return route(mm, conn_id, payload)
