# vidimeet/server/matchmaker.py
"""Pairing and relay core.

Owns the waiting pool, the room table and the connection registry. Every
public method runs to completion under one lock and returns the frames it
wants delivered as ``Outbound`` values; the transport sends them after the
lock is released, so nothing here ever awaits a peer.
"""
from __future__ import annotations
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from vidimeet.protocol import rpc
from vidimeet.protocol.types import ANSWER, ICE_CANDIDATE, OFFER, SIGNAL_KINDS
from vidimeet.server.session import ConnectionRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Room:
    room_id: str
    members: Tuple[str, str]
    created_at: float = field(default_factory=time.time)

    def __contains__(self, conn_id: object) -> bool:
        return conn_id in self.members

    def partner_of(self, conn_id: str) -> Optional[str]:
        a, b = self.members
        if conn_id == a:
            return b
        if conn_id == b:
            return a
        return None


@dataclass(frozen=True)
class Outbound:
    """One frame addressed to one connection."""
    conn_id: str
    handle: Any
    frame: Dict[str, Any]


def _build_signal(kind: str, room_id: str, sender_id: str, body: Any) -> Dict[str, Any]:
    if kind == OFFER:
        return rpc.evt_offer(room_id, body, sender_id)
    if kind == ANSWER:
        return rpc.evt_answer(room_id, body)
    if kind == ICE_CANDIDATE:
        return rpc.evt_ice_candidate(room_id, body)
    return rpc.evt_message(body)


class Matchmaker:
    def __init__(
        self,
        registry: Optional[ConnectionRegistry] = None,
        *,
        room_id_factory: Callable[[], str] = rpc.new_room_id,
    ) -> None:
        self.registry = registry if registry is not None else ConnectionRegistry()
        self._new_room_id = room_id_factory
        self._lock = threading.Lock()

        # dict keeps insertion order, so the pool is first-come first-matched
        self._waiting: Dict[str, None] = {}
        self._rooms: Dict[str, Room] = {}       # room_id -> Room
        self._member_room: Dict[str, str] = {}  # conn_id -> room_id

    # helpers (caller holds the lock)

    def _emit(self, out: List[Outbound], conn_id: Optional[str], frame: Dict[str, Any]) -> None:
        handle = self.registry.get(conn_id)
        if handle is None:
            logger.debug("skip %s to %s: not connected", frame["type"], conn_id)
            return
        out.append(Outbound(conn_id, handle, frame))

    def _destroy_room(self, room: Room) -> None:
        self._rooms.pop(room.room_id, None)
        for member in room.members:
            if self._member_room.get(member) == room.room_id:
                del self._member_room[member]

    # events

    def connect(self, conn_id: str, handle: Any) -> List[Outbound]:
        with self._lock:
            self.registry.attach(conn_id, handle)
        logger.info("User connected: %s", conn_id)
        return []

    def join_pool(self, conn_id: str) -> List[Outbound]:
        out: List[Outbound] = []
        with self._lock:
            if conn_id not in self.registry:
                logger.debug("join-pool from unknown connection %s", conn_id)
                return out
            if conn_id in self._waiting or conn_id in self._member_room:
                logger.debug("join-pool ignored: %s already waiting or paired", conn_id)
                return out

            if not self._waiting:
                self._waiting[conn_id] = None
                logger.info("User %s added to waiting pool", conn_id)
                return out

            # claim the partner before emitting anything
            partner_id = next(iter(self._waiting))
            del self._waiting[partner_id]

            room = Room(self._new_room_id(), (conn_id, partner_id))
            self._rooms[room.room_id] = room
            self._member_room[conn_id] = room.room_id
            self._member_room[partner_id] = room.room_id

            self._emit(out, conn_id, rpc.evt_matched(room.room_id, partner_id))
            self._emit(out, partner_id, rpc.evt_matched(room.room_id, conn_id))
        logger.info("Matched users %s and %s in room %s", conn_id, partner_id, room.room_id)
        return out

    def relay_signal(self, kind: str, conn_id: str, room_id: str, body: Any) -> List[Outbound]:
        if kind not in SIGNAL_KINDS:
            raise ValueError(f"not a signalling kind: {kind!r}")
        out: List[Outbound] = []
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None or conn_id not in room:
                logger.debug("drop %s from %s: not a member of room %s", kind, conn_id, room_id)
                return out
            partner_id = room.partner_of(conn_id)
            self._emit(out, partner_id, _build_signal(kind, room_id, conn_id, body))
        return out

    def leave(self, conn_id: str, room_id: str) -> List[Outbound]:
        out: List[Outbound] = []
        with self._lock:
            # only a member may close a room; any other sender is a stale reference
            room = self._rooms.get(room_id)
            if room is None or conn_id not in room:
                logger.debug("leave-room from %s ignored: not in room %s", conn_id, room_id)
                return out
            self._emit(out, room.partner_of(conn_id), rpc.evt_user_disconnected())
            self._destroy_room(room)
        logger.info("User %s left room %s", conn_id, room_id)
        return out

    def report(self, conn_id: str, target_id: Any) -> List[Outbound]:
        # telemetry only: no pool or room changes
        logger.info("User %s reported user %s", conn_id, target_id)
        return []

    def disconnect(self, conn_id: str) -> List[Outbound]:
        out: List[Outbound] = []
        with self._lock:
            self._waiting.pop(conn_id, None)

            room_id = self._member_room.get(conn_id)
            room = self._rooms.get(room_id) if room_id is not None else None
            if room is not None:
                self._emit(out, room.partner_of(conn_id), rpc.evt_user_disconnected())
                self._destroy_room(room)

            known = self.registry.detach(conn_id) is not None
        if known:
            logger.info("User disconnected: %s", conn_id)
        return out

    # queries

    def is_waiting(self, conn_id: str) -> bool:
        with self._lock:
            return conn_id in self._waiting

    def room_of(self, conn_id: str) -> Optional[Room]:
        with self._lock:
            room_id = self._member_room.get(conn_id)
            return self._rooms.get(room_id) if room_id is not None else None

    def get_room(self, room_id: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(room_id)

    def status(self) -> Dict[str, int]:
        with self._lock:
            return {
                "waitingUsers": len(self._waiting),
                "activeRooms": len(self._rooms),
            }

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "totalUsers": len(self.registry),
                "waitingUsers": len(self._waiting),
                "activeRooms": len(self._rooms),
                "activeConnections": len(self._member_room),
            }
