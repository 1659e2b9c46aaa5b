from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, Iterable, Optional

from websockets.exceptions import ConnectionClosed

from vidimeet.protocol.rpc import FrameError, decode, encode, evt_error, new_connection_id
from vidimeet.protocol.types import ERR_BAD_JSON, ERR_INTERNAL
from vidimeet.server.handlers_signal import handle_event
from vidimeet.server.matchmaker import Matchmaker, Outbound

logger = logging.getLogger(__name__)


async def send_frame(ws: Any, obj: dict) -> bool:
    try:
        await ws.send(encode(obj))
        return True
    except ConnectionClosed:
        # peer went away after the frame was addressed; nothing to deliver to
        logger.debug("send of %s skipped: connection closed", obj.get("type"))
        return False


class Outbox:
    """Per-connection send queue drained by its own writer task.

    ``push`` never waits, so a partner whose socket is slow to drain does
    not hold up the receive loop that addressed it. Frames leave in the
    order they were pushed.
    """

    def __init__(self, ws: Any, conn_id: str) -> None:
        self.ws = ws
        self.conn_id = conn_id
        self._queue: asyncio.Queue[Optional[Dict[str, Any]]] = asyncio.Queue()
        self._closed = False
        self._task = asyncio.create_task(self._drain())

    def push(self, frame: Dict[str, Any]) -> None:
        if self._closed:
            logger.debug("drop %s to %s: outbox closed", frame.get("type"), self.conn_id)
            return
        self._queue.put_nowait(frame)

    async def _drain(self) -> None:
        while True:
            frame = await self._queue.get()
            if frame is None:
                return
            if not await send_frame(self.ws, frame):
                self._closed = True
                return

    async def close(self) -> None:
        """Flush what is queued, then stop the writer."""
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(None)
        await self._task


async def deliver(outbound: Iterable[Outbound]) -> None:
    for item in outbound:
        push = getattr(item.handle, "push", None)
        if push is not None:
            push(item.frame)
        else:
            await send_frame(item.handle, item.frame)


async def handle_connection(ws: Any, mm: Matchmaker, conn_id: Optional[str] = None) -> None:
    conn_id = conn_id or new_connection_id()
    outbox = Outbox(ws, conn_id)
    mm.connect(conn_id, outbox)
    try:
        async for raw in ws:
            try:
                type_, payload = decode(raw)
            except FrameError:
                outbox.push(evt_error(ERR_BAD_JSON))
                continue

            try:
                out = handle_event(mm, conn_id, type_, payload)
            except Exception:
                logger.exception("error handling %s from %s", type_, conn_id)
                outbox.push(evt_error(ERR_INTERNAL))
                continue
            await deliver(out)
    except ConnectionClosed:
        logger.debug("connection %s dropped", conn_id)
    finally:
        await deliver(mm.disconnect(conn_id))
        await outbox.close()
