# vidimeet/server/ws_server.py
from __future__ import annotations
import logging
from typing import Optional

import websockets

from vidimeet.config import Settings, settings as default_settings
from vidimeet.server.matchmaker import Matchmaker
from vidimeet.server.router import handle_connection

logger = logging.getLogger(__name__)


class SignalServer:
    """Websocket listener feeding every connection into one Matchmaker."""

    def __init__(self, mm: Matchmaker, cfg: Optional[Settings] = None) -> None:
        self.mm = mm
        self.cfg = cfg or default_settings
        self._server = None

    async def _on_conn(self, ws) -> None:
        await handle_connection(ws, self.mm)

    async def start(self) -> None:
        self._server = await websockets.serve(
            self._on_conn,
            self.cfg.host,
            self.cfg.port,
            max_size=self.cfg.max_message_size,
        )
        logger.info("Signalling server listening on ws://%s:%d", self.cfg.host, self.cfg.port)

    async def stop(self) -> None:
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None

    async def serve_forever(self) -> None:
        await self.start()
        try:
            await self._server.serve_forever()
        finally:
            await self.stop()
