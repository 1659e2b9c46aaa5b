# vidimeet/server/main.py
# Run: python -m vidimeet.server.main
from __future__ import annotations
import asyncio
import logging

import uvicorn

from vidimeet.config import settings
from vidimeet.server.http_api import create_app
from vidimeet.server.matchmaker import Matchmaker
from vidimeet.server.ws_server import SignalServer

logger = logging.getLogger(__name__)


async def main() -> None:
    mm = Matchmaker()

    ws_server = SignalServer(mm, settings)
    http_server = uvicorn.Server(uvicorn.Config(
        create_app(mm, settings),
        host=settings.host,
        port=settings.http_port,
        log_level=settings.log_level.lower(),
    ))

    logger.info("Starting %s (ws :%d, http :%d)", settings.app_name, settings.port, settings.http_port)
    await asyncio.gather(ws_server.serve_forever(), http_server.serve())


def run() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Shutting down server...")


if __name__ == "__main__":
    run()
