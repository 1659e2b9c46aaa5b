"""Status endpoints for the signalling relay."""
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from vidimeet import __version__
from vidimeet.config import Settings, settings as default_settings
from vidimeet.server.matchmaker import Matchmaker


def create_app(mm: Matchmaker, cfg: Optional[Settings] = None) -> FastAPI:
    cfg = cfg or default_settings

    app = FastAPI(
        title=f"{cfg.app_name} Signalling API",
        description="Health and statistics for the random-pairing signalling relay",
        version=__version__,
        debug=cfg.debug,
    )
    app.state.matchmaker = mm

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {"message": f"{cfg.app_name} signalling server", "version": __version__}

    @app.get("/health")
    async def health_check(request: Request):
        """Waiting and room counts"""
        counts = request.app.state.matchmaker.status()
        return {
            "status": "OK",
            **counts,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/stats")
    async def stats(request: Request):
        return request.app.state.matchmaker.stats()

    return app
