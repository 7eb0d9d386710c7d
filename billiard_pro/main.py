import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from billiard_pro import __version__
from billiard_pro.api.dependencies import get_player_service, get_tournament_service
from billiard_pro.core.config import settings
from billiard_pro.core.logging import configure_logging
from billiard_pro.routes import match_routes, player_routes, report_routes, tournament_routes
from billiard_pro.services.sample_data import load_sample_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.LOAD_SAMPLE_DATA:
        load_sample_data(get_player_service().store, get_tournament_service().store)
    logger.info(f"{settings.APP_TITLE} {__version__} ready, data in {settings.DATA_DIR}")
    yield


def create_app() -> FastAPI:
    configure_logging(settings.LOG_LEVEL)
    app = FastAPI(title=settings.APP_TITLE, version=__version__, lifespan=lifespan)

    # Include routers
    app.include_router(player_routes.router, prefix="/api/players", tags=["Players"])
    app.include_router(tournament_routes.router, prefix="/api/tournaments", tags=["Tournaments"])
    app.include_router(match_routes.router, prefix="/api/matches", tags=["Matches"])
    app.include_router(report_routes.router, prefix="/api", tags=["Reports"])

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()


def run():
    """Console entry point: serve the API with uvicorn."""
    uvicorn.run("billiard_pro.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
