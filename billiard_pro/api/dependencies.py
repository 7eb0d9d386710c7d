import logging
from functools import lru_cache

from fastapi import HTTPException
from pydantic import ValidationError

from billiard_pro.core.config import settings
from billiard_pro.core.exceptions import (
    AlreadyCompleted,
    BracketError,
    DuplicateMatchError,
    InvalidStatusTransition,
    NotFoundError,
    TournamentNotStarted,
)
from billiard_pro.services.player_service import PlayerService
from billiard_pro.services.storage import JsonPlayerStore, JsonTournamentStore
from billiard_pro.services.tournament_service import TournamentService

logger = logging.getLogger(__name__)

CONFLICT_ERRORS = (AlreadyCompleted, InvalidStatusTransition, DuplicateMatchError, TournamentNotStarted)

@lru_cache()
def get_player_service() -> PlayerService:
    return PlayerService(store=JsonPlayerStore(settings.players_path))

@lru_cache()
def get_tournament_service() -> TournamentService:
    return TournamentService(
        store=JsonTournamentStore(settings.tournaments_path),
        player_service=get_player_service(),
    )

def to_http_exception(error: Exception) -> HTTPException:
    """Translate a service error into the HTTP error returned to the client."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, CONFLICT_ERRORS):
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(status_code=422, detail=str(error))
    if isinstance(error, (BracketError, ValueError)):
        return HTTPException(status_code=400, detail=str(error))
    logger.exception(f"Unexpected error: {error}")
    return HTTPException(status_code=500, detail="An unexpected error occurred.")
