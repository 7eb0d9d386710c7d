from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from billiard_pro.api.dependencies import get_tournament_service, to_http_exception
from billiard_pro.models.tournament_model import MatchStatus
from billiard_pro.schemas.tournament_schemas import TournamentMatch
from billiard_pro.services.tournament_service import TournamentService

router = APIRouter()


@router.get("", response_model=List[TournamentMatch], summary="List Matches Across Tournaments")
async def list_matches(
    status: Optional[MatchStatus] = Query(None, description="Only return matches in this status"),
    tournament_id: Optional[str] = Query(None, description="Only return matches of this tournament"),
    service: TournamentService = Depends(get_tournament_service)
):
    """Every match of every tournament, each tagged with its tournament's name."""
    try:
        return service.list_matches(status=status, tournament_id=tournament_id)
    except ValueError as e:
        raise to_http_exception(e)
