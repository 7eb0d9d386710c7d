from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from billiard_pro.api.dependencies import get_tournament_service, to_http_exception
from billiard_pro.models.tournament_model import TournamentModel, TournamentStatus
from billiard_pro.schemas.tournament_schemas import (
    AddPlayerRequest,
    BracketResponse,
    RecordWinnerRequest,
    TournamentCreate,
    TournamentUpdate,
)
from billiard_pro.services.tournament_service import TournamentService, bracket_view

router = APIRouter()


# --- Tournament Endpoints ---

@router.post("", response_model=TournamentModel, status_code=201, summary="Create New Tournament")
async def create_tournament(
    tournament_data: TournamentCreate,
    service: TournamentService = Depends(get_tournament_service)
):
    """
    Creates a new tournament. It opens in the Registration status with no players.

    - **name**: Name of the tournament (must be 3-100 characters).
    - **tournament_type**: Declared format. Only Single Elimination brackets can be generated.
    - **end_date** (optional): Must not be earlier than the start_date if both are provided.
    """
    try:
        tournament = TournamentModel(**tournament_data.model_dump())
        return service.create_tournament(tournament)
    except ValueError as e:
        raise to_http_exception(e)


@router.get("", response_model=List[TournamentModel], summary="List Tournaments")
async def list_tournaments(
    status: Optional[TournamentStatus] = Query(None, description="Only return tournaments in this status"),
    service: TournamentService = Depends(get_tournament_service)
):
    return service.list_tournaments(status=status)


@router.get("/{tournament_id}", response_model=TournamentModel, summary="Get Tournament Details")
async def get_tournament(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    service: TournamentService = Depends(get_tournament_service)
):
    tournament = service.get_tournament(tournament_id)
    if not tournament:
        raise HTTPException(status_code=404, detail="Tournament not found")
    return tournament


@router.patch("/{tournament_id}", response_model=TournamentModel, summary="Update Tournament Details")
async def update_tournament(
    changes: TournamentUpdate,
    tournament_id: str = Path(..., description="The ID of the tournament"),
    service: TournamentService = Depends(get_tournament_service)
):
    """Updates descriptive fields. Type and size are frozen once registration closes."""
    try:
        return service.update_tournament(tournament_id, changes.model_dump(exclude_unset=True))
    except ValueError as e:
        raise to_http_exception(e)


@router.delete("/{tournament_id}", status_code=204, summary="Delete Tournament")
async def delete_tournament(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    service: TournamentService = Depends(get_tournament_service)
):
    if not service.delete_tournament(tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    return None


# --- Registration Endpoints ---

@router.post("/{tournament_id}/players", response_model=TournamentModel, summary="Register Player")
async def add_player(
    player_data: AddPlayerRequest,
    tournament_id: str = Path(..., description="The ID of the tournament"),
    service: TournamentService = Depends(get_tournament_service)
):
    """Registers a player. Only allowed while the tournament is in Registration and not full."""
    try:
        return service.add_player(tournament_id, player_data.player_id)
    except ValueError as e:
        raise to_http_exception(e)


@router.delete("/{tournament_id}/players/{player_id}", response_model=TournamentModel, summary="Unregister Player")
async def remove_player(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    player_id: str = Path(..., description="The ID of the player to remove"),
    service: TournamentService = Depends(get_tournament_service)
):
    try:
        return service.remove_player(tournament_id, player_id)
    except ValueError as e:
        raise to_http_exception(e)


# --- Bracket Endpoints ---

@router.post("/{tournament_id}/start", response_model=TournamentModel, summary="Start Tournament")
async def start_tournament(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    service: TournamentService = Depends(get_tournament_service)
):
    """Closes registration. At least two players must be registered."""
    try:
        return service.start_tournament(tournament_id)
    except ValueError as e:
        raise to_http_exception(e)


@router.post("/{tournament_id}/bracket", response_model=BracketResponse, summary="Generate Bracket")
async def generate_bracket(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    force: bool = Query(False, description="Replace an existing bracket that has no recorded results"),
    service: TournamentService = Depends(get_tournament_service)
):
    """
    Shuffles the registered players into round 1. With an odd number of players the
    last one advances on a bye.
    """
    try:
        tournament = service.generate_bracket(tournament_id, force=force)
        return bracket_view(tournament)
    except ValueError as e:
        raise to_http_exception(e)


@router.get("/{tournament_id}/bracket", response_model=BracketResponse, summary="Get Bracket")
async def get_bracket(
    tournament_id: str = Path(..., description="The ID of the tournament"),
    service: TournamentService = Depends(get_tournament_service)
):
    """Returns the matches grouped by round, ready for rendering."""
    try:
        return service.get_bracket(tournament_id)
    except ValueError as e:
        raise to_http_exception(e)


@router.post("/{tournament_id}/matches/{match_id}/winner", response_model=BracketResponse, summary="Record Match Winner")
async def record_winner(
    payload: RecordWinnerRequest,
    tournament_id: str = Path(..., description="The ID of the tournament"),
    match_id: str = Path(..., description="The ID of the match"),
    service: TournamentService = Depends(get_tournament_service)
):
    """
    Records the winner of a pending match. When this decides the last match of a round,
    the next round is created, or the tournament completes if one player is left.
    """
    try:
        tournament = service.record_winner(tournament_id, match_id, payload.winner_id)
        return bracket_view(tournament)
    except ValueError as e:
        raise to_http_exception(e)
