from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path

from billiard_pro.api.dependencies import get_player_service, to_http_exception
from billiard_pro.models.player_model import PlayerModel
from billiard_pro.schemas.player_schemas import PlayerCreate, PlayerUpdate
from billiard_pro.services.player_service import PlayerService

router = APIRouter()


@router.post("", response_model=PlayerModel, status_code=201, summary="Create Player")
async def create_player(
    player_data: PlayerCreate,
    service: PlayerService = Depends(get_player_service)
):
    """Adds a player to the roster. The ID is generated by the server."""
    try:
        return service.create_player(PlayerModel(**player_data.model_dump()))
    except ValueError as e:
        raise to_http_exception(e)


@router.get("", response_model=List[PlayerModel], summary="List Players")
async def list_players(service: PlayerService = Depends(get_player_service)):
    """All players, highest rating first."""
    return service.list_players()


@router.get("/{player_id}", response_model=PlayerModel, summary="Get Player")
async def get_player(
    player_id: str = Path(..., description="The ID of the player"),
    service: PlayerService = Depends(get_player_service)
):
    player = service.get_player(player_id)
    if not player:
        raise HTTPException(status_code=404, detail="Player not found")
    return player


@router.patch("/{player_id}", response_model=PlayerModel, summary="Update Player")
async def update_player(
    changes: PlayerUpdate,
    player_id: str = Path(..., description="The ID of the player"),
    service: PlayerService = Depends(get_player_service)
):
    try:
        return service.update_player(player_id, changes.model_dump(exclude_unset=True))
    except ValueError as e:
        raise to_http_exception(e)


@router.delete("/{player_id}", status_code=204, summary="Delete Player")
async def delete_player(
    player_id: str = Path(..., description="The ID of the player"),
    service: PlayerService = Depends(get_player_service)
):
    if not service.delete_player(player_id):
        raise HTTPException(status_code=404, detail="Player not found")
    return None
