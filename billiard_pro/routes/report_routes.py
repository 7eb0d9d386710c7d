from typing import List

from fastapi import APIRouter, Depends

from billiard_pro.api.dependencies import get_tournament_service
from billiard_pro.schemas.report_schemas import ChampionEntry, DashboardSummary, LeaderboardEntry
from billiard_pro.services.tournament_service import TournamentService

router = APIRouter()


@router.get("/reports/champions", response_model=List[ChampionEntry], summary="Tournament Champions")
async def champions(service: TournamentService = Depends(get_tournament_service)):
    """Completed tournaments and their winners, most recent first."""
    return service.champions()


@router.get("/reports/leaderboard", response_model=List[LeaderboardEntry], summary="Player Leaderboard")
async def leaderboard(service: TournamentService = Depends(get_tournament_service)):
    """Players ranked by tournament wins, ties broken by rating."""
    return service.leaderboard()


@router.get("/dashboard", response_model=DashboardSummary, summary="Dashboard Summary")
async def dashboard(service: TournamentService = Depends(get_tournament_service)):
    return service.dashboard()
