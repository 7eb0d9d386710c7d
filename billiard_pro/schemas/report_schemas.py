from datetime import date
from typing import List, Optional

from pydantic import BaseModel

from billiard_pro.models.player_model import PlayerModel

class ChampionEntry(BaseModel):
    tournament_id: str
    tournament_name: str
    end_date: Optional[date] = None
    winner_id: str
    winner: Optional[PlayerModel] = None # None if the player record was deleted

class LeaderboardEntry(BaseModel):
    player: PlayerModel
    wins: int

class DashboardSummary(BaseModel):
    active_tournaments: int
    total_players: int
    completed_tournaments: int
    top_players: List[PlayerModel]
