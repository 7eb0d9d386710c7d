from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from billiard_pro.models.tournament_model import (
    GameFormat,
    MatchModel,
    TournamentStatus,
    TournamentType,
)

class TournamentCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=100, description="Name of the tournament")
    location: str = Field("", description="Venue or city")
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    prize_pool: float = Field(0, ge=0)
    game_format: GameFormat = GameFormat.NINE_BALL
    tournament_type: TournamentType = TournamentType.SINGLE_ELIMINATION
    max_players: int = Field(16, ge=2)
    description: Optional[str] = None

class TournamentUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=3, max_length=100)
    location: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    prize_pool: Optional[float] = Field(None, ge=0)
    game_format: Optional[GameFormat] = None
    tournament_type: Optional[TournamentType] = None
    max_players: Optional[int] = Field(None, ge=2)
    description: Optional[str] = None

class AddPlayerRequest(BaseModel):
    """Payload for registering a player in a tournament."""
    player_id: str = Field(..., description="ID of the player to register.")

class RecordWinnerRequest(BaseModel):
    """Payload for declaring the winner of a match."""
    winner_id: str = Field(..., description="ID of the player who won the match.")

class BracketRound(BaseModel):
    round: int
    matches: List[MatchModel]

class BracketResponse(BaseModel):
    tournament_id: str
    status: TournamentStatus
    winner_id: Optional[str] = None
    current_round: Optional[int] = None # None until the bracket is seeded
    rounds: List[BracketRound] = Field(default_factory=list)

    @classmethod
    def from_rounds(cls, tournament_id: str, status: TournamentStatus, winner_id: Optional[str],
                    current_round: Optional[int], rounds: Dict[int, List[MatchModel]]) -> "BracketResponse":
        return cls(
            tournament_id=tournament_id,
            status=status,
            winner_id=winner_id,
            current_round=current_round,
            rounds=[BracketRound(round=number, matches=matches) for number, matches in rounds.items()],
        )

class TournamentMatch(MatchModel):
    """A match listed outside its tournament, carrying the tournament's name."""
    tournament_name: str
