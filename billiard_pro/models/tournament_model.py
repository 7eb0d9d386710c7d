from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from pydantic import BaseModel, Field, validator

from billiard_pro.core.exceptions import InvalidStatusTransition

class GameFormat(str, Enum):
    EIGHT_BALL = "8-Ball"
    NINE_BALL = "9-Ball"
    TEN_BALL = "10-Ball"

class TournamentType(str, Enum):
    SINGLE_ELIMINATION = "Single Elimination"
    DOUBLE_ELIMINATION = "Double Elimination"
    ROUND_ROBIN = "Round Robin"

class TournamentStatus(str, Enum):
    REGISTRATION = "Registration"
    ONGOING = "Ongoing"
    COMPLETED = "Completed"

    def can_transition_to(self, target: "TournamentStatus") -> bool:
        return target in ALLOWED_STATUS_TRANSITIONS[self]

# Completed is terminal.
ALLOWED_STATUS_TRANSITIONS: Dict[TournamentStatus, Tuple[TournamentStatus, ...]] = {
    TournamentStatus.REGISTRATION: (TournamentStatus.ONGOING,),
    TournamentStatus.ONGOING: (TournamentStatus.COMPLETED,),
    TournamentStatus.COMPLETED: (),
}

class MatchStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"

class MatchModel(BaseModel):
    id: str # {tournament_id}-r{round}-m{match_number}
    tournament_id: str
    round: int = Field(ge=1)
    match_number: int = Field(ge=1)

    player1_id: Optional[str] = None
    player2_id: Optional[str] = None # None marks a bye slot

    winner_id: Optional[str] = None
    status: MatchStatus = MatchStatus.PENDING

    class Config:
        from_attributes = True

    @property
    def is_bye(self) -> bool:
        return self.player2_id is None

    @property
    def player_ids(self) -> List[str]:
        return [p for p in (self.player1_id, self.player2_id) if p is not None]

    @property
    def is_completed(self) -> bool:
        return self.status == MatchStatus.COMPLETED

class TournamentModel(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(min_length=3, max_length=100)
    location: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    prize_pool: float = Field(default=0, ge=0)
    game_format: GameFormat = GameFormat.NINE_BALL
    tournament_type: TournamentType = TournamentType.SINGLE_ELIMINATION
    max_players: int = Field(default=16, ge=2)
    status: TournamentStatus = TournamentStatus.REGISTRATION
    description: Optional[str] = None
    registered_player_ids: List[str] = Field(default_factory=list)
    matches: List[MatchModel] = Field(default_factory=list) # Append order, not round order
    winner_id: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    version: int = 0 # Bumped by the store on every write

    class Config:
        from_attributes = True

    @validator('end_date')
    def end_date_after_start_date(cls, v, values, **kwargs):
        if v and values.get('start_date') and v < values['start_date']:
            raise ValueError('End date must be after start date')
        return v

    @validator('registered_player_ids')
    def unique_player_ids(cls, v):
        if len(set(v)) != len(v):
            raise ValueError('A player can only be registered once')
        return v

    def get_match(self, match_id: str) -> Optional[MatchModel]:
        return next((m for m in self.matches if m.id == match_id), None)

    def matches_in_round(self, round_number: int) -> List[MatchModel]:
        return sorted(
            (m for m in self.matches if m.round == round_number),
            key=lambda m: m.match_number,
        )

    def with_status(self, target: TournamentStatus) -> "TournamentModel":
        """Return a copy moved to ``target``, enforcing the allowed transition table."""
        if not self.status.can_transition_to(target):
            raise InvalidStatusTransition(self.status.value, target.value)
        return self.model_copy(update={"status": target}, deep=True)
