# Import all models here so callers can use ``from billiard_pro.models import ...``
from .player_model import PlayerModel
from .tournament_model import (
    GameFormat,
    MatchModel,
    MatchStatus,
    TournamentModel,
    TournamentStatus,
    TournamentType,
)
