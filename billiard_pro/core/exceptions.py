"""
Error taxonomy for bracket and tournament operations.

Services raise these; the HTTP layer maps them onto status codes. Everything derives
from ``BracketError`` (a ``ValueError``) so callers that only care about "bad request"
can catch one type, while lookups additionally derive from ``LookupError``.
"""


class BracketError(ValueError):
    """Base class for every failure surfaced by the engine or the services."""


class NotFoundError(BracketError, LookupError):
    """A referenced record does not exist."""


class TournamentNotFound(NotFoundError):
    def __init__(self, tournament_id: str):
        self.tournament_id = tournament_id
        super().__init__(f"Tournament with ID {tournament_id} not found.")


class MatchNotFound(NotFoundError):
    def __init__(self, match_id: str, tournament_id: str):
        self.match_id = match_id
        self.tournament_id = tournament_id
        super().__init__(f"Match with ID {match_id} not found in tournament {tournament_id}.")


class PlayerNotFound(NotFoundError):
    def __init__(self, player_id: str):
        self.player_id = player_id
        super().__init__(f"Player with ID {player_id} not found.")


class InsufficientPlayers(BracketError):
    def __init__(self, count: int):
        self.count = count
        super().__init__(f"A bracket requires at least 2 players, got {count}.")


class InvalidWinner(BracketError):
    def __init__(self, winner_id: str, match_id: str):
        self.winner_id = winner_id
        self.match_id = match_id
        super().__init__(f"Player {winner_id} is not playing in match {match_id}.")


class AlreadyCompleted(BracketError):
    """Re-recording a decided match, re-seeding a live bracket, or touching a finished tournament."""


class InvalidStatusTransition(BracketError):
    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"Tournament cannot move from '{current}' to '{target}'.")


class RegistrationError(BracketError):
    """Player registration rejected (tournament full, duplicate entry, registration closed)."""


class UnsupportedTournamentType(BracketError):
    def __init__(self, tournament_type):
        self.tournament_type = tournament_type
        super().__init__(f"Bracket generation for {tournament_type} is not implemented.")


class DuplicateMatchError(BracketError):
    def __init__(self, match_ids):
        self.match_ids = sorted(match_ids)
        super().__init__(f"Duplicate match ids rejected: {', '.join(self.match_ids)}.")


class TournamentNotStarted(BracketError):
    def __init__(self, tournament_id: str, status):
        self.tournament_id = tournament_id
        self.status = status
        super().__init__(
            f"Tournament {tournament_id} is in '{status}'. Start it before generating a bracket."
        )
