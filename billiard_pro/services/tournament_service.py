import logging
from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional

from billiard_pro.core.config import settings
from billiard_pro.core.exceptions import (
    AlreadyCompleted,
    InsufficientPlayers,
    RegistrationError,
    TournamentNotFound,
)
from billiard_pro.models.tournament_model import (
    MatchStatus,
    TournamentModel,
    TournamentStatus,
)
from billiard_pro.schemas.report_schemas import ChampionEntry, DashboardSummary, LeaderboardEntry
from billiard_pro.schemas.tournament_schemas import BracketResponse, TournamentMatch
from billiard_pro.services import bracket_engine
from billiard_pro.services.player_service import PlayerService
from billiard_pro.services.storage import JsonTournamentStore

logger = logging.getLogger(__name__)

DESCRIPTIVE_FIELDS = {
    "name", "location", "start_date", "end_date", "prize_pool",
    "game_format", "tournament_type", "max_players", "description",
}
# Fields that shape the bracket and are frozen once registration closes.
REGISTRATION_ONLY_FIELDS = {"tournament_type", "max_players"}


def bracket_view(tournament: TournamentModel) -> BracketResponse:
    """The tournament's matches grouped by round, with the round currently in play."""
    return BracketResponse.from_rounds(
        tournament_id=tournament.id,
        status=tournament.status,
        winner_id=tournament.winner_id,
        current_round=bracket_engine.current_round(tournament),
        rounds=bracket_engine.group_matches_by_round(tournament.matches),
    )


class TournamentService:
    def __init__(self,
                 store: Optional[JsonTournamentStore] = None,
                 player_service: Optional[PlayerService] = None
                ):
        self.store = store if store is not None else JsonTournamentStore(settings.tournaments_path)
        self.player_service = player_service if player_service is not None else PlayerService()

    # --- CRUD ---

    def create_tournament(self, tournament: TournamentModel) -> TournamentModel:
        """New tournaments always open in Registration with an empty roster and no bracket."""
        if self.store.get(tournament.id) is not None:
            raise ValueError(f"Tournament with ID {tournament.id} already exists.")
        fresh = tournament.model_copy(update={
            "status": TournamentStatus.REGISTRATION,
            "registered_player_ids": [],
            "matches": [],
            "winner_id": None,
            "version": 0,
        })
        created = self.store.put(fresh)
        logger.info(f"Created tournament {created.id} ({created.name})")
        return created

    def get_tournament(self, tournament_id: str) -> Optional[TournamentModel]:
        return self.store.get(tournament_id)

    def require_tournament(self, tournament_id: str) -> TournamentModel:
        tournament = self.store.get(tournament_id)
        if tournament is None:
            raise TournamentNotFound(tournament_id)
        return tournament

    def list_tournaments(self, status: Optional[TournamentStatus] = None) -> List[TournamentModel]:
        tournaments = self.store.list()
        if status is not None:
            tournaments = [t for t in tournaments if t.status == status]
        return tournaments

    def update_tournament(self, tournament_id: str, changes: Dict[str, Any]) -> TournamentModel:
        unknown = set(changes) - DESCRIPTIVE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        def apply(tournament: TournamentModel) -> TournamentModel:
            if tournament.status == TournamentStatus.COMPLETED:
                raise AlreadyCompleted(f"Tournament {tournament.id} is completed and can no longer be edited.")
            frozen = REGISTRATION_ONLY_FIELDS.intersection(changes)
            if frozen and tournament.status != TournamentStatus.REGISTRATION:
                raise RegistrationError(
                    f"{', '.join(sorted(frozen))} can only be changed while registration is open."
                )
            if changes.get("max_players") is not None and changes["max_players"] < len(tournament.registered_player_ids):
                raise RegistrationError(
                    f"max_players cannot be below the {len(tournament.registered_player_ids)} registered players."
                )
            # Rebuild through the model so field and date validators run again.
            return TournamentModel(**{**tournament.model_dump(), **changes})

        return self.store.update(tournament_id, apply)

    def delete_tournament(self, tournament_id: str) -> bool:
        deleted = self.store.delete(tournament_id)
        if deleted:
            logger.info(f"Deleted tournament {tournament_id}")
        return deleted

    # --- Registration ---

    def add_player(self, tournament_id: str, player_id: str) -> TournamentModel:
        self.player_service.require_player(player_id)

        def apply(tournament: TournamentModel) -> TournamentModel:
            if tournament.status != TournamentStatus.REGISTRATION:
                raise RegistrationError(f"Registration for tournament {tournament.id} is closed.")
            if player_id in tournament.registered_player_ids:
                raise RegistrationError(f"Player {player_id} is already registered.")
            if len(tournament.registered_player_ids) >= tournament.max_players:
                raise RegistrationError(f"Tournament {tournament.id} is full ({tournament.max_players} players).")
            return tournament.model_copy(
                update={"registered_player_ids": [*tournament.registered_player_ids, player_id]}
            )

        updated = self.store.update(tournament_id, apply)
        logger.info(f"Registered player {player_id} in tournament {tournament_id}")
        return updated

    def remove_player(self, tournament_id: str, player_id: str) -> TournamentModel:
        def apply(tournament: TournamentModel) -> TournamentModel:
            if tournament.status != TournamentStatus.REGISTRATION:
                raise RegistrationError(f"Registration for tournament {tournament.id} is closed.")
            if player_id not in tournament.registered_player_ids:
                raise RegistrationError(f"Player {player_id} is not registered in tournament {tournament.id}.")
            return tournament.model_copy(
                update={"registered_player_ids": [p for p in tournament.registered_player_ids if p != player_id]}
            )

        return self.store.update(tournament_id, apply)

    # --- Lifecycle and bracket ---

    def start_tournament(self, tournament_id: str) -> TournamentModel:
        def apply(tournament: TournamentModel) -> TournamentModel:
            if len(tournament.registered_player_ids) < bracket_engine.MIN_PLAYERS:
                raise InsufficientPlayers(len(tournament.registered_player_ids))
            return tournament.with_status(TournamentStatus.ONGOING)

        started = self.store.update(tournament_id, apply)
        logger.info(f"Tournament {tournament_id} started with {len(started.registered_player_ids)} players")
        return started

    def generate_bracket(self, tournament_id: str, force: bool = False, rng=None) -> TournamentModel:
        """
        Seed round 1 for an ongoing tournament.

        An existing bracket is only replaced with ``force=True`` and only while no result
        has been recorded by hand (bye matches do not count).
        """
        def apply(tournament: TournamentModel) -> TournamentModel:
            if tournament.matches:
                if not force:
                    raise AlreadyCompleted(f"Tournament {tournament.id} already has a bracket.")
                if any(m.is_completed and not m.is_bye for m in tournament.matches):
                    raise AlreadyCompleted(
                        f"Tournament {tournament.id} has recorded results; the bracket cannot be re-seeded."
                    )
                logger.warning(f"Re-seeding bracket of tournament {tournament.id}")
            return bracket_engine.seed_bracket(tournament, rng=rng)

        return self.store.update(tournament_id, apply)

    def record_winner(self, tournament_id: str, match_id: str, winner_id: str) -> TournamentModel:
        return self.store.update(
            tournament_id,
            lambda tournament: bracket_engine.record_winner(tournament, match_id, winner_id),
        )

    def get_bracket(self, tournament_id: str) -> BracketResponse:
        return bracket_view(self.require_tournament(tournament_id))

    def list_matches(self,
                     status: Optional[MatchStatus] = None,
                     tournament_id: Optional[str] = None
                    ) -> List[TournamentMatch]:
        """Matches across tournaments, each tagged with its tournament's name."""
        if tournament_id is not None:
            tournaments = [self.require_tournament(tournament_id)]
        else:
            tournaments = self.store.list()

        matches: List[TournamentMatch] = []
        for tournament in tournaments:
            for match in tournament.matches:
                if status is not None and match.status != status:
                    continue
                matches.append(TournamentMatch(**match.model_dump(), tournament_name=tournament.name))
        return matches

    # --- Reports ---

    def champions(self) -> List[ChampionEntry]:
        """Completed tournaments with their champion, most recent end date first."""
        completed = [
            t for t in self.store.list()
            if t.status == TournamentStatus.COMPLETED and t.winner_id
        ]
        completed.sort(key=lambda t: t.end_date or date.min, reverse=True)
        return [
            ChampionEntry(
                tournament_id=t.id,
                tournament_name=t.name,
                end_date=t.end_date,
                winner_id=t.winner_id,
                winner=self.player_service.get_player(t.winner_id),
            )
            for t in completed
        ]

    def leaderboard(self) -> List[LeaderboardEntry]:
        wins = Counter(entry.winner_id for entry in self.champions())
        entries = [
            LeaderboardEntry(player=player, wins=wins.get(player.id, 0))
            for player in self.player_service.list_players()
        ]
        entries.sort(key=lambda e: (e.wins, e.player.rating), reverse=True)
        return entries

    def dashboard(self) -> DashboardSummary:
        tournaments = self.store.list()
        players = self.player_service.list_players()
        return DashboardSummary(
            active_tournaments=sum(1 for t in tournaments if t.status == TournamentStatus.ONGOING),
            total_players=len(players),
            completed_tournaments=sum(1 for t in tournaments if t.status == TournamentStatus.COMPLETED),
            top_players=self.player_service.top_players(),
        )
