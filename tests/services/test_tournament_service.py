import json
from datetime import date
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from billiard_pro.core.exceptions import (
    AlreadyCompleted,
    InsufficientPlayers,
    InvalidStatusTransition,
    InvalidWinner,
    MatchNotFound,
    PlayerNotFound,
    RegistrationError,
    TournamentNotFound,
    TournamentNotStarted,
)
from billiard_pro.models.player_model import PlayerModel
from billiard_pro.models.tournament_model import MatchStatus, TournamentModel, TournamentStatus, TournamentType
from billiard_pro.services.player_service import PlayerService
from billiard_pro.services.storage import JsonPlayerStore, JsonTournamentStore
from billiard_pro.services.tournament_service import TournamentService

TEST_TOURNAMENTS_FILE = "test_tournaments.json"


class KeepOrderRng:
    def sample(self, population, k):
        return list(population)[:k]


@pytest.fixture
def temp_tournaments_file(tmp_path):
    return tmp_path / TEST_TOURNAMENTS_FILE


@pytest.fixture
def player_service(tmp_path):
    service = PlayerService(store=JsonPlayerStore(str(tmp_path / "test_players.json")))
    for player_id, name, rating in [
        ("A", "Alice Able", 900), ("B", "Bob Baker", 800), ("C", "Cara Cole", 850),
        ("D", "Dan Drake", 700), ("E", "Eve Evans", 750),
    ]:
        service.create_player(PlayerModel(id=player_id, name=name, rating=rating))
    return service


@pytest.fixture
def tournament_service(temp_tournaments_file, player_service):
    return TournamentService(
        store=JsonTournamentStore(str(temp_tournaments_file)),
        player_service=player_service,
    )


def create_with_players(service: TournamentService, player_ids, **kwargs) -> TournamentModel:
    tournament = service.create_tournament(TournamentModel(name="Service Test Open", **kwargs))
    for player_id in player_ids:
        service.add_player(tournament.id, player_id)
    return service.get_tournament(tournament.id)


class TestTournamentCrud:

    def test_create_tournament_opens_registration(self, tournament_service: TournamentService, temp_tournaments_file):
        created = tournament_service.create_tournament(TournamentModel(
            name="Vegas Open",
            status=TournamentStatus.COMPLETED,
            registered_player_ids=["A"],
            winner_id="A",
        ))

        assert created.status == TournamentStatus.REGISTRATION
        assert created.registered_player_ids == []
        assert created.winner_id is None

        with open(temp_tournaments_file, "r") as f:
            tournaments_in_file = json.load(f)
        assert len(tournaments_in_file) == 1
        assert tournaments_in_file[0]["name"] == "Vegas Open"
        assert tournaments_in_file[0]["status"] == "Registration"

    def test_create_duplicate_id_rejected(self, tournament_service: TournamentService):
        tournament_service.create_tournament(TournamentModel(id="x", name="First Cup"))
        with pytest.raises(ValueError, match="already exists"):
            tournament_service.create_tournament(TournamentModel(id="x", name="Second Cup"))

    def test_list_tournaments_filters_by_status(self, tournament_service: TournamentService):
        create_with_players(tournament_service, ["A", "B"])
        started = create_with_players(tournament_service, ["A", "B"])
        tournament_service.start_tournament(started.id)

        assert len(tournament_service.list_tournaments()) == 2
        ongoing = tournament_service.list_tournaments(status=TournamentStatus.ONGOING)
        assert [t.id for t in ongoing] == [started.id]

    def test_update_descriptive_fields(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, [])

        updated = tournament_service.update_tournament(tournament.id, {
            "location": "Atlantic City, NJ",
            "start_date": date(2024, 9, 5),
            "end_date": date(2024, 9, 8),
        })

        assert updated.location == "Atlantic City, NJ"
        assert updated.end_date == date(2024, 9, 8)

    def test_update_rejects_end_before_start(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, [])
        with pytest.raises(ValidationError):
            tournament_service.update_tournament(tournament.id, {
                "start_date": date(2024, 9, 8),
                "end_date": date(2024, 9, 5),
            })

    def test_update_rejects_bracket_fields(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, [])
        with pytest.raises(ValueError, match="Cannot update fields: matches"):
            tournament_service.update_tournament(tournament.id, {"matches": []})

    def test_type_is_frozen_after_start(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B"])
        tournament_service.start_tournament(tournament.id)

        with pytest.raises(RegistrationError):
            tournament_service.update_tournament(tournament.id, {"tournament_type": TournamentType.ROUND_ROBIN})

    def test_max_players_cannot_drop_below_roster(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B", "C"])
        with pytest.raises(RegistrationError):
            tournament_service.update_tournament(tournament.id, {"max_players": 2})

    def test_delete_tournament(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, [])
        assert tournament_service.delete_tournament(tournament.id) is True
        assert tournament_service.get_tournament(tournament.id) is None
        assert tournament_service.delete_tournament(tournament.id) is False


class TestRegistration:

    def test_add_player_success(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B"])
        assert tournament.registered_player_ids == ["A", "B"]

    def test_add_unknown_player(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, [])
        with pytest.raises(PlayerNotFound):
            tournament_service.add_player(tournament.id, "nobody")

    def test_add_player_to_unknown_tournament(self, tournament_service: TournamentService):
        with pytest.raises(TournamentNotFound):
            tournament_service.add_player("missing", "A")

    def test_add_player_twice(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A"])
        with pytest.raises(RegistrationError, match="already registered"):
            tournament_service.add_player(tournament.id, "A")

    def test_add_player_when_full(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B"], max_players=2)
        with pytest.raises(RegistrationError, match="full"):
            tournament_service.add_player(tournament.id, "C")

    def test_registration_closes_on_start(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B"])
        tournament_service.start_tournament(tournament.id)

        with pytest.raises(RegistrationError, match="closed"):
            tournament_service.add_player(tournament.id, "C")
        with pytest.raises(RegistrationError, match="closed"):
            tournament_service.remove_player(tournament.id, "A")

    def test_remove_player(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B", "C"])

        updated = tournament_service.remove_player(tournament.id, "B")

        assert updated.registered_player_ids == ["A", "C"]
        with pytest.raises(RegistrationError, match="not registered"):
            tournament_service.remove_player(tournament.id, "B")


class TestLifecycle:

    def test_start_requires_two_players(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A"])
        with pytest.raises(InsufficientPlayers):
            tournament_service.start_tournament(tournament.id)
        assert tournament_service.get_tournament(tournament.id).status == TournamentStatus.REGISTRATION

    def test_start_only_once(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B"])
        started = tournament_service.start_tournament(tournament.id)
        assert started.status == TournamentStatus.ONGOING

        with pytest.raises(InvalidStatusTransition):
            tournament_service.start_tournament(tournament.id)

    def test_bracket_requires_started_tournament(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B"])
        with pytest.raises(TournamentNotStarted):
            tournament_service.generate_bracket(tournament.id)
        assert tournament_service.get_tournament(tournament.id).matches == []

    def test_generate_bracket_persists_round_one(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B", "C"])
        tournament_service.start_tournament(tournament.id)

        seeded = tournament_service.generate_bracket(tournament.id, rng=KeepOrderRng())

        stored = tournament_service.get_tournament(tournament.id)
        assert stored.matches == seeded.matches
        assert [(m.player1_id, m.player2_id) for m in stored.matches] == [("A", "B"), ("C", None)]

    def test_generate_bracket_twice_is_rejected(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B", "C", "D"])
        tournament_service.start_tournament(tournament.id)
        tournament_service.generate_bracket(tournament.id)

        with pytest.raises(AlreadyCompleted, match="already has a bracket"):
            tournament_service.generate_bracket(tournament.id)

    def test_force_reseed_before_any_result(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B", "C"])
        tournament_service.start_tournament(tournament.id)
        tournament_service.generate_bracket(tournament.id, rng=KeepOrderRng())

        class ReverseRng:
            def sample(self, population, k):
                return list(reversed(population))[:k]

        reseeded = tournament_service.generate_bracket(tournament.id, force=True, rng=ReverseRng())

        assert [(m.player1_id, m.player2_id) for m in reseeded.matches] == [("C", "B"), ("A", None)]

    def test_force_reseed_after_results_is_rejected(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B", "C", "D"])
        tournament_service.start_tournament(tournament.id)
        tournament_service.generate_bracket(tournament.id, rng=KeepOrderRng())
        tournament_service.record_winner(tournament.id, f"{tournament.id}-r1-m1", "A")

        with pytest.raises(AlreadyCompleted, match="recorded results"):
            tournament_service.generate_bracket(tournament.id, force=True)

    def test_full_tournament_flow(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B", "C", "D", "E"])
        tid = tournament.id
        tournament_service.start_tournament(tid)
        tournament_service.generate_bracket(tid, rng=KeepOrderRng())

        tournament_service.record_winner(tid, f"{tid}-r1-m1", "A")
        tournament_service.record_winner(tid, f"{tid}-r1-m2", "C")
        tournament_service.record_winner(tid, f"{tid}-r2-m1", "A")
        final = tournament_service.record_winner(tid, f"{tid}-r3-m1", "A")

        assert final.status == TournamentStatus.COMPLETED
        assert final.winner_id == "A"
        stored = tournament_service.get_tournament(tid)
        assert stored.status == TournamentStatus.COMPLETED
        assert stored.winner_id == "A"

        bracket = tournament_service.get_bracket(tid)
        assert [r.round for r in bracket.rounds] == [1, 2, 3]
        assert [len(r.matches) for r in bracket.rounds] == [3, 2, 1]
        assert bracket.current_round == 3
        assert bracket.winner_id == "A"

        with pytest.raises(AlreadyCompleted):
            tournament_service.record_winner(tid, f"{tid}-r3-m1", "E")
        with pytest.raises(AlreadyCompleted):
            tournament_service.update_tournament(tid, {"location": "Elsewhere"})

    def test_invalid_winner_leaves_store_untouched(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B"])
        tournament_service.start_tournament(tournament.id)
        tournament_service.generate_bracket(tournament.id, rng=KeepOrderRng())
        before = tournament_service.get_tournament(tournament.id)

        with pytest.raises(InvalidWinner):
            tournament_service.record_winner(tournament.id, f"{tournament.id}-r1-m1", "C")
        with pytest.raises(MatchNotFound):
            tournament_service.record_winner(tournament.id, "nope", "A")

        assert tournament_service.get_tournament(tournament.id) == before

    def test_record_winner_unknown_tournament(self, tournament_service: TournamentService):
        with pytest.raises(TournamentNotFound):
            tournament_service.record_winner("missing", "missing-r1-m1", "A")


class TestMatchesAndReports:

    def _finish(self, service, player_ids, winner_id, end_date, name="Finished Cup"):
        tournament = create_with_players(service, player_ids, end_date=end_date)
        tournament = service.update_tournament(tournament.id, {"name": name})
        service.start_tournament(tournament.id)
        service.generate_bracket(tournament.id, rng=KeepOrderRng())
        # Two-player bracket: one match decides it.
        return service.record_winner(tournament.id, f"{tournament.id}-r1-m1", winner_id)

    def test_list_matches_across_tournaments(self, tournament_service: TournamentService):
        first = create_with_players(tournament_service, ["A", "B", "C"])
        tournament_service.start_tournament(first.id)
        tournament_service.generate_bracket(first.id, rng=KeepOrderRng())
        second = create_with_players(tournament_service, ["D", "E"])
        tournament_service.start_tournament(second.id)
        tournament_service.generate_bracket(second.id, rng=KeepOrderRng())

        all_matches = tournament_service.list_matches()
        assert len(all_matches) == 3
        assert {m.tournament_name for m in all_matches} == {"Service Test Open"}

        pending = tournament_service.list_matches(status=MatchStatus.PENDING)
        assert len(pending) == 2
        assert [m.id for m in tournament_service.list_matches(tournament_id=second.id)] == [f"{second.id}-r1-m1"]

    def test_list_matches_unknown_tournament(self, tournament_service: TournamentService):
        with pytest.raises(TournamentNotFound):
            tournament_service.list_matches(tournament_id="missing")

    def test_champions_newest_first(self, tournament_service: TournamentService):
        self._finish(tournament_service, ["A", "B"], "A", date(2024, 7, 22), name="July Cup")
        self._finish(tournament_service, ["C", "D"], "C", date(2024, 9, 8), name="September Cup")
        create_with_players(tournament_service, ["A", "E"]) # still registering

        champions = tournament_service.champions()

        assert [c.tournament_name for c in champions] == ["September Cup", "July Cup"]
        assert champions[0].winner.name == "Cara Cole"

    def test_leaderboard_orders_by_wins_then_rating(self, tournament_service: TournamentService):
        self._finish(tournament_service, ["D", "B"], "D", date(2024, 1, 1))
        self._finish(tournament_service, ["D", "E"], "D", date(2024, 2, 1))
        self._finish(tournament_service, ["E", "C"], "E", date(2024, 3, 1))

        leaderboard = tournament_service.leaderboard()

        assert [(e.player.id, e.wins) for e in leaderboard] == [
            ("D", 2), ("E", 1), ("A", 0), ("C", 0), ("B", 0),
        ]

    def test_dashboard_counts(self, tournament_service: TournamentService):
        self._finish(tournament_service, ["A", "B"], "A", date(2024, 1, 1))
        ongoing = create_with_players(tournament_service, ["C", "D"])
        tournament_service.start_tournament(ongoing.id)
        create_with_players(tournament_service, [])

        summary = tournament_service.dashboard()

        assert summary.active_tournaments == 1
        assert summary.completed_tournaments == 1
        assert summary.total_players == 5
        assert [p.id for p in summary.top_players] == ["A", "C", "B", "E", "D"]

    def test_dashboard_takes_top_players_from_player_service(self, temp_tournaments_file, player_service):
        roster = MagicMock(spec=PlayerService)
        roster.list_players.return_value = player_service.list_players()
        roster.top_players.return_value = [player_service.get_player("A")]
        service = TournamentService(store=JsonTournamentStore(str(temp_tournaments_file)), player_service=roster)

        summary = service.dashboard()

        roster.top_players.assert_called_once_with()
        assert [p.id for p in summary.top_players] == ["A"]
        assert summary.total_players == 5

    def test_bracket_of_unseeded_tournament(self, tournament_service: TournamentService):
        tournament = create_with_players(tournament_service, ["A", "B"])

        bracket = tournament_service.get_bracket(tournament.id)

        assert bracket.rounds == []
        assert bracket.current_round is None
        with pytest.raises(TournamentNotFound):
            tournament_service.get_bracket("missing")
