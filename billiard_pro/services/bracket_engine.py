"""
Single-elimination bracket engine.

Two operations drive a bracket:

- ``seed_bracket`` shuffles the registered roster and builds round 1.
- ``record_winner`` applies one result and, once every match of that round is decided,
  either crowns the champion or pairs the round's winners into the next round.

Both take a tournament snapshot and return a new value. The input is never mutated, so
callers can run them inside a store transaction and simply discard the result on error.
"""
import logging
import random
from typing import Dict, List, Optional, Sequence

from billiard_pro.core.exceptions import (
    AlreadyCompleted,
    DuplicateMatchError,
    InsufficientPlayers,
    InvalidWinner,
    MatchNotFound,
    TournamentNotStarted,
    UnsupportedTournamentType,
)
from billiard_pro.models.tournament_model import (
    MatchModel,
    MatchStatus,
    TournamentModel,
    TournamentStatus,
    TournamentType,
)

logger = logging.getLogger(__name__)

MIN_PLAYERS = 2


def make_match_id(tournament_id: str, round_number: int, match_number: int) -> str:
    return f"{tournament_id}-r{round_number}-m{match_number}"


def pair_into_matches(tournament_id: str, round_number: int, player_ids: Sequence[str]) -> List[MatchModel]:
    """
    Pair ``player_ids`` two by two, in the given order, into the matches of one round.

    With an odd count the last player gets a bye: a match with no second player that is
    created already completed, with that player as the winner.
    """
    matches: List[MatchModel] = []
    for match_number, i in enumerate(range(0, len(player_ids), 2), start=1):
        player1_id = player_ids[i]
        player2_id = player_ids[i + 1] if i + 1 < len(player_ids) else None
        is_bye = player2_id is None
        matches.append(MatchModel(
            id=make_match_id(tournament_id, round_number, match_number),
            tournament_id=tournament_id,
            round=round_number,
            match_number=match_number,
            player1_id=player1_id,
            player2_id=player2_id,
            winner_id=player1_id if is_bye else None,
            status=MatchStatus.COMPLETED if is_bye else MatchStatus.PENDING,
        ))
        if is_bye:
            logger.debug(f"Round {round_number}: {player1_id} advances on a bye")
    return matches


def seed_bracket(tournament: TournamentModel, rng=None) -> TournamentModel:
    """
    Build round 1 from the registered roster in a random order.

    ``rng`` only needs a ``sample(population, k)`` method; it defaults to the ``random``
    module. Every call reshuffles, so seeding twice gives a different bracket. The returned
    tournament's match list replaces whatever bracket existed before.
    """
    if tournament.tournament_type != TournamentType.SINGLE_ELIMINATION:
        raise UnsupportedTournamentType(tournament.tournament_type.value)
    if tournament.status == TournamentStatus.COMPLETED:
        raise AlreadyCompleted(f"Tournament {tournament.id} is already completed.")
    if tournament.status != TournamentStatus.ONGOING:
        raise TournamentNotStarted(tournament.id, tournament.status.value)

    player_ids = list(tournament.registered_player_ids)
    if len(player_ids) < MIN_PLAYERS:
        raise InsufficientPlayers(len(player_ids))

    if rng is None:
        rng = random
    shuffled = rng.sample(player_ids, len(player_ids))
    matches = pair_into_matches(tournament.id, 1, shuffled)

    logger.info(f"Seeded tournament {tournament.id}: {len(player_ids)} players, {len(matches)} round 1 matches")
    return tournament.model_copy(update={"matches": matches, "winner_id": None}, deep=True)


def round_is_complete(round_matches: Sequence[MatchModel]) -> bool:
    return bool(round_matches) and all(m.is_completed for m in round_matches)


def record_winner(tournament: TournamentModel, match_id: str, winner_id: str) -> TournamentModel:
    """
    Record ``winner_id`` for ``match_id`` and advance the bracket if that closes the round.

    Round winners are taken in match-number order and paired without reshuffling. A round
    that leaves a single winner completes the tournament instead.
    """
    if tournament.status == TournamentStatus.COMPLETED:
        raise AlreadyCompleted(
            f"Tournament {tournament.id} is already completed; the champion is {tournament.winner_id}."
        )

    updated = tournament.model_copy(deep=True)
    match = updated.get_match(match_id)
    if match is None:
        raise MatchNotFound(match_id, tournament.id)
    if match.is_completed:
        raise AlreadyCompleted(f"Match {match_id} is already completed (winner {match.winner_id}).")
    if winner_id not in match.player_ids:
        raise InvalidWinner(winner_id, match_id)

    match.winner_id = winner_id
    match.status = MatchStatus.COMPLETED

    round_number = match.round
    round_matches = updated.matches_in_round(round_number)
    if not round_is_complete(round_matches):
        return updated

    winners = [m.winner_id for m in round_matches if m.winner_id]
    if len(winners) == 1:
        updated = updated.with_status(TournamentStatus.COMPLETED)
        updated.winner_id = winners[0]
        logger.info(f"Tournament {tournament.id} completed, champion {winners[0]}")
        return updated

    next_round = round_number + 1
    next_matches = pair_into_matches(tournament.id, next_round, winners)
    existing_ids = {m.id for m in updated.matches}
    clashes = existing_ids.intersection(m.id for m in next_matches)
    if clashes:
        raise DuplicateMatchError(clashes)
    updated.matches.extend(next_matches)
    logger.info(f"Tournament {tournament.id}: round {round_number} complete, {len(next_matches)} matches in round {next_round}")
    return updated


def group_matches_by_round(matches: Sequence[MatchModel]) -> Dict[int, List[MatchModel]]:
    """Group matches by round for rendering, rounds ascending and matches by number."""
    rounds: Dict[int, List[MatchModel]] = {}
    for match in sorted(matches, key=lambda m: (m.round, m.match_number)):
        rounds.setdefault(match.round, []).append(match)
    return rounds


def current_round(tournament: TournamentModel) -> Optional[int]:
    if not tournament.matches:
        return None
    return max(m.round for m in tournament.matches)
