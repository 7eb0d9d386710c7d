"""Demo roster and tournaments used to bootstrap an empty installation."""
import logging
from datetime import date

from billiard_pro.models.player_model import PlayerModel
from billiard_pro.models.tournament_model import (
    GameFormat,
    TournamentModel,
    TournamentStatus,
    TournamentType,
)
from billiard_pro.services.storage import JsonPlayerStore, JsonTournamentStore

logger = logging.getLogger(__name__)

def _photo(photo_id: int) -> str:
    return f"https://picsum.photos/id/{photo_id}/100/100"

SAMPLE_PLAYERS = [
    PlayerModel(id="1", name="Shane Van Boening", nickname="The South Dakota Kid", rating=850, profile_photo=_photo(1005)),
    PlayerModel(id="2", name="Efren Reyes", nickname="The Magician", rating=950, profile_photo=_photo(1012)),
    PlayerModel(id="3", name="Jayson Shaw", nickname="Eagle Eye", rating=820, profile_photo=_photo(1027)),
    PlayerModel(id="4", name="Earl Strickland", nickname="The Pearl", rating=880, profile_photo=_photo(1040)),
    PlayerModel(id="5", name="Allison Fisher", nickname="Duchess of Doom", rating=910, profile_photo=_photo(1047)),
    PlayerModel(id="6", name="Fedor Gorst", nickname="The Ghost", rating=830, profile_photo=_photo(1054)),
    PlayerModel(id="7", name="Ko Pin-yi", nickname="Prince of Pool", rating=860, profile_photo=_photo(1062)),
    PlayerModel(id="8", name="Joshua Filler", nickname="The Killer", rating=840, profile_photo=_photo(1074)),
    PlayerModel(id="9", name="Kelly Fisher", nickname="KwikFire", rating=890, profile_photo=_photo(1084)),
    PlayerModel(id="10", name="Dennis Orcollo", nickname="RoboCop", rating=870, profile_photo=_photo(20)),
]

SAMPLE_TOURNAMENTS = [
    TournamentModel(
        id="1",
        name="Vegas Open 9-Ball Championship",
        location="Las Vegas, NV",
        start_date=date(2024, 8, 10),
        end_date=date(2024, 8, 15),
        prize_pool=100000,
        game_format=GameFormat.NINE_BALL,
        tournament_type=TournamentType.SINGLE_ELIMINATION,
        max_players=128,
        status=TournamentStatus.ONGOING,
        description="The premier 9-ball event of the year, held in the heart of Las Vegas.",
        registered_player_ids=["1", "2", "3", "4", "5", "6", "7", "8"],
    ),
    TournamentModel(
        id="2",
        name="The Atlantic Challenge Cup",
        location="Atlantic City, NJ",
        start_date=date(2024, 9, 5),
        end_date=date(2024, 9, 8),
        prize_pool=50000,
        game_format=GameFormat.TEN_BALL,
        tournament_type=TournamentType.SINGLE_ELIMINATION,
        max_players=64,
        status=TournamentStatus.REGISTRATION,
        description="A high-stakes 10-ball tournament on the East Coast.",
        registered_player_ids=["9", "10", "1", "3"],
    ),
    TournamentModel(
        id="3",
        name="Midwest 8-Ball Invitational",
        location="Chicago, IL",
        start_date=date(2024, 7, 20),
        end_date=date(2024, 7, 22),
        prize_pool=25000,
        game_format=GameFormat.EIGHT_BALL,
        tournament_type=TournamentType.ROUND_ROBIN,
        max_players=32,
        status=TournamentStatus.REGISTRATION,
        description="An invitational for the best 8-ball players in the Midwest.",
        registered_player_ids=["2", "4", "5", "6", "7", "8", "9", "10"],
    ),
]

def load_sample_data(player_store: JsonPlayerStore, tournament_store: JsonTournamentStore) -> bool:
    """Write the demo records if both stores are empty. Returns True when data was loaded."""
    if player_store.list() or tournament_store.list():
        logger.info("Stores already contain data; skipping sample data")
        return False
    for player in SAMPLE_PLAYERS:
        player_store.put(player)
    for tournament in SAMPLE_TOURNAMENTS:
        tournament_store.put(tournament)
    logger.info(f"Loaded {len(SAMPLE_PLAYERS)} sample players and {len(SAMPLE_TOURNAMENTS)} sample tournaments")
    return True
