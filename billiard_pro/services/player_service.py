import logging
from typing import Any, Dict, List, Optional

from billiard_pro.core.config import settings
from billiard_pro.core.exceptions import PlayerNotFound
from billiard_pro.models.player_model import PlayerModel
from billiard_pro.services.storage import JsonPlayerStore

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"name", "nickname", "rating", "profile_photo"}

class PlayerService:
    def __init__(self, store: Optional[JsonPlayerStore] = None):
        self.store = store if store is not None else JsonPlayerStore(settings.players_path)

    def create_player(self, player: PlayerModel) -> PlayerModel:
        if self.store.get(player.id) is not None:
            raise ValueError(f"Player with ID {player.id} already exists.")
        created = self.store.put(player)
        logger.info(f"Created player {created.id} ({created.name})")
        return created

    def get_player(self, player_id: str) -> Optional[PlayerModel]:
        return self.store.get(player_id)

    def require_player(self, player_id: str) -> PlayerModel:
        player = self.store.get(player_id)
        if player is None:
            raise PlayerNotFound(player_id)
        return player

    def list_players(self) -> List[PlayerModel]:
        """All players, strongest first."""
        return sorted(self.store.list(), key=lambda p: p.rating, reverse=True)

    def top_players(self, limit: int = 5) -> List[PlayerModel]:
        return self.list_players()[:limit]

    def update_player(self, player_id: str, changes: Dict[str, Any]) -> PlayerModel:
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")

        def apply(player: PlayerModel) -> PlayerModel:
            # Re-validate so rating/name constraints still hold.
            return PlayerModel(**{**player.model_dump(), **changes})

        return self.store.update(player_id, apply)

    def delete_player(self, player_id: str) -> bool:
        deleted = self.store.delete(player_id)
        if deleted:
            logger.info(f"Deleted player {player_id}")
        return deleted
