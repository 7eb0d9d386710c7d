import os

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_TITLE: str = "BilliardPro Tournament API"
    DATA_DIR: str = "data"
    TOURNAMENTS_FILE: str = "tournaments.json"
    PLAYERS_FILE: str = "players.json"
    LOG_LEVEL: str = "INFO"
    LOAD_SAMPLE_DATA: bool = False # Fill empty stores with the demo roster on startup

    class Config:
        env_file = ".env"

    @property
    def tournaments_path(self) -> str:
        return os.path.join(self.DATA_DIR, self.TOURNAMENTS_FILE)

    @property
    def players_path(self) -> str:
        return os.path.join(self.DATA_DIR, self.PLAYERS_FILE)

settings = Settings()
