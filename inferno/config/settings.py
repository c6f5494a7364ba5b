"""
Inferno Dice - Application Settings

Loads configuration from environment variables using Pydantic Settings.
Without Supabase credentials the game runs headless with null gateways.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from inferno.engine.base import GameConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Supabase
    supabase_url: str | None = None
    supabase_anon_key: str | None = None

    # Application
    debug: bool = False
    log_level: str = "INFO"
    player_id: str = "local-player"

    # Game
    starting_score: int = Field(default=5, ge=1)
    history_size: int = Field(default=10, ge=1)
    score_history_size: int = Field(default=3, ge=1)
    cpu_think_delay: float = Field(default=1.0, ge=0)
    cpu_tense_delay: float = Field(default=3.0, ge=0)
    tense_score_threshold: int = Field(default=2, ge=0)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)

    def game_config(self) -> GameConfig:
        """Engine configuration built from these settings."""
        return GameConfig(
            starting_score=self.starting_score,
            history_size=self.history_size,
            score_history_size=self.score_history_size,
            think_delay=self.cpu_think_delay,
            tense_delay=self.cpu_tense_delay,
            tense_score_threshold=self.tense_score_threshold,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Apply the configured log level to the root logger."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(
        logging, settings.log_level.upper(), logging.INFO
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)
