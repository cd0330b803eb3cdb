"""Configuration management."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from clue_engine.models.game_state import Difficulty


class GameConfig(BaseModel):
    """Game configuration."""

    num_players: int = Field(default=4, ge=2, le=4)
    human_name: str = "Détective (Vous)"
    rival_name_prefix: str = "Rival"
    difficulty: Difficulty = Difficulty.MEDIUM
    seed: int | None = None


class TimingConfig(BaseModel):
    """Pacing of computer turns and external calls (seconds)."""

    computer_turn_delay: float = 2.0
    narrative_timeout: float = 10.0


class NarrativeConfig(BaseModel):
    """Flavor text backend configuration."""

    enabled: bool = True
    model: str = "gemini-2.5-flash"
    api_key_env: str = "API_KEY"
    language: str = "French"


class CatalogConfig(BaseModel):
    """Card catalog source."""

    path: str | None = None  # None uses the bundled catalog


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    show_hands: bool = False


class GameLogFileConfig(BaseModel):
    """Replay log configuration."""

    enabled: bool = False
    output_path: str = "logs"


class Config(BaseModel):
    """Root configuration."""

    game: GameConfig = Field(default_factory=GameConfig)
    timing: TimingConfig = Field(default_factory=TimingConfig)
    narrative: NarrativeConfig = Field(default_factory=NarrativeConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    game_log: GameLogFileConfig = Field(default_factory=GameLogFileConfig)


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses default config.

    Returns:
        Config object.
    """
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        return Config()

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return Config(**data) if data else Config()
