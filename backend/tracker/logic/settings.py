"""Tracker configuration via environment variables."""

from typing import Annotated, Literal

from pydantic import AfterValidator, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

THREE_PLAYER_COUNT = 3
FOUR_PLAYER_COUNT = 4
DEFAULT_PLAYER_COUNT = FOUR_PLAYER_COUNT
SUPPORTED_PLAYER_COUNTS = (THREE_PLAYER_COUNT, FOUR_PLAYER_COUNT)


def check_player_count(v: int) -> int:
    if v not in SUPPORTED_PLAYER_COUNTS:
        raise ValueError(f"player_count={v} is not supported (only 3 or 4 players)")
    return v


PlayerCount = Annotated[int, AfterValidator(check_player_count)]


class TrackerSettings(BaseSettings):
    """
    Session configuration for a GameManager.

    player_count fixes the total tile supply (three-player games drop 2m-8m).
    When log_dir is set, GameManager.from_settings configures logging for the
    session at log_level in log_format and opens a timestamped log file there.
    """

    model_config = SettingsConfigDict(env_prefix="TRACKER_", frozen=True)

    player_count: PlayerCount = DEFAULT_PLAYER_COUNT
    log_dir: str | None = None
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @field_validator("log_format", mode="before")
    @classmethod
    def lower_log_format(cls, v: object) -> object:
        return v.lower() if isinstance(v, str) else v
