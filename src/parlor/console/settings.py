"""Console app configuration via environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from parlor.logic.rng import validate_seed_hex


class ConsoleSettings(BaseSettings):
    model_config = {"env_prefix": "PARLOR_"}

    player_name: str = Field(default="You", min_length=1)
    advanced: bool = False
    seed: str | None = None  # 64 hex chars; a fresh seed per match when unset
    rounds: int = Field(default=8, ge=1)  # termination round
    log_dir: str | None = None
    log_level: str = "WARNING"  # console games keep the log quiet on stderr

    @field_validator("seed")
    @classmethod
    def validate_seed(cls, v: str | None) -> str | None:
        if v is not None:
            validate_seed_hex(v)
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()
