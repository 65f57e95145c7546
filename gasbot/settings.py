from __future__ import annotations

from typing import Any, TypeVar

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.errors import ConfigError

# ────────────────────────── upstream ─────────────────────────────────────────
ORACLE_URL = "https://api.etherscan.io/api?module=gastracker&action=gasoracle&apikey="


# ────────────────────────── settings models ─────────────────────────────────
class OracleSettings(BaseSettings):
    """Just enough configuration to query the gas oracle."""

    api_key:    str = Field(..., description="Etherscan API key")
    oracle_url: str = Field(ORACLE_URL, description="Gas oracle URL, key appended")

    # ─── pydantic-settings config ──────────────────────────────────────────
    model_config = SettingsConfigDict(
        env_file=".env",          # read variables from .env when present
        case_sensitive=False,     # KEY == key
        extra="ignore",           # ignore unrelated env keys
    )


class Settings(OracleSettings):
    """Runtime configuration validated with Pydantic."""

    # ─── Discord ────────────────────────────────────────────────────────────
    token: str = Field(..., description="Discord bot token")

    # ─── Polling ────────────────────────────────────────────────────────────
    shard_count:   int   = Field(1, ge=1, description="Gateway shards, one worker each")
    poll_interval: float = Field(30.0, gt=0, description="Seconds between cycles")

    # ─── Misc ──────────────────────────────────────────────────────────────
    log_level:    str        = Field("INFO")
    metrics_port: int | None = Field(None, ge=1, le=65535)

    # ─── validators ────────────────────────────────────────────────────────
    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, v: str) -> str:
        v_up = v.upper()
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        if v_up not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v_up


S = TypeVar("S", bound=OracleSettings)


def load_settings(model: type[S] = Settings, **overrides: Any) -> S:  # type: ignore[assignment]
    """Build *model*, turning validation errors into :class:`ConfigError`.

    Missing required keys are reported by their environment name so the
    operator knows exactly what to add to ``.env``.
    """
    try:
        return model(**overrides)
    except ValidationError as exc:
        missing = [
            str(err["loc"][0]).upper()
            for err in exc.errors()
            if err["type"] == "missing" and err["loc"]
        ]
        if missing:
            keys = ", ".join(missing)
            raise ConfigError(f"Could not find {keys} in environment or .env") from exc
        raise ConfigError(f"Invalid configuration: {exc}") from exc

