from functools import lru_cache
import json
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from festival.core.exceptions import ConfigurationError


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    # Resolve to backend/.env so the CLI and `uvicorn --app-dir backend` agree from any cwd.
    model_config = SettingsConfigDict(
        env_file=str(BACKEND_ENV_FILE),
        env_file_encoding="utf-8",
        env_prefix="FESTIVAL_",
        extra="ignore",
    )

    project_name: str = "Festival Scheduler API"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    default_strategy: Literal["exhaustive", "greedy", "grasp"] = "grasp"
    random_seed: int | None = None

    initial_temperature: float = Field(default=0.1, gt=0.0)
    min_temperature: float = Field(default=5e-7, gt=0.0)
    cooling_rate: float = Field(default=0.999, gt=0.0, lt=1.0)

    # Requests served over HTTP never run the local search unbounded.
    api_max_iterations: int = Field(default=200, ge=1)
    api_time_limit_seconds: float = Field(default=5.0, gt=0.0)
    api_max_exhaustive_films: int = Field(default=40, ge=1)

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {value}")
        return level

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_cors_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            stripped = value.strip()
            if stripped.startswith("["):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return [str(item).strip() for item in parsed if str(item).strip()]
                except json.JSONDecodeError:
                    pass
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
        raise ConfigurationError(
            "Invalid FESTIVAL_* settings",
            details={"fields": fields},
        ) from exc
