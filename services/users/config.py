from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

STORAGE_BACKENDS = ("memory", "sql")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _load_repo_env() -> None:
    """Load the nearest .env starting from this file upward."""
    current = Path(__file__).resolve()
    for candidate in [current.parent, *current.parents]:
        env_file = candidate / ".env"
        if env_file.exists():
            load_dotenv(env_file)
            return


_load_repo_env()


def _env_choice(
    name: str, default: str, choices: tuple[str, ...], *, upper: bool = False
) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().upper() if upper else raw.strip().lower()
    if value not in choices:
        raise ValueError(
            f"Environment variable {name} must be one of: {', '.join(choices)}"
        )
    return value


@dataclass(frozen=True)
class UsersConfig:
    storage_backend: str = "memory"
    database_url: str = ""
    log_level: str = "INFO"
    api_title: str = "User Registry"

    def __post_init__(self) -> None:
        if self.storage_backend == "sql" and not self.database_url:
            raise ValueError(
                "Environment variable USERS_DATABASE_URL is required "
                "when USERS_STORAGE_BACKEND is sql"
            )


def load_config() -> UsersConfig:
    return UsersConfig(
        storage_backend=_env_choice(
            "USERS_STORAGE_BACKEND", "memory", STORAGE_BACKENDS
        ),
        database_url=os.getenv("USERS_DATABASE_URL", ""),
        log_level=_env_choice("USERS_LOG_LEVEL", "INFO", LOG_LEVELS, upper=True),
        api_title=os.getenv("USERS_API_TITLE", "User Registry"),
    )
