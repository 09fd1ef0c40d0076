"""braindump configuration.

Source locations default to the per-user directories the agents write to and
can be overridden through environment variables.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel

from braindump.errors import ConfigurationError


def _env_path(name: str) -> Path | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return Path(value.strip()).expanduser()


def _env_log_level(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    level = logging.getLevelName(value.strip().upper())
    if isinstance(level, int):
        return level
    return default


# Relative to the user's home directory
CLAUDE_PROJECTS_SUBPATH = Path(".claude") / "projects"
GOOSE_DB_SUBPATH = Path(".local") / "share" / "goose" / "sessions" / "sessions.db"

# Envelope schema version
OUTPUT_VERSION = "1.0.0"

LOG_LEVEL = _env_log_level("BRAINDUMP_LOG_LEVEL", logging.WARNING)


class Settings(BaseModel):
    claude_projects_dir: Path
    goose_db_path: Path


def resolve_home() -> Path:
    """Return the invoking user's home directory.

    ``BRAINDUMP_HOME`` takes precedence; otherwise the platform lookup is used.
    """
    override = _env_path("BRAINDUMP_HOME")
    if override is not None:
        return override
    try:
        home = Path.home()
    except (KeyError, RuntimeError) as exc:
        raise ConfigurationError(f"failed to get home directory: {exc}") from exc
    if not str(home) or str(home) == "~":
        raise ConfigurationError("failed to get home directory")
    return home


def load_settings() -> Settings:
    claude_dir = _env_path("BRAINDUMP_CLAUDE_PROJECTS_DIR")
    goose_db = _env_path("BRAINDUMP_GOOSE_DB_PATH")
    if claude_dir is None or goose_db is None:
        home = resolve_home()
        claude_dir = claude_dir or home / CLAUDE_PROJECTS_SUBPATH
        goose_db = goose_db or home / GOOSE_DB_SUBPATH
    return Settings(claude_projects_dir=claude_dir, goose_db_path=goose_db)
