"""Configuration helpers for the tape catalog."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

LOG_DIR_ENV = "CASSETTES_LOG_DIR"
SECRET_KEY_ENV = "CASSETTES_SECRET_KEY"
DEFAULT_SECRET_KEY = "cassettes-dev-secret"


@dataclass(frozen=True)
class AppPaths:
    """Container for application paths.

    The logs directory is created on startup.
    """

    db_path: Path
    data_dir: Path
    logs_dir: Path


def get_paths(db_path: Path | str) -> AppPaths:
    """Resolve application paths from the database file location.

    Args:
        db_path: Path to the SQLite catalog file.

    Returns:
        AppPaths with logs stored beside the database unless
        ``CASSETTES_LOG_DIR`` points elsewhere.
    """

    db_path = Path(db_path).expanduser()
    data_dir = db_path.resolve().parent
    override = os.environ.get(LOG_DIR_ENV)
    logs_dir = Path(override).expanduser() if override else data_dir / "logs"
    return AppPaths(db_path=db_path, data_dir=data_dir, logs_dir=logs_dir)


def get_secret_key() -> str:
    """Return the Flask secret key used for flash messages."""

    return os.environ.get(SECRET_KEY_ENV, DEFAULT_SECRET_KEY)
