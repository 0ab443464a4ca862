"""Environment-driven runtime settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path


logger = logging.getLogger(__name__)

_FEED_ROOT_ENV = "DFSPROJ_FEED_ROOT"
_DB_PATH_ENV = "DFSPROJ_DB_PATH"
_GAME_SKEW_ENV = "DFSPROJ_GAME_SKEW_MINUTES"
_LEGACY_ODDS_ENV = "DFSPROJ_LEGACY_ODDS_SCAN"

_GAME_SKEW_DEFAULT_MINUTES = 60


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value for %s below %d: %s; using %d", name, min_value, raw, min_value)
        return min_value
    return value


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    text = raw.strip().lower()
    if text in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if text in {"0", "false", "f", "no", "n", "off", ""}:
        return False
    logger.warning("Invalid flag for %s: %s; using default %s", name, raw, default)
    return default


@dataclass(frozen=True)
class Settings:
    feed_root: Path
    db_path: Path
    game_skew: timedelta = timedelta(minutes=_GAME_SKEW_DEFAULT_MINUTES)
    legacy_odds_scan: bool = False


def load_settings(*, feed_root: Path | str | None = None, db_path: Path | str | None = None) -> Settings:
    """Build settings from explicit overrides falling back to the environment."""

    root = Path(feed_root) if feed_root is not None else Path(os.getenv(_FEED_ROOT_ENV, "feeds"))
    if db_path is not None:
        db = Path(db_path)
    else:
        env_db = os.getenv(_DB_PATH_ENV)
        db = Path(env_db) if env_db else root / "crosswalk.sqlite"
    skew_minutes = _env_int(_GAME_SKEW_ENV, _GAME_SKEW_DEFAULT_MINUTES, min_value=0)
    return Settings(
        feed_root=root,
        db_path=db,
        game_skew=timedelta(minutes=skew_minutes),
        legacy_odds_scan=_env_flag(_LEGACY_ODDS_ENV, False),
    )
