"""Data root, timezone and directory helpers for NorthStar."""

from __future__ import annotations

import logging
import os
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from northstar.fileio import read_yaml

logger = logging.getLogger(__name__)

GOALS_DIR = "goals"
REFLECTIONS_DIR = "reflections"
VISION_DIR = "vision"


def data_root() -> Path:
    """Get the data directory (contains goals/, reflections/ and vision/)."""
    return Path(
        os.environ.get("NORTHSTAR_ROOT", str(Path.home() / "northstar" / "data"))
    ).expanduser().resolve()


def settings_path(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / "settings.yaml"


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Get user's timezone from settings.yaml, defaulting to UTC."""
    settings = read_yaml(settings_path(root))
    name = settings.get("timezone")
    if name:
        try:
            return ZoneInfo(str(name))
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown timezone %r in settings.yaml, using UTC", name)
    return ZoneInfo("UTC")


def now_local(root: Path | None = None) -> datetime:
    """Get current datetime in user's timezone."""
    return datetime.now(get_user_timezone(root))


def today(root: Path | None = None) -> date:
    """Get today's date in user's timezone."""
    return now_local(root).date()


# ── Path helpers ──────────────────────────────────────────────

def goals_dir(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / GOALS_DIR


def reflections_dir(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / REFLECTIONS_DIR


def vision_dir(root: Path | None = None) -> Path:
    if root is None:
        root = data_root()
    return root / VISION_DIR


def ensure_data_dirs(root: Path | None = None) -> list[Path]:
    """Create the top-level data directories. Safe to call repeatedly.

    Returns the directories that did not exist before.
    """
    if root is None:
        root = data_root()
    created = []
    for path in (root, goals_dir(root), reflections_dir(root), vision_dir(root)):
        if not path.exists():
            path.mkdir(parents=True, exist_ok=True)
            created.append(path)
    return created
