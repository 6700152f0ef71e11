"""Workspace root, settings, timezone and path helpers for LifeAreas."""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from lifeareas.fileio import read_yaml, write_yaml_atomic
from lifeareas.models import Settings
from lifeareas.store import JsonFileStore

logger = logging.getLogger(__name__)


def workspace_root() -> Path:
    """Directory holding store.json, profile.yaml and hooks.yaml."""
    return Path(
        os.environ.get("LIFEAREAS_ROOT", str(Path.home() / "lifeareas"))
    ).expanduser().resolve()


# ── Path helpers ──────────────────────────────────────────────

def store_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "store.json"


def profile_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "profile.yaml"


def hooks_config_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "hooks.yaml"


# ── Settings ──────────────────────────────────────────────────

def load_settings(root: Path | None = None) -> Settings:
    """Read profile.yaml. Missing or unreadable profiles give defaults."""
    try:
        return Settings.from_dict(read_yaml(profile_path(root)))
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable profile: %s", e)
        return Settings()


def init_workspace(root: Path | None = None) -> Path:
    """Create the workspace with a default profile if it does not exist yet."""
    if root is None:
        root = workspace_root()
    root.mkdir(parents=True, exist_ok=True)
    if not profile_path(root).exists():
        write_yaml_atomic(profile_path(root), Settings().to_dict())
    return root


def open_store(root: Path | None = None) -> JsonFileStore:
    return JsonFileStore(store_path(root))


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """Timezone from profile.yaml, defaulting to UTC."""
    name = load_settings(root).timezone
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, using UTC", name)
        return ZoneInfo("UTC")


def now_local(root: Path | None = None) -> datetime:
    return datetime.now(get_user_timezone(root))


def configure_logging() -> None:
    """Basic logging for the surfaces; level from LIFEAREAS_LOG_LEVEL."""
    level = os.environ.get("LIFEAREAS_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
