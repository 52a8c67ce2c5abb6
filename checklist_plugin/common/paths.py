"""Path helpers for the checklist storage file."""

from __future__ import annotations

from pathlib import Path


CHECKLIST_FILENAME = "checklist.json"
ENV_FILENAME = ".env"


def checklist_path(storage_dir: str | Path, filename: str = CHECKLIST_FILENAME) -> Path:
    return Path(storage_dir) / filename


def env_path(storage_dir: str | Path) -> Path:
    return Path(storage_dir) / ENV_FILENAME
