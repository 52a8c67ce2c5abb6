"""Configuration loading: host platform block, .env file and environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from checklist_plugin.common.models import PlatformConfig


ENV_OVERRIDES: dict[str, str] = {
    "host": "CHECKLIST_HTTP_HOST",
    "port": "CHECKLIST_HTTP_PORT",
    "checklist_file": "CHECKLIST_FILE",
}


def load_config(
    raw: PlatformConfig | Mapping[str, Any] | None = None,
    env_file: Path | None = None,
) -> PlatformConfig:
    """Build the platform config.

    Keys present in the host block win; environment variables (optionally
    seeded from ``env_file``) only fill the gaps.
    """
    if isinstance(raw, PlatformConfig):
        return raw
    if env_file is not None and env_file.exists():
        load_dotenv(dotenv_path=env_file)

    data: dict[str, Any] = dict(raw or {})
    for field, variable in ENV_OVERRIDES.items():
        value = os.getenv(variable)
        if value is not None and field not in data:
            data[field] = value
    return PlatformConfig.model_validate(data)
