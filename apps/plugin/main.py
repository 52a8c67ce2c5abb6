"""Host entry point: registers the checklist platform with the plugin runtime."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from apps.api.main import ApiServer
from checklist_plugin import PLATFORM_NAME
from checklist_plugin.host.contract import HostAPI
from checklist_plugin.platform import ChecklistPlatform


def create_platform(
    log: logging.Logger | None, config: Mapping[str, Any] | None, api: HostAPI
) -> ChecklistPlatform:
    return ChecklistPlatform(log, config, api, server_factory=ApiServer)


def register(api: HostAPI) -> None:
    api.register_platform(PLATFORM_NAME, create_platform)
