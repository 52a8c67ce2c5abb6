"""Shared models and enums for the checklist platform."""

from __future__ import annotations

from enum import Enum
from typing import TypedDict

from pydantic import BaseModel, ConfigDict, Field

from checklist_plugin import PLATFORM_NAME
from checklist_plugin.common.paths import CHECKLIST_FILENAME


DEFAULT_HTTP_HOST = "0.0.0.0"
DEFAULT_HTTP_PORT = 3000


class ChecklistItem(TypedDict, total=False):
    """One persisted record. Posted items are stored as-is, so keys may be missing."""

    name: str
    checked: bool


class HostEvent(str, Enum):
    DID_FINISH_LAUNCHING = "didFinishLaunching"
    SHUTDOWN = "shutdown"


class CharacteristicEvent(str, Enum):
    GET = "get"
    SET = "set"


class PlatformConfig(BaseModel):
    """Platform block from the host configuration."""

    model_config = ConfigDict(extra="allow")

    platform: str = PLATFORM_NAME
    name: str = "Checklist"
    host: str = DEFAULT_HTTP_HOST
    port: int = Field(default=DEFAULT_HTTP_PORT, ge=0, le=65535)
    checklist_file: str = Field(default=CHECKLIST_FILENAME, min_length=1)
