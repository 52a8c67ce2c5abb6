"""Typed contract of the host plugin runtime.

The host owns accessory lifecycle, caching and the HomeKit bridge. Only the
surface the checklist platform touches is described here; anything that
implements it structurally can drive the platform.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from checklist_plugin.common.models import CharacteristicEvent, HostEvent, PlatformConfig

SetCallback = Callable[[Exception | None], None]
SetHandler = Callable[[Any, SetCallback], None]


class Characteristic(Protocol):
    def on(self, event: CharacteristicEvent, handler: SetHandler) -> Characteristic: ...

    def update_value(self, value: Any) -> Characteristic: ...


class Service(Protocol):
    def get_characteristic(self, characteristic_type: Any) -> Characteristic: ...


class PlatformAccessory(Protocol):
    display_name: str
    uuid: str

    def add_service(self, service_type: Any, name: str) -> Service: ...

    def get_service(self, service_type: Any) -> Service | None: ...


class UUIDGenerator(Protocol):
    def generate(self, data: str) -> str: ...


class HAP(Protocol):
    uuid: UUIDGenerator
    Service: Any
    Characteristic: Any


class HostUser(Protocol):
    def storage_path(self) -> str: ...


class HostAPI(Protocol):
    hap: HAP
    user: HostUser

    def on(self, event: HostEvent, callback: Callable[[], None]) -> None: ...

    def platform_accessory(self, display_name: str, uuid: str) -> PlatformAccessory: ...

    def register_platform(self, platform_name: str, constructor: Callable[..., Any]) -> None: ...

    def register_platform_accessories(
        self, plugin_name: str, platform_name: str, accessories: Iterable[PlatformAccessory]
    ) -> None: ...

    def unregister_platform_accessories(
        self, plugin_name: str, platform_name: str, accessories: Iterable[PlatformAccessory]
    ) -> None: ...


class HttpService(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...


HttpServiceFactory = Callable[[Any, PlatformConfig, logging.Logger], HttpService]
