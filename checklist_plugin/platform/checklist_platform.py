"""Dynamic platform that mirrors the checklist as switch accessories."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from checklist_plugin import PLATFORM_NAME, PLUGIN_NAME
from checklist_plugin.common.config import load_config
from checklist_plugin.common.models import ChecklistItem, CharacteristicEvent, HostEvent, PlatformConfig
from checklist_plugin.common.paths import checklist_path, env_path
from checklist_plugin.common.store import ChecklistItemNotFound, ChecklistStore
from checklist_plugin.host.contract import (
    HostAPI,
    HttpService,
    HttpServiceFactory,
    PlatformAccessory,
    Service,
    SetCallback,
)


def _usable_name(item: Any) -> str | None:
    if not isinstance(item, dict):
        return None
    name = item.get("name")
    if isinstance(name, str) and name:
        return name
    return None


class ChecklistPlatform:
    """Keeps the checklist file, the in-memory list and the host accessories in step.

    Accessories are keyed by the identifier the host derives from the item
    name, so a toggle always resolves its item by name, even after the list
    has been replaced over HTTP.
    """

    def __init__(
        self,
        log: logging.Logger | None,
        config: PlatformConfig | Mapping[str, Any] | None,
        api: HostAPI,
        server_factory: HttpServiceFactory | None = None,
    ) -> None:
        self.log = log or logging.getLogger("checklist_plugin")
        self.api = api
        self.hap = api.hap

        storage_dir = Path(api.user.storage_path())
        self.config = load_config(config, env_file=env_path(storage_dir))

        self.accessories: dict[str, PlatformAccessory] = {}
        self.orphans: dict[str, PlatformAccessory] = {}
        self._lock = threading.RLock()

        self.store = ChecklistStore(checklist_path(storage_dir, self.config.checklist_file))
        self.store.load()
        self.store.subscribe(self._on_checklist_replaced)

        self._server_factory = server_factory
        self.http_service: HttpService | None = None

        self.log.info("Checklist platform finished initializing!")

        api.on(HostEvent.DID_FINISH_LAUNCHING, self.did_finish_launching)
        api.on(HostEvent.SHUTDOWN, self.shutdown)

    def did_finish_launching(self) -> None:
        self.log.info("Checklist platform 'didFinishLaunching'")
        self.register_all(self.store.items())
        self.start_http_service()

    def shutdown(self) -> None:
        with self._lock:
            if self.http_service is not None:
                self.http_service.stop()
                self.http_service = None

    def configure_accessory(self, accessory: PlatformAccessory) -> None:
        """Called by the host for every accessory restored from its cache."""
        self.log.info("Configuring accessory %s", accessory.display_name)

        with self._lock:
            item = self.store.get(accessory.display_name)
            if item is None:
                self.log.warning(
                    "Accessory %s not found in checklist, skipping configuration.", accessory.display_name
                )
                self.orphans[accessory.uuid] = accessory
                return

            self._bind(accessory, accessory.display_name, bool(item.get("checked", False)))
            self.accessories[accessory.uuid] = accessory

    def register_all(self, items: list[ChecklistItem]) -> None:
        with self._lock:
            for item in items:
                name = _usable_name(item)
                if name is None:
                    self.log.warning("Skipping checklist item without a name: %r", item)
                    continue
                self.add_accessory(name, bool(item.get("checked", False)))

    def add_accessory(self, name: str, checked: bool = False) -> PlatformAccessory:
        uuid = self.hap.uuid.generate(name)
        with self._lock:
            existing = self.accessories.get(uuid)
            if existing is not None:
                return existing

            orphan = self.orphans.pop(uuid, None)
            if orphan is not None:
                self.log.info("Re-attaching cached accessory %s", name)
                self._bind(orphan, name, checked)
                self.accessories[uuid] = orphan
                return orphan

            self.log.info("Adding new accessory with name %s", name)
            accessory = self.api.platform_accessory(name, uuid)
            accessory.add_service(self.hap.Service.Switch, name)
            self._bind(accessory, name, checked)

            self.api.register_platform_accessories(PLUGIN_NAME, PLATFORM_NAME, [accessory])
            self.accessories[uuid] = accessory
            return accessory

    def on_toggle(self, name: str, value: Any, callback: SetCallback) -> None:
        self.log.info("Setting state of %s to %s", name, value)
        try:
            self.store.set_checked(name, bool(value))
        except ChecklistItemNotFound as exc:
            self.log.warning("Checklist item %s no longer exists, ignoring toggle.", name)
            callback(exc)
            return
        except OSError as exc:
            self.log.error("Could not save checklist after toggling %s: %s", name, exc)
            callback(exc)
            return
        callback(None)

    def start_http_service(self) -> None:
        with self._lock:
            if self._server_factory is None or self.http_service is not None:
                return
            service = self._server_factory(self.store, self.config, self.log)
            service.start()
            self.http_service = service

    def _switch_service(self, accessory: PlatformAccessory, name: str) -> Service:
        service = accessory.get_service(self.hap.Service.Switch)
        if service is None:
            service = accessory.add_service(self.hap.Service.Switch, name)
        return service

    def _bind(self, accessory: PlatformAccessory, name: str, checked: bool) -> None:
        def handle_set(value: Any, callback: SetCallback) -> None:
            self.on_toggle(name, value, callback)

        characteristic = self._switch_service(accessory, name).get_characteristic(self.hap.Characteristic.On)
        characteristic.on(CharacteristicEvent.SET, handle_set)
        characteristic.update_value(checked)

    def _on_checklist_replaced(self, items: list[ChecklistItem]) -> None:
        # A later replace may already have landed; sync against the current list.
        with self._lock:
            self.sync_accessories(self.store.items())

    def sync_accessories(self, items: list[ChecklistItem]) -> None:
        """Register, unregister and refresh accessories to match ``items``."""
        with self._lock:
            wanted: dict[str, ChecklistItem] = {}
            for item in items:
                name = _usable_name(item)
                if name is not None:
                    wanted.setdefault(self.hap.uuid.generate(name), item)

            stale = [accessory for uuid, accessory in self.accessories.items() if uuid not in wanted]
            if stale:
                for accessory in stale:
                    self.log.info("Removing accessory %s", accessory.display_name)
                    del self.accessories[accessory.uuid]
                self.api.unregister_platform_accessories(PLUGIN_NAME, PLATFORM_NAME, stale)

            for uuid, item in wanted.items():
                checked = bool(item.get("checked", False))
                accessory = self.accessories.get(uuid)
                if accessory is None:
                    self.add_accessory(item["name"], checked)
                    continue
                service = self._switch_service(accessory, accessory.display_name)
                service.get_characteristic(self.hap.Characteristic.On).update_value(checked)
