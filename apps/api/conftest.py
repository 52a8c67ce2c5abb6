import sys
import uuid as uuid_lib
from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

# Add project root to python path for tests
ROOT_DIR = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT_DIR))

from checklist_plugin.common.config import ENV_OVERRIDES  # noqa: E402
from checklist_plugin.common.models import CharacteristicEvent, HostEvent  # noqa: E402


class FakeCharacteristic:
    def __init__(self) -> None:
        self.value: Any = False
        self.handlers: dict[CharacteristicEvent, list[Callable[..., None]]] = {}

    def on(self, event: CharacteristicEvent, handler: Callable[..., None]) -> "FakeCharacteristic":
        self.handlers.setdefault(event, []).append(handler)
        return self

    def update_value(self, value: Any) -> "FakeCharacteristic":
        self.value = value
        return self

    def set(self, value: Any) -> list[Exception | None]:
        """Simulate a HomeKit client writing the characteristic."""
        results: list[Exception | None] = []
        for handler in self.handlers.get(CharacteristicEvent.SET, []):
            handler(value, results.append)
        if all(result is None for result in results):
            self.value = value
        return results


class FakeService:
    def __init__(self, service_type: str, name: str) -> None:
        self.service_type = service_type
        self.name = name
        self.characteristics: dict[str, FakeCharacteristic] = {}

    def get_characteristic(self, characteristic_type: str) -> FakeCharacteristic:
        return self.characteristics.setdefault(characteristic_type, FakeCharacteristic())


class FakeAccessory:
    def __init__(self, display_name: str, uuid: str) -> None:
        self.display_name = display_name
        self.uuid = uuid
        self.services: dict[str, FakeService] = {}

    def add_service(self, service_type: str, name: str) -> FakeService:
        service = FakeService(service_type, name)
        self.services[service_type] = service
        return service

    def get_service(self, service_type: str) -> FakeService | None:
        return self.services.get(service_type)

    def switch(self) -> FakeCharacteristic:
        return self.services["Switch"].get_characteristic("On")


class FakeUUID:
    def generate(self, data: str) -> str:
        return str(uuid_lib.uuid5(uuid_lib.NAMESPACE_URL, data))


class FakeHostAPI:
    """In-process stand-in for the host plugin runtime."""

    def __init__(self, storage_dir: Path) -> None:
        self.hap = SimpleNamespace(
            uuid=FakeUUID(),
            Service=SimpleNamespace(Switch="Switch"),
            Characteristic=SimpleNamespace(On="On"),
        )
        self.user = SimpleNamespace(storage_path=lambda: str(storage_dir))
        self.listeners: dict[HostEvent, list[Callable[[], None]]] = {}
        self.platforms: dict[str, Callable[..., Any]] = {}
        self.registered: dict[str, FakeAccessory] = {}
        self.unregistered: list[FakeAccessory] = []

    def on(self, event: HostEvent, callback: Callable[[], None]) -> None:
        self.listeners.setdefault(event, []).append(callback)

    def emit(self, event: HostEvent) -> None:
        for callback in self.listeners.get(event, []):
            callback()

    def platform_accessory(self, display_name: str, uuid: str) -> FakeAccessory:
        return FakeAccessory(display_name, uuid)

    def register_platform(self, platform_name: str, constructor: Callable[..., Any]) -> None:
        self.platforms[platform_name] = constructor

    def register_platform_accessories(self, plugin_name: str, platform_name: str, accessories: list) -> None:
        for accessory in accessories:
            assert accessory.uuid not in self.registered, f"duplicate accessory {accessory.display_name}"
            self.registered[accessory.uuid] = accessory

    def unregister_platform_accessories(self, plugin_name: str, platform_name: str, accessories: list) -> None:
        for accessory in accessories:
            self.registered.pop(accessory.uuid, None)
            self.unregistered.append(accessory)

    def cached_accessory(self, display_name: str) -> FakeAccessory:
        """Build an accessory as the host would restore it from its cache."""
        accessory = FakeAccessory(display_name, self.hap.uuid.generate(display_name))
        accessory.add_service("Switch", display_name)
        self.registered[accessory.uuid] = accessory
        return accessory


class FakeHttpService:
    def __init__(self, store: Any, config: Any, log: Any) -> None:
        self.store = store
        self.config = config
        self.started = False
        self.stopped = False

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so teardown also removes values a test loads from a .env file
    for variable in ENV_OVERRIDES.values():
        monkeypatch.setenv(variable, "")
        monkeypatch.delenv(variable)


@pytest.fixture
def host(tmp_path: Path) -> FakeHostAPI:
    return FakeHostAPI(tmp_path)


@pytest.fixture
def http_service_factory() -> Callable[..., FakeHttpService]:
    created: list[FakeHttpService] = []

    def factory(store: Any, config: Any, log: Any) -> FakeHttpService:
        service = FakeHttpService(store, config, log)
        created.append(service)
        return service

    factory.created = created  # type: ignore[attr-defined]
    return factory
