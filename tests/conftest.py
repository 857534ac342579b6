from __future__ import annotations

from typing import Any

import pytest

from statuscard.core.classifier import ClassifierFilters, entities_by_domain
from statuscard.core.config import parse_card_config
from statuscard.core.customization import CustomizationTable
from statuscard.core.model import (
    AreaRegistryEntry,
    DeviceRegistryEntry,
    EntityRegistryEntry,
    EntityState,
)
from statuscard.core.registry import build_registry_index


def reg(entity_id: str, device_id: str | None = None, area_id: str | None = None, **kw: Any):
    return EntityRegistryEntry(
        entity_id=entity_id,
        device_id=device_id,
        area_id=area_id,
        hidden_by=kw.get("hidden_by"),
        disabled_by=kw.get("disabled_by"),
        labels=tuple(kw.get("labels", ())),
    )


def dev(device_id: str, area_id: str | None = None, labels: tuple[str, ...] = ()):
    return DeviceRegistryEntry(id=device_id, area_id=area_id, labels=labels)


def area(area_id: str, name: str, floor_id: str | None = None):
    return AreaRegistryEntry(area_id=area_id, name=name, floor_id=floor_id)


def st(entity_id: str, state: str, **attributes: Any) -> EntityState:
    return EntityState(entity_id=entity_id, state=state, attributes=attributes)


def states_of(*states: EntityState) -> dict[str, EntityState]:
    return {s.entity_id: s for s in states}


def table_for(data: dict[str, Any]) -> CustomizationTable:
    return CustomizationTable.from_config(parse_card_config(data))


class Home:
    """A small house: two floors, three areas, a handful of devices."""

    def __init__(self) -> None:
        self.areas = (
            area("kitchen", "Kitchen", "ground"),
            area("living_room", "Living Room", "ground"),
            area("bedroom", "bedroom", "first"),
        )
        self.devices = (
            dev("dev_kitchen", "kitchen"),
            dev("dev_tv", "living_room", labels=("media",)),
            dev("dev_loose"),
        )
        self.entities = (
            reg("light.kitchen", area_id="kitchen"),
            reg("light.sofa", device_id="dev_tv"),
            reg("light.bed", area_id="bedroom"),
            reg("light.hidden", area_id="kitchen", hidden_by="user"),
            reg("light.nowhere", device_id="dev_loose"),
            reg("switch.kettle", device_id="dev_kitchen", labels=("appliance",)),
            reg("switch.lamp", area_id="living_room"),
            reg("lock.front", area_id="living_room"),
            reg("lock.back", area_id="kitchen"),
            reg("sensor.temp", area_id="kitchen"),
            reg("update.core"),
            reg("media_player.tv", device_id="dev_tv"),
            reg("person.alice"),
            reg("person.bob", hidden_by="user"),
        )
        self.states = states_of(
            st("light.kitchen", "on", friendly_name="Kitchen Light"),
            st("light.sofa", "off", friendly_name="Sofa Lamp"),
            st("light.bed", "on", friendly_name="Bed Light"),
            st("light.hidden", "on"),
            st("light.nowhere", "on"),
            st("switch.kettle", "on", device_class="outlet"),
            st("switch.lamp", "off"),
            st("lock.front", "unlocked"),
            st("lock.back", "locked"),
            st("sensor.temp", "21.5", unit_of_measurement="°C"),
            st("update.core", "on"),
            st("media_player.tv", "playing", friendly_name="TV"),
            st("person.alice", "home", friendly_name="Alice Smith"),
            st("person.bob", "home", friendly_name="Bob"),
        )

    @property
    def index(self):
        return build_registry_index(self.entities, self.devices, self.areas)

    def by_domain(self, filters: ClassifierFilters | None = None):
        return entities_by_domain(
            self.entities, self.devices, self.areas, self.states, filters or ClassifierFilters()
        )


@pytest.fixture
def home() -> Home:
    return Home()


class FakeHA:
    """Stands in for HAWebSocketClient; records service calls."""

    url = "ws://fake/websocket"
    token = "token"

    def __init__(self) -> None:
        self.areas = [{"area_id": "kitchen", "name": "Kitchen", "floor_id": "ground"}]
        self.devices = [{"id": "dev_kitchen", "area_id": "kitchen", "labels": []}]
        self.entities = [
            {"entity_id": "light.kitchen", "area_id": "kitchen"},
            {"entity_id": "light.counter", "device_id": "dev_kitchen"},
            {"entity_id": "lock.back", "area_id": "kitchen"},
            {"entity_id": "sensor.temp", "area_id": "kitchen"},
        ]
        self.states = [
            {"entity_id": "light.kitchen", "state": "on", "attributes": {"friendly_name": "Kitchen"}},
            {"entity_id": "light.counter", "state": "on", "attributes": {}},
            {"entity_id": "lock.back", "state": "unlocked", "attributes": {}},
            {"entity_id": "sensor.temp", "state": "21", "attributes": {"unit_of_measurement": "°C"}},
        ]
        self.fail_registries = False
        self.calls: list[tuple[str, str, Any]] = []
        self.closed = False

    async def connect(self) -> None:
        return None

    async def close(self) -> None:
        self.closed = True

    async def area_list(self) -> list[dict]:
        if self.fail_registries:
            raise ConnectionError("socket closed")
        return self.areas

    async def device_list(self) -> list[dict]:
        return self.devices

    async def entity_list(self) -> list[dict]:
        return self.entities

    async def get_states(self) -> list[dict]:
        return self.states

    async def call_service(self, domain: str, service: str, entity_id: Any = None) -> Any:
        self.calls.append((domain, service, entity_id))
        return None


@pytest.fixture
def fake_ha() -> FakeHA:
    return FakeHA()
