from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .model import UNASSIGNED, AreaRegistryEntry, DeviceRegistryEntry, EntityRegistryEntry
from .util import memoize_one


@dataclass(frozen=True)
class RegistryIndex:
    entity_by_id: dict[str, EntityRegistryEntry]
    device_by_id: dict[str, DeviceRegistryEntry]
    area_by_id: dict[str, AreaRegistryEntry]

    def entry(self, entity_id: str) -> EntityRegistryEntry | None:
        return self.entity_by_id.get(entity_id)

    def device_of(self, entry: EntityRegistryEntry) -> DeviceRegistryEntry | None:
        if not entry.device_id:
            return None
        return self.device_by_id.get(entry.device_id)

    def area_of(self, entity_id: str) -> str:
        # Effective area = entity.area_id if set; else device.area_id if linked.
        entry = self.entry(entity_id)
        if entry is None:
            return UNASSIGNED
        if entry.area_id:
            return entry.area_id
        device = self.device_of(entry)
        if device is not None and device.area_id:
            return device.area_id
        return UNASSIGNED

    def area_name(self, area_id: str) -> str:
        area = self.area_by_id.get(area_id)
        if area is not None:
            return area.name
        if area_id == UNASSIGNED:
            return "Unassigned"
        return area_id

    def floor_of_area(self, area_id: str | None) -> str | None:
        if not area_id:
            return None
        area = self.area_by_id.get(area_id)
        return area.floor_id if area is not None else None

    def labels_of(self, entry: EntityRegistryEntry) -> set[str]:
        labels = set(entry.labels)
        device = self.device_of(entry)
        if device is not None:
            labels.update(device.labels)
        return labels


@memoize_one
def build_registry_index(
    entities: Sequence[EntityRegistryEntry],
    devices: Sequence[DeviceRegistryEntry],
    areas: Sequence[AreaRegistryEntry],
) -> RegistryIndex:
    return RegistryIndex(
        entity_by_id={e.entity_id: e for e in entities},
        device_by_id={d.id: d for d in devices},
        area_by_id={a.area_id: a for a in areas},
    )
