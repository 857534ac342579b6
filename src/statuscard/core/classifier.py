from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from .domains import ALLOWED_DOMAINS
from .model import AreaRegistryEntry, DeviceRegistryEntry, EntityRegistryEntry, EntityState
from .registry import RegistryIndex, build_registry_index
from .util import memoize_one

logger = logging.getLogger(__name__)


def _as_tuple(v: Iterable[str] | None) -> tuple[str, ...] | None:
    if v is None:
        return None
    return tuple(v)


@dataclass(frozen=True)
class ClassifierFilters:
    area: tuple[str, ...] | None = None
    floor: tuple[str, ...] | None = None
    label: tuple[str, ...] | None = None
    hidden_entities: frozenset[str] = frozenset()
    hidden_labels: frozenset[str] = frozenset()

    @classmethod
    def build(
        cls,
        area: Iterable[str] | None = None,
        floor: Iterable[str] | None = None,
        label: Iterable[str] | None = None,
        hidden_entities: Iterable[str] | None = None,
        hidden_labels: Iterable[str] | None = None,
    ) -> ClassifierFilters:
        return cls(
            area=_as_tuple(area),
            floor=_as_tuple(floor),
            label=_as_tuple(label),
            hidden_entities=frozenset(hidden_entities or ()),
            hidden_labels=frozenset(hidden_labels or ()),
        )


def _is_listed_hidden(entry: EntityRegistryEntry, filters: ClassifierFilters) -> bool:
    if entry.entity_id in filters.hidden_entities:
        return True
    return any(lbl in filters.hidden_labels for lbl in entry.labels)


def is_eligible(entry: EntityRegistryEntry, index: RegistryIndex, filters: ClassifierFilters) -> bool:
    if entry.hidden_by or entry.disabled_by:
        return False

    # Updates are shown regardless of placement.
    if entry.domain == "update":
        return True

    device = index.device_of(entry)
    device_area = device.area_id if device is not None else None
    if not entry.area_id and not device_area:
        return False

    if filters.label:
        wanted = set(filters.label)
        if not wanted.intersection(index.labels_of(entry)):
            return False

    if filters.area:
        if entry.area_id not in filters.area and device_area not in filters.area:
            return False

    if filters.floor:
        floors = {index.floor_of_area(entry.area_id), index.floor_of_area(device_area)}
        floors.discard(None)
        if not floors.intersection(filters.floor):
            return False

    return not _is_listed_hidden(entry, filters)


@memoize_one
def entities_by_domain(
    entities: Sequence[EntityRegistryEntry],
    devices: Sequence[DeviceRegistryEntry],
    areas: Sequence[AreaRegistryEntry],
    states: Mapping[str, EntityState],
    filters: ClassifierFilters,
) -> dict[str, list[EntityState]]:
    """Group live states of eligible entities by domain.

    Only allow-listed domains appear. Registry entries without a live state
    are left out.
    """
    index = build_registry_index(entities, devices, areas)
    out: dict[str, list[EntityState]] = {}
    skipped_no_state = 0
    for entry in entities:
        domain = entry.domain
        if domain not in ALLOWED_DOMAINS:
            continue
        if not is_eligible(entry, index, filters):
            continue
        st = states.get(entry.entity_id)
        if st is None:
            skipped_no_state += 1
            continue
        out.setdefault(domain, []).append(st)
    if skipped_no_state:
        logger.debug("%d eligible entities have no live state yet", skipped_no_state)
    return out


def entity_ids_by_domain(by_domain: Mapping[str, Sequence[EntityState]]) -> dict[str, list[str]]:
    return {domain: [s.entity_id for s in ents] for domain, ents in by_domain.items()}
