from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .activity import is_on_state
from .model import UNASSIGNED, EntityState
from .registry import RegistryIndex
from .util import sort_text


@dataclass(frozen=True)
class AreaGroup:
    area_id: str
    name: str
    entities: tuple[EntityState, ...]


def _group_sort_name(area_id: str, index: RegistryIndex) -> str:
    area = index.area_by_id.get(area_id)
    if area is not None:
        return sort_text(area.name)
    if area_id == UNASSIGNED:
        return sort_text("Unassigned")
    return sort_text(area_id)


def sort_entities(entities: Sequence[EntityState], show_all: bool) -> list[EntityState]:
    def key(e: EntityState) -> tuple[int, str]:
        # Active entities first only when inactive ones are listed too.
        tier = 0 if (not show_all or is_on_state(e.state)) else 1
        return tier, sort_text(e.name)

    return sorted(entities, key=key)


def group_by_area(
    entities: Sequence[EntityState],
    index: RegistryIndex,
    show_all: bool,
) -> list[AreaGroup]:
    buckets: dict[str, list[EntityState]] = {}
    for e in entities:
        buckets.setdefault(index.area_of(e.entity_id), []).append(e)

    ordered = sorted(buckets, key=lambda aid: _group_sort_name(aid, index))
    return [
        AreaGroup(
            area_id=aid,
            name=index.area_name(aid),
            entities=tuple(sort_entities(buckets[aid], show_all)),
        )
        for aid in ordered
    ]
