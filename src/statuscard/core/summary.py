"""Summary tiles and drill-down views handed to the presentation layer."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from .actions import has_action
from .aggregator import active_entities, aggregate, total_entities
from .classifier import ClassifierFilters
from .config import CardConfig
from .customization import CustomizationTable, Target, state_condition_matches
from .domains import status_word
from .grouping import AreaGroup, group_by_area
from .model import Category, EntityRegistryEntry, EntityState, UiState
from .registry import RegistryIndex
from .util import format_domain, is_entity_id

TileKind = Literal["person", "entity", "domain", "device_class"]

DEFAULT_COLUMNS = 4


@dataclass(frozen=True)
class Tile:
    kind: TileKind
    key: str
    domain: str
    device_class: str | None
    entity_id: str | None
    active_count: int
    total_count: int
    count_label: str
    status: str
    unit: str | None
    name: str | None
    icon: str
    color: str | None
    background: str
    icon_css: str | None
    has_hold: bool
    has_double_tap: bool


def asdict_tile(t: Tile) -> dict[str, Any]:
    return {
        "kind": t.kind,
        "key": t.key,
        "domain": t.domain,
        "device_class": t.device_class,
        "entity_id": t.entity_id,
        "active_count": t.active_count,
        "total_count": t.total_count,
        "count_label": t.count_label,
        "status": t.status,
        "unit": t.unit,
        "name": t.name,
        "icon": t.icon,
        "color": t.color,
        "background": t.background,
        "icon_css": t.icon_css,
        "has_hold": t.has_hold,
        "has_double_tap": t.has_double_tap,
    }


def count_label(active: int, total: int, show_total_number: bool) -> str:
    return f"{active}/{total}" if show_total_number else str(active)


def _gesture_hints(table: CustomizationTable, target: Target) -> dict[str, bool]:
    return {
        "has_hold": has_action(table.action_for(target, "hold")),
        "has_double_tap": has_action(table.action_for(target, "double_tap")),
    }


def person_entities(
    entities: Sequence[EntityRegistryEntry],
    states: Mapping[str, EntityState],
    filters: ClassifierFilters,
) -> list[EntityState]:
    out = []
    for entry in entities:
        if entry.domain != "person":
            continue
        if entry.hidden_by or entry.disabled_by:
            continue
        if entry.entity_id in filters.hidden_entities:
            continue
        if any(lbl in filters.hidden_labels for lbl in entry.labels):
            continue
        st = states.get(entry.entity_id)
        if st is not None:
            out.append(st)
    return out


def _person_tile(entity: EntityState, config: CardConfig) -> Tile:
    home = entity.state == "home"
    name = None
    if not config.hide_content_name:
        name = (entity.friendly_name or "").split(" ")[0]
    return Tile(
        kind="person",
        key=entity.entity_id,
        domain="person",
        device_class=None,
        entity_id=entity.entity_id,
        active_count=1 if home else 0,
        total_count=1,
        count_label="",
        status=entity.state,
        unit=None,
        name=name,
        icon=entity.attributes.get("entity_picture") or entity.attributes.get("icon") or "mdi:account",
        color=None,
        background="",
        icon_css=None,
        has_hold=False,
        has_double_tap=False,
    )


def _entity_tile(entity: EntityState, config: CardConfig, table: CustomizationTable) -> Tile:
    eid = entity.entity_id
    return Tile(
        kind="entity",
        key=eid,
        domain=entity.domain,
        device_class=entity.device_class,
        entity_id=eid,
        active_count=1,
        total_count=1,
        count_label="",
        status=entity.state,
        unit=entity.attributes.get("unit_of_measurement"),
        name=None if config.hide_content_name else table.name(eid, entity),
        icon=table.icon(eid, entity),
        color=table.color(eid),
        background=table.background(eid),
        icon_css=table.icon_css(eid),
        **_gesture_hints(table, eid),
    )


def _category_tile(
    category: Category,
    by_domain: Mapping[str, Sequence[EntityState]],
    config: CardConfig,
    table: CustomizationTable,
) -> Tile | None:
    inverted = table.is_inverted(category)
    group = aggregate(by_domain, category, inverted)
    if group.active_count == 0:
        return None

    name = None
    if not config.hide_content_name:
        fallback = format_domain(category.device_class or category.domain)
        name = table.name(category) or fallback

    return Tile(
        kind="device_class" if category.device_class else "domain",
        key=category.key,
        domain=category.domain,
        device_class=category.device_class,
        entity_id=None,
        active_count=group.active_count,
        total_count=group.total_count,
        count_label=count_label(group.active_count, group.total_count, config.show_total_number),
        status=status_word(category.domain, category.device_class, inverted),
        unit=None,
        name=name,
        icon=table.icon(category),
        color=table.color(category),
        background=table.background(category),
        icon_css=table.icon_css(category),
        **_gesture_hints(table, category),
    )


def build_summary(
    config: CardConfig,
    table: CustomizationTable,
    by_domain: Mapping[str, Sequence[EntityState]],
    states: Mapping[str, EntityState],
    entities: Sequence[EntityRegistryEntry],
    filters: ClassifierFilters,
) -> list[Tile]:
    """Tiles in display order: people first, then ``content`` order.

    Categories with nothing active are left out, as are literal entities that
    are not live or whose state condition does not hold.
    """
    tiles: list[Tile] = []
    if not config.hide_person:
        tiles.extend(_person_tile(p, config) for p in person_entities(entities, states, filters))

    for item in config.content:
        if is_entity_id(item):
            entity = states.get(item)
            if entity is None:
                continue
            if not state_condition_matches(table.rule(item), entity):
                continue
            tiles.append(_entity_tile(entity, config, table))
            continue

        tile = _category_tile(Category.parse(item), by_domain, config, table)
        if tile is not None:
            tiles.append(tile)
    return tiles


@dataclass(frozen=True)
class DialogView:
    key: str
    domain: str
    device_class: str | None
    inverted: bool
    show_all: bool
    columns: int
    groups: tuple[AreaGroup, ...]


def effective_show_all(config: CardConfig, ui: UiState) -> bool:
    return config.show_total_entities != ui.show_all


def build_dialog(
    ui: UiState,
    config: CardConfig,
    table: CustomizationTable,
    by_domain: Mapping[str, Sequence[EntityState]],
    index: RegistryIndex,
) -> DialogView | None:
    category = ui.selected
    if category is None:
        return None

    inverted = table.is_inverted(category)
    show_all = effective_show_all(config, ui)
    if show_all:
        ents = total_entities(by_domain, category)
    else:
        ents = active_entities(by_domain, category, inverted)

    columns = 1 if config.list_mode else (config.columns or DEFAULT_COLUMNS)
    return DialogView(
        key=category.key,
        domain=category.domain,
        device_class=category.device_class,
        inverted=inverted,
        show_all=show_all,
        columns=max(1, min(columns, len(ents))),
        groups=tuple(group_by_area(ents, index, show_all)),
    )


def asdict_dialog(v: DialogView) -> dict[str, Any]:
    return {
        "key": v.key,
        "domain": v.domain,
        "device_class": v.device_class,
        "inverted": v.inverted,
        "show_all": v.show_all,
        "columns": v.columns,
        "groups": [
            {
                "area_id": g.area_id,
                "name": g.name,
                "entities": [
                    {"entity_id": e.entity_id, "state": e.state, "name": e.name}
                    for e in g.entities
                ],
            }
            for g in v.groups
        ],
    }
