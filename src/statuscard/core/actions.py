"""Gesture dispatch for category tiles and literal entity tiles.

Nothing is remembered between gestures: the binding, the target and its
entities are resolved from the snapshot passed in on every call.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Literal

from .aggregator import total_entities
from .config import ActionConfig
from .customization import CustomizationTable
from .model import (
    GESTURES,
    Category,
    EntityState,
    ForwardAction,
    Gesture,
    Intent,
    Navigate,
    OpenUrl,
    ServiceCall,
    ShowCategory,
    ShowMoreInfo,
    UiState,
)
from .toggle import toggle_category

logger = logging.getLogger(__name__)

ActionKind = Literal["more-info", "navigate", "url", "toggle", "other"]

_KNOWN_KINDS = ("more-info", "navigate", "url", "toggle")


def action_name(cfg: ActionConfig | None) -> str | None:
    if cfg is None:
        return None
    if isinstance(cfg, str):
        return cfg
    return cfg.get("action")


def classify_action(cfg: ActionConfig | None) -> ActionKind:
    name = action_name(cfg)
    if name is None:
        return "more-info"
    if name in _KNOWN_KINDS:
        return name  # type: ignore[return-value]
    return "other"


def has_action(cfg: ActionConfig | None) -> bool:
    return cfg is not None and action_name(cfg) != "none"


def _as_mapping(cfg: ActionConfig | None) -> dict[str, Any]:
    if cfg is None:
        return {}
    if isinstance(cfg, str):
        return {"action": cfg}
    return dict(cfg)


def _check_gesture(gesture: str) -> Gesture:
    if gesture not in GESTURES:
        raise ValueError(f"Unknown gesture {gesture!r}")
    return gesture  # type: ignore[return-value]


def _link_intent(kind: ActionKind, cfg: dict[str, Any], target: str) -> list[Intent]:
    if kind == "navigate":
        path = cfg.get("navigation_path")
        if path:
            return [Navigate(path)]
        logger.debug("navigate action for %s has no navigation_path", target)
        return []
    url = cfg.get("url_path")
    if url:
        return [OpenUrl(url)]
    logger.debug("url action for %s has no url_path", target)
    return []


def dispatch_category(
    ui: UiState,
    category: Category,
    gesture: str,
    by_domain: Mapping[str, Sequence[EntityState]],
    table: CustomizationTable,
) -> tuple[UiState, list[Intent]]:
    gesture = _check_gesture(gesture)

    if not total_entities(by_domain, category):
        logger.debug("%s on %s ignored: no live entities", gesture, category.key)
        return ui, []

    cfg = table.action_for(category, gesture)
    kind = classify_action(cfg)

    if kind == "more-info":
        return ui.select(category), [ShowCategory(category.domain, category.device_class)]

    if kind == "toggle":
        return ui, list(toggle_category(by_domain, category, table.is_inverted(category)))

    if kind in ("navigate", "url"):
        return ui, _link_intent(kind, _as_mapping(cfg), category.key)

    return ui, [ForwardAction(_as_mapping(cfg), gesture)]


def dispatch_entity(
    ui: UiState,
    entity_id: str,
    gesture: str,
    states: Mapping[str, EntityState],
    table: CustomizationTable,
) -> tuple[UiState, list[Intent]]:
    gesture = _check_gesture(gesture)

    entity = states.get(entity_id)
    if entity is None:
        logger.debug("%s on %s ignored: entity has no live state", gesture, entity_id)
        return ui, []

    cfg = table.action_for(entity_id, gesture)
    kind = classify_action(cfg)

    if kind == "more-info":
        return ui, [ShowMoreInfo(entity.entity_id)]

    if kind == "toggle":
        return ui, [ServiceCall("homeassistant", "toggle", entity.entity_id)]

    if kind in ("navigate", "url"):
        return ui, _link_intent(kind, _as_mapping(cfg), entity_id)

    return ui, [ForwardAction(_as_mapping(cfg), gesture)]
