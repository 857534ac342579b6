from __future__ import annotations

from .domains import DEFAULT_OFF_STATES, IDLE_ACTIONS, UNAVAILABLE_STATES, DeviceClassRule, behavior
from .model import EntityState


def is_available(entity: EntityState) -> bool:
    return entity.state not in UNAVAILABLE_STATES


def matches_device_class(domain: str, device_class: str | None, entity: EntityState) -> bool:
    entity_dc = entity.device_class
    if behavior(domain).device_class_rule is DeviceClassRule.SWITCH:
        if device_class == "outlet":
            return entity_dc == "outlet"
        if device_class == "switch":
            return entity_dc == "switch" or entity_dc is None
    return not device_class or entity_dc == device_class


def is_on_state(state: str) -> bool:
    return state not in DEFAULT_OFF_STATES


def is_active(
    domain: str,
    device_class: str | None,
    entity: EntityState,
    inverted: bool = False,
) -> bool:
    if not is_available(entity):
        return False

    if not matches_device_class(domain, device_class, entity):
        return False

    attr = behavior(domain).action_attribute
    if attr is not None and entity.attributes.get(attr) is not None:
        running = entity.attributes[attr] not in IDLE_ACTIONS
        return not running if inverted else running

    on = is_on_state(entity.state)
    return not on if inverted else on
