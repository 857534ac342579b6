"""Per-domain behavior table.

Activity, device-class matching, toggle semantics, icons and status words
are looked up here by every component instead of branching on domain names.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_OFF_STATES = frozenset(
    {
        "closed",
        "locked",
        "off",
        "docked",
        "idle",
        "standby",
        "paused",
        "auto",
        "not_home",
        "disarmed",
        "0",
    }
)

UNAVAILABLE_STATES = frozenset({"unavailable", "unknown"})

# Values of hvac_action / action meaning the appliance is not running.
IDLE_ACTIONS = frozenset({"idle", "off"})

# Device classes whose status reads open/closed instead of on/off.
OPEN_DEVICE_CLASSES = frozenset(
    {
        "window",
        "door",
        "lock",
        "awning",
        "blind",
        "curtain",
        "damper",
        "garage",
        "gate",
        "shade",
        "shutter",
    }
)

DEFAULT_DOMAIN_ICON = "mdi:bookmark"


class DeviceClassRule(Enum):
    EXACT = "exact"
    # switch: "outlet" is exact, "switch" also matches a missing device class.
    SWITCH = "switch"


@dataclass(frozen=True)
class ToggleRule:
    """How to flip a category.

    ``bulk`` issues one ``toggle`` for all ids. Otherwise ``on_service`` is
    called for entities that are currently on and ``off_service`` for the rest.
    """

    bulk: bool = False
    on_service: str | None = None
    off_service: str | None = None

    def service_for(self, is_on: bool) -> str | None:
        if self.bulk:
            return "toggle"
        return self.on_service if is_on else self.off_service


BULK_TOGGLE = ToggleRule(bulk=True)


@dataclass(frozen=True)
class StatusWords:
    normal: str = "on"
    inverted: str = "off"

    def pick(self, inverted: bool) -> str:
        return self.inverted if inverted else self.normal


ON_OFF = StatusWords()
OPEN_CLOSED = StatusWords("open", "closed")
HOME_AWAY = StatusWords("home", "not_home")


@dataclass(frozen=True)
class DomainBehavior:
    # Attribute that, when present, decides activity on its own.
    action_attribute: str | None = None
    device_class_rule: DeviceClassRule = DeviceClassRule.EXACT
    toggle: ToggleRule | None = None
    status: StatusWords = ON_OFF
    icon_on: str = DEFAULT_DOMAIN_ICON
    icon_off: str = DEFAULT_DOMAIN_ICON
    device_class_icons: dict[str, tuple[str, str]] = field(default_factory=dict)


DOMAINS: dict[str, DomainBehavior] = {
    "alarm_control_panel": DomainBehavior(
        toggle=ToggleRule(on_service="alarm_arm_away", off_service="alarm_disarm"),
        icon_on="mdi:shield-lock",
        icon_off="mdi:shield-off",
    ),
    "binary_sensor": DomainBehavior(
        icon_on="mdi:checkbox-marked-circle",
        icon_off="mdi:radiobox-blank",
        device_class_icons={
            "battery": ("mdi:battery-outline", "mdi:battery"),
            "connectivity": ("mdi:check-network-outline", "mdi:close-network-outline"),
            "door": ("mdi:door-open", "mdi:door-closed"),
            "garage_door": ("mdi:garage-open", "mdi:garage"),
            "gas": ("mdi:alert-circle", "mdi:check-circle"),
            "lock": ("mdi:lock-open", "mdi:lock"),
            "moisture": ("mdi:water", "mdi:water-off"),
            "motion": ("mdi:motion-sensor", "mdi:motion-sensor-off"),
            "occupancy": ("mdi:home", "mdi:home-outline"),
            "opening": ("mdi:square-outline", "mdi:square"),
            "plug": ("mdi:power-plug", "mdi:power-plug-off"),
            "presence": ("mdi:home", "mdi:home-outline"),
            "problem": ("mdi:alert-circle", "mdi:check-circle"),
            "smoke": ("mdi:smoke-detector-alert", "mdi:smoke-detector"),
            "vibration": ("mdi:vibrate", "mdi:crop-portrait"),
            "window": ("mdi:window-open", "mdi:window-closed"),
        },
    ),
    "calendar": DomainBehavior(icon_on="mdi:calendar", icon_off="mdi:calendar-remove"),
    "climate": DomainBehavior(
        action_attribute="hvac_action",
        toggle=BULK_TOGGLE,
        icon_on="mdi:thermostat",
        icon_off="mdi:thermostat-cog",
    ),
    "counter": DomainBehavior(icon_on="mdi:counter", icon_off="mdi:counter"),
    "cover": DomainBehavior(
        toggle=BULK_TOGGLE,
        status=OPEN_CLOSED,
        icon_on="mdi:window-open",
        icon_off="mdi:window-closed",
        device_class_icons={
            "blind": ("mdi:blinds-open", "mdi:blinds"),
            "curtain": ("mdi:curtains", "mdi:curtains-closed"),
            "door": ("mdi:door-open", "mdi:door-closed"),
            "garage": ("mdi:garage-open", "mdi:garage"),
            "gate": ("mdi:gate-open", "mdi:gate"),
            "shutter": ("mdi:window-shutter-open", "mdi:window-shutter"),
            "window": ("mdi:window-open", "mdi:window-closed"),
        },
    ),
    "device_tracker": DomainBehavior(
        status=HOME_AWAY,
        icon_on="mdi:account",
        icon_off="mdi:account-off",
    ),
    "fan": DomainBehavior(toggle=BULK_TOGGLE, icon_on="mdi:fan", icon_off="mdi:fan-off"),
    "humidifier": DomainBehavior(
        action_attribute="action",
        toggle=BULK_TOGGLE,
        icon_on="mdi:air-humidifier",
        icon_off="mdi:air-humidifier-off",
    ),
    "input_boolean": DomainBehavior(
        icon_on="mdi:toggle-switch",
        icon_off="mdi:toggle-switch-off",
    ),
    "lawn_mower": DomainBehavior(
        toggle=ToggleRule(on_service="pause", off_service="start_mowing"),
        icon_on="mdi:robot-mower",
        icon_off="mdi:robot-mower-outline",
    ),
    "light": DomainBehavior(
        toggle=BULK_TOGGLE,
        icon_on="mdi:lightbulb",
        icon_off="mdi:lightbulb-off",
    ),
    "lock": DomainBehavior(
        toggle=ToggleRule(on_service="lock", off_service="unlock"),
        status=OPEN_CLOSED,
        icon_on="mdi:lock-open",
        icon_off="mdi:lock",
    ),
    "media_player": DomainBehavior(
        toggle=ToggleRule(on_service="media_pause", off_service="media_play"),
        icon_on="mdi:cast-connected",
        icon_off="mdi:cast-off",
    ),
    "remote": DomainBehavior(toggle=BULK_TOGGLE, icon_on="mdi:remote", icon_off="mdi:remote-off"),
    "siren": DomainBehavior(
        toggle=BULK_TOGGLE,
        icon_on="mdi:bullhorn",
        icon_off="mdi:bullhorn-outline",
    ),
    "switch": DomainBehavior(
        device_class_rule=DeviceClassRule.SWITCH,
        toggle=BULK_TOGGLE,
        icon_on="mdi:toggle-switch",
        icon_off="mdi:toggle-switch-off",
        device_class_icons={"outlet": ("mdi:power-plug", "mdi:power-plug-off")},
    ),
    "timer": DomainBehavior(icon_on="mdi:timer-outline", icon_off="mdi:timer-off"),
    "update": DomainBehavior(
        toggle=ToggleRule(on_service="skip", off_service="install"),
        icon_on="mdi:package-up",
        icon_off="mdi:package",
    ),
    "vacuum": DomainBehavior(
        toggle=ToggleRule(on_service="stop", off_service="start"),
        icon_on="mdi:robot-vacuum",
        icon_off="mdi:robot-vacuum-off",
    ),
    "valve": DomainBehavior(
        toggle=BULK_TOGGLE,
        icon_on="mdi:valve-open",
        icon_off="mdi:valve-closed",
    ),
    "water_heater": DomainBehavior(
        toggle=ToggleRule(on_service="turn_off", off_service="turn_on"),
        icon_on="mdi:water-boiler",
        icon_off="mdi:water-boiler-off",
    ),
}

ALLOWED_DOMAINS = frozenset(DOMAINS)

_FALLBACK = DomainBehavior()


def behavior(domain: str) -> DomainBehavior:
    return DOMAINS.get(domain, _FALLBACK)


def is_off_state(state: str) -> bool:
    return state in DEFAULT_OFF_STATES


def domain_icon(domain: str, state: str = "on", device_class: str | None = None) -> str:
    if domain == "person":
        return "mdi:account" if state == "home" else "mdi:account-arrow-right"
    b = behavior(domain)
    on = not is_off_state(state)
    if device_class and device_class in b.device_class_icons:
        icon_on, icon_off = b.device_class_icons[device_class]
        return icon_on if on else icon_off
    return b.icon_on if on else b.icon_off


def status_word(domain: str, device_class: str | None, inverted: bool) -> str:
    b = behavior(domain)
    if b.status is ON_OFF and device_class in OPEN_DEVICE_CLASSES:
        return OPEN_CLOSED.pick(inverted)
    return b.status.pick(inverted)
