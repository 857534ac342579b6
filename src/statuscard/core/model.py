from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal

from .util import compute_domain, format_domain

UNASSIGNED = "unassigned"

Gesture = Literal["tap", "hold", "double_tap"]
GESTURES: tuple[Gesture, ...] = ("tap", "hold", "double_tap")


def _labels(raw: Any) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(str(x) for x in raw)


@dataclass(frozen=True)
class EntityRegistryEntry:
    entity_id: str
    device_id: str | None = None
    area_id: str | None = None
    hidden_by: str | None = None
    disabled_by: str | None = None
    labels: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> EntityRegistryEntry:
        return cls(
            entity_id=d["entity_id"],
            device_id=d.get("device_id") or None,
            area_id=d.get("area_id") or None,
            hidden_by=d.get("hidden_by") or None,
            disabled_by=d.get("disabled_by") or None,
            labels=_labels(d.get("labels")),
        )

    @property
    def domain(self) -> str:
        return compute_domain(self.entity_id)


@dataclass(frozen=True)
class DeviceRegistryEntry:
    id: str
    area_id: str | None = None
    labels: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DeviceRegistryEntry:
        return cls(
            id=d["id"],
            area_id=d.get("area_id") or None,
            labels=_labels(d.get("labels")),
        )


@dataclass(frozen=True)
class AreaRegistryEntry:
    area_id: str
    name: str
    floor_id: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> AreaRegistryEntry:
        return cls(
            area_id=d["area_id"],
            name=d.get("name") or d["area_id"],
            floor_id=d.get("floor_id") or None,
        )


@dataclass(frozen=True)
class EntityState:
    entity_id: str
    state: str
    attributes: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> EntityState:
        return cls(
            entity_id=d["entity_id"],
            state=str(d["state"]) if d.get("state") is not None else "unknown",
            attributes=dict(d.get("attributes") or {}),
        )

    @property
    def domain(self) -> str:
        return compute_domain(self.entity_id)

    @property
    def device_class(self) -> str | None:
        return self.attributes.get("device_class")

    @property
    def friendly_name(self) -> str | None:
        return self.attributes.get("friendly_name")

    @property
    def name(self) -> str:
        return self.friendly_name or self.entity_id


@dataclass(frozen=True)
class Category:
    """One summary tile: a domain, optionally narrowed to a device class."""

    domain: str
    device_class: str | None = None

    @property
    def key(self) -> str:
        # Always derived; the formatted key is never stored.
        if self.device_class:
            return f"{format_domain(self.domain)} - {self.device_class}"
        return self.domain

    @classmethod
    def parse(cls, content: str) -> Category:
        """Parse a ``content`` item such as ``light`` or ``Binary Sensor - door``."""
        if " - " in content:
            domain_part, device_class = content.split(" - ", 1)
            domain = "_".join(domain_part.strip().lower().split())
            return cls(domain=domain, device_class=device_class.strip().lower())
        return cls(domain=content.strip())


@dataclass(frozen=True)
class AggregatedGroup:
    domain: str
    device_class: str | None
    active_entities: tuple[EntityState, ...]
    total_entities: tuple[EntityState, ...]

    @property
    def active_count(self) -> int:
        return len(self.active_entities)

    @property
    def total_count(self) -> int:
        return len(self.total_entities)


# Intents handed to the host. The core never performs these itself.


@dataclass(frozen=True)
class ShowMoreInfo:
    entity_id: str
    kind: Literal["more_info"] = "more_info"


@dataclass(frozen=True)
class ShowCategory:
    domain: str
    device_class: str | None = None
    kind: Literal["show_category"] = "show_category"


@dataclass(frozen=True)
class Navigate:
    path: str
    kind: Literal["navigate"] = "navigate"


@dataclass(frozen=True)
class OpenUrl:
    url: str
    kind: Literal["url"] = "url"


@dataclass(frozen=True)
class ServiceCall:
    domain: str
    service: str
    entity_id: str | tuple[str, ...]
    kind: Literal["service_call"] = "service_call"


@dataclass(frozen=True)
class ForwardAction:
    action_config: dict[str, Any] = field(hash=False, compare=False)
    gesture: Gesture = "tap"
    kind: Literal["forward"] = "forward"


Intent = ShowMoreInfo | ShowCategory | Navigate | OpenUrl | ServiceCall | ForwardAction


def asdict_intent(i: Intent) -> dict[str, Any]:
    if isinstance(i, ServiceCall):
        entity_id = list(i.entity_id) if isinstance(i.entity_id, tuple) else i.entity_id
        return {
            "kind": i.kind,
            "domain": i.domain,
            "service": i.service,
            "entity_id": entity_id,
        }
    if isinstance(i, ShowMoreInfo):
        return {"kind": i.kind, "entity_id": i.entity_id}
    if isinstance(i, ShowCategory):
        return {"kind": i.kind, "domain": i.domain, "device_class": i.device_class}
    if isinstance(i, Navigate):
        return {"kind": i.kind, "path": i.path}
    if isinstance(i, OpenUrl):
        return {"kind": i.kind, "url": i.url}
    return {"kind": i.kind, "action_config": dict(i.action_config), "gesture": i.gesture}


@dataclass(frozen=True)
class UiState:
    """Dialog state owned by the presentation layer.

    Every transition returns a new instance; the core keeps no copy.
    """

    selected: Category | None = None
    show_all: bool = False
    confirm_pending: bool = False
    confirm_target: Category | None = None

    def select(self, category: Category) -> UiState:
        return replace(self, selected=category)

    def close(self) -> UiState:
        return replace(self, selected=None, confirm_pending=False, confirm_target=None)

    def toggle_show_all(self) -> UiState:
        return replace(self, show_all=not self.show_all)

    def ask_toggle(self, category: Category | None = None) -> UiState:
        target = category or self.selected
        if target is None:
            return self
        return replace(self, confirm_pending=True, confirm_target=target)

    def reset_confirm(self) -> UiState:
        return replace(self, confirm_pending=False, confirm_target=None)
