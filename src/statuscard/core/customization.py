"""Cascading per-category overrides.

Each property resolves on its own: customization rule, then the rule for
the bare domain (device-class categories only), then the entity's own
attributes, then the card-wide default, then a fixed fallback. A rule that
only sets ``icon_color`` still lets the name fall through.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .config import ActionConfig, CardConfig, CustomizationRule
from .domains import domain_icon
from .model import Category, EntityState, Gesture
from .util import compute_domain

DEFAULT_BACKGROUND = "rgba(var(--rgb-primary-text-color), 0.15)"

Target = Category | str


def _key(target: Target) -> str:
    return target.key if isinstance(target, Category) else target


def _rgb(value: Any) -> str | None:
    if not isinstance(value, list | tuple) or not value:
        return None
    return f"rgb({','.join(str(v) for v in value)})"


def normalize_css(css: str) -> str:
    lines = [ln.strip() for ln in css.split("\n")]
    decls = [ln if ln.endswith(";") else f"{ln};" for ln in lines if ln and ":" in ln]
    return " ".join(decls)


class CustomizationTable:
    def __init__(self, rules: Iterable[CustomizationRule], defaults: CardConfig | None = None):
        self._by_key: dict[str, CustomizationRule] = {}
        for r in rules:
            # First matching rule wins, as with a list scan.
            self._by_key.setdefault(r.type.lower(), r)
        self.defaults = defaults or CardConfig()

    @classmethod
    def from_config(cls, config: CardConfig) -> CustomizationTable:
        return cls(config.customization, config)

    def rule(self, target: Target) -> CustomizationRule | None:
        return self._by_key.get(_key(target).lower())

    def _cascade(self, target: Target) -> list[CustomizationRule]:
        rules = [self.rule(target)]
        if isinstance(target, Category) and target.device_class:
            rules.append(self.rule(target.domain))
        return [r for r in rules if r is not None]

    def is_inverted(self, target: Target) -> bool:
        r = self.rule(target)
        return r is not None and r.invert is True

    def name(self, target: Target, entity: EntityState | None = None) -> str | None:
        for r in self._cascade(target):
            if r.name:
                return r.name
        if entity is not None and entity.friendly_name:
            return entity.friendly_name
        return None

    def icon(self, target: Target, entity: EntityState | None = None) -> str:
        rules = self._cascade(target)
        if entity is not None and any(r.show_entity_picture for r in rules):
            picture = entity.attributes.get("entity_picture")
            if picture:
                return picture
        for r in rules:
            if r.icon:
                return r.icon
        if entity is not None:
            return entity.attributes.get("icon") or ""

        exemplar = "off" if self.is_inverted(target) else "on"
        if isinstance(target, Category):
            return domain_icon(target.domain, exemplar, target.device_class)
        return domain_icon(compute_domain(target), exemplar)

    def color(self, target: Target) -> str | None:
        for r in self._cascade(target):
            if r.icon_color:
                return r.icon_color
        return self.defaults.color or None

    def background(self, target: Target) -> str:
        for r in self._cascade(target):
            rgb = _rgb(r.background_color)
            if rgb:
                return rgb
        return _rgb(self.defaults.background_color) or DEFAULT_BACKGROUND

    def icon_css(self, target: Target) -> str | None:
        for r in self._cascade(target):
            if r.icon_css:
                return normalize_css(r.icon_css)
        return None

    def action_for(self, target: Target, gesture: Gesture) -> ActionConfig | None:
        field_name = f"{gesture}_action"
        for r in self._cascade(target):
            bound = getattr(r, field_name)
            if bound is not None:
                return bound
        return getattr(self.defaults, field_name)


def state_condition_matches(rule: CustomizationRule | None, entity: EntityState) -> bool:
    """Whether a literal entity tile should be shown for its current state."""
    if rule is None or rule.state is None or rule.invert_state is None:
        return True
    if rule.invert_state == "false":
        return entity.state == rule.state
    return entity.state != rule.state
