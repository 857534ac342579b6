import os
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .classifier import ClassifierFilters

DEFAULT_CONFIG_PATH = "/app/config/card.yaml"

ActionConfig = dict[str, Any] | str

PRESENTATION_FIELDS = (
    "hide_person",
    "hide_content_name",
    "list_mode",
    "columns",
    "square",
    "theme",
    "show_total_number",
    "show_total_entities",
)


class CardConfigError(ValueError):
    pass


class CustomizationRule(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    invert: bool = False
    name: str | None = None
    icon: str | None = None
    icon_color: str | None = None
    show_entity_picture: bool = False
    icon_css: str | None = None
    # Kept loose: a non-list value is ignored when resolving the background.
    background_color: Any = None
    tap_action: ActionConfig | None = None
    hold_action: ActionConfig | None = None
    double_tap_action: ActionConfig | None = None
    # Literal entity rules only.
    state: str | None = None
    invert_state: Literal["true", "false"] | None = None

    @field_validator("invert_state", mode="before")
    @classmethod
    def _bool_to_str(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return "true" if v else "false"
        return v

    @field_validator("state", mode="before")
    @classmethod
    def _state_to_str(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)


def _listify(v: Any) -> Any:
    if v is None or v == "":
        return None
    if isinstance(v, str):
        return [v]
    return v


class CardConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    content: list[str] = Field(default_factory=list)
    area: list[str] | None = None
    floor: list[str] | None = None
    label: list[str] | None = None
    hidden_entities: list[str] = Field(default_factory=list)
    hidden_labels: list[str] = Field(default_factory=list)
    customization: list[CustomizationRule] = Field(default_factory=list)

    color: str | None = None
    background_color: Any = None
    tap_action: ActionConfig | None = None
    hold_action: ActionConfig | None = None
    double_tap_action: ActionConfig | None = None

    show_total_number: bool = False
    show_total_entities: bool = False
    hide_person: bool = False
    hide_content_name: bool = False
    list_mode: bool = False
    columns: int | None = None
    square: bool = False
    theme: str | None = None

    @field_validator("area", "floor", "label", mode="before")
    @classmethod
    def _filters_as_lists(cls, v: Any) -> Any:
        return _listify(v)

    @field_validator("hidden_entities", "hidden_labels", "content", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return _listify(v) or []

    def classifier_filters(self) -> ClassifierFilters:
        return ClassifierFilters.build(
            area=self.area,
            floor=self.floor,
            label=self.label,
            hidden_entities=self.hidden_entities,
            hidden_labels=self.hidden_labels,
        )

    def presentation(self) -> dict[str, Any]:
        out = {k: getattr(self, k) for k in PRESENTATION_FIELDS}
        out.update(self.model_extra or {})
        return out


def parse_card_config(data: Any) -> CardConfig:
    if data is None:
        raise CardConfigError("Invalid configuration: card configuration is missing")
    if not isinstance(data, dict):
        raise CardConfigError("Invalid configuration: root must be a mapping/object")
    try:
        return CardConfig.model_validate(data)
    except ValidationError as e:
        raise CardConfigError(f"Invalid configuration: {e}") from e


def _candidate_paths(explicit_path: str | None) -> list[str]:
    out: list[str] = []
    if explicit_path:
        out.append(explicit_path)
    out.extend(
        [
            "/config/statuscard/card.yaml",
            "/config/statuscard.yaml",
            DEFAULT_CONFIG_PATH,
        ]
    )
    # de-dup while preserving order
    seen = set()
    uniq = []
    for p in out:
        if p in seen:
            continue
        seen.add(p)
        uniq.append(p)
    return uniq


def find_config_path(explicit_path: str | None = None) -> str | None:
    for p in _candidate_paths(explicit_path):
        if p and os.path.exists(p):
            return p
    return None


def load_card_config(explicit_path: str | None = None) -> tuple[CardConfig, str]:
    """Load and validate the card configuration.

    Returns (config, path). Any problem is fatal and raised as CardConfigError.
    """
    path = find_config_path(explicit_path)
    if not path:
        raise CardConfigError("Invalid configuration: no card configuration file found")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise CardConfigError(f"Invalid configuration in {path}: {e}") from e
    return parse_card_config(data), path
