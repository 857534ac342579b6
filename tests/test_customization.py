from statuscard.core.config import parse_card_config
from statuscard.core.customization import (
    DEFAULT_BACKGROUND,
    CustomizationTable,
    normalize_css,
    state_condition_matches,
)
from statuscard.core.model import Category

from .conftest import st, table_for

MOTION = Category("binary_sensor", "motion")
LIGHT = Category("light")
LIGHT_CEILING = Category("light", "ceiling")

CASCADE = {
    "content": ["light"],
    "color": "blue",
    "background_color": [10, 20, 30],
    "tap_action": {"action": "navigate", "navigation_path": "/lights"},
    "hold_action": {"action": "more-info"},
    "customization": [
        {
            "type": "Light - ceiling",
            "icon_color": "red",
            "icon": "mdi:ceiling-light",
            "tap_action": {"action": "toggle"},
        },
        {
            "type": "light",
            "icon_color": "green",
            "icon": "mdi:lamp",
            "tap_action": {"action": "url", "url_path": "https://example.org"},
        },
    ],
}


class TestLookup:
    def test_case_insensitive_key(self):
        table = table_for({"customization": [{"type": "BINARY SENSOR - MOTION", "name": "Moves"}]})
        assert table.rule(MOTION).name == "Moves"
        assert table.rule("binary_sensor") is None

    def test_first_rule_wins(self):
        table = table_for(
            {"customization": [{"type": "light", "name": "One"}, {"type": "Light", "name": "Two"}]}
        )
        assert table.name(LIGHT) == "One"

    def test_literal_entity_key(self):
        table = table_for({"customization": [{"type": "sensor.temp", "name": "Temperature"}]})
        assert table.name("sensor.temp") == "Temperature"

    def test_empty_config(self):
        table = CustomizationTable([])
        assert table.rule(LIGHT) is None
        assert table.color(LIGHT) is None
        assert table.background(LIGHT) == DEFAULT_BACKGROUND
        assert table.action_for(LIGHT, "tap") is None


class TestCascade:
    def setup_method(self):
        self.table = table_for(CASCADE)
        self.bare = table_for({"content": ["light"]})
        self.defaults_only = table_for({k: v for k, v in CASCADE.items() if k != "customization"})

    def test_color(self):
        assert self.table.color(LIGHT_CEILING) == "red"
        assert self.table.color(LIGHT) == "green"
        assert self.defaults_only.color(LIGHT) == "blue"
        assert self.bare.color(LIGHT) is None

    def test_icon(self):
        assert self.table.icon(LIGHT_CEILING) == "mdi:ceiling-light"
        assert self.table.icon(LIGHT) == "mdi:lamp"
        assert self.defaults_only.icon(LIGHT) == "mdi:lightbulb"

    def test_gesture_bindings(self):
        assert self.table.action_for(LIGHT_CEILING, "tap") == {"action": "toggle"}
        assert self.table.action_for(LIGHT, "tap")["action"] == "url"
        assert self.defaults_only.action_for(LIGHT, "tap")["action"] == "navigate"
        assert self.bare.action_for(LIGHT, "tap") is None

    def test_device_class_category_falls_back_to_domain_rule(self):
        table = table_for(
            {
                "color": "blue",
                "customization": [
                    {"type": "Light - ceiling", "icon": "mdi:ceiling-light"},
                    {"type": "light", "icon_color": "green", "hold_action": "toggle", "invert": True},
                ],
            }
        )
        assert table.icon(LIGHT_CEILING) == "mdi:ceiling-light"
        assert table.color(LIGHT_CEILING) == "green"
        assert table.action_for(LIGHT_CEILING, "hold") == "toggle"
        assert table.color(Category("switch", "outlet")) == "blue"
        assert not table.is_inverted(LIGHT_CEILING)

    def test_unbound_gesture_falls_back_to_card_default(self):
        assert self.table.action_for(LIGHT_CEILING, "hold") == {"action": "more-info"}
        assert self.table.action_for(LIGHT_CEILING, "double_tap") is None

    def test_fields_resolve_independently(self):
        table = table_for({"customization": [{"type": "light.desk", "icon_color": "amber"}]})
        desk = st("light.desk", "on", friendly_name="Desk", icon="mdi:desk-lamp")
        assert table.color("light.desk") == "amber"
        assert table.name("light.desk", desk) == "Desk"
        assert table.icon("light.desk", desk) == "mdi:desk-lamp"

    def test_background(self):
        assert self.table.background(LIGHT) == "rgb(10,20,30)"
        table = table_for({"customization": [{"type": "light", "background_color": [1, 2, 3]}]})
        assert table.background(LIGHT) == "rgb(1,2,3)"

    def test_malformed_background_is_ignored(self):
        table = table_for(
            {
                "background_color": [9, 9, 9],
                "customization": [{"type": "light", "background_color": "red"}],
            }
        )
        assert table.background(LIGHT) == "rgb(9,9,9)"
        table = table_for({"customization": [{"type": "light", "background_color": "red"}]})
        assert table.background(LIGHT) == DEFAULT_BACKGROUND


class TestIcon:
    def test_entity_picture_wins_when_requested(self):
        table = table_for(
            {"customization": [{"type": "person.a", "show_entity_picture": True, "icon": "mdi:x"}]}
        )
        ent = st("person.a", "home", entity_picture="/local/a.png")
        assert table.icon("person.a", ent) == "/local/a.png"

    def test_picture_ignored_without_flag(self):
        table = table_for({"customization": [{"type": "person.a", "icon": "mdi:x"}]})
        ent = st("person.a", "home", entity_picture="/local/a.png")
        assert table.icon("person.a", ent) == "mdi:x"

    def test_category_icon_uses_inverted_exemplar(self):
        table = table_for({"customization": [{"type": "lock", "invert": True}]})
        assert table.icon(Category("lock")) == "mdi:lock"
        assert table_for({}).icon(Category("lock")) == "mdi:lock-open"

    def test_device_class_icon(self):
        table = table_for({})
        assert table.icon(Category("binary_sensor", "door")) == "mdi:door-open"

    def test_entity_without_icon_gives_empty(self):
        assert table_for({}).icon("light.a", st("light.a", "on")) == ""


class TestCss:
    def test_normalize(self):
        css = "color: red\n  animation: spin 2s ;\n\nnot-a-declaration\n"
        assert normalize_css(css) == "color: red; animation: spin 2s ;"

    def test_icon_css_from_rule(self):
        table = table_for({"customization": [{"type": "fan", "icon_css": "color: red"}]})
        assert table.icon_css(Category("fan")) == "color: red;"
        assert table.icon_css(LIGHT) is None


class TestStateCondition:
    def _rule(self, **kw):
        cfg = parse_card_config({"customization": [{"type": "sensor.door", **kw}]})
        return cfg.customization[0]

    def test_no_condition(self):
        assert state_condition_matches(None, st("sensor.door", "open"))
        assert state_condition_matches(self._rule(state="open"), st("sensor.door", "x"))

    def test_normal_condition(self):
        rule = self._rule(state="open", invert_state="false")
        assert state_condition_matches(rule, st("sensor.door", "open"))
        assert not state_condition_matches(rule, st("sensor.door", "closed"))

    def test_inverted_condition(self):
        rule = self._rule(state="open", invert_state=True)
        assert not state_condition_matches(rule, st("sensor.door", "open"))
        assert state_condition_matches(rule, st("sensor.door", "closed"))
