from statuscard.core.grouping import group_by_area, sort_entities
from statuscard.core.registry import build_registry_index

from .conftest import area, reg, st


class TestSortEntities:
    def setup_method(self):
        self.ents = [
            st("light.b", "off", friendly_name="beta"),
            st("light.a", "on", friendly_name="Alpha"),
            st("light.c", "on", friendly_name="Charlie"),
            st("light.z", "off"),
        ]

    def test_show_all_puts_active_first(self):
        names = [e.name for e in sort_entities(self.ents, show_all=True)]
        assert names == ["Alpha", "Charlie", "beta", "light.z"]

    def test_active_only_sorts_by_name(self):
        names = [e.name for e in sort_entities(self.ents, show_all=False)]
        assert names == ["Alpha", "beta", "Charlie", "light.z"]

    def test_accented_names_sort_with_their_base_letter(self):
        ents = [st("person.z", "home", friendly_name="Zoe"), st("person.e", "home", friendly_name="Éthan")]
        assert [e.name for e in sort_entities(ents, show_all=False)] == ["Éthan", "Zoe"]


class TestGroupByArea:
    def test_groups_sorted_by_area_name(self):
        index = build_registry_index(
            (
                reg("light.k", area_id="kitchen"),
                reg("light.g", area_id="garden"),
                reg("light.x"),
                reg("light.w", area_id="attic"),
            ),
            (),
            (area("kitchen", "Kitchen"), area("garden", "garden"), area("attic", "Zolder")),
        )
        ents = [st("light.k", "on"), st("light.g", "on"), st("light.x", "on"), st("light.w", "on")]
        groups = group_by_area(ents, index, show_all=False)

        assert [g.area_id for g in groups] == ["garden", "kitchen", "unassigned", "attic"]
        assert groups[2].name == "Unassigned"
        assert [e.entity_id for e in groups[2].entities] == ["light.x"]

    def test_members_are_sorted_within_group(self, home):
        ents = [home.states["light.bed"], home.states["light.kitchen"], home.states["lock.back"]]
        groups = group_by_area(ents, home.index, show_all=True)
        assert [g.name for g in groups] == ["bedroom", "Kitchen"]
        assert [e.entity_id for e in groups[1].entities] == ["light.kitchen", "lock.back"]

    def test_empty(self, home):
        assert group_by_area([], home.index, show_all=True) == []
