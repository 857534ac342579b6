from __future__ import annotations

from collections.abc import Mapping, Sequence

from .activity import is_active, is_available, matches_device_class
from .model import AggregatedGroup, Category, EntityState


def active_entities(
    by_domain: Mapping[str, Sequence[EntityState]],
    category: Category,
    inverted: bool = False,
) -> list[EntityState]:
    ents = by_domain.get(category.domain) or ()
    return [e for e in ents if is_active(category.domain, category.device_class, e, inverted)]


def total_entities(
    by_domain: Mapping[str, Sequence[EntityState]],
    category: Category,
) -> list[EntityState]:
    ents = by_domain.get(category.domain) or ()
    return [
        e
        for e in ents
        if is_available(e) and matches_device_class(category.domain, category.device_class, e)
    ]


def aggregate(
    by_domain: Mapping[str, Sequence[EntityState]],
    category: Category,
    inverted: bool = False,
) -> AggregatedGroup:
    return AggregatedGroup(
        domain=category.domain,
        device_class=category.device_class,
        active_entities=tuple(active_entities(by_domain, category, inverted)),
        total_entities=tuple(total_entities(by_domain, category)),
    )
