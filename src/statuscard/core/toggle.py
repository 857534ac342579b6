from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from .activity import is_on_state
from .aggregator import active_entities
from .customization import CustomizationTable
from .domains import behavior
from .model import Category, EntityState, ServiceCall, UiState

logger = logging.getLogger(__name__)


def plan_toggle(domain: str, entities: Sequence[EntityState]) -> list[ServiceCall]:
    """Service calls that flip ``entities`` of ``domain``.

    Bulk domains get a single ``toggle`` for every id; the rest get one call
    per entity chosen by its current state.
    """
    if not entities:
        logger.debug("No entities to toggle for %s", domain)
        return []

    rule = behavior(domain).toggle
    if rule is None:
        logger.warning("Toggle not supported for domain %s; nothing sent", domain)
        return []

    if rule.bulk:
        return [ServiceCall(domain, "toggle", tuple(e.entity_id for e in entities))]

    calls: list[ServiceCall] = []
    for e in entities:
        service = rule.service_for(is_on_state(e.state))
        if service:
            calls.append(ServiceCall(domain, service, e.entity_id))
    return calls


def toggle_category(
    by_domain: Mapping[str, Sequence[EntityState]],
    category: Category,
    inverted: bool = False,
) -> list[ServiceCall]:
    active = active_entities(by_domain, category, inverted)
    if not active:
        logger.debug("No active entities for %s; toggle skipped", category.key)
        return []
    return plan_toggle(category.domain, active)


def confirm_toggle(
    ui: UiState,
    confirmed: bool,
    by_domain: Mapping[str, Sequence[EntityState]],
    table: CustomizationTable,
) -> tuple[UiState, list[ServiceCall]]:
    """Resolve the yes/no gate opened by ``UiState.ask_toggle``.

    The pending flag is cleared either way.
    """
    target = ui.confirm_target
    cleared = ui.reset_confirm()
    if not confirmed or not ui.confirm_pending or target is None:
        return cleared, []
    return cleared, toggle_category(by_domain, target, table.is_inverted(target))
