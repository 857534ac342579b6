import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from .actions import dispatch_category, dispatch_entity
from .classifier import entities_by_domain, entity_ids_by_domain
from .config import CardConfig
from .customization import CustomizationTable
from .ha_ws import HAWebSocketClient
from .model import (
    AreaRegistryEntry,
    Category,
    DeviceRegistryEntry,
    EntityRegistryEntry,
    EntityState,
    Intent,
    ServiceCall,
    UiState,
)
from .registry import RegistryIndex, build_registry_index
from .summary import DialogView, Tile, build_dialog, build_summary
from .toggle import confirm_toggle
from .util import is_entity_id

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class RegistryRefreshError(RuntimeError):
    pass


@dataclass(frozen=True)
class RegistrySnapshot:
    entities: tuple[EntityRegistryEntry, ...] = ()
    devices: tuple[DeviceRegistryEntry, ...] = ()
    areas: tuple[AreaRegistryEntry, ...] = ()
    loaded_at: str | None = None


class StatusEngine:
    def __init__(self, ha: HAWebSocketClient, config: CardConfig):
        self.ha = ha
        self.registry = RegistrySnapshot()
        self.states: dict[str, EntityState] = {}
        self._tasks: set[asyncio.Task] = set()
        self.load_config(config)

    def load_config(self, config: CardConfig) -> None:
        # Filters and the customization table are built once per load so the
        # classifier memo sees a stable identity between renders.
        self.config = config
        self.filters = config.classifier_filters()
        self.customization = CustomizationTable.from_config(config)

    async def _fetch_registries(self) -> RegistrySnapshot:
        try:
            areas, devices, entities = await asyncio.gather(
                self.ha.area_list(),
                self.ha.device_list(),
                self.ha.entity_list(),
            )
            return RegistrySnapshot(
                entities=tuple(EntityRegistryEntry.from_dict(e) for e in entities or []),
                devices=tuple(DeviceRegistryEntry.from_dict(d) for d in devices or []),
                areas=tuple(AreaRegistryEntry.from_dict(a) for a in areas or []),
                loaded_at=_now_iso(),
            )
        except Exception as e:
            raise RegistryRefreshError(f"Registry refresh failed: {e}") from e

    async def refresh_registries(self) -> bool:
        """Reload all three registries together.

        On any failure the previous snapshot stays in place.
        """
        try:
            snapshot = await self._fetch_registries()
        except RegistryRefreshError as e:
            logger.error("%s; keeping snapshot from %s", e, self.registry.loaded_at)
            return False
        self.registry = snapshot
        logger.info(
            "Registries loaded: %d entities, %d devices, %d areas",
            len(snapshot.entities),
            len(snapshot.devices),
            len(snapshot.areas),
        )
        return True

    def set_states(self, rows: Iterable[dict[str, Any]]) -> None:
        self.states = {
            s.entity_id: s for s in (EntityState.from_dict(r) for r in rows if r.get("entity_id"))
        }

    async def refresh_states(self) -> None:
        self.set_states(await self.ha.get_states())

    async def refresh(self) -> dict[str, Any]:
        registries_ok = await self.refresh_registries()
        await self.refresh_states()
        return {
            "registries_refreshed": registries_ok,
            "registries_loaded_at": self.registry.loaded_at,
            "states": len(self.states),
        }

    @property
    def index(self) -> RegistryIndex:
        r = self.registry
        return build_registry_index(r.entities, r.devices, r.areas)

    def entities_by_domain(self) -> dict[str, list[EntityState]]:
        r = self.registry
        return entities_by_domain(r.entities, r.devices, r.areas, self.states, self.filters)

    def entity_ids_by_domain(self) -> dict[str, list[str]]:
        return entity_ids_by_domain(self.entities_by_domain())

    def summary(self) -> list[Tile]:
        return build_summary(
            self.config,
            self.customization,
            self.entities_by_domain(),
            self.states,
            self.registry.entities,
            self.filters,
        )

    def dialog(self, ui: UiState) -> DialogView | None:
        return build_dialog(
            ui, self.config, self.customization, self.entities_by_domain(), self.index
        )

    def handle_gesture(self, ui: UiState, key: str, gesture: str) -> tuple[UiState, list[Intent]]:
        if is_entity_id(key):
            return dispatch_entity(ui, key, gesture, self.states, self.customization)
        return dispatch_category(
            ui, Category.parse(key), gesture, self.entities_by_domain(), self.customization
        )

    def confirm_toggle(self, ui: UiState, confirmed: bool) -> tuple[UiState, list[ServiceCall]]:
        return confirm_toggle(ui, confirmed, self.entities_by_domain(), self.customization)

    def execute(self, intents: Iterable[Intent]) -> list[Intent]:
        """Send service calls to HA without waiting; return the rest for the host."""
        passthrough: list[Intent] = []
        for i in intents:
            if not isinstance(i, ServiceCall):
                passthrough.append(i)
                continue
            entity_id = list(i.entity_id) if isinstance(i.entity_id, tuple) else i.entity_id
            task = asyncio.create_task(self.ha.call_service(i.domain, i.service, entity_id))
            self._tasks.add(task)
            task.add_done_callback(self._service_call_done)
        return passthrough

    def _service_call_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Service call failed: %s", exc)
