from typing import Any, Literal

from fastapi import APIRouter
from pydantic import BaseModel

from ..core.model import Category, asdict_intent
from ..core.summary import asdict_dialog, asdict_tile
from .dependencies import get_components

router = APIRouter()


class ActionRequest(BaseModel):
    key: str
    gesture: Literal["tap", "hold", "double_tap"] = "tap"


class ConfirmRequest(BaseModel):
    confirmed: bool = False


class ToggleRequest(BaseModel):
    key: str | None = None


@router.get("/health")
async def health() -> dict[str, Any]:
    """Health check."""
    try:
        c = get_components()
        return {
            "ok": True,
            "detail": "API running",
            "ha_connected": bool(c.ha.token),
            "registries_loaded_at": c.engine.registry.loaded_at,
        }
    except Exception as e:
        return {"ok": False, "detail": str(e), "ha_connected": False}


@router.post("/refresh")
async def refresh() -> dict[str, Any]:
    try:
        c = get_components()
        return {"ok": True, **(await c.engine.refresh())}
    except Exception as e:
        return {"ok": False, "error": str(e)}


@router.get("/summary")
async def summary() -> dict[str, Any]:
    try:
        engine = get_components().engine
        return {
            "ok": True,
            "tiles": [asdict_tile(t) for t in engine.summary()],
            "presentation": engine.config.presentation(),
        }
    except Exception as e:
        return {"ok": False, "error": str(e), "tiles": []}


@router.get("/entities-by-domain")
async def entities_by_domain() -> dict[str, Any]:
    try:
        engine = get_components().engine
        return {"ok": True, "entities_by_domain": engine.entity_ids_by_domain()}
    except Exception as e:
        return {"ok": False, "error": str(e)}


@router.post("/action")
async def action(req: ActionRequest) -> dict[str, Any]:
    try:
        c = get_components()
        c.ui.state, intents = c.engine.handle_gesture(c.ui.state, req.key, req.gesture)
        host_intents = c.engine.execute(intents)
        return {
            "ok": True,
            "intents": [asdict_intent(i) for i in intents],
            "host_intents": [asdict_intent(i) for i in host_intents],
        }
    except Exception as e:
        return {"ok": False, "error": str(e), "intents": []}


@router.get("/dialog")
async def dialog() -> dict[str, Any]:
    try:
        c = get_components()
        view = c.engine.dialog(c.ui.state)
        return {
            "ok": True,
            "dialog": asdict_dialog(view) if view else None,
            "confirm_pending": c.ui.state.confirm_pending,
        }
    except Exception as e:
        return {"ok": False, "error": str(e)}


@router.post("/dialog/close")
async def close_dialog() -> dict[str, Any]:
    c = get_components()
    c.ui.state = c.ui.state.close()
    return {"ok": True}


@router.post("/dialog/show-all")
async def toggle_show_all() -> dict[str, Any]:
    c = get_components()
    c.ui.state = c.ui.state.toggle_show_all()
    return {"ok": True, "show_all": c.ui.state.show_all}


@router.post("/dialog/toggle")
async def ask_toggle(req: ToggleRequest) -> dict[str, Any]:
    try:
        c = get_components()
        category = Category.parse(req.key) if req.key else None
        c.ui.state = c.ui.state.ask_toggle(category)
        return {"ok": True, "confirm_pending": c.ui.state.confirm_pending}
    except Exception as e:
        return {"ok": False, "error": str(e)}


@router.post("/dialog/confirm")
async def confirm(req: ConfirmRequest) -> dict[str, Any]:
    try:
        c = get_components()
        c.ui.state, calls = c.engine.confirm_toggle(c.ui.state, req.confirmed)
        c.engine.execute(calls)
        return {"ok": True, "intents": [asdict_intent(i) for i in calls]}
    except Exception as e:
        return {"ok": False, "error": str(e), "intents": []}
