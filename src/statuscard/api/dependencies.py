"""Dependency injection for the status card service."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from ..core.config import load_card_config
from ..core.engine import StatusEngine
from ..core.ha_ws import HAWebSocketClient
from ..core.model import UiState

logger = logging.getLogger(__name__)

DEFAULT_WS_URL = "ws://supervisor/core/websocket"


@dataclass
class UiSession:
    """Owner of the dialog state between requests."""

    state: UiState = field(default_factory=UiState)


@dataclass(frozen=True)
class Components:
    ha: HAWebSocketClient
    engine: StatusEngine
    ui: UiSession


_components: Components | None = None


def _load_options() -> dict[str, object]:
    """Load options from /data/options.json."""
    try:
        path = Path("/data/options.json")
        if path.exists():
            with open(path, encoding="utf-8") as f:
                return json.load(f) or {}
    except Exception as e:
        logger.warning("Failed to load options: %s", e)
    return {}


def _get_supervisor_token() -> str:
    """Get Supervisor token from environment or s6 container files."""
    # 1. Standard environment variable
    token = os.environ.get("SUPERVISOR_TOKEN", "")

    # 2. s6-overlay container environment files
    if not token:
        for s6_dir in ["/var/run/s6/container_environment", "/run/s6/container_environment"]:
            token_file = Path(s6_dir) / "SUPERVISOR_TOKEN"
            if token_file.exists():
                try:
                    token = token_file.read_text().strip()
                except OSError as e:
                    logger.warning("Could not read %s: %s", token_file, e)
                    continue
                if token:
                    logger.info("SUPERVISOR_TOKEN loaded from %s", token_file)
                    break

    # 3. Legacy HASSIO_TOKEN
    if not token:
        token = os.environ.get("HASSIO_TOKEN", "")

    if not token:
        logger.error("SUPERVISOR_TOKEN not found in environment or s6 files!")

    return token


def init_components() -> None:
    """Initialize components.

    An invalid card configuration raises CardConfigError and leaves the
    service without an engine.
    """
    global _components
    if _components is not None:
        return

    options = _load_options()
    config_path = os.environ.get("STATUSCARD_CONFIG_PATH") or options.get("config_path")
    config, path = load_card_config(str(config_path) if config_path else None)
    logger.info("Card configuration loaded from %s", path)

    token = _get_supervisor_token()
    ha = HAWebSocketClient(
        url=str(options.get("ha_ws_url") or DEFAULT_WS_URL),
        token=token,
        timeout=float(options.get("timeout", 30.0)),
    )

    engine = StatusEngine(ha=ha, config=config)
    _components = Components(ha=ha, engine=engine, ui=UiSession())

    if token:
        logger.info("Components initialized with Supervisor authentication")
    else:
        logger.warning("Components initialized WITHOUT authentication - operations will fail")


def set_components(components: Components | None) -> None:
    global _components
    _components = components


def get_components() -> Components:
    if _components is None:
        init_components()
    assert _components is not None
    return _components
