"""Home Assistant WebSocket API client."""

import asyncio
import contextlib
import json
import logging
from typing import Any

import websockets

logger = logging.getLogger(__name__)


class HAWebSocketClient:
    """Request-response WS client for HA.

    A single reader task routes each ``result`` frame to the request that
    is waiting for its id, so several requests may be in flight at once.
    """

    def __init__(self, url: str, token: str, timeout: float = 30.0):
        self.url = url
        self.token = token
        self.timeout = timeout
        self._ws: Any | None = None
        self._msg_id = 1
        self._pending: dict[int, asyncio.Future] = {}
        self._reader: asyncio.Task | None = None
        self._connect_lock = asyncio.Lock()

    async def connect(self) -> None:
        """Connect and authenticate to HA WebSocket."""
        await self._close_ws()

        if not self.token:
            raise ConnectionError(
                "No authentication token. "
                "Ensure 'homeassistant_api: true' in config.yaml and addon was installed."
            )

        logger.info("Connecting to Home Assistant at %s", self.url)

        try:
            self._ws = await asyncio.wait_for(
                websockets.connect(self.url, ping_interval=None, max_size=2**24),
                timeout=10.0,
            )

            # auth_required
            raw = await asyncio.wait_for(self._ws.recv(), timeout=10.0)
            msg = json.loads(raw)
            if msg.get("type") != "auth_required":
                raise ConnectionError(f"Expected auth_required, got: {msg.get('type')}")

            await self._ws.send(json.dumps({"type": "auth", "access_token": self.token}))

            # auth response
            raw = await asyncio.wait_for(self._ws.recv(), timeout=10.0)
            resp = json.loads(raw)
            if resp.get("type") != "auth_ok":
                raise ConnectionError(f"Auth failed: {resp.get('message', 'unknown')}")

            logger.info("Connected to Home Assistant successfully")

        except TimeoutError:
            await self._close_ws()
            raise ConnectionError("Timeout connecting to Home Assistant") from None
        except ConnectionError:
            await self._close_ws()
            raise
        except Exception as e:
            await self._close_ws()
            raise ConnectionError(f"Failed to connect: {e}") from e

        self._reader = asyncio.create_task(self._read_loop(self._ws))

    async def _ensure_connected(self) -> None:
        async with self._connect_lock:
            if self._ws is None:
                await self.connect()

    async def _read_loop(self, ws: Any) -> None:
        try:
            async for raw in ws:
                data = json.loads(raw)
                if data.get("type") != "result":
                    # Skip events and other messages
                    continue
                fut = self._pending.pop(data.get("id"), None)
                if fut is None or fut.done():
                    continue
                if data.get("success"):
                    fut.set_result(data.get("result"))
                else:
                    error = data.get("error", {})
                    fut.set_exception(
                        RuntimeError(
                            f"HA error {error.get('code', '?')}: {error.get('message', '?')}"
                        )
                    )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("WS reader stopped: %s", e)
            with contextlib.suppress(Exception):
                await ws.close()
        finally:
            if self._ws is ws:
                self._ws = None
            self._fail_pending(ConnectionError("Connection to Home Assistant lost"))

    def _fail_pending(self, exc: Exception) -> None:
        pending, self._pending = self._pending, {}
        for fut in pending.values():
            if not fut.done():
                fut.set_exception(exc)

    async def _close_ws(self) -> None:
        reader, self._reader = self._reader, None
        if reader is not None and reader is not asyncio.current_task():
            reader.cancel()
            with contextlib.suppress(asyncio.CancelledError, Exception):
                await reader
        if self._ws:
            with contextlib.suppress(Exception):
                await self._ws.close()
            self._ws = None
        self._fail_pending(ConnectionError("Connection to Home Assistant closed"))

    async def close(self) -> None:
        await self._close_ws()

    async def send(self, msg_type: str, **kwargs: Any) -> Any:
        """Send command and wait for its result frame."""
        await self._ensure_connected()

        msg_id = self._msg_id
        self._msg_id += 1

        fut: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending[msg_id] = fut
        msg = {"id": msg_id, "type": msg_type, **kwargs}

        try:
            await self._ws.send(json.dumps(msg))
            return await asyncio.wait_for(fut, timeout=self.timeout)
        except TimeoutError:
            raise RuntimeError(f"Timeout waiting for {msg_type}") from None
        except RuntimeError:
            raise
        except Exception as e:
            # Connection lost - reset and raise
            await self._close_ws()
            raise RuntimeError(f"WS error during {msg_type}: {e}") from e
        finally:
            self._pending.pop(msg_id, None)

    # Registry API wrappers
    async def area_list(self) -> list[dict]:
        return await self.send("config/area_registry/list")

    async def device_list(self) -> list[dict]:
        return await self.send("config/device_registry/list")

    async def entity_list(self) -> list[dict]:
        return await self.send("config/entity_registry/list")

    async def get_states(self) -> list[dict]:
        return await self.send("get_states")

    async def call_service(
        self, domain: str, service: str, entity_id: str | list[str]
    ) -> Any:
        return await self.send(
            "call_service",
            domain=domain,
            service=service,
            target={"entity_id": entity_id},
        )
