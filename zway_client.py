"""Z-Way home automation hub client."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

import aiohttp

from backend import BackendError, base_url, request_json
from constants import DEFAULT_ZWAY_PORT, ZWAY_API_PREFIX, ZWAY_SESSION_HEADER
from device_helpers import endpoint_from_zway_device
from models import EndpointDescriptor

logger = logging.getLogger(__name__)


class ZWaySession:
    """
    Process-wide Z-Way session id.

    Refresh is single-flight: concurrent callers holding the same stale token
    wait on one login and all get its result.
    """

    def __init__(self, login: Callable[[], Awaitable[str]]):
        self._login = login
        self._lock = asyncio.Lock()
        self.token: Optional[str] = None

    async def get(self) -> str:
        """Return the current token, logging in first if there is none."""
        token = self.token
        if token is not None:
            return token
        async with self._lock:
            if self.token is None:
                self.token = await self._login()
            return self.token

    async def refresh(self, stale: Optional[str]) -> str:
        """Replace `stale` with a new token unless another caller already did."""
        async with self._lock:
            if self.token is None or self.token == stale:
                self.token = None
                self.token = await self._login()
            else:
                logger.debug("Z-Way session already refreshed by another request")
            return self.token


class ZWayClient:
    """List and switch Z-Way devices."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        host: str,
        username: str,
        password: str,
        port: int = DEFAULT_ZWAY_PORT,
    ):
        self.session = session
        self.api_url = f"{base_url(host, port)}{ZWAY_API_PREFIX}"
        self.username = username
        self.password = password
        self.auth = ZWaySession(self._login)

    async def _login(self) -> str:
        logger.info(f"Logging in to Z-Way as {self.username}")
        resp = await request_json(
            self.session, "POST", f"{self.api_url}/login",
            payload={"login": self.username, "password": self.password, "rememberme": False},
        )
        try:
            sid = resp["data"]["sid"]
        except (KeyError, TypeError):
            raise RuntimeError("Z-Way login response did not contain a session id")
        if not sid:
            raise RuntimeError("Z-Way login returned an empty session id")
        return str(sid)

    async def _call(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """Authenticated request; a 401 re-logs in once and retries once."""
        url = f"{self.api_url}{path}"
        token = await self.auth.get()
        try:
            return await request_json(
                self.session, method, url, payload=payload,
                headers={ZWAY_SESSION_HEADER: token},
            )
        except BackendError as e:
            if e.status != 401:
                raise
            logger.info(f"Z-Way session rejected for {path}, logging in again")

        token = await self.auth.refresh(token)
        return await request_json(
            self.session, method, url, payload=payload,
            headers={ZWAY_SESSION_HEADER: token},
        )

    async def list_devices(self) -> List[Dict[str, Any]]:
        resp = await self._call("GET", "/devices")
        devices = ((resp or {}).get("data") or {}).get("devices", [])
        if not isinstance(devices, list):
            logger.warning("Unexpected device list format from Z-Way")
            return []
        logger.debug(f"Retrieved {len(devices)} devices from Z-Way")
        return devices

    async def list_endpoints(self) -> List[EndpointDescriptor]:
        """Binary switches and dimmers known to the hub."""
        endpoints = []
        for device in await self.list_devices():
            ep = endpoint_from_zway_device(device)
            if ep is not None:
                endpoints.append(ep)
        return endpoints

    async def set_power(self, device_id: str, on: bool) -> None:
        command = "on" if on else "off"
        logger.info(f"Z-Way {device_id} -> {command}")
        await self._call("GET", f"/devices/{device_id}/command/{command}")
