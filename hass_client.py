"""Home Assistant REST API client."""

import logging
import ssl
from typing import Any, Dict, List, Optional

import aiohttp

from backend import base_url, request_json
from constants import DEFAULT_HASS_PORT, HASS_API_PREFIX
from device_helpers import endpoint_from_hass_state
from models import EndpointDescriptor

logger = logging.getLogger(__name__)


class HomeAssistantClient:
    """Read entity states and call turn_on/turn_off services."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        host: str,
        port: int = DEFAULT_HASS_PORT,
        password: Optional[str] = None,
        token: Optional[str] = None,
        ca_path: Optional[str] = None,
    ):
        self.session = session
        self.ssl_context: Optional[ssl.SSLContext] = None
        scheme = "http"
        if ca_path:
            self.ssl_context = ssl.create_default_context(cafile=ca_path)
            scheme = "https"
        self.api_url = f"{base_url(host, port, scheme)}{HASS_API_PREFIX}"

        self.headers: Dict[str, str] = {"Accept": "application/json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        elif password:
            # legacy API password
            self.headers["x-ha-access"] = password

    def _kwargs(self) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"headers": self.headers}
        if self.ssl_context is not None:
            kwargs["ssl"] = self.ssl_context
        return kwargs

    async def get_states(self) -> List[Dict[str, Any]]:
        states = await request_json(self.session, "GET", f"{self.api_url}/states", **self._kwargs())
        if not isinstance(states, list):
            logger.warning("Unexpected states format from Home Assistant")
            return []
        return states

    async def list_endpoints(self) -> List[EndpointDescriptor]:
        """Switches and lights known to Home Assistant."""
        endpoints = []
        for state in await self.get_states():
            ep = endpoint_from_hass_state(state)
            if ep is not None:
                endpoints.append(ep)
        return endpoints

    async def set_power(self, entity_id: str, on: bool) -> Any:
        if "." not in entity_id:
            raise ValueError(f"Not a Home Assistant entity id: {entity_id}")
        domain = entity_id.split(".", 1)[0]
        service = "turn_on" if on else "turn_off"
        logger.info(f"Home Assistant {domain}.{service} {entity_id}")
        return await request_json(
            self.session, "POST", f"{self.api_url}/services/{domain}/{service}",
            payload={"entity_id": entity_id}, **self._kwargs(),
        )
