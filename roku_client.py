"""Roku External Control Protocol client."""

import logging
from typing import List

import aiohttp

from backend import base_url, request
from constants import DEFAULT_ROKU_PORT
from device_helpers import channel_apps, parse_roku_apps
from models import RokuApp

logger = logging.getLogger(__name__)


class RokuClient:
    """Query apps, launch apps and press keys on a Roku device."""

    def __init__(self, session: aiohttp.ClientSession, host: str, port: int = DEFAULT_ROKU_PORT):
        self.session = session
        self.base_url = base_url(host, port)

    async def list_apps(self) -> List[RokuApp]:
        """All installed apps, in the order the device reports them."""
        body = await request(
            self.session, "GET", f"{self.base_url}/query/apps",
            headers={"Accept": "application/xml"},
        )
        apps = parse_roku_apps(body)
        logger.debug(f"Roku reported {len(apps)} apps")
        return apps

    async def list_channels(self) -> List[RokuApp]:
        return channel_apps(await self.list_apps())

    async def launch(self, app_id: str) -> None:
        logger.info(f"Roku launch {app_id}")
        await request(self.session, "POST", f"{self.base_url}/launch/{app_id}")

    async def keypress(self, key: str) -> None:
        logger.info(f"Roku keypress {key}")
        await request(self.session, "POST", f"{self.base_url}/keypress/{key}")
