"""Main irbridge application."""

import asyncio
import logging
from typing import Optional

import aiohttp
from aiohttp import web

from handlers import BridgeHandlers, SwitchBackend
from hass_client import HomeAssistantClient
from ir_blaster import IrBlasterClient, IrSequencer
from roku_client import RokuClient
from settings import Settings
from zway_client import ZWayClient

logger = logging.getLogger(__name__)


def create_handlers(settings: Settings, session: aiohttp.ClientSession) -> BridgeHandlers:
    """Wire up the backend clients that are configured."""
    sequencer: Optional[IrSequencer] = None
    if settings.ir_host:
        blaster = IrBlasterClient(session, settings.ir_host, settings.ir_port, settings.ir_receiver)
        sequencer = IrSequencer(blaster, settings.pause_ms, settings.max_ir_repeat)
    else:
        logger.warning("IR_HOST not set, television commands disabled")

    roku: Optional[RokuClient] = None
    if settings.roku_host:
        roku = RokuClient(session, settings.roku_host, settings.roku_port)
    else:
        logger.warning("ROKU_HOST not set, Roku commands disabled")

    switches: Optional[SwitchBackend] = None
    backend = settings.switch_backend
    if backend == "zway":
        switches = ZWayClient(
            session,
            settings.zway_host,
            settings.zway_username,
            settings.zway_password,
            settings.zway_port,
        )
    elif backend == "hass":
        switches = HomeAssistantClient(
            session,
            settings.hass_host,
            settings.hass_port,
            password=settings.hass_password,
            token=settings.hass_token,
            ca_path=settings.hass_ca_path,
        )
    logger.info(f"Switch backend: {backend or 'none'}")

    return BridgeHandlers(sequencer=sequencer, roku=roku, switches=switches)


def create_app(handlers: BridgeHandlers) -> web.Application:
    app = web.Application()
    app.add_routes(handlers.routes())

    async def _cancel_background(app: web.Application) -> None:
        await handlers.cancel_pending()

    app.on_shutdown.append(_cancel_background)
    return app


class IrBridge:
    """HTTP relay between the smart-home skill and the device backends."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.session: Optional[aiohttp.ClientSession] = None
        self.runner: Optional[web.AppRunner] = None
        self.handlers: Optional[BridgeHandlers] = None
        self._stopped = asyncio.Event()
        self.running = True

    async def start(self):
        """Start serving; returns only when stopped or cancelled."""
        timeout = aiohttp.ClientTimeout(total=self.settings.backend_timeout)
        self.session = aiohttp.ClientSession(timeout=timeout)
        self.handlers = create_handlers(self.settings, self.session)

        self.runner = web.AppRunner(create_app(self.handlers))
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.settings.listen_host, self.settings.listen_port)
        await site.start()
        logger.info(f"Server listening on {self.settings.listen_host}:{self.settings.listen_port}")

        await self._stopped.wait()

    async def stop(self):
        """Stop the server and close backend sessions."""
        if not self.running:
            return
        self.running = False
        self._stopped.set()

        if self.runner is not None:
            try:
                await self.runner.cleanup()
            except Exception as e:
                logger.debug(f"Error during server cleanup: {e}")
            self.runner = None
        if self.session is not None and not self.session.closed:
            await self.session.close()
        self.session = None
