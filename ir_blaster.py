"""IR blaster client and the paced key-repeat sequencer."""

import asyncio
import logging
from typing import Awaitable, Callable

import aiohttp

from backend import base_url, request
from constants import DEFAULT_IR_PORT, DEFAULT_IR_RECEIVER, DEFAULT_MAX_IR_REPEAT, DEFAULT_PAUSE_MS

logger = logging.getLogger(__name__)


class IrBlasterClient:
    """Send single key codes to a network IR blaster."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        host: str,
        port: int = DEFAULT_IR_PORT,
        receiver: str = DEFAULT_IR_RECEIVER,
    ):
        self.session = session
        self.url = f"{base_url(host, port)}/receivers/{receiver}/commands"

    async def send(self, key: str) -> None:
        """Fire one key code. Returns once the blaster acknowledged with 200."""
        logger.debug(f"IR send {key}")
        await request(self.session, "POST", self.url, payload={"key": key})


class IrSequencer:
    """
    Turns "press key N times" into N discrete blaster commands.

    Commands go out strictly one after another with a fixed pause between
    them, since the television drops keypresses that arrive faster. N is
    capped at max_repeat. The first failed command aborts the rest.
    """

    def __init__(
        self,
        blaster: IrBlasterClient,
        pause_ms: int = DEFAULT_PAUSE_MS,
        max_repeat: int = DEFAULT_MAX_IR_REPEAT,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.blaster = blaster
        self.pause_ms = pause_ms
        self.max_repeat = max_repeat
        self._sleep = sleep

    async def pause(self) -> None:
        await self._sleep(self.pause_ms / 1000.0)

    async def send(self, key: str) -> None:
        await self.blaster.send(key)

    async def repeat(self, key: str, times: int) -> int:
        """Send key `times` times (clamped). Returns the number sent."""
        if times <= 0:
            return 0
        if times > self.max_repeat:
            logger.warning(f"Clamping {key} x{times} to {self.max_repeat}")
            times = self.max_repeat

        for i in range(times):
            if i:
                await self.pause()
            await self.blaster.send(key)
        logger.debug(f"IR repeat {key} x{times} done")
        return times
