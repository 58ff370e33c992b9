"""HTTP handlers: endpoint discovery and command translation."""

import asyncio
import json
import logging
import math
from typing import Any, Coroutine, Dict, List, Optional, Protocol, Set

from aiohttp import web

from constants import (
    PLAYBACK_DIRECTIVES,
    RESOURCE_CHANNEL,
    RESOURCE_INPUT,
    RESOURCE_PLAYBACK,
    RESOURCE_POWER,
    RESOURCE_VOLUME,
    TV_INPUTS,
    TV_KEYS,
)
from device_helpers import merge_endpoints
from ir_blaster import IrSequencer
from models import ROKU, STATIC_ENDPOINTS, TELEVISION_IDS, CommandRequest, EndpointDescriptor
from responses import state_envelope, unsupported_error
from roku_client import RokuClient

logger = logging.getLogger(__name__)


class SwitchBackend(Protocol):
    async def list_endpoints(self) -> List[EndpointDescriptor]: ...

    async def set_power(self, endpoint_id: str, on: bool) -> Any: ...


class Unsupported(Exception):
    """The endpoint cannot handle the resource or the body is invalid."""


def _as_number(value: Any) -> Optional[int]:
    """Finite JSON number truncated to int; bools are not numbers."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return int(value)


def _as_positive_int(value: Any) -> Optional[int]:
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            return None
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def _input_presses(name: Any) -> Optional[int]:
    """Input-cycle presses for an input given by index or by name."""
    if isinstance(name, bool):
        return None
    if isinstance(name, int):
        return name if name >= 0 else None
    if not isinstance(name, str):
        return None
    key = name.strip()
    if key.isdecimal():
        try:
            return int(key)
        except ValueError:
            return None
    return TV_INPUTS.get(key.upper())


def _power_state(body: Dict[str, Any]) -> Optional[str]:
    state = body.get("state")
    if isinstance(state, str) and state.lower() in ("on", "off"):
        return state.lower()
    return None


class BridgeHandlers:
    """
    Validates commands, answers immediately and runs the backend calls as
    background tasks. Background failures are only logged.
    """

    def __init__(
        self,
        sequencer: Optional[IrSequencer] = None,
        roku: Optional[RokuClient] = None,
        switches: Optional[SwitchBackend] = None,
    ):
        self.sequencer = sequencer
        self.roku = roku
        self.switches = switches
        self._tasks: Set[asyncio.Task] = set()

    def routes(self) -> List[web.RouteDef]:
        path = "/endpoints/{endpoint_id}/{resource_id}"
        return [
            web.get("/health", self.health),
            web.get("/endpoints", self.list_endpoints),
            web.put(path, self.command),
            web.post(path, self.command),
        ]

    def dispatch(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task:
        """Run coro unsupervised; its outcome only reaches the log."""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.debug(f"{task.get_name()} cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"{task.get_name()} failed: {exc}", exc_info=exc)
        else:
            logger.debug(f"{task.get_name()} completed")

    async def drain(self) -> None:
        """Wait for all in-flight background tasks."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_pending(self) -> None:
        tasks = list(self._tasks)
        for t in tasks:
            t.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def health(self, request: web.Request) -> web.Response:
        return web.json_response({"ok": True})

    async def list_endpoints(self, request: web.Request) -> web.Response:
        logger.info(f"{request.method} {request.path}")
        dynamic: List[EndpointDescriptor] = []
        if self.switches is not None:
            try:
                dynamic = await self.switches.list_endpoints()
            except Exception as e:
                logger.error(f"Switch discovery failed, returning static endpoints only: {e}")
        endpoints = merge_endpoints(STATIC_ENDPOINTS, dynamic)
        return web.json_response([ep.to_dict() for ep in endpoints])

    async def command(self, request: web.Request) -> web.Response:
        cmd = CommandRequest(
            method=request.method,
            endpoint_id=request.match_info["endpoint_id"],
            resource=request.match_info["resource_id"],
            body=await self._read_body(request),
        )
        logger.info(f"{cmd.method} {request.path} {json.dumps(cmd.body)}")

        try:
            state = self.handle(cmd)
        except Unsupported as e:
            error = unsupported_error(cmd.endpoint_id, cmd.resource)
            logger.warning(f"REPLY 500 {error['error']} ({e})")
            return web.json_response(error, status=500)

        payload = state_envelope(state)
        logger.debug(f"REPLY 200 {json.dumps(payload)}")
        return web.json_response(payload)

    @staticmethod
    async def _read_body(request: web.Request) -> Dict[str, Any]:
        if not request.can_read_body:
            return {}
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.debug("Request body is not JSON")
            return {}
        return body if isinstance(body, dict) else {}

    def handle(self, cmd: CommandRequest) -> Any:
        """Validate and dispatch; returns the state to report."""
        if cmd.endpoint_id in TELEVISION_IDS:
            return self._handle_tv(cmd)
        if cmd.endpoint_id == ROKU.id:
            return self._handle_roku(cmd)
        return self._handle_switch(cmd)

    def _handle_tv(self, cmd: CommandRequest) -> Any:
        seq = self.sequencer
        if seq is None:
            raise Unsupported("IR blaster not configured")
        body = cmd.body
        tag = f"{cmd.endpoint_id}/{cmd.resource}"

        if cmd.resource == RESOURCE_POWER:
            state = _power_state(body)
            if state is None:
                raise Unsupported("power state must be on or off")
            self.dispatch(seq.send(TV_KEYS["power"]), tag)
            return state

        if cmd.resource == RESOURCE_CHANNEL:
            delta = _as_number(body.get("channelCount"))
            if delta is None:
                raise Unsupported("channelCount must be a number")
            key = TV_KEYS["channel_down"] if delta < 0 else TV_KEYS["channel_up"]
            self.dispatch(seq.repeat(key, abs(delta)), tag)
            return delta

        if cmd.resource == RESOURCE_VOLUME:
            mute = body.get("mute")
            if isinstance(mute, bool):
                self.dispatch(seq.send(TV_KEYS["mute"]), tag)
                return mute
            steps = _as_number(body.get("volumeSteps"))
            if steps is None:
                raise Unsupported("volumeSteps must be a number or mute a boolean")
            key = TV_KEYS["volume_down"] if steps < 0 else TV_KEYS["volume_up"]
            self.dispatch(seq.repeat(key, abs(steps)), tag)
            return steps

        if cmd.resource == RESOURCE_INPUT:
            name = body.get("name")
            presses = _input_presses(name)
            if presses is None:
                raise Unsupported(f"unknown input {name!r}")
            self.dispatch(self._switch_input(seq, presses), tag)
            return name

        raise Unsupported("resource not handled by television")

    @staticmethod
    async def _switch_input(seq: IrSequencer, presses: int) -> None:
        # the input menu only opens from live TV
        await seq.send(TV_KEYS["live_tv"])
        await seq.pause()
        await seq.repeat(TV_KEYS["input"], presses)
        await seq.pause()
        await seq.send(TV_KEYS["ok"])

    def _handle_roku(self, cmd: CommandRequest) -> Any:
        roku = self.roku
        if roku is None:
            raise Unsupported("Roku not configured")
        tag = f"{cmd.endpoint_id}/{cmd.resource}"

        if cmd.resource == RESOURCE_CHANNEL:
            number = _as_positive_int(cmd.body.get("number"))
            if number is None:
                raise Unsupported("number must be a positive integer")
            self.dispatch(self._launch_channel(roku, number), tag)
            return number

        if cmd.resource == RESOURCE_PLAYBACK:
            directive = cmd.body.get("directive")
            key = PLAYBACK_DIRECTIVES.get(directive) if isinstance(directive, str) else None
            if key is None:
                raise Unsupported(f"unknown playback directive {directive!r}")
            self.dispatch(roku.keypress(key), tag)
            return directive

        raise Unsupported("resource not handled by roku")

    @staticmethod
    async def _launch_channel(roku: RokuClient, number: int) -> None:
        channels = await roku.list_channels()
        if number > len(channels):
            raise LookupError(f"Roku channel {number} not available ({len(channels)} installed)")
        app = channels[number - 1]
        logger.info(f"Roku channel {number} is {app.name} ({app.id})")
        await roku.launch(app.id)

    def _handle_switch(self, cmd: CommandRequest) -> Any:
        if self.switches is None or cmd.resource != RESOURCE_POWER:
            raise Unsupported("resource not handled by switches")
        state = _power_state(cmd.body)
        if state is None:
            raise Unsupported("power state must be on or off")
        self.dispatch(
            self.switches.set_power(cmd.endpoint_id, state == "on"),
            f"{cmd.endpoint_id}/{cmd.resource}",
        )
        return state
