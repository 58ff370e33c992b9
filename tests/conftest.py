"""Shared fixtures: fake backends served by aiohttp test servers."""

import json
from typing import Any, Callable, Dict, List, Tuple, Union

import aiohttp
import pytest
from aiohttp import web

Reply = Tuple[int, str]
Responder = Union[Reply, List[Reply], Callable[[Dict[str, Any]], Reply]]


class FakeBackend:
    """Records every request and answers from a (method, path) table."""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []
        self.replies: Dict[Tuple[str, str], Responder] = {}
        self.host = "127.0.0.1"
        self.port = 0

    def reply(self, method: str, path: str, responder: Responder):
        self.replies[(method, path)] = responder

    def reply_json(self, method: str, path: str, payload: Any, status: int = 200):
        self.reply(method, path, (status, json.dumps(payload)))

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._handle)
        return app

    async def _handle(self, request: web.Request) -> web.Response:
        text = await request.text()
        call = {
            "method": request.method,
            "path": request.path,
            "body": json.loads(text) if text else None,
            "headers": request.headers.copy(),
        }
        self.calls.append(call)

        responder = self.replies.get((request.method, request.path), (200, ""))
        if callable(responder):
            status, body = responder(call)
        elif isinstance(responder, list):
            status, body = responder.pop(0) if len(responder) > 1 else responder[0]
        else:
            status, body = responder
        return web.Response(status=status, text=body)

    def paths(self, method: str = None) -> List[str]:
        return [c["path"] for c in self.calls if method is None or c["method"] == method]

    def bodies(self) -> List[Any]:
        return [c["body"] for c in self.calls]


class FakeSleep:
    """Stands in for asyncio.sleep and records requested delays."""

    def __init__(self, log: List[Any] = None):
        self.calls: List[float] = []
        self.log = log

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self.log is not None:
            self.log.append(("sleep", seconds))


async def _start_backend(aiohttp_server) -> FakeBackend:
    fake = FakeBackend()
    server = await aiohttp_server(fake.app())
    fake.host, fake.port = server.host, server.port
    return fake


@pytest.fixture
async def ir_backend(aiohttp_server):
    return await _start_backend(aiohttp_server)


@pytest.fixture
async def roku_backend(aiohttp_server):
    return await _start_backend(aiohttp_server)


@pytest.fixture
async def switch_backend(aiohttp_server):
    return await _start_backend(aiohttp_server)


@pytest.fixture
async def session():
    async with aiohttp.ClientSession() as s:
        yield s


@pytest.fixture
def fake_sleep():
    return FakeSleep()


ROKU_APPS_XML = """<?xml version="1.0" encoding="UTF-8" ?>
<apps>
    <app id="tvinput.hdmi1" type="tvin" version="1.0.0">HDMI 1</app>
    <app id="12" type="appl" version="4.2.81179053">Netflix</app>
    <app id="2285" subtype="rsga" type="appl" version="6.23.1">Hulu</app>
    <app id="55545" type="ssvr" version="1.0.4">Aquarium</app>
    <app id="13" type="appl" version="10.4.2019080814">Prime Video</app>
</apps>
"""


@pytest.fixture
def roku_apps_xml():
    return ROKU_APPS_XML
