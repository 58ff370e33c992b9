"""Shared HTTP plumbing for backend clients."""

import json
import logging
import time
from typing import Any, Dict, Optional

import aiohttp

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """A backend answered with a non-200 status."""

    def __init__(self, status: int, path: str, body: str = ""):
        super().__init__(f"HTTP {status} from {path}")
        self.status = status
        self.path = path
        self.body = body


def base_url(host: str, port: int, scheme: str = "http") -> str:
    return f"{scheme}://{host}:{port}"


async def request(
    session: aiohttp.ClientSession,
    method: str,
    url: str,
    *,
    payload: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any,
) -> str:
    """
    Issue one request and return the response body as text.
    Raises BackendError for anything but HTTP 200.
    """
    start = time.monotonic()
    data = json.dumps(payload) if payload is not None else None
    req_headers = {"Accept": "*/*"}
    if data is not None:
        req_headers["Content-Type"] = "application/json"
    if headers:
        req_headers.update(headers)

    logger.debug(f"REQ {method} {url} {data or ''}")
    async with session.request(method, url, data=data, headers=req_headers, **kwargs) as resp:
        body = await resp.text()
        elapsed_ms = int((time.monotonic() - start) * 1000)
        if resp.status != 200:
            logger.info(f"HTTP {resp.status} {method} {url} {body} {elapsed_ms}ms")
            raise BackendError(resp.status, url, body)
        logger.debug(f"RESP {url} {body} {elapsed_ms}ms")
        return body


async def request_json(session: aiohttp.ClientSession, method: str, url: str, **kwargs: Any) -> Any:
    body = await request(session, method, url, **kwargs)
    if not body:
        return None
    return json.loads(body)
