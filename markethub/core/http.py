"""httpx helpers that translate transport and status failures into MarketHubError."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from markethub.core.config import settings
from markethub.core.errors import (
    BadRequestError,
    ConflictError,
    InternalError,
    MarketHubError,
    NotFoundError,
    RequestTimeoutError,
    UnavailableError,
)
from markethub.core.logging import get_logger

log = get_logger("core.http")


def error_for_status(source: str, response: httpx.Response) -> MarketHubError:
    status = response.status_code
    message = f"{source} responded with HTTP {status} for {response.request.method} {response.request.url.path}"
    if status in (400, 422):
        return BadRequestError(message)
    if status == 404:
        return NotFoundError(message)
    if status == 409:
        return ConflictError(message)
    if status == 429 or status >= 500:
        return UnavailableError(message)
    return InternalError(message)


class HttpJsonClient:
    """Thin JSON-over-HTTP wrapper used by every remote client.

    A fresh ``httpx.AsyncClient`` is opened per call. ``transport`` exists so
    tests can plug in ``httpx.MockTransport``.
    """

    source = "remote"

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self.headers = headers or {}
        self.transport = transport

    async def request_json(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, headers=self.headers, transport=self.transport
            ) as client:
                resp = await client.request(method, url, params=params, json=json)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"{self.source} timed out on {method} {path}") from exc
        except httpx.TransportError as exc:
            raise UnavailableError(f"{self.source} is unreachable: {exc}") from exc

        if resp.is_error:
            error = error_for_status(self.source, resp)
            log.warning(f"{error.kind} from {self.source}: {error.message}")
            raise error

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise InternalError(f"{self.source} returned a body that is not JSON for {method} {path}") from exc

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request_json("GET", path, params=params)
