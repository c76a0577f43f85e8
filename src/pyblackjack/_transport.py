"""HTTP transport for the JSON ledger gateway."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyblackjack._constants import USER_AGENT
from pyblackjack._redact import redact_for_log
from pyblackjack.config import BlackjackConfig
from pyblackjack.exceptions import BlackjackRemoteError, BlackjackTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    `GatewayTransport` is the aiohttp implementation; tests pass in-memory
    gateways.
    """

    async def get_json(self, endpoint: str) -> dict[str, Any]:
        ...

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        ...


class GatewayTransport:
    """aiohttp transport speaking JSON to the ledger gateway."""

    def __init__(self, config: BlackjackConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    async def get_json(self, endpoint: str) -> dict[str, Any]:
        return await self._request("GET", endpoint)

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        return await self._request("POST", endpoint, payload)

    async def _request(
        self,
        method: str,
        endpoint: str,
        payload: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self._config.base_url}{endpoint}"
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        body: str | None = None
        if payload is not None:
            headers["content-type"] = "application/json; charset=UTF-8"
            body = json.dumps(payload, separators=(",", ":"))

        _logger.debug("%s %s payload=%s", method, url, redact_for_log(payload))

        try:
            async with self._http.request(method, url, data=body, headers=headers) as resp:
                raw_body = await resp.read()
                text = raw_body.decode("utf-8", errors="replace")
                if resp.status < 200 or resp.status >= 300:
                    raise BlackjackTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except BlackjackTransportError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise BlackjackTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            result = json.loads(raw_body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise BlackjackTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(result, dict):
            raise BlackjackTransportError(
                f"Expected a JSON object from {endpoint}",
                endpoint=endpoint,
            )

        _logger.debug("%s %s -> %s", method, url, redact_for_log(result))
        raise_for_error_body(result, endpoint)
        return result


def raise_for_error_body(response: Mapping[str, Any], endpoint: str) -> None:
    """Raise :class:`BlackjackRemoteError` for ``{"error": ...}`` bodies."""
    error = response.get("error")
    if error is None:
        return
    if isinstance(error, Mapping):
        code = str(error.get("code", ""))
        message = str(error.get("message", ""))
    else:
        code = ""
        message = str(error)
    raise BlackjackRemoteError(
        f"{endpoint} failed: code={code} message={message}",
        code=code,
        endpoint=endpoint,
    )
