"""HTTP transport for the Tessie REST API."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pytessie._redact import redact_for_log, redact_url
from pytessie.config import TessieConfig
from pytessie.exceptions import TessieTransportError

_logger = logging.getLogger(__name__)

# Methods for which some servers reject a request without a body.
_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Implementations never raise for transport failures; they return an
    empty dict instead, so callers proceed as if no data arrived.
    """

    async def request(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any] | None = None,
        *,
        params: Mapping[str, str] | None = None,
    ) -> Any: ...


class HttpTransport:
    """Bearer-token JSON transport on top of an :class:`aiohttp.ClientSession`."""

    def __init__(self, config: TessieConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(
            total=config.request_timeout,
            connect=config.connect_timeout,
        )

    async def send(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any] | None = None,
        *,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON.

        Raises :class:`TessieTransportError` on connect/timeout failures,
        non-2xx statuses, undecodable bodies and non-JSON responses.
        """
        method = method.upper()
        url = f"{self._config.base_url}{path}"
        headers: dict[str, str] = {
            "Accept": "application/json",
            "Authorization": f"Bearer {self._config.token}",
        }

        data: bytes | None = None
        if body is not None:
            data = json.dumps(dict(body), separators=(",", ":")).encode("utf-8")
            headers["Content-Type"] = "application/json"
        elif method in _BODY_METHODS:
            data = b""

        _logger.debug("%s %s params=%s body=%s", method, redact_url(url), params, redact_for_log(body))

        try:
            async with self._http.request(
                method,
                url,
                data=data,
                headers=headers,
                params=dict(params) if params else None,
                timeout=self._timeout,
            ) as resp:
                raw = await resp.read()
                status = resp.status
        except TimeoutError as exc:
            raise TessieTransportError(f"Request to {path} timed out", path=path) from exc
        except aiohttp.ClientError as exc:
            raise TessieTransportError(f"Request to {path} failed: {exc}", path=path) from exc

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TessieTransportError(
                f"HTTP {status} undecodable body from {path}",
                status_code=status,
                path=path,
            ) from exc

        if not 200 <= status < 300:
            raise TessieTransportError(
                f"HTTP {status} from {path}: {text[:200]}",
                status_code=status,
                path=path,
            )

        if not text.strip():
            return {}

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise TessieTransportError(
                f"HTTP {status} non-JSON from {path}: {text[:200]}",
                status_code=status,
                path=path,
            ) from exc

    async def request(
        self,
        method: str,
        path: str,
        body: Mapping[str, Any] | None = None,
        *,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        """Send one request; log failures and return ``{}`` instead of raising."""
        try:
            return await self.send(method, path, body, params=params)
        except TessieTransportError as exc:
            _logger.debug("API request failed: %s", exc)
            return {}
