"""Streaming telemetry WebSocket reader.

A thin inbound transport: it keeps one WebSocket to the streaming endpoint
open and forwards every text/binary frame unchanged. Decoding happens in
:mod:`pytessie.ingestion.telemetry`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from urllib.parse import quote, urlencode

import aiohttp

from pytessie._redact import redact_url
from pytessie.config import TessieConfig

_logger = logging.getLogger(__name__)

FrameHandler = Callable[[bytes | str], Awaitable[None]]


def streaming_url(config: TessieConfig) -> str:
    """``<streaming_base>/<VIN>?access_token=<telemetry token>``."""
    base = config.streaming_base.strip().rstrip("/")
    query = urlencode({"access_token": config.telemetry_token.strip()})
    return f"{base}/{quote(config.normalized_vin, safe='')}?{query}"


class TelemetryStream:
    """Reconnecting WebSocket reader feeding frames to *on_frame*."""

    def __init__(
        self,
        url: str,
        http_session: aiohttp.ClientSession,
        on_frame: FrameHandler,
        *,
        reconnect_delay: float = 5.0,
        heartbeat: float = 30.0,
    ) -> None:
        self._url = url
        self._http = http_session
        self._on_frame = on_frame
        self._reconnect_delay = reconnect_delay
        self._heartbeat = heartbeat
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="pytessie-telemetry-stream")

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        while True:
            try:
                await self._read_once()
            except aiohttp.ClientError as exc:
                _logger.debug("Telemetry stream %s failed: %s", redact_url(self._url), exc)
            await asyncio.sleep(self._reconnect_delay)

    async def _read_once(self) -> None:
        _logger.debug("Connecting telemetry stream %s", redact_url(self._url))
        async with self._http.ws_connect(self._url, heartbeat=self._heartbeat) as ws:
            async for msg in ws:
                if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                    await self._on_frame(msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    _logger.debug("Telemetry stream error: %s", ws.exception())
                    break
        _logger.debug("Telemetry stream closed")
