"""Periodic polling and streaming subscription lifecycle."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pytessie.exceptions import TessieError
from pytessie.stream import TelemetryStream

_logger = logging.getLogger(__name__)


class UpdateScheduler:
    """Runs *update* every *interval* seconds and owns the telemetry stream.

    Polls never overlap: a tick that arrives while the previous poll is
    still running is skipped. An interval of ``0`` disables polling.
    """

    def __init__(
        self,
        update: Callable[[], Awaitable[Any]],
        interval: float,
        *,
        stream: TelemetryStream | None = None,
    ) -> None:
        self._update = update
        self._interval = max(0.0, float(interval))
        self._stream = stream
        self._poll_lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def polling(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> bool:
        """Run one poll unless one is already in progress.

        Returns whether a poll was run.
        """
        if self._poll_lock.locked():
            _logger.debug("Previous poll still running; skipping tick")
            return False
        async with self._poll_lock:
            try:
                await self._update()
            except TessieError as exc:
                _logger.warning("Scheduled update failed: %s", exc)
        return True

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.tick()
            except Exception:
                _logger.exception("Scheduled update crashed; polling continues")

    def start(self) -> None:
        if self._interval > 0 and not self.polling:
            self._task = asyncio.create_task(self._loop(), name="pytessie-update-timer")
        if self._stream is not None:
            self._stream.start()

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if self._stream is not None:
            await self._stream.stop()
