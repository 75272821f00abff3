"""Command dispatch.

Turns a write to an action point into a Tessie vehicle command. Each
:class:`ActionKind` has exactly one handler that maps the requested value
to the command name and parameters; the dispatcher adds the shared policies
around it (credentials check, optimistic point update, optional wake, wait
for completion, momentary reset).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pytessie._api.commands import command_succeeded, send_command, wake
from pytessie._api.vehicles import fetch_status
from pytessie._constants import CHARGE_LIMIT_MAX, CHARGE_LIMIT_MIN, CHARGING_AMPS_MAX, CHARGING_AMPS_MIN
from pytessie._redact import redact_for_log
from pytessie._transport import Transport
from pytessie.config import TessieConfig
from pytessie.exceptions import TessieConfigError, TessieStoreError
from pytessie.models.command import ActionKind, CommandResult
from pytessie.models.point import DataType
from pytessie.models.signal import Scalar
from pytessie.reconcile.reconciler import PointReconciler, coerce_value

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _CommandPlan:
    """What a handler decided: the point value to show and the command to send."""

    point_value: Scalar
    command: str | None
    params: dict[str, Any] = field(default_factory=dict)


def _clamp(value: int, minimum: int, maximum: int) -> int:
    return max(minimum, min(maximum, value))


def _as_bool(value: Any) -> bool:
    return bool(coerce_value(DataType.BOOLEAN, value))


def _as_int(value: Any) -> int:
    return int(coerce_value(DataType.INTEGER, value))


def _plan_lock(value: Any) -> _CommandPlan:
    locked = _as_bool(value)
    return _CommandPlan(locked, "lock" if locked else "unlock")


def _plan_climate(value: Any) -> _CommandPlan:
    on = _as_bool(value)
    return _CommandPlan(on, "start_climate" if on else "stop_climate")


def _plan_charging(value: Any) -> _CommandPlan:
    on = _as_bool(value)
    return _CommandPlan(on, "start_charging" if on else "stop_charging")


def _plan_charge_limit(value: Any) -> _CommandPlan:
    percent = _clamp(_as_int(value), CHARGE_LIMIT_MIN, CHARGE_LIMIT_MAX)
    return _CommandPlan(percent, "set_charge_limit", {"percent": percent})


def _plan_charging_amps(value: Any) -> _CommandPlan:
    amps = _clamp(_as_int(value), CHARGING_AMPS_MIN, CHARGING_AMPS_MAX)
    return _CommandPlan(amps, "set_charging_amps", {"amps": amps})


def _plan_flash(value: Any) -> _CommandPlan:
    return _CommandPlan(False, "flash_lights" if _as_bool(value) else None)


def _plan_horn(value: Any) -> _CommandPlan:
    return _CommandPlan(False, "honk" if _as_bool(value) else None)


_HANDLERS: dict[ActionKind, Callable[[Any], _CommandPlan]] = {
    ActionKind.LOCK: _plan_lock,
    ActionKind.CLIMATE: _plan_climate,
    ActionKind.CHARGING: _plan_charging,
    ActionKind.SET_CHARGE_LIMIT: _plan_charge_limit,
    ActionKind.SET_CHARGING_AMPS: _plan_charging_amps,
    ActionKind.FLASH: _plan_flash,
    ActionKind.HORN: _plan_horn,
}


class CommandDispatcher:
    """Dispatches action point writes of one vehicle, one at a time."""

    def __init__(self, config: TessieConfig, transport: Transport, reconciler: PointReconciler) -> None:
        self._config = config
        self._transport = transport
        self._reconciler = reconciler
        self._lock = asyncio.Lock()

    def _write_action_point(self, kind: ActionKind, value: Scalar) -> None:
        point_id = self._reconciler.find_point(kind.point_identifier)
        if point_id is None:
            _logger.debug("Action point %s missing; skipping local update", kind.point_identifier)
            return
        try:
            self._reconciler.write_point(point_id, value)
        except (TessieStoreError, TypeError, ValueError) as exc:
            _logger.warning("Could not update action point %s: %s", kind.point_identifier, exc)

    async def _wake_if_needed(self, vin: str) -> None:
        status = await fetch_status(self._transport, vin)
        if status == "awake":
            return
        _logger.debug("Vehicle %s is %s; waking before command", vin, status or "unknown")
        if not await wake(self._transport, vin):
            _logger.debug("Wake request for %s was not acknowledged", vin)

    async def _send(self, kind: ActionKind, plan: _CommandPlan) -> CommandResult:
        if plan.command is None:
            return CommandResult(action=kind)

        vin = self._config.normalized_vin
        if self._config.wake_before_commands:
            await self._wake_if_needed(vin)

        response = await send_command(
            self._transport,
            vin,
            plan.command,
            plan.params,
            wait_for_completion=self._config.wait_for_completion,
        )
        success = command_succeeded(response)
        if not success:
            _logger.warning("Command %s failed: %s", plan.command, redact_for_log(response))
        return CommandResult(action=kind, command=plan.command, params=plan.params, success=success, raw=response)

    async def dispatch(self, action_identifier: str, requested_value: Any) -> CommandResult:
        """Handle a write of *requested_value* to an action point.

        Raises :class:`TessieUnknownActionError` for identifiers outside the
        command surface and :class:`TessieConfigError` when token or VIN is
        missing. Command failures are reported in the result, not raised.
        Uncoercible values raise :class:`ValueError` or :class:`TypeError`;
        momentary points are reset to ``False`` either way.
        """
        kind = ActionKind.parse(action_identifier)
        if not self._config.has_credentials:
            raise TessieConfigError("API token and VIN are required to send commands")

        handler = _HANDLERS[kind]
        async with self._lock:
            if kind.momentary:
                try:
                    return await self._send(kind, handler(requested_value))
                finally:
                    self._write_action_point(kind, False)

            plan = handler(requested_value)

            # The optimistic value stays even when the command fails; the
            # next poll brings the point back in line with the vehicle.
            self._write_action_point(kind, plan.point_value)
            return await self._send(kind, plan)
