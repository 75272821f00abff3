"""Action and command models.

The command surface is a closed set: every :class:`ActionKind` member is
backed by exactly one writable action point and one handler in
:mod:`pytessie.commands`.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pytessie.exceptions import TessieUnknownActionError
from pytessie.models.point import DataType


class ActionKind(enum.StrEnum):
    """User-triggerable vehicle actions."""

    LOCK = "lock"
    CLIMATE = "climate"
    CHARGING = "charging"
    SET_CHARGE_LIMIT = "set_charge_limit"
    SET_CHARGING_AMPS = "set_charging_amps"
    FLASH = "flash"
    HORN = "horn"

    @property
    def point_identifier(self) -> str:
        return _POINT_IDENTIFIERS[self]

    @property
    def path(self) -> str:
        """Signal path used for the action's link under the Actions category."""
        return f"action.{self.point_identifier.removeprefix('act_')}"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def data_type(self) -> DataType:
        if self in (ActionKind.SET_CHARGE_LIMIT, ActionKind.SET_CHARGING_AMPS):
            return DataType.INTEGER
        return DataType.BOOLEAN

    @property
    def profile_name(self) -> str:
        return _PROFILES[self]

    @property
    def momentary(self) -> bool:
        """Button-style actions that reset to ``False`` after dispatch."""
        return self in (ActionKind.FLASH, ActionKind.HORN)

    @classmethod
    def parse(cls, identifier: str) -> ActionKind:
        """Resolve an action name or action point identifier.

        Raises :class:`TessieUnknownActionError` for anything else.
        """
        key = str(identifier).strip()
        try:
            return cls(key)
        except ValueError:
            pass
        for kind, ident in _POINT_IDENTIFIERS.items():
            if ident == key:
                return kind
        raise TessieUnknownActionError(key)


_POINT_IDENTIFIERS: dict[ActionKind, str] = {
    ActionKind.LOCK: "act_locked",
    ActionKind.CLIMATE: "act_climate",
    ActionKind.CHARGING: "act_charging",
    ActionKind.SET_CHARGE_LIMIT: "act_charge_limit",
    ActionKind.SET_CHARGING_AMPS: "act_charging_amps",
    ActionKind.FLASH: "act_flash",
    ActionKind.HORN: "act_honk",
}

_LABELS: dict[ActionKind, str] = {
    ActionKind.LOCK: "Locked",
    ActionKind.CLIMATE: "Climate",
    ActionKind.CHARGING: "Charging",
    ActionKind.SET_CHARGE_LIMIT: "Charge limit (%)",
    ActionKind.SET_CHARGING_AMPS: "Charging current (A)",
    ActionKind.FLASH: "Flash lights",
    ActionKind.HORN: "Horn",
}

_PROFILES: dict[ActionKind, str] = {
    ActionKind.LOCK: "Tessie.Lock",
    ActionKind.CLIMATE: "Tessie.Switch",
    ActionKind.CHARGING: "Tessie.Switch",
    ActionKind.SET_CHARGE_LIMIT: "Tessie.PercentInt",
    ActionKind.SET_CHARGING_AMPS: "Tessie.Amps",
    ActionKind.FLASH: "Tessie.Switch",
    ActionKind.HORN: "Tessie.Switch",
}


class CommandResult(BaseModel):
    """Outcome of one dispatched action.

    ``command`` is ``None`` when nothing was sent (e.g. a momentary action
    released with its neutral value).
    """

    model_config = ConfigDict(frozen=True)

    action: ActionKind
    command: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)
    success: bool = False
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def sent(self) -> bool:
        return self.command is not None
