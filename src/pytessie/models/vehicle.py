"""Vehicle listing model returned by the account vehicle list."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class VehicleListing(BaseModel):
    """One vehicle of the Tessie account."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    vin: str
    display_name: str | None = Field(default=None, validation_alias=AliasChoices("display_name", "name"))
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.display_name or self.vin
