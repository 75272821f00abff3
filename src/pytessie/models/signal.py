"""Transient signal facts produced by one ingestion cycle."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, field_validator

Scalar = bool | int | float | str
"""Leaf value carried by a signal."""


class SignalOrigin(enum.StrEnum):
    REST = "rest"
    TELEMETRY = "telemetry"
    ACTION = "action"


class Signal(BaseModel):
    """A single ``(path, value)`` observation."""

    model_config = ConfigDict(frozen=True)

    path: str
    value: Scalar
    origin: SignalOrigin

    @field_validator("path")
    @classmethod
    def _non_empty_path(cls, value: str) -> str:
        if not value:
            raise ValueError("path must be non-empty")
        return value
