"""Point, profile and category models for the external object tree."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict


class DataType(enum.StrEnum):
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"

    @property
    def is_numeric(self) -> bool:
        return self in (DataType.INTEGER, DataType.FLOAT)


class Category(enum.StrEnum):
    """Logical groupings points are placed under."""

    CHARGING = "Charging"
    CLIMATE = "Climate"
    DRIVING = "Driving"
    SECURITY = "Security"
    GENERAL = "General"
    ACTIONS = "Actions"
    STATUS = "Status"


class Profile(BaseModel):
    """Presentation metadata attached to a point."""

    model_config = ConfigDict(frozen=True)

    name: str
    data_type: DataType
    suffix: str = ""
    minimum: float | None = None
    maximum: float | None = None
    step: float | None = None


class Resolution(BaseModel):
    """Classification of one signal path/value pair."""

    model_config = ConfigDict(frozen=True)

    data_type: DataType
    profile: Profile | None
    category: Category
