"""Data models for pytessie."""

from pytessie.models.command import ActionKind, CommandResult
from pytessie.models.point import Category, DataType, Profile, Resolution
from pytessie.models.signal import Scalar, Signal, SignalOrigin
from pytessie.models.vehicle import VehicleListing

__all__ = [
    "ActionKind",
    "Category",
    "CommandResult",
    "DataType",
    "Profile",
    "Resolution",
    "Scalar",
    "Signal",
    "SignalOrigin",
    "VehicleListing",
]
