"""pytessie - Async Tessie vehicle integration with a reconciling object tree."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pytessie")
except PackageNotFoundError:
    __version__ = "0+local"
from pytessie.client import TessieVehicle
from pytessie.commands import CommandDispatcher
from pytessie.config import TessieConfig
from pytessie.configurator import VehicleSetup, build_vehicle_setup, discover_vehicles
from pytessie.exceptions import (
    TessieConfigError,
    TessieError,
    TessieStoreError,
    TessieTransportError,
    TessieUnknownActionError,
)
from pytessie.models import (
    ActionKind,
    Category,
    CommandResult,
    DataType,
    Profile,
    Resolution,
    Signal,
    SignalOrigin,
    VehicleListing,
)
from pytessie.reconcile import DesiredLink, PointReconciler, ReconcileError, ReconcileReport, resolve
from pytessie.tree import MemoryObjectStore, ObjectKind, ObjectStore, TreeObject

__all__ = [
    "__version__",
    "ActionKind",
    "Category",
    "CommandDispatcher",
    "CommandResult",
    "DataType",
    "DesiredLink",
    "MemoryObjectStore",
    "ObjectKind",
    "ObjectStore",
    "PointReconciler",
    "Profile",
    "ReconcileError",
    "ReconcileReport",
    "Resolution",
    "Signal",
    "SignalOrigin",
    "TessieConfig",
    "TessieConfigError",
    "TessieError",
    "TessieStoreError",
    "TessieTransportError",
    "TessieUnknownActionError",
    "TessieVehicle",
    "TreeObject",
    "VehicleListing",
    "VehicleSetup",
    "build_vehicle_setup",
    "discover_vehicles",
    "resolve",
]
