"""Account vehicle discovery and per-vehicle setup."""

from __future__ import annotations

import dataclasses
import logging

from pytessie._api.vehicles import fetch_vehicles
from pytessie._transport import Transport
from pytessie.config import TessieConfig
from pytessie.models.vehicle import VehicleListing
from pytessie.stream import streaming_url
from pytessie.tree.store import ObjectKind, ObjectStore

_logger = logging.getLogger(__name__)

__all__ = ["VehicleSetup", "build_vehicle_setup", "discover_vehicles", "fetch_vehicles", "find_vehicle_instance"]


@dataclasses.dataclass(frozen=True, slots=True)
class VehicleSetup:
    """Everything needed to create one vehicle instance.

    ``streaming_url`` is ``None`` when no stream should be opened.
    ``instance_id`` points at an existing instance for the same VIN.
    """

    name: str
    vin: str
    config: TessieConfig
    streaming_url: str | None = None
    instance_id: int | None = None


def find_vehicle_instance(store: ObjectStore, vin: str) -> int | None:
    """Find an instance node whose identifier is *vin*."""
    for child_id in store.list_children(store.root_id):
        child = store.get_object(child_id)
        if child.kind == ObjectKind.INSTANCE and child.identifier == vin:
            return child_id
    return None


def build_vehicle_setup(
    listing: VehicleListing,
    base_config: TessieConfig,
    *,
    create_stream: bool = True,
    enable_telemetry: bool = True,
    store: ObjectStore | None = None,
) -> VehicleSetup:
    """Derive the vehicle configuration and streaming URL for *listing*.

    Telemetry is only enabled when a stream is created, which in turn
    needs a telemetry token in *base_config*.
    """
    has_stream = create_stream and bool(base_config.telemetry_token.strip())
    config = dataclasses.replace(
        base_config,
        vin=listing.vin,
        telemetry_enabled=enable_telemetry and has_stream,
    )
    return VehicleSetup(
        name=listing.name,
        vin=listing.vin,
        config=config,
        streaming_url=streaming_url(config) if has_stream else None,
        instance_id=find_vehicle_instance(store, listing.vin) if store is not None else None,
    )


async def discover_vehicles(
    transport: Transport,
    base_config: TessieConfig,
    *,
    create_stream: bool = True,
    enable_telemetry: bool = True,
    store: ObjectStore | None = None,
) -> list[VehicleSetup]:
    """List the account's vehicles with a ready-made setup for each."""
    if not base_config.token:
        _logger.debug("Vehicle discovery skipped: no API token")
        return []
    listings = await fetch_vehicles(transport)
    return [
        build_vehicle_setup(
            listing,
            base_config,
            create_stream=create_stream,
            enable_telemetry=enable_telemetry,
            store=store,
        )
        for listing in listings
    ]
