"""Vehicle read endpoints.

Endpoints:
  - GET /api/1/vehicles
  - GET /api/1/vehicles/{vin}/vehicle_data
  - GET /{vin}/status
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from pytessie._transport import Transport
from pytessie.ingestion.rest import unwrap_response
from pytessie.models.vehicle import VehicleListing

_logger = logging.getLogger(__name__)

VEHICLES_ENDPOINT = "/api/1/vehicles"


def _vin_segment(vin: str) -> str:
    return quote(vin.strip(), safe="")


def vehicle_data_path(vin: str) -> str:
    return f"{VEHICLES_ENDPOINT}/{_vin_segment(vin)}/vehicle_data"


def status_path(vin: str) -> str:
    return f"/{_vin_segment(vin)}/status"


async def fetch_vehicle_data(transport: Transport, vin: str) -> dict[str, Any] | None:
    """Fetch the full vehicle state snapshot.

    Returns ``None`` when the reply carries no object payload (including
    transport failures, which the transport reports as ``{}``).
    """
    data = await transport.request("GET", vehicle_data_path(vin))
    payload = unwrap_response(data)
    if not isinstance(payload, dict) or not payload:
        _logger.debug("No vehicle data payload for %s", vin)
        return None
    return payload


async def fetch_status(transport: Transport, vin: str) -> str:
    """Return the vehicle's sleep status (``awake``, ``asleep``, ...), or ``""``."""
    data = await transport.request("GET", status_path(vin))
    payload = unwrap_response(data)
    if isinstance(payload, dict):
        return str(payload.get("status") or "").strip().lower()
    return ""


def _vehicle_items(data: Any) -> list[Any]:
    payload = unwrap_response(data)
    if isinstance(payload, dict):
        payload = payload.get("vehicles") or payload.get("results") or []
    if isinstance(payload, list):
        return payload
    return []


def parse_vehicle_list(data: Any) -> list[VehicleListing]:
    """Parse the vehicle list reply.

    Accepts ``{"response": {"vehicles": [...]}}``, ``{"response": [...]}``,
    ``{"results": [...]}`` and a bare list. Entries without a VIN are skipped.
    """
    vehicles: list[VehicleListing] = []
    for item in _vehicle_items(data):
        if not isinstance(item, dict):
            continue
        vin = item.get("vin")
        if not isinstance(vin, str) or not vin.strip():
            continue
        try:
            vehicles.append(VehicleListing.model_validate({**item, "vin": vin.strip(), "raw": item}))
        except ValidationError as exc:
            _logger.debug("Skipping vehicle entry %s: %s", vin, exc)
    return vehicles


async def fetch_vehicles(transport: Transport) -> list[VehicleListing]:
    """List the vehicles of the account."""
    data = await transport.request("GET", VEHICLES_ENDPOINT)
    return parse_vehicle_list(data)
