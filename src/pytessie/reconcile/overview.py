"""Overview link tree.

A curated set of links grouped by domain, pointing at the most useful
points of a vehicle. Each entry names its REST path first and the telemetry
key as fallback, so the overview fills in from whichever source has
delivered data.
"""

from __future__ import annotations

from typing import NamedTuple

from pytessie.models.command import ActionKind
from pytessie.reconcile.identifiers import make_identifier
from pytessie.reconcile.reconciler import DesiredLink
from pytessie.tree.store import ObjectStore


class OverviewEntry(NamedTuple):
    domain: str
    key: str
    label: str
    candidates: tuple[str, ...]


OVERVIEW_ENTRIES: tuple[OverviewEntry, ...] = (
    OverviewEntry("Status", "state", "State", ("rest.state",)),
    OverviewEntry("Status", "display_name", "Name", ("rest.display_name", "rest.vehicle_state.vehicle_name")),
    OverviewEntry("Status", "software", "Software", ("rest.vehicle_state.car_version", "telemetry.Version")),
    OverviewEntry("Status", "odometer", "Odometer", ("rest.vehicle_state.odometer", "telemetry.Odometer")),
    OverviewEntry("Charging", "battery_level", "Battery", ("rest.charge_state.battery_level", "telemetry.Soc")),
    OverviewEntry(
        "Charging",
        "battery_range",
        "Range",
        ("rest.charge_state.battery_range", "telemetry.EstBatteryRange", "telemetry.RatedRange"),
    ),
    OverviewEntry(
        "Charging",
        "charge_limit",
        "Charge limit",
        ("rest.charge_state.charge_limit_soc", "telemetry.ChargeLimitSoc"),
    ),
    OverviewEntry(
        "Charging",
        "charging_state",
        "Charging state",
        ("rest.charge_state.charging_state", "telemetry.DetailedChargeState"),
    ),
    OverviewEntry(
        "Charging",
        "charger_power",
        "Charger power",
        ("rest.charge_state.charger_power", "telemetry.ACChargingPower"),
    ),
    OverviewEntry("Charging", "charge_switch", "Charging", (f"@{ActionKind.CHARGING.point_identifier}",)),
    OverviewEntry(
        "Charging",
        "charge_limit_action",
        "Set charge limit",
        (f"@{ActionKind.SET_CHARGE_LIMIT.point_identifier}",),
    ),
    OverviewEntry("Climate", "inside_temp", "Inside", ("rest.climate_state.inside_temp", "telemetry.InsideTemp")),
    OverviewEntry("Climate", "outside_temp", "Outside", ("rest.climate_state.outside_temp", "telemetry.OutsideTemp")),
    OverviewEntry("Climate", "climate_on", "Climate", ("rest.climate_state.is_climate_on", "telemetry.HvacPower")),
    OverviewEntry("Climate", "climate_switch", "Climate on/off", (f"@{ActionKind.CLIMATE.point_identifier}",)),
    OverviewEntry("Security", "locked", "Locked", ("rest.vehicle_state.locked", "telemetry.Locked")),
    OverviewEntry("Security", "sentry_mode", "Sentry mode", ("rest.vehicle_state.sentry_mode", "telemetry.SentryMode")),
    OverviewEntry("Security", "lock_switch", "Lock", (f"@{ActionKind.LOCK.point_identifier}",)),
    OverviewEntry("Driving", "speed", "Speed", ("rest.drive_state.speed", "telemetry.VehicleSpeed")),
    OverviewEntry("Driving", "shift_state", "Gear", ("rest.drive_state.shift_state", "telemetry.Gear")),
    OverviewEntry(
        "Driving",
        "latitude",
        "Latitude",
        ("rest.drive_state.latitude", "telemetry.Location.latitude"),
    ),
    OverviewEntry(
        "Driving",
        "longitude",
        "Longitude",
        ("rest.drive_state.longitude", "telemetry.Location.longitude"),
    ),
)


def _candidate_identifier(candidate: str) -> str:
    # "@" marks a literal point identifier (action points)
    if candidate.startswith("@"):
        return candidate[1:]
    return make_identifier(candidate)


def desired_overview_links(
    store: ObjectStore,
    instance_id: int,
    entries: tuple[OverviewEntry, ...] = OVERVIEW_ENTRIES,
) -> list[DesiredLink]:
    """Desired overview links for the points that currently exist.

    Entries whose candidates have no point yet are left out, which makes
    their links disappear again if the point is ever removed.
    """
    desired: list[DesiredLink] = []
    for entry in entries:
        for candidate in entry.candidates:
            identifier = _candidate_identifier(candidate)
            if store.find_by_identifier(instance_id, identifier) is not None:
                desired.append(DesiredLink(parent=entry.domain, key=entry.key, target=identifier, label=entry.label))
                break
    return desired
