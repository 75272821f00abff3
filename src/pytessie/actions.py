"""Writable action points.

Each :class:`ActionKind` owns one writable point under the instance, linked
from the ``Actions`` category. Besides being written by the user, the points
mirror the vehicle's current state whenever a REST snapshot or telemetry
frame reports it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pytessie.exceptions import TessieStoreError
from pytessie.ingestion.normalize import safe_int
from pytessie.models.command import ActionKind
from pytessie.models.point import Category
from pytessie.models.signal import Scalar
from pytessie.reconcile.identifiers import link_identifier
from pytessie.reconcile.profiles import PROFILES_BY_NAME
from pytessie.reconcile.reconciler import PointReconciler
from pytessie.reconcile.report import ReconcileErrorKind, ReconcileReport

_logger = logging.getLogger(__name__)


def provision_action_points(reconciler: PointReconciler) -> ReconcileReport:
    """Register profiles and ensure every action point with its link."""
    report = ReconcileReport()
    try:
        reconciler.ensure_profiles()
        category_id = reconciler.ensure_category(Category.ACTIONS.value, report=report)
    except TessieStoreError as exc:
        report.record_error(ReconcileErrorKind.STORE, Category.ACTIONS.value, str(exc))
        return report

    for kind in ActionKind:
        try:
            point_id, _ = reconciler.ensure_point(
                kind.point_identifier,
                kind.label,
                kind.data_type,
                PROFILES_BY_NAME[kind.profile_name],
                writable=True,
                report=report,
            )
            reconciler.ensure_link(category_id, link_identifier(kind.path), point_id, kind.label, report=report)
        except TessieStoreError as exc:
            report.record_error(ReconcileErrorKind.STORE, kind.point_identifier, str(exc))
    return report


def _section(payload: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = payload.get(name)
    return section if isinstance(section, Mapping) else {}


def action_values_from_rest(payload: Mapping[str, Any]) -> dict[ActionKind, Scalar]:
    """Current action states found in a ``vehicle_data`` payload."""
    values: dict[ActionKind, Scalar] = {}
    vehicle_state = _section(payload, "vehicle_state")
    climate_state = _section(payload, "climate_state")
    charge_state = _section(payload, "charge_state")

    locked = vehicle_state.get("locked")
    if isinstance(locked, bool):
        values[ActionKind.LOCK] = locked

    climate_on = climate_state.get("is_climate_on")
    if isinstance(climate_on, bool):
        values[ActionKind.CLIMATE] = climate_on

    charging_state = charge_state.get("charging_state")
    if isinstance(charging_state, str):
        values[ActionKind.CHARGING] = charging_state.strip().lower() == "charging"

    limit = safe_int(charge_state.get("charge_limit_soc"))
    if limit is not None:
        values[ActionKind.SET_CHARGE_LIMIT] = limit

    amps = safe_int(charge_state.get("charge_current_request"))
    if amps is not None:
        values[ActionKind.SET_CHARGING_AMPS] = amps
    return values


def action_values_from_telemetry(pairs: Iterable[tuple[str, Scalar]]) -> dict[ActionKind, Scalar]:
    """Current action states found in decoded telemetry pairs (last wins)."""
    values: dict[ActionKind, Scalar] = {}
    for key, value in pairs:
        if key == "Locked" and isinstance(value, bool):
            values[ActionKind.LOCK] = value
        elif key == "HvacPower" and isinstance(value, str):
            values[ActionKind.CLIMATE] = "on" in value.lower()
        elif key == "ChargeLimitSoc":
            limit = safe_int(value)
            if limit is not None:
                values[ActionKind.SET_CHARGE_LIMIT] = limit
        elif key == "ChargeCurrentRequest":
            amps = safe_int(value)
            if amps is not None:
                values[ActionKind.SET_CHARGING_AMPS] = amps
    return values


def sync_action_points(reconciler: PointReconciler, values: Mapping[ActionKind, Scalar]) -> ReconcileReport:
    """Write observed states into existing action points.

    Missing action points are not created here; provisioning owns that.
    """
    report = ReconcileReport()
    for kind, value in values.items():
        point_id = reconciler.find_point(kind.point_identifier)
        if point_id is None:
            continue
        try:
            reconciler.write_point(point_id, value)
            report.updated += 1
        except TessieStoreError as exc:
            report.record_error(ReconcileErrorKind.STORE, kind.point_identifier, str(exc))
        except (TypeError, ValueError) as exc:
            report.record_error(ReconcileErrorKind.COERCION, kind.point_identifier, str(exc))
    if values:
        _logger.debug("Synced %d action point(s)", report.updated)
    return report
