from __future__ import annotations

from pytessie.actions import (
    action_values_from_rest,
    action_values_from_telemetry,
    provision_action_points,
    sync_action_points,
)
from pytessie.config import TessieConfig
from pytessie.models.command import ActionKind
from pytessie.models.point import Category, DataType
from pytessie.reconcile.identifiers import category_identifier
from pytessie.reconcile.overview import desired_overview_links
from pytessie.reconcile.reconciler import PointReconciler
from pytessie.tree.store import MemoryObjectStore, ObjectKind


def _setup() -> tuple[MemoryObjectStore, int, PointReconciler]:
    store = MemoryObjectStore()
    instance = store.create_instance("Car", identifier="VIN1")
    return store, instance, PointReconciler(store, instance, TessieConfig(api_token="t", vin="VIN1"))


def test_provisioning_creates_writable_action_points() -> None:
    store, instance, reconciler = _setup()

    report = provision_action_points(reconciler)

    assert report.ok
    assert "Tessie.Amps" in store.profiles
    actions = store.find_by_identifier(instance, category_identifier(Category.ACTIONS.value))
    assert actions is not None
    assert len(store.list_children(actions)) == len(ActionKind)

    limit = store.get_object(store.find_by_identifier(instance, "act_charge_limit"))  # type: ignore[arg-type]
    assert limit.writable
    assert limit.data_type == DataType.INTEGER
    assert limit.profile == "Tessie.PercentInt"

    honk = store.get_object(store.find_by_identifier(instance, "act_honk"))  # type: ignore[arg-type]
    assert honk.data_type == DataType.BOOLEAN
    assert honk.name == "Horn"


def test_provisioning_is_idempotent() -> None:
    store, instance, reconciler = _setup()
    provision_action_points(reconciler)
    before = store.render()

    report = provision_action_points(reconciler)

    assert report.created == 0
    assert store.render() == before
    assert len(store.descendants(instance, ObjectKind.POINT)) == len(ActionKind)


def test_action_values_from_rest() -> None:
    payload = {
        "vehicle_state": {"locked": False},
        "climate_state": {"is_climate_on": True},
        "charge_state": {"charging_state": "Charging", "charge_limit_soc": 90, "charge_current_request": "16"},
    }
    assert action_values_from_rest(payload) == {
        ActionKind.LOCK: False,
        ActionKind.CLIMATE: True,
        ActionKind.CHARGING: True,
        ActionKind.SET_CHARGE_LIMIT: 90,
        ActionKind.SET_CHARGING_AMPS: 16,
    }


def test_action_values_from_rest_ignores_missing_and_odd_values() -> None:
    payload = {"vehicle_state": {"locked": "yes"}, "charge_state": {"charging_state": "Stopped"}, "climate_state": []}
    assert action_values_from_rest(payload) == {ActionKind.CHARGING: False}


def test_action_values_from_telemetry() -> None:
    pairs = [
        ("Locked", True),
        ("HvacPower", "HvacPowerStateOn"),
        ("ChargeLimitSoc", 80),
        ("ChargeLimitSoc", 85),
        ("ChargeCurrentRequest", 32.0),
        ("Soc", 70),
    ]
    assert action_values_from_telemetry(pairs) == {
        ActionKind.LOCK: True,
        ActionKind.CLIMATE: True,
        ActionKind.SET_CHARGE_LIMIT: 85,
        ActionKind.SET_CHARGING_AMPS: 32,
    }
    assert action_values_from_telemetry([("HvacPower", "HvacPowerStateOff")]) == {ActionKind.CLIMATE: False}


def test_sync_writes_only_existing_action_points() -> None:
    store, instance, reconciler = _setup()
    assert sync_action_points(reconciler, {ActionKind.LOCK: True}).updated == 0

    provision_action_points(reconciler)
    report = sync_action_points(reconciler, {ActionKind.LOCK: True, ActionKind.SET_CHARGING_AMPS: 13})

    assert report.updated == 2
    assert store.get_object(store.find_by_identifier(instance, "act_locked")).value is True  # type: ignore[arg-type]
    amps_id = store.find_by_identifier(instance, "act_charging_amps")
    assert amps_id is not None
    assert store.get_object(amps_id).value == 13


def test_overview_prefers_rest_and_falls_back_to_telemetry() -> None:
    store, instance, reconciler = _setup()
    reconciler.upsert_point("telemetry.Soc", 70)
    reconciler.upsert_point("telemetry.InsideTemp", 21.0)
    reconciler.upsert_point("rest.climate_state.inside_temp", 21.5)

    desired = {link.key: link for link in desired_overview_links(store, instance)}

    assert set(desired) == {"battery_level", "inside_temp"}
    assert desired["battery_level"].parent == "Charging"
    assert desired["inside_temp"].target.startswith("rest_climate_state_inside_temp_")


def test_overview_links_action_points() -> None:
    store, instance, reconciler = _setup()
    provision_action_points(reconciler)

    keys = {link.key for link in desired_overview_links(store, instance)}

    assert {"charge_switch", "charge_limit_action", "climate_switch", "lock_switch"} <= keys
