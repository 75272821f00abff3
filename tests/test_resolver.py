from __future__ import annotations

import pytest

from pytessie.models.point import Category, DataType
from pytessie.reconcile.resolver import resolve, resolve_category, resolve_data_type, resolve_profile, strip_origin


def test_resolve_charge_limit() -> None:
    resolution = resolve("charge_state.charge_limit_soc", 80)
    assert resolution.data_type == DataType.INTEGER
    assert resolution.profile is not None and resolution.profile.name == "Tessie.Percent"
    assert resolution.category == Category.CHARGING


def test_resolve_locked() -> None:
    resolution = resolve("vehicle_state.locked", True)
    assert resolution.data_type == DataType.BOOLEAN
    assert resolution.profile is not None and resolution.profile.name == "Tessie.Lock"
    assert resolution.category == Category.SECURITY


def test_resolve_vin_is_string() -> None:
    resolution = resolve("vin", "5YJ3E1EA7KF000001")
    assert resolution.data_type == DataType.STRING
    assert resolution.profile is None


def test_prefixed_and_bare_paths_classify_alike() -> None:
    assert resolve("rest.climate_state.inside_temp", 21.5) == resolve("climate_state.inside_temp", 21.5)


@pytest.mark.parametrize(
    ("path", "value", "expected"),
    [
        ("rest.vehicle_id", 123456, DataType.STRING),
        ("rest.id_s", "123", DataType.STRING),
        ("rest.charge_state.battery_level", 80, DataType.INTEGER),
        ("rest.drive_state.speed", 12.5, DataType.FLOAT),
        ("telemetry.ChargeStartTime", "1700000000", DataType.INTEGER),
        ("telemetry.Odometer", "12345.6", DataType.FLOAT),
        ("rest.charge_state.charging_state", "Charging", DataType.STRING),
        ("rest.vehicle_state.sentry_mode", False, DataType.BOOLEAN),
    ],
)
def test_resolve_data_type_table(path: str, value: object, expected: DataType) -> None:
    assert resolve_data_type(path, value) == expected  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("path", "data_type", "expected"),
    [
        ("rest.vehicle_state.sentry_mode", DataType.BOOLEAN, "Tessie.Switch"),
        ("rest.vehicle_state.odometer", DataType.FLOAT, "Tessie.Kilometer"),
        ("rest.climate_state.outside_temp", DataType.FLOAT, "Tessie.Celsius"),
        ("rest.vehicle_state.tpms_pressure_fl", DataType.FLOAT, "Tessie.Bar"),
        ("rest.drive_state.speed", DataType.INTEGER, "Tessie.Kmh"),
        ("rest.drive_state.power", DataType.INTEGER, "Tessie.kW"),
        ("rest.charge_state.battery_range", DataType.FLOAT, "Tessie.Kilometer"),
    ],
)
def test_resolve_profile_table(path: str, data_type: DataType, expected: str) -> None:
    profile = resolve_profile(path, data_type)
    assert profile is not None
    assert profile.name == expected


def test_string_points_have_no_profile() -> None:
    assert resolve_profile("rest.charge_state.charging_state", DataType.STRING) is None
    assert resolve_profile("rest.gui_settings.gui_24_hour_time", DataType.INTEGER) is None


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("action.locked", Category.ACTIONS),
        ("act_charge_limit", Category.ACTIONS),
        ("rest.charge_state.fast_charger_type", Category.CHARGING),
        ("rest.climate_state.seat_heater_left", Category.CLIMATE),
        ("rest.drive_state.heading", Category.DRIVING),
        ("telemetry.Soc", Category.CHARGING),
        ("telemetry.HvacPower", Category.CLIMATE),
        ("telemetry.Gear", Category.DRIVING),
        ("rest.vehicle_state.sentry_mode", Category.SECURITY),
        ("rest.vehicle_config.car_type", Category.GENERAL),
    ],
)
def test_resolve_category_table(path: str, expected: Category) -> None:
    assert resolve_category(path) == expected


def test_strip_origin() -> None:
    assert strip_origin("rest.a.b") == "a.b"
    assert strip_origin("telemetry.Soc") == "Soc"
    assert strip_origin("action.locked") == "action.locked"
