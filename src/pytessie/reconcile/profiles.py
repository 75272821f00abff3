"""Display profiles registered in the object store."""

from __future__ import annotations

from pytessie.models.point import DataType, Profile

LOCK = Profile(name="Tessie.Lock", data_type=DataType.BOOLEAN)
SWITCH = Profile(name="Tessie.Switch", data_type=DataType.BOOLEAN)

PERCENT = Profile(name="Tessie.Percent", data_type=DataType.FLOAT, suffix="%", minimum=0, maximum=100, step=1)
KILOMETER = Profile(
    name="Tessie.Kilometer",
    data_type=DataType.FLOAT,
    suffix=" km",
    minimum=0,
    maximum=1_000_000,
    step=0.1,
)
CELSIUS = Profile(name="Tessie.Celsius", data_type=DataType.FLOAT, suffix=" °C", minimum=-50, maximum=100, step=0.1)
BAR = Profile(name="Tessie.Bar", data_type=DataType.FLOAT, suffix=" bar", minimum=0, maximum=6, step=0.01)
KMH = Profile(name="Tessie.Kmh", data_type=DataType.FLOAT, suffix=" km/h", minimum=0, maximum=300, step=0.1)
KW = Profile(name="Tessie.kW", data_type=DataType.FLOAT, suffix=" kW", minimum=-500, maximum=500, step=0.1)

# Integer variants for the writable action points.
PERCENT_INT = Profile(
    name="Tessie.PercentInt",
    data_type=DataType.INTEGER,
    suffix=" %",
    minimum=0,
    maximum=100,
    step=1,
)
AMPS = Profile(name="Tessie.Amps", data_type=DataType.INTEGER, suffix=" A", minimum=0, maximum=48, step=1)

ALL_PROFILES: tuple[Profile, ...] = (LOCK, SWITCH, PERCENT, KILOMETER, CELSIUS, BAR, KMH, KW, PERCENT_INT, AMPS)

PROFILES_BY_NAME: dict[str, Profile] = {profile.name: profile for profile in ALL_PROFILES}

# Numeric keyword table, first match wins.
NUMERIC_KEYWORD_PROFILES: tuple[tuple[tuple[str, ...], Profile], ...] = (
    (("soc", "percent", "battery_level", "charge_limit"), PERCENT),
    (("odometer", "range", "distance"), KILOMETER),
    (("temp",), CELSIUS),
    (("pressure", "tpms"), BAR),
    (("speed",), KMH),
    (("power",), KW),
)
