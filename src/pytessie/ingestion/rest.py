"""REST snapshot ingestion.

A ``vehicle_data`` response is a deep object (``charge_state``,
``climate_state``, ``drive_state``, ``vehicle_state``, ...). It is flattened
under the ``rest`` prefix and every non-null leaf becomes a signal.
"""

from __future__ import annotations

from typing import Any

from pytessie._constants import REST_PREFIX
from pytessie.ingestion.flatten import flatten
from pytessie.models.signal import Signal, SignalOrigin


def unwrap_response(data: Any) -> Any:
    """Return the ``response`` member of an API reply, or the reply itself."""
    if isinstance(data, dict) and "response" in data:
        return data["response"]
    return data


def signals_from_vehicle_data(payload: Any) -> list[Signal]:
    """Build REST signals from an (already unwrapped) vehicle data payload."""
    if not isinstance(payload, dict):
        return []
    signals: list[Signal] = []
    for path, value in flatten(payload, REST_PREFIX).items():
        # null leaves carry no value and would pin a point to the string type.
        if value is None or not isinstance(value, (bool, int, float, str)):
            continue
        signals.append(Signal(path=path, value=value, origin=SignalOrigin.REST))
    return signals
