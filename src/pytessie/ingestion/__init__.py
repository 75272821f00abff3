"""Ingestion layer.

Adapters that turn REST snapshots and streaming frames into normalized
:class:`pytessie.models.Signal` lists.
"""

from pytessie.ingestion.flatten import flatten
from pytessie.ingestion.rest import signals_from_vehicle_data
from pytessie.ingestion.telemetry import decode_frame, signals_from_frame

__all__ = ["decode_frame", "flatten", "signals_from_frame", "signals_from_vehicle_data"]
