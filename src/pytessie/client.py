"""High-level async facade for one Tessie vehicle instance."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pytessie._api.vehicles import fetch_vehicle_data
from pytessie._transport import HttpTransport, Transport
from pytessie.actions import (
    action_values_from_rest,
    action_values_from_telemetry,
    provision_action_points,
    sync_action_points,
)
from pytessie.commands import CommandDispatcher
from pytessie.config import TessieConfig
from pytessie.exceptions import TessieConfigError
from pytessie.ingestion.rest import signals_from_vehicle_data
from pytessie.ingestion.telemetry import decode_frame, signals_from_pairs
from pytessie.models.command import CommandResult
from pytessie.reconcile.overview import desired_overview_links
from pytessie.reconcile.reconciler import PointReconciler
from pytessie.reconcile.report import ReconcileReport
from pytessie.scheduler import UpdateScheduler
from pytessie.stream import TelemetryStream, streaming_url
from pytessie.tree.store import ObjectStore

_logger = logging.getLogger(__name__)


class TessieVehicle:
    """One vehicle bound to an instance node of the host object tree.

    Usage::

        async with TessieVehicle(config, store, instance_id) as vehicle:
            vehicle.apply_changes()
            await vehicle.update()
            await vehicle.request_action("act_charge_limit", 80)

    Instances of different vehicles share nothing but the store.
    """

    def __init__(
        self,
        config: TessieConfig,
        store: ObjectStore,
        instance_id: int,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._instance_id = instance_id
        self._external_session = session is not None
        self._http_session = session
        self._transport = transport
        self._reconciler = PointReconciler(store, instance_id, config)
        self._dispatcher: CommandDispatcher | None = None
        self._scheduler: UpdateScheduler | None = None

    @property
    def config(self) -> TessieConfig:
        return self._config

    @property
    def reconciler(self) -> PointReconciler:
        return self._reconciler

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TessieVehicle:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise TessieConfigError("Transport not initialized; use 'async with TessieVehicle(...)'")
        return self._transport

    def _require_dispatcher(self) -> CommandDispatcher:
        if self._dispatcher is None:
            self._dispatcher = CommandDispatcher(self._config, self._require_transport(), self._reconciler)
        return self._dispatcher

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def apply_changes(self) -> ReconcileReport:
        """Register profiles and ensure the action points.

        Safe to call any number of times.
        """
        return provision_action_points(self._reconciler)

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    async def update(self) -> ReconcileReport:
        """Poll the REST snapshot and reconcile it.

        Without token or VIN this is a no-op returning an empty report.
        """
        report = ReconcileReport()
        if not self._config.has_credentials:
            _logger.debug("Update skipped: API token or VIN missing")
            return report

        payload = await fetch_vehicle_data(self._require_transport(), self._config.normalized_vin)
        if payload is None:
            return report

        report.merge(self._reconciler.upsert_signals(signals_from_vehicle_data(payload)))
        report.merge(sync_action_points(self._reconciler, action_values_from_rest(payload)))
        if self._config.overview_enabled:
            report.merge(self.refresh_overview())
        _logger.debug(
            "Update for %s: %d created, %d updated, %d error(s)",
            self._config.normalized_vin,
            report.created,
            report.updated,
            len(report.errors),
        )
        return report

    def refresh_overview(self) -> ReconcileReport:
        """Reconcile the overview link tree against the points that exist now."""
        desired = desired_overview_links(self._store, self._instance_id)
        return self._reconciler.reconcile_link_set(desired)

    async def receive_frame(self, frame: bytes | str) -> ReconcileReport:
        """Reconcile one streaming telemetry frame.

        Frames are ignored while telemetry is disabled.
        """
        if not self._config.telemetry_enabled:
            _logger.debug("Telemetry disabled; frame ignored")
            return ReconcileReport()

        pairs = decode_frame(frame, expected_vin=self._config.normalized_vin or None)
        if not pairs:
            return ReconcileReport()
        report = self._reconciler.upsert_signals(signals_from_pairs(pairs))
        report.merge(sync_action_points(self._reconciler, action_values_from_telemetry(pairs)))
        return report

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def request_action(self, identifier: str, value: Any) -> CommandResult:
        """Dispatch a write to an action point as a vehicle command."""
        return await self._require_dispatcher().dispatch(identifier, value)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start periodic polling and, when configured, the telemetry stream."""
        if self._scheduler is not None:
            return
        stream: TelemetryStream | None = None
        if self._config.telemetry_enabled and self._config.telemetry_token.strip() and self._http_session is not None:
            stream = TelemetryStream(streaming_url(self._config), self._http_session, self._on_stream_frame)
        self._scheduler = UpdateScheduler(self.update, self._config.update_interval, stream=stream)
        self._scheduler.start()

    async def stop(self) -> None:
        scheduler, self._scheduler = self._scheduler, None
        if scheduler is not None:
            await scheduler.stop()

    async def _on_stream_frame(self, frame: bytes | str) -> None:
        await self.receive_frame(frame)
