"""Point reconciliation.

Converges the external object tree to the set of points, categories and
links the current signals call for. The reconciler keeps no memory between
calls: everything it needs (existing points, their types, where the
overview tree was placed last time) is read back from the store.

Only find-or-create primitives are used, so any pass can be interrupted and
re-run. A failure on one object is recorded in the returned
:class:`ReconcileReport` and the pass carries on with the next object.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from pytessie._constants import (
    CATEGORY_PREFIX,
    LINK_ROOT_META_IDENT,
    LINK_ROOT_PREFIX,
    LINK_SET_PREFIX,
    is_managed_identifier,
)
from pytessie.config import TessieConfig
from pytessie.exceptions import TessieStoreError
from pytessie.ingestion.normalize import looks_numeric
from pytessie.models.point import DataType, Profile
from pytessie.models.signal import Scalar, Signal, SignalOrigin
from pytessie.reconcile.identifiers import category_identifier, link_identifier, make_identifier
from pytessie.reconcile.profiles import ALL_PROFILES
from pytessie.reconcile.report import ReconcileErrorKind, ReconcileReport
from pytessie.reconcile.resolver import resolve
from pytessie.tree.store import ObjectKind, ObjectStore

_logger = logging.getLogger(__name__)

_TRUE_STRINGS = frozenset({"true", "1", "on", "yes"})
_FALSE_STRINGS = frozenset({"false", "0", "off", "no", ""})


@dataclass(frozen=True, slots=True)
class DesiredLink:
    """One link of the overview tree.

    ``parent`` is the domain category name, ``key`` the semantic key the
    managed identifier is derived from, ``target`` the point identifier.
    """

    parent: str
    key: str
    target: str
    label: str

    @property
    def identifier(self) -> str:
        return link_set_identifier(self.parent, self.key)


def link_set_identifier(parent: str, key: str) -> str:
    return make_identifier(f"{parent}/{key}", prefix=LINK_SET_PREFIX)


def coerce_value(data_type: DataType, value: Any) -> Scalar:
    """Coerce *value* to *data_type*.

    Raises ``ValueError`` when the value has no sensible representation in
    that type (e.g. ``"Charging"`` as an integer).
    """
    if data_type == DataType.BOOLEAN:
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
            raise ValueError(f"{value!r} is not a boolean")
        return bool(value)

    if data_type == DataType.STRING:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    if isinstance(value, str):
        if not looks_numeric(value):
            raise ValueError(f"{value!r} is not numeric")
        number = float(value.strip())
    elif isinstance(value, (bool, int, float)):
        number = value
    else:
        raise TypeError(f"Cannot coerce {type(value).__name__} to {data_type}")

    if data_type == DataType.INTEGER:
        return int(number)
    return float(number)


class PointReconciler:
    """Reconciles signals and overview links for one vehicle instance."""

    def __init__(self, store: ObjectStore, instance_id: int, config: TessieConfig) -> None:
        self._store = store
        self._instance_id = instance_id
        self._config = config

    @property
    def instance_id(self) -> int:
        return self._instance_id

    # ------------------------------------------------------------------
    # Primitive ensure helpers
    # ------------------------------------------------------------------

    def ensure_profiles(self, profiles: Iterable[Profile] = ALL_PROFILES) -> None:
        for profile in profiles:
            self._store.ensure_profile(profile)

    def ensure_category(
        self,
        name: str,
        *,
        parent: int | None = None,
        parent_key: str = "",
        report: ReconcileReport | None = None,
    ) -> int:
        parent_id = self._instance_id if parent is None else parent
        identifier = category_identifier(name, parent_key)
        category_id = self._store.find_by_identifier(parent_id, identifier)
        if category_id is None:
            category_id = self._store.create_category(parent_id, identifier)
            self._store.set_name(category_id, name)
            _logger.debug("Created category %s (%s)", name, identifier)
            if report is not None:
                report.created += 1
        return category_id

    def ensure_point(
        self,
        identifier: str,
        label: str,
        data_type: DataType,
        profile: Profile | None,
        *,
        writable: bool = False,
        report: ReconcileReport | None = None,
    ) -> tuple[int, DataType]:
        """Find or create a point and return its id and effective data type.

        An existing point keeps its data type: the first classification wins
        and a conflicting one is only logged.
        """
        point_id = self._store.find_by_identifier(self._instance_id, identifier)
        if point_id is None:
            point_id = self._store.create_point(self._instance_id, identifier, data_type)
            self._store.set_name(point_id, label)
            if profile is not None:
                self._store.ensure_profile(profile)
                self._store.set_profile(point_id, profile.name)
            if writable:
                self._store.set_writable(point_id, True)
            _logger.debug("Created %s point %s", data_type, identifier)
            if report is not None:
                report.created += 1
            return point_id, data_type

        existing = self._store.get_object(point_id)
        if existing.kind != ObjectKind.POINT or existing.data_type is None:
            raise TessieStoreError(f"Identifier {identifier!r} is not a point", identifier=identifier)
        if existing.data_type != data_type:
            _logger.warning(
                "Point %s keeps type %s; new observation classified as %s",
                label,
                existing.data_type,
                data_type,
            )
            if report is not None:
                report.type_mismatches.append(identifier)
            return point_id, existing.data_type

        if existing.name != label:
            self._store.set_name(point_id, label)
        if existing.profile is None and profile is not None:
            self._store.ensure_profile(profile)
            self._store.set_profile(point_id, profile.name)
        if writable and not existing.writable:
            self._store.set_writable(point_id, True)
        return point_id, existing.data_type

    def ensure_link(
        self,
        parent: int,
        identifier: str,
        target: int,
        label: str,
        *,
        report: ReconcileReport | None = None,
    ) -> int:
        link_id = self._store.find_by_identifier(parent, identifier)
        if link_id is None:
            link_id = self._store.create_link(parent, identifier)
            self._store.set_name(link_id, label)
            self._store.set_target(link_id, target)
            if report is not None:
                report.created += 1
            return link_id

        existing = self._store.get_object(link_id)
        if existing.name != label:
            self._store.set_name(link_id, label)
        if existing.target != target:
            self._store.set_target(link_id, target)
        return link_id

    def find_point(self, identifier: str) -> int | None:
        return self._store.find_by_identifier(self._instance_id, identifier)

    def write_point(self, point_id: int, value: Any) -> Scalar:
        """Coerce *value* to the point's data type and write it."""
        data_type = self._store.get_object(point_id).data_type
        if data_type is None:
            raise TessieStoreError(f"Object {point_id} is not a point")
        coerced = coerce_value(data_type, value)
        self._store.write_value(point_id, data_type, coerced)
        return coerced

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------

    def upsert_point(
        self,
        path: str,
        value: Scalar,
        *,
        origin: SignalOrigin | None = None,
        report: ReconcileReport | None = None,
    ) -> ReconcileReport:
        """Ensure category, point and link for *path* and write *value*.

        Repeating the call with the same input only rewrites the value.
        """
        report = report if report is not None else ReconcileReport()
        try:
            resolution = resolve(path, value)
            category_id = self.ensure_category(resolution.category.value, report=report)
            point_id, data_type = self.ensure_point(
                make_identifier(path),
                path,
                resolution.data_type,
                resolution.profile,
                report=report,
            )
            self.ensure_link(category_id, link_identifier(path), point_id, path, report=report)
            coerced = coerce_value(data_type, value)
            self._store.write_value(point_id, data_type, coerced)
            report.updated += 1
            _logger.debug("Upserted %s=%r (%s)", path, coerced, origin or "direct")
        except TessieStoreError as exc:
            _logger.debug("Store rejected %s: %s", path, exc)
            report.record_error(ReconcileErrorKind.STORE, path, str(exc))
        except (TypeError, ValueError) as exc:
            _logger.debug("Cannot coerce %s=%r: %s", path, value, exc)
            report.record_error(ReconcileErrorKind.COERCION, path, str(exc))
        return report

    def upsert_signals(self, signals: Iterable[Signal]) -> ReconcileReport:
        """Upsert a batch; one failing point never aborts the rest."""
        report = ReconcileReport()
        for signal in signals:
            self.upsert_point(signal.path, signal.value, origin=signal.origin, report=report)
        if report.errors:
            _logger.debug("Reconciled with %d error(s): %s", len(report.errors), report.errors[:5])
        return report

    # ------------------------------------------------------------------
    # Overview link tree
    # ------------------------------------------------------------------

    def _delete(self, object_id: int, identifier: str, report: ReconcileReport) -> bool:
        """Delete a managed object unless cleanup is disabled or dry-run."""
        if not self._config.cleanup_enabled:
            return False
        if self._config.dry_run:
            _logger.info("Dry run: would delete %s (object %s)", identifier, object_id)
            report.would_delete.append(identifier)
            return False
        self._store.delete_object(object_id)
        report.deleted.append(identifier)
        return True

    def _link_root_parent(self) -> int:
        if self._config.link_root_parent is None:
            return self._instance_id
        return self._config.link_root_parent

    def _link_root_identifier(self) -> str:
        return make_identifier(f"{self._instance_id}/{self._config.link_root_name}", prefix=LINK_ROOT_PREFIX)

    def _read_link_root_record(self) -> tuple[int, str] | None:
        meta_id = self._store.find_by_identifier(self._instance_id, LINK_ROOT_META_IDENT)
        if meta_id is None:
            return None
        raw = self._store.get_object(meta_id).value
        if not isinstance(raw, str) or ":" not in raw:
            return None
        parent, _, identifier = raw.partition(":")
        try:
            return int(parent), identifier
        except ValueError:
            return None

    def _write_link_root_record(self, parent: int, identifier: str) -> None:
        meta_id, _ = self.ensure_point(LINK_ROOT_META_IDENT, "Link tree root", DataType.STRING, None)
        self._store.write_value(meta_id, DataType.STRING, f"{parent}:{identifier}")

    def ensure_link_root(self, report: ReconcileReport) -> int:
        """Return the overview root, relocating it when the location changed.

        A relocation deletes the whole previous root subtree in one pass and
        starts the tree afresh at the new location.
        """
        parent = self._link_root_parent()
        identifier = self._link_root_identifier()

        record_current = True
        previous = self._read_link_root_record()
        if previous is not None and previous != (parent, identifier):
            old_parent, old_identifier = previous
            old_root = self._store.find_by_identifier(old_parent, old_identifier)
            if old_root is not None:
                _logger.info("Link tree root moved from %s to %s", previous, (parent, identifier))
                record_current = self._delete(old_root, old_identifier, report)

        root_id = self._store.find_by_identifier(parent, identifier)
        if root_id is None:
            root_id = self._store.create_category(parent, identifier)
            report.created += 1
        self._store.set_name(root_id, self._config.link_root_name)

        if record_current:
            self._write_link_root_record(parent, identifier)
        return root_id

    def reconcile_link_set(self, desired: Iterable[DesiredLink]) -> ReconcileReport:
        """Make the overview tree hold exactly the *desired* managed links.

        Links whose identifier lacks the reserved prefix are never touched.
        """
        report = ReconcileReport()
        try:
            root_id = self.ensure_link_root(report)
        except TessieStoreError as exc:
            report.record_error(ReconcileErrorKind.STORE, self._config.link_root_location, str(exc))
            return report

        root_key = self._link_root_identifier()
        keep: dict[int, set[str]] = {}
        for link in desired:
            try:
                parent_id = self.ensure_category(link.parent, parent=root_id, parent_key=root_key, report=report)
                keep.setdefault(parent_id, set())
                target_id = self.find_point(link.target)
                if target_id is None:
                    _logger.debug("Overview link %s skipped: point %s missing", link.identifier, link.target)
                    continue
                self.ensure_link(parent_id, link.identifier, target_id, link.label, report=report)
                keep[parent_id].add(link.identifier)
            except TessieStoreError as exc:
                report.record_error(ReconcileErrorKind.STORE, link.identifier, str(exc))

        for child_id in self._store.list_children(root_id):
            try:
                child = self._store.get_object(child_id)
                if child.kind != ObjectKind.CATEGORY or not child.identifier.startswith(CATEGORY_PREFIX):
                    continue
                wanted = keep.get(child_id, set())
                for link_id in self._store.list_children(child_id):
                    link = self._store.get_object(link_id)
                    if link.kind != ObjectKind.LINK or not link.identifier.startswith(LINK_SET_PREFIX):
                        continue
                    if link.identifier not in wanted:
                        self._delete(link_id, link.identifier, report)
            except TessieStoreError as exc:
                report.record_error(ReconcileErrorKind.STORE, str(child_id), str(exc))
        return report

    # ------------------------------------------------------------------
    # Explicit cleanup
    # ------------------------------------------------------------------

    def purge_managed(self, *, include_points: bool = False) -> ReconcileReport:
        """Delete every managed category/link this engine created for the instance.

        Points are only removed with *include_points*. Honours the cleanup
        and dry-run flags.
        """
        report = ReconcileReport()
        record = self._read_link_root_record()
        if record is not None:
            root_id = self._store.find_by_identifier(*record)
            if root_id is not None and self._store.get_object(root_id).parent != self._instance_id:
                self._delete(root_id, record[1], report)

        for child_id in self._store.list_children(self._instance_id):
            try:
                child = self._store.get_object(child_id)
                if is_managed_identifier(child.identifier) or (include_points and child.kind == ObjectKind.POINT):
                    self._delete(child_id, child.identifier, report)
            except TessieStoreError as exc:
                report.record_error(ReconcileErrorKind.STORE, str(child_id), str(exc))
        return report
