"""Reconciliation engine.

Resolves signals into typed points and converges the external object tree
to them.
"""

from pytessie.reconcile.identifiers import category_identifier, link_identifier, make_identifier
from pytessie.reconcile.overview import OVERVIEW_ENTRIES, OverviewEntry, desired_overview_links
from pytessie.reconcile.reconciler import DesiredLink, PointReconciler, coerce_value, link_set_identifier
from pytessie.reconcile.report import ReconcileError, ReconcileErrorKind, ReconcileReport
from pytessie.reconcile.resolver import resolve

__all__ = [
    "DesiredLink",
    "OVERVIEW_ENTRIES",
    "OverviewEntry",
    "PointReconciler",
    "ReconcileError",
    "ReconcileErrorKind",
    "ReconcileReport",
    "category_identifier",
    "coerce_value",
    "desired_overview_links",
    "link_identifier",
    "link_set_identifier",
    "make_identifier",
    "resolve",
]
