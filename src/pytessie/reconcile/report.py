"""Result values returned by reconciliation passes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class ReconcileErrorKind(enum.StrEnum):
    STORE = "store"
    COERCION = "coercion"


@dataclass(frozen=True, slots=True)
class ReconcileError:
    kind: ReconcileErrorKind
    key: str
    message: str


@dataclass(slots=True)
class ReconcileReport:
    """Counters and per-object failures of one reconciliation pass."""

    created: int = 0
    updated: int = 0
    deleted: list[str] = field(default_factory=list)
    would_delete: list[str] = field(default_factory=list)
    type_mismatches: list[str] = field(default_factory=list)
    errors: list[ReconcileError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def record_error(self, kind: ReconcileErrorKind, key: str, message: str) -> None:
        self.errors.append(ReconcileError(kind=kind, key=key, message=message))

    def merge(self, other: ReconcileReport) -> ReconcileReport:
        self.created += other.created
        self.updated += other.updated
        self.deleted.extend(other.deleted)
        self.would_delete.extend(other.would_delete)
        self.type_mismatches.extend(other.type_mismatches)
        self.errors.extend(other.errors)
        return self
