"""External object tree interface and an in-memory implementation.

The reconciler only ever talks to the :class:`ObjectStore` protocol. Hosts
plug their own object tree in; :class:`MemoryObjectStore` is the reference
implementation used by tests and the developer scripts.
"""

from __future__ import annotations

import enum
import itertools
import threading
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field

from pytessie.exceptions import TessieStoreError
from pytessie.models.point import DataType, Profile


class ObjectKind(enum.StrEnum):
    ROOT = "root"
    INSTANCE = "instance"
    CATEGORY = "category"
    POINT = "point"
    LINK = "link"


class TreeObject(BaseModel):
    """Snapshot of one node of the object tree."""

    model_config = ConfigDict(extra="forbid")

    id: int
    kind: ObjectKind
    parent: int | None
    identifier: str = ""
    name: str = ""
    data_type: DataType | None = None
    profile: str | None = None
    writable: bool = False
    value: Any = None
    target: int | None = None
    children: list[int] = Field(default_factory=list)


class ObjectStore(Protocol):
    """Primitive operations of the host object tree.

    Every call is individually idempotent or trivially safe to repeat.
    Implementations raise :class:`TessieStoreError` to reject an operation.
    """

    @property
    def root_id(self) -> int: ...

    def find_by_identifier(self, parent: int, identifier: str) -> int | None: ...

    def create_category(self, parent: int, identifier: str) -> int: ...

    def create_point(self, parent: int, identifier: str, data_type: DataType) -> int: ...

    def create_link(self, parent: int, identifier: str) -> int: ...

    def set_name(self, object_id: int, name: str) -> None: ...

    def set_target(self, link_id: int, target_id: int) -> None: ...

    def set_profile(self, point_id: int, profile_name: str | None) -> None: ...

    def set_writable(self, point_id: int, writable: bool) -> None: ...

    def write_value(self, point_id: int, data_type: DataType, value: Any) -> None: ...

    def delete_object(self, object_id: int) -> None: ...

    def list_children(self, parent: int) -> list[int]: ...

    def get_object(self, object_id: int) -> TreeObject: ...

    def ensure_profile(self, profile: Profile) -> None: ...


def _value_matches(data_type: DataType, value: Any) -> bool:
    if data_type == DataType.BOOLEAN:
        return isinstance(value, bool)
    if data_type == DataType.INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    if data_type == DataType.FLOAT:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, str)


class MemoryObjectStore:
    """Thread-safe in-memory object tree."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._ids = itertools.count(1)
        self._objects: dict[int, TreeObject] = {0: TreeObject(id=0, kind=ObjectKind.ROOT, parent=None, name="Root")}
        self.profiles: dict[str, Profile] = {}

    @property
    def root_id(self) -> int:
        return 0

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _get(self, object_id: int) -> TreeObject:
        obj = self._objects.get(object_id)
        if obj is None:
            raise TessieStoreError(f"Object {object_id} does not exist")
        return obj

    def _get_kind(self, object_id: int, *kinds: ObjectKind) -> TreeObject:
        obj = self._get(object_id)
        if obj.kind not in kinds:
            raise TessieStoreError(
                f"Object {object_id} is a {obj.kind}, expected {'/'.join(kinds)}",
                identifier=obj.identifier,
            )
        return obj

    def _create(self, parent: int, identifier: str, kind: ObjectKind, **fields: Any) -> int:
        with self._lock:
            parent_obj = self._get(parent)
            if parent_obj.kind in (ObjectKind.POINT, ObjectKind.LINK):
                raise TessieStoreError(f"Object {parent} cannot have children", identifier=identifier)
            existing = self.find_by_identifier(parent, identifier) if identifier else None
            if existing is not None:
                if self._objects[existing].kind != kind:
                    raise TessieStoreError(
                        f"Identifier {identifier!r} already used by a {self._objects[existing].kind}",
                        identifier=identifier,
                    )
                return existing
            object_id = next(self._ids)
            self._objects[object_id] = TreeObject(
                id=object_id,
                kind=kind,
                parent=parent,
                identifier=identifier,
                name=identifier,
                **fields,
            )
            parent_obj.children.append(object_id)
            return object_id

    # ------------------------------------------------------------------
    # ObjectStore protocol
    # ------------------------------------------------------------------

    def create_instance(self, name: str, identifier: str = "") -> int:
        """Create a vehicle instance node under the root."""
        object_id = self._create(self.root_id, identifier, ObjectKind.INSTANCE)
        self.set_name(object_id, name)
        return object_id

    def find_by_identifier(self, parent: int, identifier: str) -> int | None:
        with self._lock:
            parent_obj = self._objects.get(parent)
            if parent_obj is None:
                return None
            for child_id in parent_obj.children:
                if self._objects[child_id].identifier == identifier:
                    return child_id
            return None

    def create_category(self, parent: int, identifier: str) -> int:
        return self._create(parent, identifier, ObjectKind.CATEGORY)

    def create_point(self, parent: int, identifier: str, data_type: DataType) -> int:
        with self._lock:
            object_id = self._create(parent, identifier, ObjectKind.POINT, data_type=data_type)
            if self._objects[object_id].data_type != data_type:
                raise TessieStoreError(
                    f"Point {identifier!r} already exists as {self._objects[object_id].data_type}",
                    identifier=identifier,
                )
            return object_id

    def create_link(self, parent: int, identifier: str) -> int:
        return self._create(parent, identifier, ObjectKind.LINK)

    def set_name(self, object_id: int, name: str) -> None:
        with self._lock:
            self._get(object_id).name = name

    def set_target(self, link_id: int, target_id: int) -> None:
        with self._lock:
            link = self._get_kind(link_id, ObjectKind.LINK)
            self._get(target_id)
            link.target = target_id

    def set_profile(self, point_id: int, profile_name: str | None) -> None:
        with self._lock:
            point = self._get_kind(point_id, ObjectKind.POINT)
            if profile_name is not None and profile_name not in self.profiles:
                raise TessieStoreError(f"Unknown profile {profile_name!r}", identifier=point.identifier)
            point.profile = profile_name

    def set_writable(self, point_id: int, writable: bool) -> None:
        with self._lock:
            self._get_kind(point_id, ObjectKind.POINT).writable = writable

    def write_value(self, point_id: int, data_type: DataType, value: Any) -> None:
        with self._lock:
            point = self._get_kind(point_id, ObjectKind.POINT)
            if point.data_type != data_type or not _value_matches(data_type, value):
                raise TessieStoreError(
                    f"Cannot write {value!r} as {data_type} into {point.data_type} point",
                    identifier=point.identifier,
                )
            point.value = float(value) if data_type == DataType.FLOAT else value

    def delete_object(self, object_id: int) -> None:
        with self._lock:
            obj = self._objects.get(object_id)
            if obj is None:
                return
            if obj.kind == ObjectKind.ROOT:
                raise TessieStoreError("The root object cannot be deleted")
            for child_id in list(obj.children):
                self.delete_object(child_id)
            if obj.parent is not None and obj.parent in self._objects:
                self._objects[obj.parent].children.remove(object_id)
            del self._objects[object_id]

    def list_children(self, parent: int) -> list[int]:
        with self._lock:
            return list(self._get(parent).children)

    def get_object(self, object_id: int) -> TreeObject:
        with self._lock:
            return self._get(object_id).model_copy(deep=True)

    def ensure_profile(self, profile: Profile) -> None:
        with self._lock:
            self.profiles[profile.name] = profile

    # ------------------------------------------------------------------
    # Inspection helpers
    # ------------------------------------------------------------------

    def exists(self, object_id: int) -> bool:
        return object_id in self._objects

    def descendants(self, parent: int, kind: ObjectKind | None = None) -> list[TreeObject]:
        """All objects below *parent* (depth first), optionally filtered by kind."""
        found: list[TreeObject] = []
        with self._lock:
            stack = list(reversed(self._get(parent).children))
            while stack:
                obj = self._objects[stack.pop()]
                if kind is None or obj.kind == kind:
                    found.append(obj.model_copy(deep=True))
                stack.extend(reversed(obj.children))
        return found

    def render(self, parent: int | None = None, *, indent: str = "  ") -> str:
        """Human-readable outline of the tree below *parent*."""
        lines: list[str] = []

        def rec(object_id: int, depth: int) -> None:
            obj = self._objects[object_id]
            detail = ""
            if obj.kind == ObjectKind.POINT:
                detail = f" = {obj.value!r} ({obj.data_type}{', ' + obj.profile if obj.profile else ''})"
            elif obj.kind == ObjectKind.LINK and obj.target is not None:
                target = self._objects.get(obj.target)
                detail = f" -> {target.name if target else obj.target}"
            lines.append(f"{indent * depth}[{obj.kind}] {obj.name}{detail}")
            for child_id in obj.children:
                rec(child_id, depth + 1)

        with self._lock:
            rec(self.root_id if parent is None else parent, 0)
        return "\n".join(lines)
