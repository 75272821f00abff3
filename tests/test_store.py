from __future__ import annotations

import pytest

from pytessie.exceptions import TessieStoreError
from pytessie.models.point import DataType
from pytessie.reconcile.profiles import PERCENT
from pytessie.tree.store import MemoryObjectStore, ObjectKind


def test_creates_are_idempotent() -> None:
    store = MemoryObjectStore()
    instance = store.create_instance("Car", identifier="VIN1")

    first = store.create_category(instance, "CAT_a")
    assert store.create_category(instance, "CAT_a") == first
    assert store.find_by_identifier(instance, "CAT_a") == first
    assert store.list_children(instance) == [first]


def test_identifier_clash_across_kinds_is_rejected() -> None:
    store = MemoryObjectStore()
    instance = store.create_instance("Car")
    store.create_category(instance, "same")

    with pytest.raises(TessieStoreError):
        store.create_link(instance, "same")


def test_point_type_is_fixed_at_creation() -> None:
    store = MemoryObjectStore()
    instance = store.create_instance("Car")
    point = store.create_point(instance, "p", DataType.INTEGER)

    with pytest.raises(TessieStoreError):
        store.create_point(instance, "p", DataType.STRING)
    with pytest.raises(TessieStoreError):
        store.write_value(point, DataType.INTEGER, "text")

    store.write_value(point, DataType.INTEGER, 5)
    assert store.get_object(point).value == 5


def test_float_points_store_floats() -> None:
    store = MemoryObjectStore()
    point = store.create_point(store.create_instance("Car"), "p", DataType.FLOAT)
    store.write_value(point, DataType.FLOAT, 3)
    assert store.get_object(point).value == 3.0
    assert isinstance(store.get_object(point).value, float)


def test_points_and_links_cannot_have_children() -> None:
    store = MemoryObjectStore()
    instance = store.create_instance("Car")
    point = store.create_point(instance, "p", DataType.BOOLEAN)

    with pytest.raises(TessieStoreError):
        store.create_category(point, "child")


def test_profiles_must_be_registered() -> None:
    store = MemoryObjectStore()
    point = store.create_point(store.create_instance("Car"), "p", DataType.FLOAT)

    with pytest.raises(TessieStoreError):
        store.set_profile(point, PERCENT.name)

    store.ensure_profile(PERCENT)
    store.set_profile(point, PERCENT.name)
    assert store.get_object(point).profile == PERCENT.name


def test_delete_is_recursive_and_root_is_protected() -> None:
    store = MemoryObjectStore()
    instance = store.create_instance("Car")
    category = store.create_category(instance, "CAT_a")
    link = store.create_link(category, "LNK_a")

    store.delete_object(category)
    assert not store.exists(category)
    assert not store.exists(link)
    assert store.list_children(instance) == []

    store.delete_object(category)
    with pytest.raises(TessieStoreError):
        store.delete_object(store.root_id)


def test_get_object_returns_a_snapshot() -> None:
    store = MemoryObjectStore()
    instance = store.create_instance("Car")
    snapshot = store.get_object(instance)
    snapshot.name = "changed"
    assert store.get_object(instance).name == "Car"


def test_descendants_and_render() -> None:
    store = MemoryObjectStore()
    instance = store.create_instance("Car")
    category = store.create_category(instance, "CAT_a")
    point = store.create_point(instance, "p", DataType.BOOLEAN)
    link = store.create_link(category, "LNK_a")
    store.set_target(link, point)

    assert [obj.id for obj in store.descendants(instance, ObjectKind.LINK)] == [link]
    assert "[link] LNK_a -> p" in store.render()
