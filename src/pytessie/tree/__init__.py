"""Object tree layer.

The host's object tree is external; this package defines the primitive
operations the reconciler needs and ships an in-memory implementation.
"""

from pytessie.tree.store import MemoryObjectStore, ObjectKind, ObjectStore, TreeObject

__all__ = ["MemoryObjectStore", "ObjectKind", "ObjectStore", "TreeObject"]
