"""policy_store — A hierarchical, permission-aware key-value store.

Slots are addressed by colon paths (``"a:b:c"``).  Every hop is gated by the
key's declared permission, falling back to the store's default policy.
Plain mappings are normalized into nested stores on write; callables are
resolved lazily on read.
"""

from policy_store.exceptions import (
    AccessDeniedError,
    InvalidPermissionError,
    StoreError,
    StoreStructureError,
)
from policy_store.permissions import Permission
from policy_store.registry import PermissionRegistry, default_registry, restrict
from policy_store.store import SEPARATOR, Store

__all__ = [
    "SEPARATOR",
    "AccessDeniedError",
    "InvalidPermissionError",
    "Permission",
    "PermissionRegistry",
    "Store",
    "StoreError",
    "StoreStructureError",
    "default_registry",
    "restrict",
]
