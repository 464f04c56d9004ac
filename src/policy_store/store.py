"""Store — a permission-aware tree of named slots addressed by colon paths."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from policy_store.exceptions import AccessDeniedError, StoreStructureError
from policy_store.permissions import Permission
from policy_store.registry import PermissionRegistry, default_registry

logger = logging.getLogger(__name__)

SEPARATOR = ":"


def _is_producer(value: Any) -> bool:
    return callable(value) and not isinstance(value, Store)


class Store:
    """A node in a hierarchical key-value tree.

    Each slot holds a primitive, a list, a nested ``Store`` or a *producer*
    (a zero-argument callable evaluated on every terminal read).  Paths such
    as ``"a:b:c"`` are routed segment by segment through nested stores, and
    every hop is gated by the key's permission: the declaration found in the
    :class:`PermissionRegistry` or, failing that, :attr:`default_policy`.

    Plain mappings handed to :meth:`write` are normalized into nested stores.
    A store exclusively owns its children; assigning a store that already has
    a parent, or one that would contain itself, raises
    :class:`StoreStructureError`.

    Parameters:
        registry:       Where permission declarations are looked up.
                        Defaults to the module-wide ``default_registry``.
        default_policy: Permission for undeclared keys.
        initial:        Top-level slots to seed without permission checks,
                        so keys declared read-only can still start with a
                        value.  Mappings are normalized as in :meth:`write`.
    """

    def __init__(
        self,
        registry: PermissionRegistry | None = None,
        default_policy: Permission | str = Permission.READ_WRITE,
        initial: Mapping[str, Any] | None = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry
        self._data: dict[str, Any] = {}
        self._parent: Store | None = None
        self.default_policy = default_policy
        for key, value in (initial or {}).items():
            if SEPARATOR in key:
                raise ValueError(f"Initial key {key!r} must not contain '{SEPARATOR}'")
            self._place(key, self.convert_to_store(value))

    @property
    def default_policy(self) -> Permission:
        return self._default_policy

    @default_policy.setter
    def default_policy(self, value: Permission | str) -> None:
        self._default_policy = Permission.parse(value)

    @property
    def registry(self) -> PermissionRegistry:
        return self._registry

    # ── permission checks ────────────────────────────────────

    def _permission_for(self, key: str) -> Permission:
        declared = self._registry.lookup(self, key)
        if declared is None and self._registry is not default_registry:
            # @restrict always declares on default_registry
            declared = default_registry.lookup(type(self), key)
        return declared if declared is not None else self._default_policy

    def allowed_to_read(self, key: str) -> bool:
        return self._permission_for(key).can_read

    def allowed_to_write(self, key: str) -> bool:
        return self._permission_for(key).can_write

    # ── read ─────────────────────────────────────────────────

    def read(self, path: str) -> Any:
        """Return the value at *path*, or ``None`` if nothing resolves there.

        A producer found at the final segment is invoked and its result
        returned.  Stepping through a non-store value mid-path yields
        ``None`` rather than an error.

        Raises:
            AccessDeniedError: If any segment along the path is not readable.
        """
        if not path:
            return None
        keys = path.split(SEPARATOR)
        key = keys[0]
        if not self.allowed_to_read(key):
            logger.debug("Read of %r denied", key)
            raise AccessDeniedError(key, "read")

        value = self._data.get(key)
        if _is_producer(value):
            value = value()
        if len(keys) == 1:
            return value
        if isinstance(value, Store):
            return value.read(SEPARATOR.join(keys[1:]))
        return None

    # ── write ────────────────────────────────────────────────

    def write(self, path: str, value: Any) -> None:
        """Store *value* at *path*, creating intermediate stores as needed.

        A write whose path runs through an existing non-store value is
        silently ignored.

        Raises:
            AccessDeniedError: If the final key is not writable.
            StoreStructureError: If *value* is a store that cannot be owned here.
        """
        if not path:
            return
        keys = path.split(SEPARATOR)
        key = keys[0]
        if len(keys) == 1:
            self.set_key_value(key, self.convert_to_store(value))
            return

        if key not in self._data:
            logger.debug("Auto-creating store at %r", key)
            self._place(key, self._spawn())
        child = self._data[key]
        if isinstance(child, Store):
            child.write(SEPARATOR.join(keys[1:]), value)

    def set_key_value(self, key: str, value: Any) -> None:
        """Assign *value* under *key*, replacing whatever was there."""
        if not self.allowed_to_write(key):
            logger.debug("Write of %r denied", key)
            raise AccessDeniedError(key, "write")
        self._place(key, value)

    def convert_to_store(self, value: Any) -> Any:
        """Normalize a plain mapping into a nested store; pass anything else through."""
        if not isinstance(value, Mapping):
            return value
        store = self._spawn()
        for key, data in value.items():
            store.write(str(key), data)
        return store

    def write_entries(self, entries: Mapping[str, Any]) -> None:
        """Write every item of *entries*.  Not atomic: earlier writes stay on failure."""
        for key, value in entries.items():
            self.write(key, value)

    # ── enumeration ──────────────────────────────────────────

    def entries(self) -> dict[str, Any]:
        """Return readable own keys as a nested dict.

        Nested stores are expanded recursively; producers are returned
        uninvoked.
        """
        result: dict[str, Any] = {}
        for key, value in self._data.items():
            if not self.allowed_to_read(key):
                continue
            result[key] = value.entries() if isinstance(value, Store) else value
        return result

    # ── declaration ──────────────────────────────────────────

    def restrict(self, path: str, permission: Permission | str) -> None:
        """Declare *permission* for the key at *path* on the store that owns it.

        Missing intermediate stores are created.  No permission checks are
        made, so a slot can be seeded with :meth:`write` first and locked
        down afterwards.

        Raises:
            StoreStructureError: If the path runs through a non-store value.
        """
        if not path:
            raise ValueError("Cannot restrict an empty path")
        keys = path.split(SEPARATOR)
        owner = self
        for key in keys[:-1]:
            if key not in owner._data:
                owner._place(key, owner._spawn())
            child = owner._data[key]
            if not isinstance(child, Store):
                raise StoreStructureError(key, "path runs through a non-store value")
            owner = child
        owner._registry.declare(owner, keys[-1], permission)

    # ── tree shape ───────────────────────────────────────────

    def _spawn(self) -> Store:
        return Store(registry=self._registry)

    def _place(self, key: str, value: Any) -> None:
        previous = self._data.get(key)
        if isinstance(value, Store):
            self._check_adoptable(key, value)
            value._parent = self
        if isinstance(previous, Store) and previous is not value:
            previous._parent = None
        self._data[key] = value

    def _check_adoptable(self, key: str, child: Store) -> None:
        node: Store | None = self
        while node is not None:
            if node is child:
                raise StoreStructureError(key, "a store cannot contain itself")
            node = node._parent
        if child._parent is None:
            return
        if child._parent is not self or self._data.get(key) is not child:
            raise StoreStructureError(key, "store is already owned by another slot")

    # ── dunder helpers ───────────────────────────────────────

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={list(self._data)!r}, default_policy='{self._default_policy.value}')"
