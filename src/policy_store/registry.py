"""PermissionRegistry — per-owner, per-key permission declarations."""

from __future__ import annotations

import logging
import weakref
from collections.abc import Callable
from typing import Any, TypeVar

from policy_store.permissions import Permission

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


class PermissionRegistry:
    """Maps ``(owner, key)`` pairs to a declared :class:`Permission`.

    An *owner* is either a store instance or a store class.  Class-level
    declarations are inherited by every instance (and subclass) along the
    MRO; an instance-level declaration for the same key wins.

    Owners are held by weak reference, so declarations vanish together with
    the store that made them.
    """

    def __init__(self) -> None:
        self._entries: weakref.WeakKeyDictionary[Any, dict[str, Permission]] = (
            weakref.WeakKeyDictionary()
        )

    def declare(self, owner: Any, key: str, permission: Permission | str) -> None:
        """Record *permission* for *key* on *owner*.  Redeclaration overwrites."""
        parsed = Permission.parse(permission)
        self._entries.setdefault(owner, {})[key] = parsed
        logger.debug("Declared %s permission for %r on %s", parsed, key, _describe(owner))

    def lookup(self, owner: Any, key: str) -> Permission | None:
        """Return the declared permission, or ``None`` if *key* is undeclared."""
        if not isinstance(owner, type):
            own = self._entries.get(owner)
            if own is not None and key in own:
                return own[key]
        for klass in self._lineage(owner):
            declared = self._entries.get(klass)
            if declared is not None and key in declared:
                return declared[key]
        return None

    def declared(self, owner: Any) -> dict[str, Permission]:
        """Return every declaration visible to *owner*, instance-level last."""
        merged: dict[str, Permission] = {}
        for klass in reversed(self._lineage(owner)):
            merged.update(self._entries.get(klass, {}))
        if not isinstance(owner, type):
            merged.update(self._entries.get(owner, {}))
        return merged

    def clear(self) -> None:
        """Drop every declaration."""
        self._entries.clear()

    @staticmethod
    def _lineage(owner: Any) -> tuple[type, ...]:
        klass = owner if isinstance(owner, type) else type(owner)
        return klass.__mro__


def _describe(owner: Any) -> str:
    # Plain string so log records never hold the owner alive
    if isinstance(owner, type):
        return f"class {owner.__name__}"
    return f"{type(owner).__name__} at {id(owner):#x}"


default_registry = PermissionRegistry()


def restrict(**labels: Permission | str) -> Callable[[T], T]:
    """Class decorator declaring class-level permissions on ``default_registry``.

    Example::

        @restrict(secret="none", name="r")
        class UserStore(Store):
            ...
    """

    def decorator(cls: T) -> T:
        for key, permission in labels.items():
            default_registry.declare(cls, key, permission)
        return cls

    return decorator
