"""Permission — the access level attached to a store key."""

from __future__ import annotations

from enum import Enum

from policy_store.exceptions import InvalidPermissionError

_ALIASES = {
    "read": "r",
    "write": "w",
    "read-write": "rw",
    "read_write": "rw",
    "readwrite": "rw",
}


class Permission(str, Enum):
    """Read/write capability of a single key.

    Values are the short labels used in declarations (``"r"``, ``"w"``,
    ``"rw"``, ``"none"``), so a ``Permission`` can be dropped straight into
    JSON configuration.
    """

    READ = "r"
    WRITE = "w"
    READ_WRITE = "rw"
    NONE = "none"

    @property
    def can_read(self) -> bool:
        return self in (Permission.READ, Permission.READ_WRITE)

    @property
    def can_write(self) -> bool:
        return self in (Permission.WRITE, Permission.READ_WRITE)

    @classmethod
    def parse(cls, value: Permission | str) -> Permission:
        """Coerce *value* into a ``Permission``.

        Accepts a member, a short label, or a long name such as
        ``"read-write"`` (case-insensitive).

        Raises:
            InvalidPermissionError: If *value* names no permission.
        """
        if isinstance(value, Permission):
            return value
        if not isinstance(value, str):
            raise InvalidPermissionError(value)
        label = value.strip().lower()
        label = _ALIASES.get(label, label)
        try:
            return cls(label)
        except ValueError:
            raise InvalidPermissionError(value) from None

    def __str__(self) -> str:
        return self.value
