"""Custom exceptions for the policy_store package."""

from __future__ import annotations

from typing import Any


class StoreError(Exception):
    """Base exception for all store-related errors."""


class AccessDeniedError(StoreError):
    """Raised when a key's effective permission forbids the operation."""

    def __init__(self, key: str, operation: str) -> None:
        self.key = key
        self.operation = operation
        adjective = "readable" if operation == "read" else "writable"
        super().__init__(f"'{key}' is not {adjective}")


class StoreStructureError(StoreError):
    """Raised when an assignment would break the tree shape (cycle or shared child)."""

    def __init__(self, key: str, detail: str) -> None:
        self.key = key
        super().__init__(f"Cannot place store at '{key}': {detail}")


class InvalidPermissionError(StoreError, ValueError):
    """Raised when a permission label cannot be parsed."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            f"Invalid permission {value!r}; expected one of 'r', 'w', 'rw', 'none'"
        )
