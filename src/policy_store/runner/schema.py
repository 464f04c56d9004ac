# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Data transfer objects for runner input/output.

These Pydantic models define the JSON contract of
``python -m policy_store.runner``.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, Field

from policy_store.permissions import Permission

# Accepts short labels and long names ("read-write") alike
PermissionLabel = Annotated[Permission, BeforeValidator(Permission.parse)]


class StoreDefinitionSchema(BaseModel):
    """Declarative description of a store subtree.

    Attributes:
        default_policy: Permission for keys with no declaration
        permissions: Path -> permission declarations, applied after seeding
        entries: Initial values, written in order (mappings become stores)
        children: Nested store definitions, each with its own defaults
    """

    default_policy: PermissionLabel = Permission.READ_WRITE
    permissions: dict[str, PermissionLabel] = Field(default_factory=dict)
    entries: dict[str, Any] = Field(default_factory=dict)
    children: dict[str, StoreDefinitionSchema] = Field(default_factory=dict)


class OperationSchema(BaseModel):
    """Single operation to apply to the built store.

    Attributes:
        op: Operation name ("read", "write", "write_entries" or "entries")
        path: Colon path for read/write
        value: Value to write
        entries: Mapping for write_entries
    """

    op: Literal["read", "write", "write_entries", "entries"]
    path: str = ""
    value: Any = None
    entries: dict[str, Any] = Field(default_factory=dict)


class RunnerInput(BaseModel):
    """Complete input read from stdin.

    Attributes:
        store: Definition of the store to build
        operations: Operations applied in order
        stop_on_error: Abort remaining operations after the first failure
    """

    store: StoreDefinitionSchema = Field(default_factory=StoreDefinitionSchema)
    operations: list[OperationSchema] = Field(default_factory=list)
    stop_on_error: bool = True


class OperationResultSchema(BaseModel):
    """Outcome of a single operation.

    Attributes:
        op: Operation name
        path: Path the operation addressed
        ok: Whether the operation completed
        value: Read result or entries snapshot (stores reported as entries)
        error: Error message (on failure)
        error_type: Error class name (on failure)
    """

    op: str
    path: str = ""
    ok: bool = True
    value: Any = None
    error: str = ""
    error_type: str = ""


class RunnerOutput(BaseModel):
    """Complete output written to stdout.

    The runner always outputs valid JSON matching this schema,
    even on errors.

    Attributes:
        success: Whether every operation completed
        results: Per-operation outcomes, in order
        snapshot: Readable entries of the root store after the run
        error: Error message (on failure)
        error_type: Error class name (on failure)
    """

    success: bool
    results: list[OperationResultSchema] = Field(default_factory=list)
    snapshot: dict[str, Any] = Field(default_factory=dict)
    error: str = ""
    error_type: str = ""
