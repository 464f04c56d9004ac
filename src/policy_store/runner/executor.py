# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Executor for applying operations to a store.

Orchestrates the full execution flow:
1. Build the store from its definition
2. Apply each operation in order
3. Return structured per-operation results and a final snapshot
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from policy_store.exceptions import StoreError
from policy_store.registry import PermissionRegistry
from policy_store.store import Store

from .factory import StoreFactory, StoreFactoryError
from .schema import (
    OperationResultSchema,
    OperationSchema,
    RunnerInput,
    RunnerOutput,
)

logger = logging.getLogger(__name__)


class ExecutionError(Exception):
    """Raised when an operation is malformed."""

    pass


class Executor:
    """Applies runner operations to a store.

    Responsibilities:
    - Build the store from its definition (on a private registry)
    - Run read / write / write_entries / entries operations in order
    - Translate results and failures to the output schema

    Pass a store to the constructor to skip building one from the
    definition.  Useful for testing.

    Example:
        executor = Executor()
        output = executor.execute(input_data)
    """

    def __init__(self, store: Store | None = None) -> None:
        """Initialize executor with optional injected store.

        Args:
            store: Optional store to use instead of building from the
                   definition.
        """
        self._injected_store = store

    def execute(self, input_data: RunnerInput) -> RunnerOutput:
        """Build the store and apply every operation.

        Args:
            input_data: Complete runner input

        Returns:
            RunnerOutput with per-operation results and the final snapshot

        Note:
            This method catches all exceptions and returns them as
            RunnerOutput errors, ensuring valid JSON is always returned.
        """
        try:
            return self._execute_internal(input_data)
        except StoreFactoryError as e:
            return RunnerOutput(
                success=False,
                error=str(e),
                error_type="StoreFactoryError",
            )
        except Exception as e:
            return RunnerOutput(
                success=False,
                error=str(e),
                error_type=type(e).__name__,
            )

    def _execute_internal(self, input_data: RunnerInput) -> RunnerOutput:
        """Internal execution logic.

        Separated from execute() to allow exception propagation
        for testing while execute() catches all errors.
        """
        if self._injected_store is not None:
            store = self._injected_store
        else:
            store = StoreFactory(PermissionRegistry()).build(input_data.store)

        results: list[OperationResultSchema] = []
        for operation in input_data.operations:
            result = self._apply(store, operation)
            results.append(result)
            if not result.ok and input_data.stop_on_error:
                break

        failed = next((r for r in results if not r.ok), None)
        return RunnerOutput(
            success=failed is None,
            results=results,
            snapshot=self._to_json(store),
            error=failed.error if failed else "",
            error_type=failed.error_type if failed else "",
        )

    def _apply(self, store: Store, operation: OperationSchema) -> OperationResultSchema:
        """Run a single operation, capturing store and validation errors."""
        logger.debug("Applying %s %r", operation.op, operation.path)
        try:
            value = self._dispatch(store, operation)
        except (StoreError, ExecutionError) as e:
            logger.warning("Operation %s %r failed: %s", operation.op, operation.path, e)
            return OperationResultSchema(
                op=operation.op,
                path=operation.path,
                ok=False,
                error=str(e),
                error_type=type(e).__name__,
            )
        return OperationResultSchema(op=operation.op, path=operation.path, value=value)

    def _dispatch(self, store: Store, operation: OperationSchema) -> Any:
        if operation.op == "read":
            return self._to_json(store.read(operation.path))

        if operation.op == "write":
            if not operation.path:
                raise ExecutionError("'write' operation requires a path")
            store.write(operation.path, operation.value)
            return None

        if operation.op == "write_entries":
            store.write_entries(operation.entries)
            return None

        # "entries"
        target = store.read(operation.path) if operation.path else store
        if not isinstance(target, Store):
            raise ExecutionError(f"'{operation.path}' does not resolve to a store")
        return self._to_json(target)

    def _to_json(self, value: Any, active: frozenset[int] = frozenset()) -> Any:
        """Convert store results into JSON-serializable data.

        Stores become their entries; producers surfaced by ``entries()`` are
        reported by name since they are never invoked there.  *active* holds
        the ids of stores being expanded on the current branch.

        Raises:
            ExecutionError: If a store is reachable from itself through a list
        """
        if isinstance(value, Store):
            if id(value) in active:
                raise ExecutionError("Store contains itself through a list value")
            return self._to_json(value.entries(), active | {id(value)})
        if isinstance(value, Mapping):
            return {str(k): self._to_json(v, active) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._to_json(v, active) for v in value]
        if callable(value):
            return f"<producer {getattr(value, '__name__', type(value).__name__)}>"
        return value
