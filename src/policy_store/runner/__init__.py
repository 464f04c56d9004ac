# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Runner submodule for driving a store from JSON.

This module builds a store from a declarative definition and applies a
sequence of read / write operations to it.

Usage:
    python -m policy_store.runner < input.json > output.json

Exports:
    Executor: Applies operations and collects results
    StoreFactory: Builds stores from definitions
    RunnerInput: Input schema
    RunnerOutput: Output schema
"""

from .executor import ExecutionError, Executor
from .factory import StoreFactory, StoreFactoryError
from .schema import (
    OperationResultSchema,
    OperationSchema,
    RunnerInput,
    RunnerOutput,
    StoreDefinitionSchema,
)

__all__ = [
    "ExecutionError",
    "Executor",
    "OperationResultSchema",
    "OperationSchema",
    "RunnerInput",
    "RunnerOutput",
    "StoreDefinitionSchema",
    "StoreFactory",
    "StoreFactoryError",
]
