# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Store factory for building store trees from declarative definitions."""

from __future__ import annotations

import logging

from policy_store.exceptions import StoreError
from policy_store.registry import PermissionRegistry
from policy_store.store import SEPARATOR, Store

from .schema import StoreDefinitionSchema

logger = logging.getLogger(__name__)


class StoreFactoryError(Exception):
    """Raised when a store definition cannot be built."""

    pass


class StoreFactory:
    """Builds :class:`Store` trees from :class:`StoreDefinitionSchema`.

    Each subtree is built in three steps so that seeding is never blocked by
    the policies being declared:

    1. ``entries`` and ``children`` are written while the store is still
       read-write.
    2. ``permissions`` are declared through :meth:`Store.restrict`.
    3. ``default_policy`` is applied.

    Example:
        factory = StoreFactory()
        store = factory.build(
            StoreDefinitionSchema(
                entries={"name": "demo", "token": "s3cret"},
                permissions={"name": "r", "token": "none"},
            )
        )
    """

    def __init__(self, registry: PermissionRegistry | None = None) -> None:
        """Initialize factory.

        Args:
            registry: Registry the built stores declare permissions on.
                      Defaults to the module-wide registry.
        """
        self._registry = registry

    def build(self, definition: StoreDefinitionSchema) -> Store:
        """Build a store tree from *definition*.

        Raises:
            StoreFactoryError: If the definition is inconsistent
        """
        try:
            return self._build(definition, "")
        except StoreFactoryError:
            raise
        except StoreError as e:
            raise StoreFactoryError(f"Failed to build store: {e}") from e

    def _build(self, definition: StoreDefinitionSchema, location: str) -> Store:
        store = Store(registry=self._registry)

        for key, value in definition.entries.items():
            store.write(key, value)

        for key, child_definition in definition.children.items():
            child_location = f"{location}{SEPARATOR}{key}" if location else key
            if SEPARATOR in key:
                raise StoreFactoryError(
                    f"Child store name '{child_location}' must not contain '{SEPARATOR}'"
                )
            if key in store:
                raise StoreFactoryError(
                    f"Child store '{child_location}' collides with an entry of the same name"
                )
            store.write(key, self._build(child_definition, child_location))

        for path, permission in definition.permissions.items():
            store.restrict(path, permission)

        store.default_policy = definition.default_policy
        logger.debug(
            "Built store %r with %d keys and %d declarations",
            location or "<root>",
            len(store),
            len(definition.permissions),
        )
        return store
