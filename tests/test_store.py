"""Tests for Store."""

import pytest

from policy_store import (
    AccessDeniedError,
    Permission,
    Store,
    StoreStructureError,
    restrict,
)

# ── read / write ─────────────────────────────────────────────


@pytest.mark.parametrize("value", ["text", 0, 42, 3.5, True, False, None])
def test_primitive_round_trip(store, value):
    store.write("key", value)
    assert store.read("key") == value


def test_read_missing_key(store):
    assert store.read("missing") is None


def test_read_empty_path(store):
    assert store.read("") is None


def test_write_empty_path_is_noop(store):
    store.write("", 1)
    assert store.entries() == {}


def test_overwrite(store):
    store.write("k", 1)
    store.write("k", "two")
    assert store.read("k") == "two"


def test_lists_are_not_normalized(store):
    store.write("items", [1, {"a": 2}])
    assert store.read("items") == [1, {"a": 2}]


def test_nested_mapping_is_normalized(store):
    store.write("x", {"a": 1, "b": {"c": 2}})
    assert store.read("x:b:c") == 2
    assert store.read("x:a") == 1
    assert isinstance(store.read("x"), Store)
    assert isinstance(store.read("x:b"), Store)


def test_normalized_children_share_registry(store, registry):
    store.write("x", {"b": {"c": 2}})
    assert store.read("x:b").registry is registry


def test_multi_segment_write_auto_creates(store):
    store.write("a:b:c", "deep")
    assert store.read("a:b:c") == "deep"
    assert store.entries() == {"a": {"b": {"c": "deep"}}}


def test_multi_segment_write_reuses_existing_store(store):
    store.write("a:one", 1)
    store.write("a:two", 2)
    assert store.entries() == {"a": {"one": 1, "two": 2}}


def test_write_through_primitive_is_ignored(store):
    store.write("a", 5)
    store.write("a:b", 6)
    assert store.read("a") == 5
    assert store.entries() == {"a": 5}


def test_read_through_primitive_is_absent(store):
    store.write("a", 5)
    assert store.read("a:b") is None


def test_read_through_missing_key_is_absent(store):
    assert store.read("nope:deeper") is None


def test_write_store_value(store, registry):
    child = Store(registry=registry)
    child.write("inner", 1)
    store.write("child", child)
    assert store.read("child") is child
    assert store.read("child:inner") == 1


def test_write_entries(store):
    store.write_entries({"a": 1, "b:c": 2, "d": {"e": 3}})
    assert store.entries() == {"a": 1, "b": {"c": 2}, "d": {"e": 3}}


def test_write_entries_is_not_atomic(store):
    store.restrict("locked", Permission.READ)
    with pytest.raises(AccessDeniedError):
        store.write_entries({"first": 1, "locked": 2, "last": 3})
    assert store.read("first") == 1
    assert "locked" not in store
    assert "last" not in store


# ── permissions ──────────────────────────────────────────────


def test_none_permission_denies_read_and_write(store):
    store.write("k", 1)
    store.restrict("k", "none")
    with pytest.raises(AccessDeniedError) as exc_info:
        store.read("k")
    assert exc_info.value.key == "k"
    assert exc_info.value.operation == "read"
    with pytest.raises(AccessDeniedError) as exc_info:
        store.write("k", 2)
    assert exc_info.value.operation == "write"


def test_read_permission_denies_write_only(store):
    store.write("k", 1)
    store.restrict("k", "r")
    assert store.read("k") == 1
    with pytest.raises(AccessDeniedError, match="'k' is not writable"):
        store.write("k", 2)


def test_write_permission_denies_read_only(store):
    store.restrict("k", "w")
    store.write("k", 1)
    with pytest.raises(AccessDeniedError, match="'k' is not readable"):
        store.read("k")


def test_default_policy_applies_to_undeclared_keys(store):
    store.write("open", 1)
    store.write("declared", 2)
    store.restrict("declared", "rw")

    store.default_policy = Permission.NONE

    with pytest.raises(AccessDeniedError):
        store.read("open")
    with pytest.raises(AccessDeniedError):
        store.write("new", 1)
    assert store.read("declared") == 2


def test_default_policy_accepts_labels(registry):
    store = Store(registry=registry, default_policy="r")
    assert store.default_policy is Permission.READ
    assert store.allowed_to_read("k")
    assert not store.allowed_to_write("k")


def test_permissions_are_per_instance(registry):
    first, second = Store(registry=registry), Store(registry=registry)
    first.restrict("k", "none")
    assert not first.allowed_to_read("k")
    assert second.allowed_to_read("k")


def test_denied_intermediate_key_blocks_nested_read(store):
    store.write("a:b", 1)
    store.restrict("a", "w")
    with pytest.raises(AccessDeniedError) as exc_info:
        store.read("a:b")
    assert exc_info.value.key == "a"


def test_nested_permission_checked_at_each_hop(store):
    store.write("a:b", 1)
    store.restrict("a:b", "none")
    assert isinstance(store.read("a"), Store)
    with pytest.raises(AccessDeniedError) as exc_info:
        store.read("a:b")
    assert exc_info.value.key == "b"


def test_auto_vivification_skips_permission_check(store):
    store.restrict("a", "r")
    store.write("a:b", 1)
    assert store.read("a:b") == 1


def test_restrict_creates_intermediate_stores(store):
    store.restrict("a:b:c", "none")
    assert isinstance(store.read("a:b"), Store)
    with pytest.raises(AccessDeniedError):
        store.write("a:b:c", 1)


def test_restrict_through_primitive_raises(store):
    store.write("a", 1)
    with pytest.raises(StoreStructureError):
        store.restrict("a:b", "r")


def test_restrict_empty_path_raises(store):
    with pytest.raises(ValueError):
        store.restrict("", "r")


def test_class_level_restrictions(clean_default_registry):
    @restrict(secret="none", name="r")
    class UserStore(Store):
        pass

    user = UserStore(initial={"name": "alice", "secret": "hunter2"})
    assert user.read("name") == "alice"
    with pytest.raises(AccessDeniedError):
        user.write("name", "bob")
    with pytest.raises(AccessDeniedError):
        user.read("secret")
    assert user.entries() == {"name": "alice"}

    user.restrict("name", "rw")
    user.write("name", "bob")
    assert user.read("name") == "bob"
    assert UserStore().allowed_to_write("name") is False


def test_initial_rejects_paths(registry):
    with pytest.raises(ValueError):
        Store(registry=registry, initial={"a:b": 1})


def test_initial_normalizes_mappings(registry):
    store = Store(registry=registry, initial={"cfg": {"debug": True}})
    assert store.read("cfg:debug") is True


# ── producers ────────────────────────────────────────────────


def test_producer_invoked_on_every_read(store):
    calls = []

    def produce():
        calls.append(1)
        return len(calls)

    store.write("f", produce)
    assert store.read("f") == 1
    assert store.read("f") == 2
    assert len(calls) == 2


def test_producer_not_invoked_by_entries(store):
    calls = []

    def produce():
        calls.append(1)
        return "value"

    store.write("f", produce)
    snapshot = store.entries()
    assert snapshot["f"] is produce
    assert calls == []


def test_producer_not_invoked_by_write(store):
    calls = []
    store.write("f", lambda: calls.append(1))
    assert calls == []


def test_read_through_producer_returning_store(store, registry):
    nested = Store(registry=registry)
    nested.write("inner", "ok")
    calls = []

    def produce():
        calls.append(1)
        return nested

    store.write("lazy", produce)
    assert store.read("lazy:inner") == "ok"
    assert calls == [1]


def test_read_through_producer_returning_primitive(store):
    store.write("lazy", lambda: 5)
    assert store.read("lazy:inner") is None


def test_denied_producer_not_invoked(store):
    calls = []
    store.write("f", lambda: calls.append(1))
    store.restrict("f", "w")
    with pytest.raises(AccessDeniedError):
        store.read("f")
    assert calls == []


# ── entries ──────────────────────────────────────────────────


def test_entries_skips_denied_keys(store):
    store.write("allowed", 1)
    store.write("denied", 2)
    store.restrict("denied", "none")
    assert store.entries() == {"allowed": 1}


def test_entries_preserves_insertion_order(store):
    for key in ["z", "a", "m"]:
        store.write(key, key)
    assert list(store.entries()) == ["z", "a", "m"]


def test_entries_nested_filtering(store):
    store.write("outer", {"visible": 1, "hidden": 2})
    store.restrict("outer:hidden", "w")
    assert store.entries() == {"outer": {"visible": 1}}


def test_entries_empty(store):
    assert store.entries() == {}


# ── tree shape ───────────────────────────────────────────────


def test_store_cannot_contain_itself(store):
    with pytest.raises(StoreStructureError):
        store.write("me", store)


def test_store_cannot_contain_ancestor(store):
    store.write("a:b:c", 1)
    inner = store.read("a:b")
    with pytest.raises(StoreStructureError):
        inner.write("loop", store)
    assert "loop" not in inner


def test_store_cannot_be_shared(store):
    store.write("a:leaf", 1)
    child = store.read("a")
    with pytest.raises(StoreStructureError):
        store.write("b", child)


def test_rewriting_same_child_is_allowed(store):
    store.write("a:leaf", 1)
    child = store.read("a")
    store.write("a", child)
    assert store.read("a") is child


def test_replaced_child_can_be_rehomed(store):
    store.write("a:leaf", 1)
    child = store.read("a")
    store.write("a", "replaced")
    store.write("b", child)
    assert store.read("b:leaf") == 1


def test_contains_and_len(store):
    store.write("a", 1)
    store.write("b:c", 2)
    assert "a" in store
    assert "b" in store
    assert "c" not in store
    assert len(store) == 2


def test_repr(store):
    store.write("a", 1)
    assert repr(store) == "Store(keys=['a'], default_policy='rw')"


def test_class_level_restrictions_with_custom_registry(clean_default_registry, registry):
    @restrict(secret="none", name="r")
    class Secretive(Store):
        pass

    secretive = Secretive(registry=registry, initial={"secret": "x", "name": "n"})
    with pytest.raises(AccessDeniedError):
        secretive.read("secret")
    with pytest.raises(AccessDeniedError):
        secretive.write("name", "other")
    assert secretive.entries() == {"name": "n"}

    secretive.restrict("secret", "rw")
    assert secretive.read("secret") == "x"
