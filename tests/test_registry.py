"""Tests for the instance registry and query resolution."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from playerhub.api import Api
from playerhub.page import Element, PageContext
from playerhub.registry import CreateRequest, InstanceRegistry, Unresolvable


def _player(registry: InstanceRegistry, element_id: str) -> Api:
    return registry.register(Api(Element(element_id), registry=registry))


class TestRegister:
    def test_ids_increase_in_creation_order(self):
        registry = InstanceRegistry()
        first = _player(registry, "a")
        second = _player(registry, "b")
        assert first.unique_id >= 1
        assert second.unique_id == first.unique_id + 1
        assert list(registry) == [first, second]

    def test_ids_not_reused_after_clear(self):
        registry = InstanceRegistry()
        first = _player(registry, "a")
        registry.clear()
        assert len(registry) == 0
        assert _player(registry, "b").unique_id > first.unique_id

    def test_ids_shared_across_registries(self):
        first = _player(InstanceRegistry(), "a")
        second = _player(InstanceRegistry(), "a")
        assert second.unique_id > first.unique_id

    def test_register_twice_rejected(self):
        registry = InstanceRegistry()
        player = _player(registry, "a")
        with pytest.raises(ValueError, match="already has unique id"):
            registry.register(player)

    def test_unregister_idempotent(self):
        registry = InstanceRegistry()
        player = _player(registry, "a")
        assert registry.unregister(player.unique_id) is True
        assert registry.unregister(player.unique_id) is False
        assert player not in registry

    def test_lookup(self):
        registry = InstanceRegistry()
        player = _player(registry, "a")
        assert registry.get(player.unique_id) is player
        assert registry.get(99) is None
        assert registry.by_element_id("a") is player
        assert registry.by_element_id("b") is None

    def test_iteration_is_a_snapshot(self):
        registry = InstanceRegistry()
        for element_id in ("a", "b", "c"):
            _player(registry, element_id)
        for player in registry:
            registry.unregister(player.unique_id)
        assert len(registry) == 0


class TestRegistryProperties:
    @given(st.lists(st.tuples(st.booleans(), st.integers(min_value=0, max_value=20)), max_size=40))
    def test_order_and_unique_ids(self, operations):
        registry = InstanceRegistry()
        expected: list[Api] = []
        issued: set[int] = set()
        for create, pick in operations:
            if create or not expected:
                player = _player(registry, f"el-{len(issued)}")
                assert player.unique_id not in issued
                issued.add(player.unique_id)
                expected.append(player)
            else:
                victim = expected.pop(pick % len(expected))
                registry.unregister(victim.unique_id)
            assert list(registry) == expected
            live_ids = [player.unique_id for player in registry]
            assert len(live_ids) == len(set(live_ids))


class TestResolve:
    def test_none_returns_first(self):
        registry = InstanceRegistry()
        first = _player(registry, "a")
        _player(registry, "b")
        assert registry.resolve() is first

    def test_none_on_empty(self):
        result = InstanceRegistry().resolve(None)
        assert isinstance(result, Unresolvable)

    @pytest.mark.parametrize("query", ["", False])
    def test_falsy_query_returns_first(self, query):
        registry = InstanceRegistry()
        first = _player(registry, "a")
        assert registry.resolve(query) is first
        assert len(registry) == 1

    def test_empty_string_on_empty(self):
        assert isinstance(InstanceRegistry().resolve(""), Unresolvable)

    def test_string_finds_existing_instance(self):
        registry = InstanceRegistry()
        player = _player(registry, "main")
        assert registry.resolve("main") is player

    def test_string_for_new_element(self):
        result = InstanceRegistry().resolve("fresh")
        assert result == CreateRequest(Element("fresh"))

    def test_string_missing_from_page(self):
        page = PageContext(elements={"known": Element("known")})
        registry = InstanceRegistry(page)
        assert registry.resolve("known") == CreateRequest(Element("known"))
        result = registry.resolve("ghost")
        assert isinstance(result, Unresolvable)
        assert "ghost" in result.reason

    def test_index(self):
        registry = InstanceRegistry()
        first = _player(registry, "a")
        second = _player(registry, "b")
        assert registry.resolve(0) is first
        assert registry.resolve(1) is second
        assert isinstance(registry.resolve(2), Unresolvable)
        assert isinstance(registry.resolve(-1), Unresolvable)

    def test_bool_is_not_an_index(self):
        registry = InstanceRegistry()
        _player(registry, "a")
        assert isinstance(registry.resolve(True), Unresolvable)

    def test_element_object(self):
        registry = InstanceRegistry()
        player = _player(registry, "a")
        assert registry.resolve(Element("a")) is player
        element = Element("b", {"class": "video"})
        assert registry.resolve(element) == CreateRequest(element)
        assert registry.resolve(element).element is element

    def test_foreign_element_like_object(self):
        class Node:
            id = "node"

        result = InstanceRegistry().resolve(Node())
        assert result == CreateRequest(Element("node"))

    def test_anything_else(self):
        result = InstanceRegistry().resolve(3.5)
        assert isinstance(result, Unresolvable)
        assert result.query == 3.5
