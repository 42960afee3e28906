"""Tests for nested message dependency analysis."""

import pytest

from galalith.generator.analysis import direct_sub_protocol_ids, sub_protocol_ids
from galalith.generator.errors import DependencyCycleError, RegistryError


def message(protocol_id, name, *types):
    return {
        "id": protocol_id,
        "name": name,
        "fields": [{"name": f"f{i}", "type": t} for i, t in enumerate(types)],
    }


def describe_direct_sub_protocol_ids():
    def finds_ids_inside_containers(expect, game_registry):
        expect(direct_sub_protocol_ids(game_registry.get(100))) == [102, 103]

    def ignores_primitive_messages(expect, game_registry):
        expect(direct_sub_protocol_ids(game_registry.get(7))) == []


def describe_sub_protocol_ids():
    def is_transitive(expect, game_registry):
        expect(sub_protocol_ids(game_registry, 102)) == [103]
        expect(sub_protocol_ids(game_registry, 100)) == [102, 103]

    def is_empty_without_nested_messages(expect, game_registry):
        expect(sub_protocol_ids(game_registry, 7)) == []
        expect(sub_protocol_ids(game_registry, 1)) == []

    def follows_depth_first_discovery_order(expect, make_registry):
        registry = make_registry(
            message(1, "Root", "B", "List<C>"),
            message(2, "B", "D"),
            message(3, "C", "D"),
            message(4, "D", "int"),
        )
        expect(sub_protocol_ids(registry, 1)) == [2, 4, 3]

    def lists_each_id_once(expect, make_registry):
        registry = make_registry(
            message(1, "Root", "Leaf", "Map<Leaf, Leaf>", "Set<Leaf>"),
            message(2, "Leaf", "int"),
        )
        expect(sub_protocol_ids(registry, 1)) == [2]

    def excludes_self_reference_inside_containers(expect, make_registry):
        registry = make_registry(message(1, "Node", "int", "List<Node>"))
        expect(sub_protocol_ids(registry, 1)) == []

    def rejects_fields_of_the_own_message_type(expect, make_registry):
        registry = make_registry(message(1, "Node", "int", "Node"))
        with pytest.raises(DependencyCycleError) as e:
            sub_protocol_ids(registry, 1)
        expect(str(e.value)) == "Node.f1 holds its own message type: 1 -> 1"

    def rejects_cycles(expect, make_registry):
        registry = make_registry(
            message(1, "A", "B"),
            message(2, "B", "C"),
            message(3, "C", "List<A>"),
        )
        with pytest.raises(DependencyCycleError) as e:
            sub_protocol_ids(registry, 1)
        expect(str(e.value)) == "Nested messages form a cycle: 1 -> 2 -> 3 -> 1"

    def reports_cycle_below_the_start(expect, make_registry):
        registry = make_registry(
            message(1, "Root", "A"),
            message(2, "A", "B"),
            message(3, "B", "A"),
        )
        with pytest.raises(DependencyCycleError, match="2 -> 3 -> 2"):
            sub_protocol_ids(registry, 1)

    def cycle_error_is_registry_error(expect):
        expect(issubclass(DependencyCycleError, RegistryError)) == True
