"""Tests for design_extract.processors.tree."""

from design_extract.processors.tree import (
    count_values,
    find_node_by_id,
    find_nodes_by_type,
    iter_nodes,
    walk_nodes,
)


def _tree():
    return {
        "id": "root",
        "type": "DOCUMENT",
        "children": [
            {
                "id": "a",
                "type": "FRAME",
                "children": [
                    {"id": "a1", "type": "COMPONENT"},
                    {"id": "a2", "type": "TEXT"},
                ],
            },
            {"id": "b", "type": "COMPONENT_SET", "children": []},
        ],
    }


class TestIterNodes:

    def test_pre_order(self):
        assert [n["id"] for n in iter_nodes(_tree())] == ["root", "a", "a1", "a2", "b"]

    def test_none_root_yields_nothing(self):
        assert list(iter_nodes(None)) == []

    def test_non_list_children_is_leaf(self):
        root = {"id": "r", "children": {"id": "x"}}
        assert [n["id"] for n in iter_nodes(root)] == ["r"]

    def test_cycle_visits_each_node_once(self):
        root = {"id": "r", "children": []}
        child = {"id": "c", "children": [root]}
        root["children"].append(child)
        assert [n["id"] for n in iter_nodes(root)] == ["r", "c"]


class TestWalkNodes:

    def test_visits_every_node(self):
        seen = []
        walk_nodes(_tree(), lambda n: seen.append(n["id"]))
        assert len(seen) == 5


class TestFindNodeById:

    def test_finds_nested(self):
        assert find_node_by_id(_tree(), "a2")["type"] == "TEXT"

    def test_missing_returns_none(self):
        assert find_node_by_id(_tree(), "zzz") is None

    def test_first_match_wins(self):
        root = {"id": "r", "children": [{"id": "x", "name": "first"}, {"id": "x", "name": "second"}]}
        assert find_node_by_id(root, "x")["name"] == "first"


class TestFindNodesByType:

    def test_collects_in_traversal_order(self):
        found = find_nodes_by_type(_tree(), ("COMPONENT", "COMPONENT_SET"))
        assert [n["id"] for n in found] == ["a1", "b"]


class TestCountValues:

    def test_counts_and_ties_keep_first_occurrence(self):
        root = {
            "id": "r",
            "gap": 8,
            "children": [{"id": "c1", "gap": 4}, {"id": "c2", "gap": 4}, {"id": "c3", "gap": 8}],
        }
        counts = count_values(root, lambda n: [n["gap"]] if "gap" in n else [])
        assert counts == {8: 2, 4: 2}
        assert [v for v, _ in counts.most_common()] == [8, 4]

    def test_cyclic_tree_counted_once_per_node(self):
        root = {"id": "r", "gap": 8, "children": []}
        child = {"id": "c", "gap": 8, "children": [root]}
        root["children"].append(child)
        counts = count_values(root, lambda n: [n["gap"]])
        assert counts == {8: 2}
