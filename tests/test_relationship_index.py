from conftest import make_tree
from models import ChildLink
from services.relationship_index import build_index


def index_of(tree):
    return build_index(tree.persons, tree.unions, tree.child_links)


def test_children_and_parents(remarriage_tree):
    index = index_of(remarriage_tree)

    assert index.union_children == {"U1": ["X"], "U2": ["Y"]}
    assert index.parents_of("X") == ["F", "M1"]
    assert index.parents_of("Y") == ["F", "M2"]
    # F is a parent in both unions
    assert index.children_of("F") == ["X", "Y"]
    assert index.children_of("M1") == ["X"]
    assert index.children_of("X") == []


def test_single_parent_union(single_parent_tree):
    index = index_of(single_parent_tree)

    assert index.parents_of("K") == ["P"]
    assert index.children_of("P") == ["K"]


def test_union_without_parents_has_children_but_no_edges():
    tree = make_tree([("K", 2)], [("U", None, None)], [("U", "K")])
    index = index_of(tree)

    assert index.union_children["U"] == ["K"]
    assert index.parents_of("K") == []
    assert index.parent_children == {}


def test_duplicate_links_are_deduplicated(linear_tree):
    linear_tree.child_links.append(ChildLink(union_id="U1", person_id="B"))
    index = index_of(linear_tree)

    assert index.union_children["U1"] == ["B"]
    assert index.children_of("A") == ["B"]


def test_unknown_references_are_dropped(linear_tree):
    linear_tree.child_links.append(ChildLink(union_id="missing", person_id="C"))
    linear_tree.child_links.append(ChildLink(union_id="U1", person_id="ghost"))
    index = index_of(linear_tree)

    assert index.children_of("A") == ["B"]
    assert "ghost" not in index.child_union
    assert "missing" not in index.union_children


def test_second_union_for_same_child_is_ignored(remarriage_tree):
    remarriage_tree.child_links.append(ChildLink(union_id="U2", person_id="X"))
    index = index_of(remarriage_tree)

    assert index.child_union["X"] == "U1"
    assert index.union_children["U2"] == ["Y"]
    assert index.children_of("M2") == ["Y"]


def test_unknown_parent_is_not_recorded():
    tree = make_tree([("M", 1), ("K", 2)], [("U", "nobody", "M")], [("U", "K")])
    index = index_of(tree)

    assert index.parents_of("K") == ["M"]
    assert "nobody" not in index.parent_children


def test_empty_input():
    index = build_index({}, {}, [])

    assert index.union_children == {}
    assert index.parent_children == {}
    assert index.child_parents == {}
