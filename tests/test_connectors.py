from conftest import make_tree
from models import LayoutOptions, ViewState
from services.connectors import PARENT_CHILD, SPOUSE, build_connectors
from services.layout_service import build_tree_layout, layout_generations
from services.relationship_index import build_index


def connect(tree, visible=None, collapsed=frozenset()):
    index = build_index(tree.persons, tree.unions, tree.child_links)
    people = [p for p in tree.persons.values() if visible is None or p.id in visible]
    nodes = layout_generations(people, LayoutOptions(), index)
    return nodes, build_connectors(tree.unions, index, nodes, frozenset(collapsed))


def test_parent_child_paths_are_orthogonal(family_tree):
    _, connectors = connect(family_tree)

    for connector in connectors:
        if connector.kind != PARENT_CHILD:
            continue
        assert len(connector.points) == 4
        for (x1, y1), (x2, y2) in zip(connector.points, connector.points[1:]):
            assert x1 == x2 or y1 == y2


def test_endpoints_are_placed_nodes(family_tree):
    for collapsed in [set(), {"G1"}, {"P1"}, {"S2", "C3"}]:
        layout = build_tree_layout(family_tree, ViewState(collapsed=collapsed))
        placed = {n.person_id for n in layout.nodes}
        for connector in layout.connectors:
            assert set(connector.source_ids) <= placed
            assert connector.target_id in placed


def test_connector_counts_are_bounded(family_tree):
    nodes, connectors = connect(family_tree)

    spouse = [c for c in connectors if c.kind == SPOUSE]
    parent_child = [c for c in connectors if c.kind == PARENT_CHILD]
    assert len(spouse) == 3
    assert len(parent_child) == 5
    assert len(parent_child) <= len(nodes)


def test_child_without_placed_parents_gets_no_connector(remarriage_tree):
    _, connectors = connect(remarriage_tree, visible={"M1", "M2", "X", "Y"})

    by_child = {c.target_id: c for c in connectors if c.kind == PARENT_CHILD}
    assert [c for c in connectors if c.kind == SPOUSE] == []
    # mother alone anchors each child
    assert set(by_child) == {"X", "Y"}
    assert by_child["X"].source_ids == ["M1"]


def test_union_with_no_placed_parent_is_skipped(remarriage_tree):
    _, connectors = connect(remarriage_tree, visible={"X", "Y"})
    assert connectors == []


def test_collapsed_mother_suppresses_anchor(remarriage_tree):
    _, connectors = connect(remarriage_tree, collapsed={"M2"})

    targets = {c.target_id for c in connectors if c.kind == PARENT_CHILD}
    assert targets == {"X"}


def test_anchor_uses_father_row_when_parents_differ():
    tree = make_tree(
        [("F", 1), ("M", 2), ("K", 3)],
        [("U", "F", "M")],
        [("U", "K")],
    )
    nodes, connectors = connect(tree)
    father = next(n for n in nodes if n.person_id == "F")
    child_link = next(c for c in connectors if c.kind == PARENT_CHILD)

    assert child_link.points[0][1] == father.bottom
    assert child_link.points[-1][1] == next(n for n in nodes if n.person_id == "K").y


def test_connector_ids(remarriage_tree):
    _, connectors = connect(remarriage_tree)

    assert [c.id for c in connectors] == [
        "couple-U1", "child-U1-X", "couple-U2", "child-U2-Y",
    ]


def test_same_person_in_both_parent_slots_is_not_a_couple():
    tree = make_tree([("P", 1), ("K", 2)], [("U", "P", "P")], [("U", "K")])
    nodes, connectors = connect(tree)
    parent = next(n for n in nodes if n.person_id == "P")

    assert [c.id for c in connectors] == ["child-U-K"]
    assert connectors[0].source_ids == ["P"]
    assert connectors[0].points[0] == (parent.center_x, parent.bottom)
