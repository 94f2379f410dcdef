"""
Shared record sets for the layout tests.
"""
import pytest

from models import ChildLink, FamilyTree, Person, Union


def make_tree(people, unions=(), links=()):
    """Build a FamilyTree from (id, generation) pairs, union tuples and link pairs.

    unions: (union_id, father_id, mother_id)
    links:  (union_id, person_id)
    """
    persons = {}
    for pid, gen in people:
        persons[pid] = Person(id=pid, name=pid, generation=gen)
    return FamilyTree(
        persons=persons,
        unions={uid: Union(id=uid, father_id=f, mother_id=m) for uid, f, m in unions},
        child_links=[ChildLink(union_id=uid, person_id=pid) for uid, pid in links],
    )


@pytest.fixture
def linear_tree():
    # A -> B -> C, one single-parent union per generation
    return make_tree(
        [("A", 1), ("B", 2), ("C", 3)],
        [("U1", "A", None), ("U2", "B", None)],
        [("U1", "B"), ("U2", "C")],
    )


@pytest.fixture
def remarriage_tree():
    # F married M1 (child X) and M2 (child Y)
    return make_tree(
        [("F", 1), ("M1", 1), ("M2", 1), ("X", 2), ("Y", 2)],
        [("U1", "F", "M1"), ("U2", "F", "M2")],
        [("U1", "X"), ("U2", "Y")],
    )


@pytest.fixture
def single_parent_tree():
    return make_tree(
        [("P", 1), ("K", 2)],
        [("U", "P", None)],
        [("U", "K")],
    )


@pytest.fixture
def family_tree():
    """Three generations with two couples marrying in."""
    return make_tree(
        [
            ("G1", 1), ("G2", 1),
            ("P1", 2), ("S1", 2), ("P2", 2), ("S2", 2),
            ("C1", 3), ("C2", 3), ("C3", 3),
        ],
        [
            ("UG", "G1", "G2"),
            ("UP1", "P1", "S1"),
            ("UP2", "S2", "P2"),
        ],
        [
            ("UG", "P1"), ("UG", "P2"),
            ("UP1", "C1"), ("UP1", "C2"),
            ("UP2", "C3"),
        ],
    )


@pytest.fixture
def cyclic_tree():
    # Corrupted data: A is B's parent and B is A's parent
    return make_tree(
        [("A", 1), ("B", 2)],
        [("UA", "A", None), ("UB", "B", None)],
        [("UA", "B"), ("UB", "A")],
    )
