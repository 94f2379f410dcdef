"""
Connector builder: spouse links and orthogonal parent-child links.
"""
import logging
from typing import Dict, FrozenSet, List

from models import Connector, PlacedNode, RelationshipIndex, Union

logger = logging.getLogger(__name__)

SPOUSE = "spouse"
PARENT_CHILD = "parent-child"


def build_connectors(
    unions: Dict[str, Union],
    index: RelationshipIndex,
    nodes: List[PlacedNode],
    collapsed: FrozenSet[str] = frozenset(),
) -> List[Connector]:
    """
    Derive connectors between placed nodes, one union at a time.

    Children of a collapsed parent get no connectors. Parent-child paths go
    down from the anchor under the parents, across at the midline and down
    into the child's top edge.
    """
    placed = {node.person_id: node for node in nodes}
    connectors = []

    for union in unions.values():
        father = placed.get(union.father_id) if union.father_id else None
        mother = placed.get(union.mother_id) if union.mother_id else None
        if father is mother:
            mother = None  # same person recorded in both slots

        if father and mother:
            connectors.append(Connector(
                id=f"couple-{union.id}",
                kind=SPOUSE,
                union_id=union.id,
                source_ids=[father.person_id],
                target_id=mother.person_id,
                points=[(father.center_x, father.center_y),
                        (mother.center_x, mother.center_y)],
            ))

        if not father and not mother:
            continue
        if union.father_id in collapsed or union.mother_id in collapsed:
            logger.debug("Skipping child connectors of collapsed union %s", union.id)
            continue

        if father and mother:
            anchor_x = (father.center_x + mother.center_x) / 2
        else:
            anchor_x = (father or mother).center_x
        anchor_y = (father or mother).bottom
        parent_ids = [p.person_id for p in (father, mother) if p]

        for child_id in index.union_children.get(union.id, []):
            child = placed.get(child_id)
            if child is None:
                continue
            mid_y = anchor_y + (child.y - anchor_y) / 2
            connectors.append(Connector(
                id=f"child-{union.id}-{child_id}",
                kind=PARENT_CHILD,
                union_id=union.id,
                source_ids=parent_ids,
                target_id=child_id,
                points=[(anchor_x, anchor_y), (anchor_x, mid_y),
                        (child.center_x, mid_y), (child.center_x, child.y)],
            ))

    return connectors
