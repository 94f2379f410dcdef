"""
Relationship index: bidirectional parent/child adjacency built from unions.
"""
import logging
from typing import Dict, Iterable

from models import ChildLink, Person, RelationshipIndex, Union

logger = logging.getLogger(__name__)


def build_index(
    persons: Dict[str, Person],
    unions: Dict[str, Union],
    child_links: Iterable[ChildLink],
) -> RelationshipIndex:
    """
    Build child->parents and parent->children lookups.

    Links naming an unknown union or person are dropped. A person is the
    child of at most one union; later links placing them under another
    union are ignored.
    """
    index = RelationshipIndex()

    for union in unions.values():
        index.union_children[union.id] = []

    for link in child_links:
        if link.union_id not in unions or link.person_id not in persons:
            logger.debug("Dropping child link %s -> %s: unknown reference",
                         link.union_id, link.person_id)
            continue

        current = index.child_union.get(link.person_id)
        if current == link.union_id:
            continue  # duplicate link
        if current is not None:
            logger.warning("Person %s already a child of union %s, ignoring union %s",
                           link.person_id, current, link.union_id)
            continue

        index.child_union[link.person_id] = link.union_id
        index.union_children[link.union_id].append(link.person_id)

    for union_id, child_ids in index.union_children.items():
        union = unions[union_id]
        parent_ids = [
            pid for pid in (union.father_id, union.mother_id)
            if pid and pid in persons
        ]
        if len(parent_ids) == 2 and parent_ids[0] == parent_ids[1]:
            parent_ids = parent_ids[:1]

        for child_id in child_ids:
            index.child_parents[child_id] = parent_ids
            for parent_id in parent_ids:
                children = index.parent_children.setdefault(parent_id, [])
                if child_id not in children:
                    children.append(child_id)

    logger.debug("Indexed %d child links across %d unions",
                 len(index.child_union), len(index.union_children))
    return index
