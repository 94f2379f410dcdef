"""
Layout service for arranging the visible family tree by generation.
"""
import logging
from typing import Dict, FrozenSet, Iterable, List

from models import (
    FamilyTree, LayoutOptions, Person, PlacedNode, RelationshipIndex,
    TreeLayout, ViewMode, ViewState,
)
from services.bounds import compute_bounds
from services.connectors import build_connectors
from services.relationship_index import build_index
from services.visibility import effective_mode, resolve_visible

logger = logging.getLogger(__name__)

DEFAULT_GENERATION = 1


def generation_of(person: Person) -> int:
    """Return the person's generation, or the first row when it is unusable."""
    gen = person.generation
    if isinstance(gen, int) and not isinstance(gen, bool) and gen > 0:
        return gen
    return DEFAULT_GENERATION


def layout_generations(
    people: Iterable[Person],
    options: LayoutOptions,
    index: RelationshipIndex = None,
    collapsed: FrozenSet[str] = frozenset(),
    collapse_active: bool = True,
) -> List[PlacedNode]:
    """
    Place people in one row per generation.

    Rows are ordered by generation, top to bottom. Within a row people keep
    the order they are given in and the row is centered on x = 0.
    """
    by_generation: Dict[int, List[Person]] = {}
    for person in people:
        by_generation.setdefault(generation_of(person), []).append(person)

    step = options.node_width + options.sibling_gap
    nodes = []

    for row, gen in enumerate(sorted(by_generation)):
        row_people = by_generation[gen]
        y = row * options.level_height + options.top_margin
        total_width = len(row_people) * step - options.sibling_gap
        start_x = -total_width / 2

        for slot, person in enumerate(row_people):
            has_children = bool(index and index.children_of(person.id))
            is_collapsed = person.id in collapsed
            nodes.append(PlacedNode(
                person_id=person.id,
                name=person.name,
                gender=person.gender,
                is_living=person.is_living,
                generation=gen,
                row=row,
                slot=slot,
                x=start_x + slot * step,
                y=y,
                width=options.node_width,
                height=options.node_height,
                is_collapsed=is_collapsed,
                has_children=has_children,
                has_hidden_children=collapse_active and is_collapsed and has_children,
            ))

    return nodes


def build_tree_layout(tree: FamilyTree, view: ViewState = None,
                      options: LayoutOptions = None) -> TreeLayout:
    """
    Run one full layout pass over the record set.

    records -> index -> visible ids -> placed nodes -> connectors + bounds.
    """
    view = view or ViewState()
    options = options or LayoutOptions()

    index = build_index(tree.persons, tree.unions, tree.child_links)
    visible_ids = resolve_visible(index, tree.persons, view)

    # Collapse only hides people in the full view; a collapsed parent never
    # gets child connectors in any view
    collapse_active = effective_mode(tree.persons, view) == ViewMode.ALL

    visible_people = [p for p in tree.persons.values() if p.id in visible_ids]
    nodes = layout_generations(visible_people, options, index, view.collapsed, collapse_active)
    connectors = build_connectors(tree.unions, index, nodes, view.collapsed)
    bounds = compute_bounds(nodes, options)

    logger.info("Calculated layout for %d of %d persons (%s view, %d connectors)",
                len(nodes), len(tree.persons), view.mode.value, len(connectors))
    return TreeLayout(nodes=nodes, connectors=connectors, bounds=bounds, view=view)
