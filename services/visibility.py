"""
Visibility resolver: which people are drawn for a given view snapshot.
"""
import logging
from typing import Callable, Dict, Iterable, List, Set

from models import Person, RelationshipIndex, ViewMode, ViewState

logger = logging.getLogger(__name__)


def _closure(start: Iterable[str], neighbours: Callable[[str], List[str]],
             visited: Set[str]) -> Set[str]:
    """Walk edges from start with an explicit stack, returning newly reached ids.

    Ids already in ``visited`` are never expanded again, so cycles in
    corrupted data terminate.
    """
    reached = set()
    stack = list(start)
    while stack:
        person_id = stack.pop()
        for next_id in neighbours(person_id):
            if next_id in visited:
                continue
            visited.add(next_id)
            reached.add(next_id)
            stack.append(next_id)
    return reached


def ancestors_of(index: RelationshipIndex, person_id: str) -> Set[str]:
    """Return person_id and every transitive recorded parent."""
    return {person_id} | _closure([person_id], index.parents_of, {person_id})


def descendants_of(index: RelationshipIndex, person_id: str) -> Set[str]:
    """Return person_id and every transitive recorded child."""
    return {person_id} | _closure([person_id], index.children_of, {person_id})


def hidden_by_collapse(index: RelationshipIndex, collapsed: Iterable[str]) -> Set[str]:
    """Return the strict descendants of every collapsed id.

    Each collapsed id is walked on its own and never hides itself, so the
    result only grows as the collapse set grows.
    """
    hidden = set()
    for person_id in collapsed:
        hidden |= _closure([person_id], index.children_of, {person_id})
    return hidden


def effective_mode(persons: Dict[str, Person], view: ViewState) -> ViewMode:
    """Return the view mode in force; focused modes need a known focus."""
    if view.mode != ViewMode.ALL and view.focus not in persons:
        return ViewMode.ALL
    return view.mode


def resolve_visible(
    index: RelationshipIndex,
    persons: Dict[str, Person],
    view: ViewState,
) -> Set[str]:
    """
    Compute the set of person ids to draw.

    Focused modes without a resolvable focus fall back to showing everyone.
    Collapse only applies in the "all" mode.
    """
    mode = effective_mode(persons, view)
    if mode != view.mode:
        logger.info("Focus %r not found, falling back to all for %s view",
                    view.focus, view.mode.value)

    if mode == ViewMode.ANCESTORS:
        visible = ancestors_of(index, view.focus)
    elif mode == ViewMode.DESCENDANTS:
        visible = descendants_of(index, view.focus)
    else:
        collapsed = [pid for pid in view.collapsed if pid in persons]
        visible = set(persons) - hidden_by_collapse(index, collapsed)

    return visible & set(persons)
