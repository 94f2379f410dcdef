"""
View API endpoints (collapse/expand, view mode, computed layout).
"""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request, Response

from models import LayoutOptions, TreeLayout, ViewModeUpdate, ViewState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/view", tags=["view"])

# Session management functions (set by main.py)
session_manager = None
get_session_from_request = None
set_session_cookie = None


def set_session_manager(manager, get_session_func, set_cookie_func):
    """Set the session manager and helper functions."""
    global session_manager, get_session_from_request, set_session_cookie
    session_manager = manager
    get_session_from_request = get_session_func
    set_session_cookie = set_cookie_func


def get_tree_state(request: Request, response: Response):
    """Get tree state for current session."""
    session_id, tree_state = get_session_from_request(request)
    set_session_cookie(response, session_id)
    return tree_state


def require_person(tree_state, person_id: str):
    if person_id not in tree_state.tree.persons:
        raise HTTPException(status_code=404, detail="Person not found")


@router.get("", response_model=ViewState)
async def get_view(request: Request, response: Response):
    """Get the current collapse set, view mode and focus."""
    tree_state = get_tree_state(request, response)
    return tree_state.view


@router.put("/mode", response_model=ViewState)
async def set_view_mode(update: ViewModeUpdate, request: Request, response: Response):
    """Switch between the full, ancestors and descendants views."""
    tree_state = get_tree_state(request, response)
    tree_state.set_view_mode(update.mode, update.focus)
    return tree_state.view


@router.post("/collapse/{person_id}", response_model=ViewState)
async def collapse(person_id: str, request: Request, response: Response):
    """Hide a person's descendants."""
    tree_state = get_tree_state(request, response)
    require_person(tree_state, person_id)

    tree_state.set_collapsed(person_id)
    logger.info("Collapsed %s", person_id)
    return tree_state.view


@router.delete("/collapse/{person_id}", response_model=ViewState)
async def expand(person_id: str, request: Request, response: Response):
    """Show a person's descendants again."""
    tree_state = get_tree_state(request, response)
    require_person(tree_state, person_id)

    tree_state.clear_collapsed(person_id)
    logger.info("Expanded %s", person_id)
    return tree_state.view


@router.post("/collapse/{person_id}/toggle", response_model=ViewState)
async def toggle_collapse(person_id: str, request: Request, response: Response):
    """Flip a person's collapse state."""
    tree_state = get_tree_state(request, response)
    require_person(tree_state, person_id)

    collapsed = tree_state.toggle_collapsed(person_id)
    logger.info("%s %s", "Collapsed" if collapsed else "Expanded", person_id)
    return tree_state.view


@router.get("/layout", response_model=TreeLayout)
async def get_layout(
    request: Request,
    response: Response,
    node_width: Optional[float] = None,
    node_height: Optional[float] = None,
    level_height: Optional[float] = None,
    sibling_gap: Optional[float] = None,
    top_margin: Optional[float] = None,
):
    """Compute node positions, connectors and bounds for the current view."""
    tree_state = get_tree_state(request, response)

    overrides = {
        "node_width": node_width,
        "node_height": node_height,
        "level_height": level_height,
        "sibling_gap": sibling_gap,
        "top_margin": top_margin,
    }
    options = LayoutOptions(**{k: v for k, v in overrides.items() if v is not None})

    return tree_state.layout(options)
