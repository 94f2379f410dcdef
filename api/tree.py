"""
Record set API endpoints (load/replace, JSON and image export).
"""
import logging
import os

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import FileResponse

from models import FamilyTree, ExportOptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tree", tags=["tree"])

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


@router.get("")
async def get_tree(request: Request, response: Response):
    """Get the entire record set."""
    tree_state = get_tree_state(request, response)

    return {
        "tree": tree_state.tree.model_dump(),
        "persons": len(tree_state.tree.persons),
        "unions": len(tree_state.tree.unions),
    }


@router.post("/new")
async def new_tree(request: Request, response: Response):
    """Replace the records with an empty tree."""
    tree_state = get_tree_state(request, response)

    tree_state.replace_tree(FamilyTree())
    logger.info("Created new tree")
    return {"status": "created"}


@router.post("/export")
async def export_tree(options: ExportOptions, request: Request, response: Response):
    """Export the current layout as an image or PDF."""
    tree_state = get_tree_state(request, response)

    from services.export_service import export_layout

    try:
        filepath = export_layout(tree_state.layout(), options, tree_state.tree)
        return FileResponse(
            filepath,
            media_type="application/octet-stream",
            filename=os.path.basename(filepath)
        )
    except Exception as e:
        logger.exception("Export failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/export-json")
async def export_json(request: Request, response: Response):
    """Export the record set as JSON."""
    tree_state = get_tree_state(request, response)
    return tree_state.tree.model_dump()


@router.post("/import-json")
async def import_json(tree_data: FamilyTree, request: Request, response: Response):
    """Replace the record set with client-uploaded JSON."""
    tree_state = get_tree_state(request, response)

    # The mapping key is the record's identity
    tree_data.persons = {
        key: p if p.id == key else p.model_copy(update={"id": key})
        for key, p in tree_data.persons.items()
    }
    tree_data.unions = {
        key: u if u.id == key else u.model_copy(update={"id": key})
        for key, u in tree_data.unions.items()
    }

    tree_state.replace_tree(tree_data)

    logger.info("Imported tree with %d persons, %d unions",
                len(tree_data.persons), len(tree_data.unions))
    return {
        "status": "imported",
        "persons": len(tree_data.persons),
        "unions": len(tree_data.unions),
    }
