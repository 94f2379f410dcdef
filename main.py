"""
Family Tree Layout Service - FastAPI Entry Point
"""
import logging
import uuid
from pathlib import Path
from typing import Dict, Optional
import time

from fastapi import FastAPI, Request, Response

from models import FamilyTree, LayoutOptions, TreeLayout, ViewMode, ViewState
from services.layout_service import build_tree_layout

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Session configuration
SESSION_COOKIE_NAME = "family_tree_session"
SESSION_MAX_AGE = 86400 * 7  # 7 days
MAX_SESSIONS = 100  # Maximum concurrent sessions (memory protection)
SESSION_CLEANUP_INTERVAL = 3600  # Cleanup old sessions every hour


class TreeState:
    """Holds one record set and its view snapshot."""

    def __init__(self, tree: FamilyTree = None):
        self.tree = tree or FamilyTree()
        self.view = ViewState()
        self.last_accessed = time.time()

    def touch(self):
        """Update last accessed time."""
        self.last_accessed = time.time()

    def replace_tree(self, tree: FamilyTree):
        """Swap in a new record set; the view keeps only people still present."""
        self.tree = tree
        self._prune_view()
        self.touch()

    def _prune_view(self):
        """Drop collapse entries for people no longer in the records."""
        kept = frozenset(pid for pid in self.view.collapsed if pid in self.tree.persons)
        if kept != self.view.collapsed:
            self.view = self.view.model_copy(update={"collapsed": kept})

    # View mutations. Each one replaces the snapshot instead of editing it.

    def set_collapsed(self, person_id: str):
        self.view = self.view.model_copy(update={"collapsed": self.view.collapsed | {person_id}})
        self.touch()

    def clear_collapsed(self, person_id: str):
        self.view = self.view.model_copy(update={"collapsed": self.view.collapsed - {person_id}})
        self.touch()

    def toggle_collapsed(self, person_id: str) -> bool:
        """Flip the collapse state of a person, returning the new state."""
        if person_id in self.view.collapsed:
            self.clear_collapsed(person_id)
            return False
        self.set_collapsed(person_id)
        return True

    def set_view_mode(self, mode: ViewMode, focus: Optional[str] = None):
        """Switch view mode; focused modes default to the first person."""
        if mode != ViewMode.ALL and focus is None and self.tree.persons:
            focus = next(iter(self.tree.persons))
        self.view = self.view.model_copy(update={"mode": mode, "focus": focus})
        self.touch()
        logger.info("View mode set to %s (focus=%s)", mode.value, focus)

    def layout(self, options: LayoutOptions = None) -> TreeLayout:
        """Compute the diagram for the current records and view."""
        return build_tree_layout(self.tree, self.view, options)


class SessionManager:
    """Manages per-user sessions with memory protection."""

    def __init__(self):
        self.sessions: Dict[str, TreeState] = {}
        self.last_cleanup = time.time()

    def get_or_create_session(self, session_id: str = None) -> tuple[str, TreeState]:
        """Get existing session or create new one."""
        self._cleanup_old_sessions()

        if session_id and session_id in self.sessions:
            state = self.sessions[session_id]
            state.touch()
            return session_id, state

        # Create new session
        new_id = str(uuid.uuid4())

        # Memory protection: remove oldest session if at limit
        if len(self.sessions) >= MAX_SESSIONS:
            oldest_id = min(self.sessions.keys(),
                            key=lambda k: self.sessions[k].last_accessed)
            del self.sessions[oldest_id]
            logger.info("Removed oldest session %s to make room", oldest_id[:8])

        self.sessions[new_id] = TreeState()
        logger.info("Created new session: %s", new_id[:8])
        return new_id, self.sessions[new_id]

    def _cleanup_old_sessions(self):
        """Remove sessions that haven't been accessed in a while."""
        now = time.time()
        if now - self.last_cleanup < SESSION_CLEANUP_INTERVAL:
            return

        self.last_cleanup = now
        expired = [
            sid for sid, state in self.sessions.items()
            if now - state.last_accessed > SESSION_MAX_AGE
        ]
        for sid in expired:
            del self.sessions[sid]
            logger.info("Cleaned up expired session: %s", sid[:8])


# Initialize app and session manager
app = FastAPI(
    title="Family Tree Layout Service",
    description="Generational layout, collapse and focused views for family tree records",
    version="1.0.0"
)

session_manager = SessionManager()


def get_session_from_request(request: Request) -> tuple[str, TreeState]:
    """Get or create session from request cookies."""
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    return session_manager.get_or_create_session(session_id)


def set_session_cookie(response: Response, session_id: str):
    """Set session cookie on response."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_id,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        samesite="lax"
    )


# Import routers - they will use get_session_from_request
from api import tree, view

# Pass session manager to routers
tree.set_session_manager(session_manager, get_session_from_request, set_session_cookie)
view.set_session_manager(session_manager, get_session_from_request, set_session_cookie)

app.include_router(tree.router)
app.include_router(view.router)


# Ensure directories exist
Path("exports").mkdir(exist_ok=True)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "active_sessions": len(session_manager.sessions)
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
