"""
Routes package for the Feedback Proxy API.
"""

from feedback_proxy.routes.changes import router as changes_router
from feedback_proxy.routes.notes import router as notes_router

__all__ = ["changes_router", "notes_router"]
