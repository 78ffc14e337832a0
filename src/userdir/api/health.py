"""Health check endpoint.

Learn: GET endpoint that confirms the server is running and reports
how many users the store holds. Callers need a valid token.
"""

from fastapi import APIRouter, Depends

from userdir import __version__
from userdir.db.store import UserStore, get_store

router = APIRouter()


@router.get("/health")
def health_check(store: UserStore = Depends(get_store)):
    """Check server health."""
    return {
        "status": "healthy",
        "server": "ok",
        "version": __version__,
        "users": store.count(),
    }
