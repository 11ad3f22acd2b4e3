from fastapi import HTTPException, Request

from database.db_manager import DatabaseManager


def get_db(request: Request) -> DatabaseManager:
    """FastAPI dependency that provides the DatabaseManager."""
    manager = getattr(request.app.state, "db_manager", None)
    if manager is None:
        raise HTTPException(503, "Database unavailable")
    return manager
