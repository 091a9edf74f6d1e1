"""API routers."""

from fastapi import Request

from ...db.engine import Database


def get_database(request: Request) -> Database:
    """Get the database handle from app state."""
    return request.app.state.db
