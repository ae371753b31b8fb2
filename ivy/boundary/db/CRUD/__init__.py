"""
Database CRUD operations.
"""

from ivy.boundary.db.CRUD.session_crud import SqlSessionRepository

__all__ = ["SqlSessionRepository"]
