"""
Session persistence boundary layer.

- InMemorySessionRepository: single-process store
- SqlSessionRepository: SQLAlchemy store (PostgreSQL or SQLite)
"""

from ivy.boundary.db.CRUD.session_crud import SqlSessionRepository
from ivy.boundary.db.memory_repository import InMemorySessionRepository

__all__ = ["InMemorySessionRepository", "SqlSessionRepository"]
