"""
ORM models.
"""

from ivy.boundary.db.models.session_model import ChatSessionModel

__all__ = ["ChatSessionModel"]
