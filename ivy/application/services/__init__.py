"""
Application services.
"""

from ivy.application.services.chat_service import ChatService
from ivy.application.services.reindex_service import CorpusIndexer
from ivy.application.services.session_sweeper import SessionSweeper

__all__ = ["ChatService", "CorpusIndexer", "SessionSweeper"]
