"""
Error types raised by the Ivy backend.

Services raise these; the API layer maps each family to a status code
(see api/routers/router_utils/error_handling.py). Keyword arguments
beyond `details` are folded into `details`, so callers write
CompletionError("timed out", model="gemini-2.5-flash").

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class IvyException(Exception):
    """Root of the hierarchy; carries a message and a context dict for logs."""

    def __init__(self, message: str, details: dict[str, Any] | None = None, **context: Any) -> None:
        self.message = message
        self.details = dict(details or {})
        self.details.update({key: value for key, value in context.items() if value is not None})
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} | Details: {self.details}" if self.details else self.message


class ValidationError(IvyException):
    """Caller input rejected; usually carries `field`."""


class ConfigurationError(IvyException):
    """A capability was used without its credentials or settings; carries `setting`."""


class UpstreamError(IvyException):
    """An external provider (completion, embedding, vector store) failed."""


class CompletionError(UpstreamError):
    """No reply from the completion provider; carries `model`."""


class EmbeddingError(UpstreamError):
    """Embedding call failed or returned a vector of the wrong shape."""


class VectorStoreError(UpstreamError):
    """Chunk index load, search or replace failed; carries `operation`."""


class SessionStorageError(IvyException):
    """A session record could not be read or written; carries `session_id`."""


class CorruptSessionRecordError(SessionStorageError):
    """A stored record exists but cannot be decoded into a Session."""


class ConcurrentSessionWriteError(SessionStorageError):
    """Another writer saved the session after it was read (version mismatch)."""


class ContentSourceError(IvyException):
    """The content store could not be listed or read."""


class IndexingError(IvyException):
    """A corpus re-index could not complete."""


class ReindexInProgressError(IndexingError):
    """A re-index was requested while one is already running."""
