"""
Local directory content source.

Reads the content tree from a directory on disk.

Dependencies: fastapi.concurrency
System role: Corpus provider for development and self-hosted deployments
"""

import logging
from pathlib import Path

from fastapi.concurrency import run_in_threadpool

from ivy.boundary.content.layout import slug_for, strip_front_matter
from ivy.core.exceptions import ContentSourceError
from ivy.models.content import ContentDocument

logger = logging.getLogger(__name__)


class LocalContentSource:
    """ContentSource reading Markdown files under a root directory."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _fetch(self) -> list[ContentDocument]:
        if not self._root.is_dir():
            raise ContentSourceError(
                f"Content directory not found: {self._root}",
                details={"root": str(self._root)},
            )

        documents = []
        for path in sorted(self._root.rglob("*.md")):
            slug = slug_for(path.relative_to(self._root).as_posix())
            if slug is None:
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"{__name__}:_fetch - Failed to read {slug}: {type(e).__name__}")
                continue
            documents.append(ContentDocument(slug=slug, content=strip_front_matter(text)))
        return documents

    async def afetch_documents(self) -> list[ContentDocument]:
        """
        Read every indexed document.

        Returns:
            list[ContentDocument]: Documents sorted by path; unreadable files skipped

        Raises:
            ContentSourceError: Root directory missing
        """
        documents = await run_in_threadpool(self._fetch)
        logger.info(f"{__name__}:afetch_documents - Fetched {len(documents)} documents from {self._root}")
        return documents
