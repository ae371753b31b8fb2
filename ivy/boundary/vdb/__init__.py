"""
Chunk index boundary layer.
"""

from ivy.boundary.vdb.faiss_chunk_index import FaissChunkIndex
from ivy.boundary.vdb.text_index import TextIndex

__all__ = ["FaissChunkIndex", "TextIndex"]
