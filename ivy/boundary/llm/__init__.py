"""
LLM provider boundary layer.
"""

from ivy.boundary.llm.gemini_completion import GeminiCompletionClient
from ivy.boundary.llm.gemini_embedder import GeminiEmbeddingClient

__all__ = ["GeminiCompletionClient", "GeminiEmbeddingClient"]
