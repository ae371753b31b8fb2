"""
Gemini completion client.

Wraps ChatGoogleGenerativeAI behind the CompletionClient interface. One
chat model instance is cached per (model, max_tokens) pair so repeated
requests reuse the underlying HTTP client.

Dependencies: langchain_google_genai, langchain_core, ivy.configs
System role: Reply and summary generation provider
"""

import logging

from langchain_core.messages import BaseMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from ivy.configs.llm import LLMSettings
from ivy.core.exceptions import CompletionError, ConfigurationError

logger = logging.getLogger(__name__)


def message_text(content: str | list) -> str:
    """Flatten a LangChain message content payload to plain text."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class GeminiCompletionClient:
    """CompletionClient backed by Google Gemini chat models."""

    def __init__(self, settings: LLMSettings) -> None:
        """
        Initialize client.

        Args:
            settings: LLM settings (API key, model names, temperature)
        """
        self._settings = settings
        self._models: dict[tuple[str, int | None], ChatGoogleGenerativeAI] = {}

    @property
    def primary_model(self) -> str:
        return self._settings.chat_model

    def _get_model(self, model: str, max_tokens: int | None) -> ChatGoogleGenerativeAI:
        """
        Get or create the chat model for a (model, max_tokens) pair.

        Raises:
            ConfigurationError: No Google API key configured
        """
        if not self._settings.google_api_key:
            raise ConfigurationError(
                "Google API key is not configured",
                setting="LLM_GOOGLE_API_KEY",
            )

        key = (model, max_tokens)
        if key not in self._models:
            logger.info(
                f"{__name__}:_get_model - Creating chat model {model} (max_tokens={max_tokens})"
            )
            self._models[key] = ChatGoogleGenerativeAI(
                model=model,
                temperature=self._settings.temperature,
                max_output_tokens=max_tokens,
                google_api_key=self._settings.google_api_key,
            )
        return self._models[key]

    async def acomplete(
        self,
        messages: list[BaseMessage],
        *,
        model: str | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """
        Generate a reply.

        Args:
            messages: System instructions followed by conversation turns
            model: Model name (defaults to the primary model)
            max_tokens: Output token cap

        Returns:
            str: Reply text

        Raises:
            ConfigurationError: Missing credentials
            CompletionError: Provider failure or empty reply
        """
        model_name = model or self.primary_model
        chat_model = self._get_model(model_name, max_tokens)

        try:
            response = await chat_model.ainvoke(messages)
        except Exception as e:
            raise CompletionError(
                f"Completion failed: {type(e).__name__}: {e}",
                model=model_name,
            ) from e

        text = message_text(response.content).strip()
        if not text:
            raise CompletionError("Completion returned no text", model=model_name)
        return text
