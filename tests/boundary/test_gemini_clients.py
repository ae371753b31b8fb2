"""
Test suite for the Gemini completion and embedding clients.

Provider classes are patched; no network calls are made.

System role: Verification of the LLM provider boundary
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from ivy.boundary.llm.gemini_completion import GeminiCompletionClient, message_text
from ivy.boundary.llm.gemini_embedder import GeminiEmbeddingClient
from ivy.configs.llm import LLMSettings
from ivy.core.exceptions import CompletionError, ConfigurationError, EmbeddingError


@pytest.fixture
def llm_settings() -> LLMSettings:
    return LLMSettings(google_api_key="test-key", chat_model="primary", fallback_model="fallback")


class TestMessageText:
    """Test suite for message_text."""

    def test_should_flatten_content_parts(self) -> None:
        content = ["Hello ", {"type": "text", "text": "world"}, {"type": "image_url", "url": "x"}]
        assert message_text(content) == "Hello world"


class TestGeminiCompletionClient:
    """Test suite for GeminiCompletionClient."""

    @pytest.mark.asyncio
    async def test_missing_key_should_raise_configuration_error(self) -> None:
        # Arrange
        client = GeminiCompletionClient(LLMSettings(google_api_key=None))

        # Act / Assert
        with pytest.raises(ConfigurationError):
            await client.acomplete([HumanMessage(content="hi")])

    @pytest.mark.asyncio
    async def test_should_return_stripped_reply_and_cache_model(self, llm_settings) -> None:
        # Arrange
        with patch("ivy.boundary.llm.gemini_completion.ChatGoogleGenerativeAI") as chat_cls:
            chat_cls.return_value.ainvoke = AsyncMock(return_value=AIMessage(content="  Hello.  "))
            client = GeminiCompletionClient(llm_settings)

            # Act
            first = await client.acomplete([HumanMessage(content="hi")], max_tokens=150)
            await client.acomplete([HumanMessage(content="again")], max_tokens=150)

        # Assert
        assert first == "Hello."
        chat_cls.assert_called_once()
        assert chat_cls.call_args.kwargs["model"] == "primary"
        assert chat_cls.call_args.kwargs["max_output_tokens"] == 150

    @pytest.mark.asyncio
    async def test_provider_error_should_become_completion_error(self, llm_settings) -> None:
        # Arrange
        with patch("ivy.boundary.llm.gemini_completion.ChatGoogleGenerativeAI") as chat_cls:
            chat_cls.return_value.ainvoke = AsyncMock(side_effect=RuntimeError("quota"))
            client = GeminiCompletionClient(llm_settings)

            # Act / Assert
            with pytest.raises(CompletionError) as exc_info:
                await client.acomplete([HumanMessage(content="hi")], model="fallback")

        assert exc_info.value.details["model"] == "fallback"

    @pytest.mark.asyncio
    async def test_empty_reply_should_become_completion_error(self, llm_settings) -> None:
        # Arrange
        with patch("ivy.boundary.llm.gemini_completion.ChatGoogleGenerativeAI") as chat_cls:
            chat_cls.return_value.ainvoke = AsyncMock(return_value=AIMessage(content=""))
            client = GeminiCompletionClient(llm_settings)

            # Act / Assert
            with pytest.raises(CompletionError):
                await client.acomplete([HumanMessage(content="hi")])


class TestGeminiEmbeddingClient:
    """Test suite for GeminiEmbeddingClient."""

    @pytest.mark.asyncio
    async def test_missing_key_should_raise_only_when_used(self) -> None:
        # Arrange
        client = GeminiEmbeddingClient(model="models/embedding", dimension=8, api_key=None)

        # Act / Assert
        assert client.dimension == 8
        with pytest.raises(ConfigurationError):
            await client.aembed_query("hello")

    @pytest.mark.asyncio
    async def test_should_delegate_to_provider(self) -> None:
        # Arrange
        provider = MagicMock()
        provider.embed_query.return_value = [0.1] * 8
        provider.embed_documents.return_value = [[0.2] * 8, [0.3] * 8]
        with patch("ivy.boundary.llm.gemini_embedder.FixedDimensionEmbeddings", return_value=provider):
            client = GeminiEmbeddingClient(model="models/embedding", dimension=8, api_key="k")

            # Act
            query = await client.aembed_query("hello")
            documents = await client.aembed_documents(["a", "b"])

        # Assert
        assert query == [0.1] * 8
        assert documents == [[0.2] * 8, [0.3] * 8]
        provider.embed_documents.assert_called_once_with(["a", "b"], batch_size=2)

    @pytest.mark.asyncio
    async def test_provider_error_should_become_embedding_error(self) -> None:
        # Arrange
        provider = MagicMock()
        provider.embed_query.side_effect = RuntimeError("boom")
        with patch("ivy.boundary.llm.gemini_embedder.FixedDimensionEmbeddings", return_value=provider):
            client = GeminiEmbeddingClient(model="models/embedding", dimension=8, api_key="k")

            # Act / Assert
            with pytest.raises(EmbeddingError):
                await client.aembed_query("hello")

    @pytest.mark.asyncio
    async def test_empty_batch_should_skip_provider(self) -> None:
        # Arrange
        client = GeminiEmbeddingClient(model="models/embedding", dimension=8, api_key=None)

        # Act / Assert
        assert await client.aembed_documents([]) == []
