"""
Chat service for conversational and single-shot replies.

Orchestrates one turn: session memory, best-effort retrieval, prompt
assembly, completion with a fallback model, and persistence of the reply.
Also backs the stateless /rag and /search operations.

Dependencies: langchain_core.messages, ivy.core
System role: Conversational orchestrator
"""

import logging

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from ivy.configs.settings import Settings
from ivy.core.exceptions import CompletionError, SessionStorageError
from ivy.core.interfaces import CompletionClient
from ivy.core.messages import to_langchain_messages
from ivy.core.prompts import CONVERSATION_PERSONA, QUERY_PERSONA, build_system_prompt
from ivy.core.retrieval import RetrievalEngine
from ivy.core.session_store import SessionStore
from ivy.models.chat import ChatResult
from ivy.models.chunk import RetrievalResult
from ivy.models.session import Role
from ivy.observability.log_utils import text_stats

logger = logging.getLogger(__name__)


class ChatService:
    """
    Conversational orchestrator.

    Conversation mode reads and writes the session; query mode is
    stateless. Retrieval failures degrade to an ungrounded reply, while
    completion failures propagate after the fallback model is tried.
    """

    def __init__(
        self,
        store: SessionStore,
        retrieval: RetrievalEngine,
        completion: CompletionClient,
        settings: Settings,
    ) -> None:
        """
        Initialize chat service.

        Args:
            store: Session store for conversation memory
            retrieval: Retrieval engine for grounding
            completion: Completion client
            settings: Application settings (models, token budgets, top-k)
        """
        self.store = store
        self.retrieval = retrieval
        self.completion = completion
        self.settings = settings

    def _max_tokens(self, grounded: bool) -> int:
        llm = self.settings.llm
        return llm.grounded_max_tokens if grounded else llm.ungrounded_max_tokens

    async def _retrieve(self, message: str) -> tuple[RetrievalResult, str | None]:
        result = await self.retrieval.aretrieve(message, self.settings.vector_store.top_k)
        if result.is_empty:
            return result, None
        return result, self.retrieval.format_context(result)

    async def complete_with_fallback(
        self,
        messages: list[BaseMessage],
        max_tokens: int,
    ) -> tuple[str, str]:
        """
        Complete with the primary model, retrying once on the fallback model.

        Only CompletionError triggers the retry; configuration errors
        surface immediately.

        Args:
            messages: Prompt messages
            max_tokens: Output token cap

        Returns:
            tuple[str, str]: (reply text, model that produced it)

        Raises:
            CompletionError: Primary failed and no usable fallback, or fallback failed
            ConfigurationError: Missing credentials
        """
        primary = self.settings.llm.chat_model
        try:
            text = await self.completion.acomplete(messages, model=primary, max_tokens=max_tokens)
            return text, primary
        except CompletionError as e:
            fallback = self.settings.llm.fallback_model
            if not fallback or fallback == primary:
                raise
            logger.warning(
                f"{__name__}:complete_with_fallback - Primary model {primary} failed "
                f"({e.message}), retrying with {fallback}"
            )

        text = await self.completion.acomplete(messages, model=fallback, max_tokens=max_tokens)
        return text, fallback

    async def _retract(self, session_id: str, message_id: str) -> None:
        """Remove a user turn whose reply was never stored; the original error wins."""
        try:
            await self.store.discard(session_id, message_id)
            logger.warning(f"{__name__}:_retract - Reply failed, user turn retracted")
        except SessionStorageError as e:
            logger.error(f"{__name__}:_retract - Could not retract user turn: {e.message}")

    async def converse(
        self,
        session_id: str,
        message: str,
        clear_context: bool = False,
    ) -> ChatResult:
        """
        Handle one conversation-mode turn.

        Flow:
        1. Reset the session if asked
        2. Append the user turn (compaction runs inside the append)
        3. Retrieve grounding for the inbound message
        4. Complete over persona + summary + grounding + stored history
        5. Append the assistant turn

        Args:
            session_id: Session identifier
            message: Sanitized user message
            clear_context: Start from an empty session

        Returns:
            ChatResult: Reply, session id and sources

        Raises:
            CompletionError: Reply could not be produced; the user turn is retracted
            ConfigurationError: Missing credentials; the user turn is retracted
            SessionStorageError: The reply could not be stored; the user turn is retracted
        """
        logger.info(
            f"{__name__}:converse - START session={session_id[:8]}, "
            f"message={text_stats(message)}, clear_context={clear_context}"
        )
        if clear_context:
            await self.store.reset(session_id)

        user_turn = await self.store.append(session_id, Role.USER, message)

        try:
            result, context = await self._retrieve(message)
            session = await self.store.resolve(session_id)
            system_prompt = build_system_prompt(
                CONVERSATION_PERSONA,
                self.settings.llm.persona_name,
                summary=session.summary,
                context=context,
            )
            prompt = [SystemMessage(content=system_prompt)]
            prompt.extend(to_langchain_messages(session.conversation()))

            reply, model = await self.complete_with_fallback(
                prompt, self._max_tokens(grounded=context is not None)
            )
            await self.store.append(session_id, Role.ASSISTANT, reply)
        except Exception:
            await self._retract(session_id, user_turn.id)
            raise

        logger.info(
            f"{__name__}:converse - END model={model}, grounded={context is not None}, "
            f"sources={len(result)}, reply={text_stats(reply)}"
        )
        return ChatResult(
            response=reply,
            session_id=session_id,
            sources=result.sources,
            grounded=context is not None,
            model=model,
        )

    async def query(self, message: str) -> ChatResult:
        """
        Handle a stateless single-shot question.

        The session store is not read or written.

        Args:
            message: Sanitized user message

        Returns:
            ChatResult: Reply and sources (no session id)
        """
        logger.info(f"{__name__}:query - START message={text_stats(message)}")
        result, context = await self._retrieve(message)
        system_prompt = build_system_prompt(
            QUERY_PERSONA,
            self.settings.llm.persona_name,
            context=context,
        )
        prompt = [SystemMessage(content=system_prompt), HumanMessage(content=message)]

        reply, model = await self.complete_with_fallback(
            prompt, self._max_tokens(grounded=context is not None)
        )
        logger.info(f"{__name__}:query - END model={model}, grounded={context is not None}")
        return ChatResult(
            response=reply,
            sources=result.sources,
            grounded=context is not None,
            model=model,
        )

    async def answer_with_sources(self, message: str) -> ChatResult:
        """Grounded single-shot answer backing POST /rag."""
        return await self.query(message)

    async def search(self, query: str, k: int | None = None, text_only: bool = False) -> RetrievalResult:
        """
        Ranked chunks for a free-text query, backing GET /search.

        Args:
            query: Sanitized search query
            k: Maximum results (defaults to configured search_top_k)
            text_only: Use the full-text index instead of vector search

        Returns:
            RetrievalResult: Ranked chunks, empty on failure
        """
        limit = k or self.settings.vector_store.search_top_k
        if text_only:
            return await self.retrieval.atext_search(query, limit)
        return await self.retrieval.aretrieve(query, limit)
