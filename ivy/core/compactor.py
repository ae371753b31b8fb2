"""
Context compactor.

Keeps the most recent N messages of a session verbatim and folds everything
older into a running natural-language summary produced by the completion
model. Truncation to N never depends on the summarizer succeeding.

Dependencies: ivy.core.interfaces, ivy.core.prompts, ivy.models.session
System role: Bounded conversational memory
"""

import logging

from ivy.core.exceptions import ConfigurationError, UpstreamError
from ivy.core.interfaces import CompletionClient
from ivy.core.messages import render_transcript
from ivy.core.prompts import SUMMARY_PROMPT
from ivy.models.session import Message, Session

logger = logging.getLogger(__name__)


def approximate_size(messages: list[Message], summary: str | None = None) -> int:
    """
    Cheap size proxy for a transcript: whitespace-delimited word count.

    Args:
        messages: Stored window
        summary: Running summary, counted alongside the messages

    Returns:
        int: Approximate word count
    """
    words = sum(len(m.content.split()) for m in messages)
    if summary:
        words += len(summary.split())
    return words


class ContextCompactor:
    """
    Collapse transcript overflow into a running summary.

    Steps:
    1. Measure the transcript (word count).
    2. Above the threshold, take the prefix outside the last N messages.
    3. Summarize that prefix, folding in the existing summary.
    4. On success replace the summary; keep only the last N messages.
    5. On failure keep the old summary and still keep only the last N.
    Below the threshold the window is still capped at N.
    """

    def __init__(
        self,
        completion: CompletionClient,
        window_size: int = 20,
        word_threshold: int = 1500,
        max_tokens: int = 300,
    ) -> None:
        """
        Initialize compactor.

        Args:
            completion: Completion client used for summaries
            window_size: Messages kept verbatim (N)
            word_threshold: Approximate size that triggers summarization
            max_tokens: Output budget for one summary
        """
        if window_size < 1:
            raise ValueError("window_size must be at least 1")
        self._completion = completion
        self.window_size = window_size
        self.word_threshold = word_threshold
        self._max_tokens = max_tokens

    def needs_summary(self, session: Session) -> bool:
        """Whether the transcript is over the size threshold and has overflow to summarize."""
        return (
            len(session.messages) > self.window_size
            and approximate_size(session.messages, session.summary) > self.word_threshold
        )

    async def asummarize(self, prefix: list[Message], existing_summary: str | None) -> str:
        """
        Summarize the given prefix, composing with the existing summary.

        Args:
            prefix: Messages about to leave the window
            existing_summary: Summary from previous compactions

        Returns:
            str: New running summary

        Raises:
            UpstreamError: Completion call failed or returned nothing
        """
        messages = SUMMARY_PROMPT.invoke({
            "existing_summary": existing_summary or "(none yet)",
            "transcript": render_transcript(prefix),
        }).to_messages()

        summary = await self._completion.acomplete(messages, max_tokens=self._max_tokens)
        summary = (summary or "").strip()
        if not summary:
            raise UpstreamError("Summarizer returned an empty summary")
        return summary

    async def acompact(self, session: Session) -> Session:
        """
        Return a compacted copy of the session.

        Args:
            session: Session after the latest append

        Returns:
            Session: Copy with at most window_size messages and possibly a new summary
        """
        if len(session.messages) <= self.window_size:
            return session

        cutoff = len(session.messages) - self.window_size
        prefix, window = session.messages[:cutoff], session.messages[cutoff:]
        summary = session.summary

        if self.needs_summary(session):
            logger.info(
                f"{__name__}:acompact - Summarizing {len(prefix)} messages "
                f"for session_id={session.session_id}"
            )
            try:
                summary = await self.asummarize(prefix, session.summary)
            except ConfigurationError as e:
                logger.error(
                    f"{__name__}:acompact - Summarizer is not configured, truncating only: {e.message}"
                )
                summary = session.summary
            except Exception as e:
                logger.warning(
                    f"{__name__}:acompact - Summarization failed, truncating only: "
                    f"{type(e).__name__}: {e}"
                )
                summary = session.summary
        else:
            logger.debug(
                f"{__name__}:acompact - Below threshold, capping window at {self.window_size}"
            )

        return session.model_copy(update={"messages": list(window), "summary": summary})
