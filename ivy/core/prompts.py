"""
Prompt templates for replies and conversation summaries.

Persona instructions per request mode, the grounding wrapper that appends
retrieved passages to the system instructions, and the summarization
prompt used by the context compactor.

Dependencies: langchain_core.prompts
System role: Prompt text for the completion model
"""

from langchain_core.prompts import ChatPromptTemplate

CONVERSATION_PERSONA = """You are "{persona_name}" - wry, reflective, irreverent yet grounded. \
You are talking with a visitor through a terminal on a site that publishes journal entries, \
books and reference articles about Coherenceism.

- Be honest, present and spacious; use dry wit and gentle irony.
- Stay with the archive's books, journals and ideas; politely deflect unrelated topics.
- Keep replies brief: no more than two or three short sentences unless asked for depth.
"""

QUERY_PERSONA = """You are "{persona_name}" - a sharp, dryly funny guide to an archive of \
journal entries, books and reference articles about Coherenceism.

Answer the visitor's single question. Lead with a light touch, then give the real insight. \
Keep it short: a few sentences, never more than two paragraphs.
"""

SUMMARY_SECTION = """
## Earlier in this conversation
{summary}
"""

GROUNDING_SECTION = """
## Archive passages
The passages below were retrieved from the archive for the visitor's latest message. \
Synthesize an answer from them in your own voice: do not quote them verbatim, and do \
not invent archive content they do not support. Mention which entry or chapter an idea \
comes from when it helps.

{context}
"""

SUMMARY_SYSTEM_PROMPT = """You maintain a running summary of a conversation between a visitor \
and an assistant. Fold the new turns into the existing summary. Keep names, questions the \
visitor asked, facts they shared about themselves, and any conclusions reached. Write plain \
prose, at most 150 words, no preamble."""

SUMMARY_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SUMMARY_SYSTEM_PROMPT),
        (
            "human",
            "Existing summary:\n{existing_summary}\n\nNew turns to fold in:\n{transcript}\n\nUpdated summary:",
        ),
    ]
)


def build_system_prompt(
    persona: str,
    persona_name: str,
    summary: str | None = None,
    context: str | None = None,
) -> str:
    """
    Assemble the system instructions for one completion call.

    Args:
        persona: CONVERSATION_PERSONA or QUERY_PERSONA
        persona_name: Name the assistant answers to
        summary: Running summary of compacted turns, if any
        context: Formatted grounding block, if retrieval found anything

    Returns:
        str: System prompt text
    """
    parts = [persona.format(persona_name=persona_name)]
    if summary:
        parts.append(SUMMARY_SECTION.format(summary=summary))
    if context:
        parts.append(GROUNDING_SECTION.format(context=context))
    return "\n".join(parts)
