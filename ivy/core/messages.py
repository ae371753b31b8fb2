"""
Conversion between stored messages and LangChain chat messages.

Dependencies: langchain_core.messages, ivy.models.session
System role: Message adapter for completion calls
"""

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from ivy.models.session import Message, Role


def to_langchain_message(message: Message) -> BaseMessage:
    """Map a stored message onto the LangChain message type for its role."""
    if message.role == Role.USER:
        return HumanMessage(content=message.content)
    if message.role == Role.ASSISTANT:
        return AIMessage(content=message.content)
    return SystemMessage(content=message.content)


def to_langchain_messages(messages: list[Message]) -> list[BaseMessage]:
    return [to_langchain_message(m) for m in messages]


def render_transcript(messages: list[Message]) -> str:
    """Plain-text transcript used as summarization input."""
    labels = {Role.USER: "Visitor", Role.ASSISTANT: "Assistant", Role.SYSTEM: "System"}
    return "\n".join(f"{labels[m.role]}: {m.content}" for m in messages)
