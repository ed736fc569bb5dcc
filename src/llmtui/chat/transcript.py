"""Append-only transcript of a chat session.

Hides how the ordered message log is stored. Messages are frozen
``ChatMessage`` models; once appended they are never replaced or removed.
"""

from collections.abc import Iterator

from ..llm import ChatMessage


class Transcript:
    """Ordered, append-only log of role-tagged messages."""

    def __init__(self, system_prompt: str | None = None) -> None:
        self._messages: list[ChatMessage] = []
        self._system_prompt = system_prompt

    def append(self, message: ChatMessage) -> None:
        self._messages.append(message)

    def add_user(self, content: str) -> ChatMessage:
        message = ChatMessage.user(content)
        self.append(message)
        return message

    def add_assistant(self, content: str) -> ChatMessage:
        message = ChatMessage.assistant(content)
        self.append(message)
        return message

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Snapshot of the messages shown to the user."""
        return tuple(self._messages)

    def history(self) -> list[ChatMessage]:
        """Build the request history, with the system prompt first if one is set."""
        history = list(self._messages)
        if self._system_prompt:
            history.insert(0, ChatMessage.system(self._system_prompt))
        return history

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)
