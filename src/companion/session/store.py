"""In-memory chat session store.

Session-only storage: the transcript lives as long as the widget and is
lost when it is torn down.
"""

from .models import ChatMessage, Role


class SessionStore:
    """Ordered chat transcript plus the pending (uncommitted) input text.

    The transcript is append-only. Messages are kept in the order they were
    appended, which is the order replies resolved in, not necessarily the
    order requests were sent.
    """

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []
        self._input = ""

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Snapshot of the transcript, oldest first."""
        return tuple(self._messages)

    @property
    def current_input(self) -> str:
        return self._input

    def set_input(self, text: str) -> None:
        self._input = text

    def clear_input(self) -> None:
        self._input = ""

    def append_user(self, text: str) -> ChatMessage:
        """Append a message authored by the user."""
        return self._append(Role.USER, text)

    def append_companion(self, text: str) -> ChatMessage:
        """Append a reply from the companion service."""
        return self._append(Role.COMPANION, text)

    def last_companion_reply(self) -> str | None:
        """Get the most recent companion reply."""
        for msg in reversed(self._messages):
            if msg.role is Role.COMPANION:
                return msg.content
        return None

    def _append(self, role: Role, text: str) -> ChatMessage:
        msg = ChatMessage(role=role, content=text)
        self._messages.append(msg)
        return msg

    def __len__(self) -> int:
        return len(self._messages)
