"""Conversation log controller for the cooking assistant screen.

The log is append-only and starts with the assistant greeting. Each send
replays the full log (greeting included) to the stateless completion
endpoint; the system preamble travels separately inside the client. A failed
completion appends a fixed apology instead of surfacing the error.
"""

import time
from typing import Callable, List, Optional

from eatmate.api.completion import CompletionClient, CompletionMessage
from eatmate.controllers.base import ScreenController
from eatmate.models.models import ConversationMessage, MessageRole
from eatmate.prompts.prompts import CHAT_SUGGESTIONS, FALLBACK_REPLY, GREETING

GREETING_ID = "1"
CONTEXT_ROLES = (MessageRole.USER, MessageRole.ASSISTANT)


class MessageIdFactory:
    """Millisecond-timestamp ids, bumped when two land in the same millisecond."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        candidate = int(self._clock() * 1000)
        self._last = max(candidate, self._last + 1)
        return str(self._last)


class ConversationController(ScreenController[ConversationMessage]):
    """Owns the message log and the loading flag of one assistant screen.

    Listeners receive each appended message, which is the screen's cue to
    scroll to the newest entry.
    """

    screen_name = "assistant"

    def __init__(
        self,
        client: CompletionClient,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        super().__init__()
        self._client = client
        self._new_id = id_factory or MessageIdFactory()
        self.loading = False
        self.messages: List[ConversationMessage] = [
            ConversationMessage(id=GREETING_ID, role=MessageRole.ASSISTANT, content=GREETING)
        ]

    @property
    def suggestions(self) -> tuple[str, ...]:
        """Starter prompts, offered only until the first exchange."""
        return CHAT_SUGGESTIONS if len(self.messages) == 1 else ()

    def can_send(self, text: str) -> bool:
        """Whether the send button should be enabled."""
        return bool(text.strip()) and not self.loading and not self.closed

    def build_context(self) -> List[CompletionMessage]:
        """Every user/assistant message in log order, untruncated."""
        return [message.to_completion() for message in self.messages if message.role in CONTEXT_ROLES]

    async def send(self, text: str) -> bool:
        """Append ``text`` as a user turn and the assistant's reply after it.

        Returns:
            False if nothing was sent (blank text, request outstanding, closed).
        """
        content = text.strip()
        if not content or self.loading or self.closed:
            return False

        self._append(MessageRole.USER, content)
        context = self.build_context()
        request_id = self._next_request()
        self.loading = True
        self._log("info", f"Sending {len(context)} messages to completion endpoint", request_id)

        try:
            reply = await self._client.complete(context)
        except Exception as e:
            if not self._is_current(request_id):
                return True
            self._log("error", f"Error generating response: {e}", request_id)
            reply = FALLBACK_REPLY
        else:
            if not self._is_current(request_id):
                return True
        finally:
            self.loading = False

        self._append(MessageRole.ASSISTANT, reply)
        return True

    def _append(self, role: MessageRole, content: str) -> ConversationMessage:
        message = ConversationMessage(id=self._new_id(), role=role, content=content)
        self.messages.append(message)
        self._notify(message)
        return message
