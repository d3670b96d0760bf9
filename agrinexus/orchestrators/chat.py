import logging
from typing import List, Optional

from agrinexus.models import ChatMessage
from agrinexus.orchestrators.base import BaseFlow

logger = logging.getLogger(__name__)

CHAT_TASK_LABEL = "Processing Natural Language Intent..."


class ChatSession(BaseFlow):
    """One conversation: append-only transcript, one message in flight at a time"""

    def __init__(self, gateway, tracker, session_id: str = "default"):
        super().__init__("chat", gateway, tracker)
        self.session_id = session_id
        self._messages: List[ChatMessage] = []
        self.loading = False

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    async def send(self, text: str) -> Optional[ChatMessage]:
        """
        Send a user message and append the model's reply.

        Returns the reply, or None if the input was blank, another message is
        still in flight, or the service failed (see self.alert).
        """
        if not text or not text.strip() or self.loading:
            return None

        self._messages.append(ChatMessage(role="user", text=text))
        self.loading = True
        try:
            reply = await self.run_task(CHAT_TASK_LABEL, lambda: self.gateway.chat(text))
        finally:
            self.loading = False

        if reply is None:
            return None
        message = ChatMessage(role="model", text=reply or "")
        self._messages.append(message)
        return message
