"""
Agent status shown to the UI while an AI operation is outstanding.

There is no queue: the tracker reflects the most recently started task and
end() clears isThinking even if an earlier task is still running.
"""
import logging
from typing import Callable, List, Optional

from agrinexus.models import AgentState

logger = logging.getLogger(__name__)

Subscriber = Callable[[AgentState], None]


class AgentStateTracker:
    def __init__(self, initial: Optional[AgentState] = None):
        self._state = initial.model_copy(deep=True) if initial else AgentState()
        self._subscribers: List[Subscriber] = []

    def snapshot(self) -> AgentState:
        return self._state.model_copy(deep=True)

    @property
    def is_thinking(self) -> bool:
        return self._state.is_thinking

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register callback for every state change; returns an unsubscribe function"""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def begin(self, task_label: str, tools: Optional[List[str]] = None):
        if self._state.is_thinking:
            logger.warning(
                f"Agent task '{self._state.current_task}' overwritten by '{task_label}' while still running"
            )
        update = {"is_thinking": True, "current_task": task_label}
        if tools is not None:
            update["active_tools"] = list(tools)
        self._publish(self._state.model_copy(update=update))

    def end(self):
        self._publish(self._state.model_copy(update={"is_thinking": False}))

    def _publish(self, state: AgentState):
        self._state = state
        for callback in list(self._subscribers):
            try:
                callback(self.snapshot())
            except Exception as e:
                logger.error(f"Agent state subscriber failed: {e}", exc_info=True)
