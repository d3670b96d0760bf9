"""
Base flow shared by the feature orchestrators
"""
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from agrinexus.services.agent_state import AgentStateTracker
from agrinexus.services.errors import ServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseFlow:
    """
    Runs gateway calls under the agent tracker.

    A ServiceError is turned into a user-visible alert (self.alert) and the
    call returns None; the tracker is always released.
    """

    alert_message = "Core Sync Error"

    def __init__(self, name: str, gateway, tracker: AgentStateTracker):
        self.name = name
        self.gateway = gateway
        self.tracker = tracker
        self.alert: Optional[str] = None

    async def run_task(self, task_label: str, call: Callable[[], Awaitable[T]]) -> Optional[T]:
        self.alert = None
        self.tracker.begin(task_label)
        try:
            return await call()
        except ServiceError as e:
            logger.error(f"{self.name}: {e}")
            self.alert = self.alert_message
            return None
        finally:
            self.tracker.end()
