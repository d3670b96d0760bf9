"""
Shared application objects for the routers
"""
import logging
from collections import OrderedDict
from typing import Optional

from agrinexus.config import MAX_CHAT_SESSIONS
from agrinexus.orchestrators import ScannerFlow, ChatSession, IdentityFlow, MarketFlow
from agrinexus.services.agent_state import AgentStateTracker
from agrinexus.services.alerts import PriceAlertBook
from agrinexus.services.audio import Speaker
from agrinexus.services.settings_store import load_settings, save_settings
from agrinexus.services.storage import BlobStore

logger = logging.getLogger(__name__)


class Nexus:
    """Everything one device needs: one agent tracker shared by all flows"""

    def __init__(self, gateway, store: BlobStore, player=None, fallback_voice=None,
                 max_chat_sessions: int = MAX_CHAT_SESSIONS):
        self.gateway = gateway
        self.store = store
        self.tracker = AgentStateTracker()

        # Read once at startup
        self.settings = load_settings(store)
        self.alerts = PriceAlertBook(store)

        self.scanner = ScannerFlow(gateway, self.tracker)
        self.identity = IdentityFlow(gateway, self.tracker)
        self.market = MarketFlow(gateway, self.tracker)
        self.speaker = Speaker(gateway, player=player, fallback_voice=fallback_voice, tracker=self.tracker)
        self.max_chat_sessions = max_chat_sessions
        self._chats: "OrderedDict[str, ChatSession]" = OrderedDict()

    def find_session(self, session_id: str) -> Optional[ChatSession]:
        """Existing session or None; never creates one"""
        return self._chats.get(session_id)

    def chat_session(self, session_id: str) -> ChatSession:
        """Get or create a session, evicting the least recently used idle ones past the limit"""
        session = self._chats.get(session_id)
        if session is None:
            session = ChatSession(self.gateway, self.tracker, session_id=session_id)
            self._chats[session_id] = session
            self._evict_idle_sessions()
        else:
            self._chats.move_to_end(session_id)
        return session

    def _evict_idle_sessions(self):
        # The newest session and sessions with a message in flight are kept
        for session_id in list(self._chats)[:-1]:
            if len(self._chats) <= self.max_chat_sessions:
                break
            if not self._chats[session_id].loading:
                del self._chats[session_id]
                logger.info(f"Evicted idle chat session: {session_id}")

    def update_settings(self, settings):
        save_settings(self.store, settings)
        self.settings = settings


_nexus: Optional[Nexus] = None


def get_nexus() -> Nexus:
    global _nexus
    if _nexus is None:
        from agrinexus.services.gateway import get_gateway
        from agrinexus.services.storage import get_blob_store
        _nexus = Nexus(get_gateway(), get_blob_store())
        logger.info("Nexus initialized")
    return _nexus
