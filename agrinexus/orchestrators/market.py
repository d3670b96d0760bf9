import logging
from typing import Dict, List, Optional

from agrinexus.models import MarketTrend
from agrinexus.orchestrators.base import BaseFlow

logger = logging.getLogger(__name__)

MARKET_TASK_LABEL = "Analyzing Market Signals..."


class MarketFlow(BaseFlow):
    """Market commentary per crop; the last commentary for each crop is kept"""

    def __init__(self, gateway, tracker):
        super().__init__("market", gateway, tracker)
        self.commentary: Dict[str, str] = {}

    async def analyze(self, crop: str, trends: List[MarketTrend]) -> Optional[str]:
        crop_data = {
            "crop": crop,
            "trends": [t.model_dump() for t in trends],
        }
        self.commentary.pop(crop, None)
        text = await self.run_task(
            MARKET_TASK_LABEL, lambda: self.gateway.market_commentary(crop_data)
        )
        if text is not None:
            self.commentary[crop] = text
        return text
