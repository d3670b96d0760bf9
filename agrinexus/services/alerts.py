"""
Price alerts
At most one alert per crop; every change is written to storage.
"""
import logging
import uuid
from typing import List, Optional

from pydantic import ValidationError

from agrinexus.config import ALERTS_KEY
from agrinexus.models import PriceAlert
from agrinexus.services.storage import BlobStore, load_json, save_json

logger = logging.getLogger(__name__)


class PriceAlertBook:
    def __init__(self, store: BlobStore):
        self.store = store
        self._alerts: List[PriceAlert] = self._load()

    def _load(self) -> List[PriceAlert]:
        data = load_json(self.store, ALERTS_KEY, [])
        if not isinstance(data, list):
            logger.warning("Stored price alerts are not a list, starting empty")
            return []

        alerts: List[PriceAlert] = []
        for item in data:
            try:
                alert = PriceAlert.model_validate(item)
            except ValidationError as e:
                logger.warning(f"Skipping invalid stored alert: {e}")
                continue
            # One alert per crop, even for hand-edited storage
            alerts = [a for a in alerts if a.crop != alert.crop]
            alerts.append(alert)
        return alerts

    def _persist(self):
        save_json(self.store, ALERTS_KEY, [a.model_dump(by_alias=True) for a in self._alerts])

    @property
    def alerts(self) -> List[PriceAlert]:
        return list(self._alerts)

    def find(self, crop: str) -> Optional[PriceAlert]:
        for alert in self._alerts:
            if alert.crop == crop:
                return alert
        return None

    def set_alert(self, crop: str, target_price: float, condition: str = "above") -> PriceAlert:
        """Create the alert for crop, replacing any existing one"""
        alert = PriceAlert(
            id=uuid.uuid4().hex,
            crop=crop,
            target_price=target_price,
            condition=condition,
            active=True,
        )
        self._alerts = [a for a in self._alerts if a.crop != crop] + [alert]
        self._persist()
        logger.info(f"✓ Price alert set: {crop} {condition} {target_price}")
        return alert

    def remove_alert(self, crop: str) -> bool:
        remaining = [a for a in self._alerts if a.crop != crop]
        if len(remaining) == len(self._alerts):
            return False
        self._alerts = remaining
        self._persist()
        logger.info(f"✓ Price alert removed: {crop}")
        return True
