import logging

from pydantic import ValidationError

from agrinexus.config import SETTINGS_KEY
from agrinexus.models import FarmSettings
from agrinexus.services.storage import BlobStore, load_json, save_json

logger = logging.getLogger(__name__)


def load_settings(store: BlobStore) -> FarmSettings:
    """Saved farm settings, or the defaults if nothing valid is stored"""
    data = load_json(store, SETTINGS_KEY, None)
    if not isinstance(data, dict):
        return FarmSettings()
    try:
        return FarmSettings.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Stored settings are invalid, using defaults: {e}")
        return FarmSettings()


def save_settings(store: BlobStore, settings: FarmSettings):
    save_json(store, SETTINGS_KEY, settings.model_dump(by_alias=True))
    logger.info(f"✓ Settings saved (location: {settings.location})")
