"""
Key-value blob storage for small app data (settings, price alerts).

Each value is a JSON document stored under a string key. Two backends:
- FileBlobStore: one <key>.json file per key in a local directory (default)
- SupabaseBlobStore: rows of a Supabase table (key, value)
"""
import copy
import json
import logging
import os
import re
from typing import Any, Optional

from agrinexus.config import STORAGE_DIR, STORAGE_TABLE

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class BlobStore:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str):
        raise NotImplementedError


class FileBlobStore(BlobStore):
    def __init__(self, directory: str = STORAGE_DIR):
        self.directory = directory

    def _path(self, key: str) -> str:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return os.path.join(self.directory, f"{key}.json")

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str):
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(key)
        tmp_path = f"{path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp_path, path)


class SupabaseBlobStore(BlobStore):
    def __init__(self, client, table: str = STORAGE_TABLE):
        self.client = client
        self.table = table

    def get(self, key: str) -> Optional[str]:
        result = self.client.table(self.table)\
            .select('value')\
            .eq('key', key)\
            .execute()
        if not result.data:
            return None
        return result.data[0]['value']

    def set(self, key: str, value: str):
        self.client.table(self.table).upsert({
            'key': key,
            'value': value
        }).execute()


def load_json(store: BlobStore, key: str, default: Any) -> Any:
    """Read and parse a blob; a copy of default when absent, unreadable or malformed"""
    try:
        raw = store.get(key)
    except Exception as e:
        logger.warning(f"Storage read failed for '{key}', using defaults: {e}")
        return copy.deepcopy(default)

    if raw is None:
        return copy.deepcopy(default)

    try:
        return json.loads(raw)
    except ValueError as e:
        logger.warning(f"Malformed JSON stored under '{key}', using defaults: {e}")
        return copy.deepcopy(default)


def save_json(store: BlobStore, key: str, value: Any):
    try:
        store.set(key, json.dumps(value, ensure_ascii=False))
    except Exception as e:
        logger.error(f"Storage write failed for '{key}': {e}", exc_info=True)
        raise


def get_blob_store() -> BlobStore:
    """Supabase when configured, otherwise the local directory"""
    from agrinexus.services.services import supabase_client
    if supabase_client:
        logger.info(f"Using Supabase storage (table: {STORAGE_TABLE})")
        return SupabaseBlobStore(supabase_client)
    logger.info(f"Using local file storage ({STORAGE_DIR})")
    return FileBlobStore()
