"""
storage_service.py — JSON blob persistence
One JSON document per key in the kv_store table. No schema migration and no
transaction spanning several keys: every save commits on its own.
"""

import json
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from tafa.models.kv_entry import KVEntry

logger = logging.getLogger(__name__)


class StorageAdapter:
    """Per-key JSON read/write over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def load(self, key: str, default=None):
        """Return the decoded value for *key*, or *default* when missing or corrupt."""
        try:
            row = self.db.get(KVEntry, key)
        except Exception as e:
            logger.error(f"Failed to read '{key}' from storage: {e}")
            return default
        if row is None:
            return default
        try:
            return json.loads(row.value)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to parse saved '{key}': {e}")
            return default

    def save(self, key: str, value) -> bool:
        try:
            payload = json.dumps(value)
            row = self.db.get(KVEntry, key)
            if row is None:
                self.db.add(KVEntry(key=key, value=payload))
            else:
                row.value = payload
                row.updated_at = datetime.now(timezone.utc)
            self.db.commit()
            return True
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save '{key}': {e}")
            return False

