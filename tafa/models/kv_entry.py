from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime
from tafa.database import Base


class KVEntry(Base):
    __tablename__ = "kv_store"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)  # JSON blob
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
