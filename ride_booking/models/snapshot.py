"""
Snapshot table holding the serialized system aggregate.
"""

from sqlalchemy import Column, Integer, DateTime, Text
from sqlalchemy.sql import func

from ride_booking.core.database import Base

SNAPSHOT_ROW_ID = 1
UNREADABLE_SNAPSHOT_ROW_ID = 2

class SystemSnapshot(Base):
    """The whole aggregate is written as one JSON document in row 1.

    Row 2 keeps the last snapshot that failed to load.
    """

    __tablename__ = "system_snapshots"

    id = Column(Integer, primary_key=True, default=SNAPSHOT_ROW_ID)
    format_version = Column(Integer, nullable=False)
    payload = Column(Text, nullable=False)
    saved_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<SystemSnapshot(id={self.id}, version={self.format_version}, saved_at={self.saved_at})>"
