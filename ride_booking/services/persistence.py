"""
Persistence Manager: full snapshots of the system aggregate.

``save`` writes the whole aggregate as one row in one transaction.
``load`` restores it, or starts an empty system when there is nothing to
restore or the stored snapshot cannot be read. An unreadable snapshot is
copied to its own row first so the next save does not destroy it.
"""

import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from ride_booking.core.config import Settings, settings as default_settings
from ride_booking.core.database import AsyncSessionLocal, Base, build_session_factory, engine as default_engine
from ride_booking.core.exceptions import SnapshotSaveError
from ride_booking.models.snapshot import SNAPSHOT_ROW_ID, UNREADABLE_SNAPSHOT_ROW_ID, SystemSnapshot
from ride_booking.services.snapshot import (
    SNAPSHOT_FORMAT_VERSION,
    SnapshotFormatError,
    SystemSnapshotDocument,
    dump_system,
    restore_system,
)
from ride_booking.services.system import RideSharingSystem

logger = logging.getLogger(__name__)

class PersistenceManager:
    """Saves and restores the system snapshot."""

    def __init__(
        self,
        engine: Optional[AsyncEngine] = None,
        session_factory: Optional[async_sessionmaker] = None,
        config: Optional[Settings] = None,
    ):
        self.engine = engine or default_engine
        if session_factory is None:
            session_factory = AsyncSessionLocal if engine is None else build_session_factory(engine)
        self.session_factory = session_factory
        self.config = config or default_settings

    async def initialize(self) -> None:
        """Create the snapshot table if it does not exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def fresh_system(self) -> RideSharingSystem:
        return RideSharingSystem.from_settings(self.config)

    async def save(self, system: RideSharingSystem) -> None:
        """Write the whole aggregate.

        Raises:
            SnapshotSaveError: If the write fails. In-memory state is untouched.
        """
        payload = dump_system(system).model_dump_json()

        async with self.session_factory() as session:
            try:
                await session.merge(SystemSnapshot(
                    id=SNAPSHOT_ROW_ID,
                    format_version=SNAPSHOT_FORMAT_VERSION,
                    payload=payload,
                ))
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                logger.exception("Failed to save system snapshot")
                raise SnapshotSaveError(f"Failed to save system snapshot: {e}") from e

        logger.info(
            f"System snapshot saved ({len(system.all_users())} users, "
            f"{len(system.all_rides())} rides, {len(system.complaints)} complaints)"
        )

    async def load(self) -> RideSharingSystem:
        """Restore the saved aggregate, or return a fresh system."""
        try:
            async with self.session_factory() as session:
                record = await session.get(SystemSnapshot, SNAPSHOT_ROW_ID)
        except (SQLAlchemyError, OSError):
            logger.exception("Failed to read system snapshot; starting with an empty system")
            return self.fresh_system()

        if record is None:
            logger.info("No saved snapshot found; starting with an empty system")
            return self.fresh_system()

        try:
            document = SystemSnapshotDocument.model_validate_json(record.payload)
            system = restore_system(document, self.config)
        except (ValidationError, SnapshotFormatError):
            logger.exception("Saved snapshot is unreadable; starting with an empty system")
            await self._set_aside(record)
            return self.fresh_system()

        logger.info(
            f"System snapshot restored; next ride id {system.ride_ids.peek()}, "
            f"next complaint id {system.complaint_ids.peek()}"
        )
        return system

    async def _set_aside(self, record: SystemSnapshot) -> None:
        # Row 1 is overwritten by the next save
        try:
            async with self.session_factory() as session:
                await session.merge(SystemSnapshot(
                    id=UNREADABLE_SNAPSHOT_ROW_ID,
                    format_version=record.format_version,
                    payload=record.payload,
                ))
                await session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to keep the unreadable snapshot")
            logger.error(f"Unreadable snapshot payload: {record.payload}")
            return
        logger.warning(
            f"Unreadable snapshot kept in row {UNREADABLE_SNAPSHOT_ROW_ID} "
            f"({len(record.payload)} bytes)"
        )
