"""Repository for schedule template database operations."""

import logging
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import OperationalError

from studyplanner.exceptions import StoreUnavailableError
from studyplanner.engine.block_family import time_to_minutes
from studyplanner.models.constants import WEEKDAYS
from studyplanner.models.schedule_block import ScheduleBlock
from studyplanner.database.models import ScheduleTemplateDB

logger = logging.getLogger(__name__)

# Blocks with unparseable start times sort after every real time
_UNKNOWN_TIME_SORT = 24 * 60


def _start_key(block: ScheduleBlock) -> tuple:
    minutes = time_to_minutes(block.start_time)
    return (_UNKNOWN_TIME_SORT if minutes is None else minutes, block.block_number is None, block.block_number or 0)


def _weekday_key(block: ScheduleBlock) -> tuple:
    day = WEEKDAYS.index(block.weekday) if block.weekday in WEEKDAYS else len(WEEKDAYS)
    return (day, block.weekday) + _start_key(block)


class ScheduleTemplateRepository:
    """Repository for the read-mostly weekly schedule template."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, block: ScheduleBlock) -> ScheduleBlock:
        """Create a new template block."""
        return self.create_batch([block])[0]

    def create_batch(self, blocks: List[ScheduleBlock]) -> List[ScheduleBlock]:
        """Create multiple template blocks in a batch."""
        try:
            blocks_db = [ScheduleTemplateDB.from_pydantic(block) for block in blocks]
            self.db.add_all(blocks_db)
            self.db.commit()
            for block_db in blocks_db:
                self.db.refresh(block_db)
            logger.debug(f"Created {len(blocks)} schedule template blocks")
            return [block_db.to_pydantic() for block_db in blocks_db]
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create schedule template blocks: {type(e).__name__}: {str(e)}")
            raise

    def get_for_day(self, student_name: str, weekday: str) -> List[ScheduleBlock]:
        """Get a student's blocks for one weekday, ordered by start time."""
        try:
            rows = (
                self.db.query(ScheduleTemplateDB)
                .filter(
                    ScheduleTemplateDB.student_name == student_name,
                    ScheduleTemplateDB.weekday == weekday,
                )
                .all()
            )
        except OperationalError as e:
            self.db.rollback()
            logger.error(f"Store unavailable loading schedule for {student_name} on {weekday}: {type(e).__name__}")
            raise StoreUnavailableError(str(e), operation="load schedule") from e
        # start_time is stored as text; "9:20" must sort before "14:30"
        return sorted((row.to_pydantic() for row in rows), key=_start_key)

    def get_for_student(self, student_name: str) -> List[ScheduleBlock]:
        """Get a student's whole weekly template."""
        rows = (
            self.db.query(ScheduleTemplateDB)
            .filter(ScheduleTemplateDB.student_name == student_name)
            .all()
        )
        return sorted((row.to_pydantic() for row in rows), key=_weekday_key)

    def delete_for_student(self, student_name: str) -> int:
        """Delete a student's whole template (used when replacing it).

        Returns:
            Number of blocks deleted
        """
        try:
            deleted_count = (
                self.db.query(ScheduleTemplateDB)
                .filter(ScheduleTemplateDB.student_name == student_name)
                .delete()
            )
            self.db.commit()
            logger.debug(f"Deleted {deleted_count} schedule template blocks for {student_name}")
            return int(deleted_count)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to delete schedule template for {student_name}: {type(e).__name__}: {str(e)}")
            raise
