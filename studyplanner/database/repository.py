"""Repository layer for assignment database operations."""

import logging
from datetime import date, datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import OperationalError
from sqlalchemy import asc

from studyplanner.exceptions import StoreUnavailableError
from studyplanner.models.assignment import Assignment, CompletionStatus
from studyplanner.models.family import Family
from studyplanner.database.models import AssignmentDB, enum_to_value

logger = logging.getLogger(__name__)


class AssignmentRepository:
    """Repository for Assignment database operations.

    Also serves as the auto-fill write collaborator (update_schedule,
    save_segment).
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, operation: str, assignment_id: str) -> None:
        """Commit, rolling back and logging on failure.

        Lost connections surface as StoreUnavailableError.
        """
        try:
            self.db.commit()
        except OperationalError as e:
            self.db.rollback()
            logger.error(f"Store unavailable during {operation} for {assignment_id}: {type(e).__name__}: {str(e)}")
            raise StoreUnavailableError(str(e), operation=operation) from e
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to {operation} {assignment_id}: {type(e).__name__}: {str(e)}")
            raise

    def _get_row(self, assignment_id: str) -> Optional[AssignmentDB]:
        try:
            return self.db.query(AssignmentDB).filter(AssignmentDB.id == assignment_id).first()
        except OperationalError as e:
            self.db.rollback()
            logger.error(f"Store unavailable loading assignment {assignment_id}: {type(e).__name__}")
            raise StoreUnavailableError(str(e), operation="load assignment") from e

    def create(self, assignment: Assignment) -> Assignment:
        """Create a new assignment."""
        assignment_db = AssignmentDB.from_pydantic(assignment)
        self.db.add(assignment_db)
        self._commit("create", assignment.id)
        self.db.refresh(assignment_db)
        logger.debug(f"Created assignment {assignment.id}: {assignment.title[:50]}")
        return assignment_db.to_pydantic()

    def get(self, assignment_id: str) -> Optional[Assignment]:
        """Get assignment by ID."""
        row = self._get_row(assignment_id)
        return row.to_pydantic() if row else None

    def get_for_student(self, user_id: str) -> List[Assignment]:
        """Get all assignments for a student sorted by due date (missing last)."""
        try:
            rows = (
                self.db.query(AssignmentDB)
                .filter(AssignmentDB.user_id == user_id)
                .order_by(AssignmentDB.due_date.is_(None), asc(AssignmentDB.due_date), asc(AssignmentDB.created_at))
                .all()
            )
        except OperationalError as e:
            self.db.rollback()
            logger.error(f"Store unavailable loading assignments for {user_id}: {type(e).__name__}")
            raise StoreUnavailableError(str(e), operation="load assignments") from e
        return [row.to_pydantic() for row in rows]

    def get_unplaced(self, user_id: str) -> List[Assignment]:
        """Get non-completed assignments missing a scheduled date or block."""
        return [a for a in self.get_for_student(user_id) if not a.is_completed and not a.is_placed]

    def update_schedule(
        self,
        assignment_id: str,
        scheduled_date: date,
        scheduled_block: int,
        detected_family: Optional[Family] = None,
    ) -> Assignment:
        """Write a placement onto an assignment."""
        row = self._get_row(assignment_id)
        if row is None:
            raise ValueError(f"Assignment {assignment_id} not found")

        row.scheduled_date = scheduled_date
        row.scheduled_block = scheduled_block
        if detected_family is not None:
            row.detected_family = enum_to_value(detected_family)
        row.updated_at = datetime.utcnow()

        self._commit("schedule", assignment_id)
        self.db.refresh(row)
        logger.debug(f"Scheduled assignment {assignment_id} on {scheduled_date} block {scheduled_block}")
        return row.to_pydantic()

    def save_segment(self, segment: Assignment) -> Assignment:
        """Insert or update one daily segment of a split module."""
        if not segment.parent_id:
            raise ValueError(f"Assignment {segment.id} is not a module segment")

        row = self._get_row(segment.id)
        if row is None:
            row = AssignmentDB.from_pydantic(segment)
            self.db.add(row)
        else:
            row.scheduled_date = segment.scheduled_date
            row.scheduled_block = segment.scheduled_block
            row.detected_family = enum_to_value(segment.detected_family)
            row.updated_at = datetime.utcnow()

        self._commit("save segment", segment.id)
        self.db.refresh(row)
        logger.debug(f"Saved segment {segment.id} of {segment.parent_id}")
        return row.to_pydantic()

    def mark_completed(self, assignment_id: str, completed_at: Optional[datetime] = None) -> Optional[Assignment]:
        """Mark an assignment completed. Returns None if it does not exist."""
        row = self._get_row(assignment_id)
        if row is None:
            return None

        row.completion_status = CompletionStatus.COMPLETED.value
        row.completed_at = completed_at or datetime.utcnow()
        self._commit("complete", assignment_id)
        self.db.refresh(row)
        logger.debug(f"Completed assignment {assignment_id}")
        return row.to_pydantic()

    def clear_schedule(self, user_id: str, scheduled_dates: List[date]) -> int:
        """Unplace a student's incomplete assignments on the given dates.

        Returns:
            Number of assignments cleared
        """
        if not scheduled_dates:
            return 0
        try:
            affected = (
                self.db.query(AssignmentDB)
                .filter(
                    AssignmentDB.user_id == user_id,
                    AssignmentDB.scheduled_date.in_(scheduled_dates),
                    AssignmentDB.completion_status != CompletionStatus.COMPLETED.value,
                )
                .update(
                    {AssignmentDB.scheduled_date: None, AssignmentDB.scheduled_block: None},
                    synchronize_session=False,
                )
            )
        except OperationalError as e:
            self.db.rollback()
            raise StoreUnavailableError(str(e), operation="clear schedule") from e
        self._commit("clear schedule for", user_id)
        logger.debug(f"Cleared {affected} scheduled assignments for {user_id}")
        return int(affected)
