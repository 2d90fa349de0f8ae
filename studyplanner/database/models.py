"""SQLAlchemy database models for studyplanner."""

from datetime import datetime
from typing import Union, TypeVar, Type
import uuid
from sqlalchemy import Column, String, Integer, Date, DateTime, UniqueConstraint

from studyplanner.database.database import Base
from studyplanner.models.assignment import CompletionStatus
from studyplanner.models.family import Family

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T, None]):
    """Convert enum to string value (handles enum, string and None).

    Args:
        enum_obj: Enum instance, string value or None

    Returns:
        String value of the enum, the string itself, or None
    """
    if enum_obj is None:
        return None
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value)
    except (ValueError, AttributeError):
        return default


class AssignmentDB(Base):
    """Database model for Assignment."""

    __tablename__ = "assignments"
    __table_args__ = (
        # One row per day of a split module
        UniqueConstraint("parent_id", "segment_order", name="uq_assignment_segment"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, index=True)

    # Basic fields
    title = Column(String, nullable=False)
    subject = Column(String, nullable=True)
    course_name = Column(String, nullable=True)
    due_date = Column(Date, nullable=True, index=True)

    # Scheduling fields
    scheduled_date = Column(Date, nullable=True, index=True)
    scheduled_block = Column(Integer, nullable=True)

    # Lifecycle
    completion_status = Column(String, nullable=False, default=CompletionStatus.PENDING.value)
    completed_at = Column(DateTime, nullable=True)

    # Classification
    detected_family = Column(String, nullable=True)
    actual_estimated_minutes = Column(Integer, nullable=True)

    # Module segment linkage (optional)
    parent_id = Column(String, nullable=True, index=True)
    segment_order = Column(Integer, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from studyplanner.models.assignment import Assignment

        return Assignment(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            subject=self.subject,
            course_name=self.course_name,
            due_date=self.due_date,
            scheduled_date=self.scheduled_date,
            scheduled_block=self.scheduled_block,
            completion_status=value_to_enum(self.completion_status, CompletionStatus, CompletionStatus.PENDING),
            completed_at=self.completed_at,
            detected_family=value_to_enum(self.detected_family, Family, None),
            actual_estimated_minutes=self.actual_estimated_minutes,
            parent_id=self.parent_id,
            segment_order=self.segment_order,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_pydantic(cls, assignment):
        """Create database model from Pydantic model."""
        now = datetime.utcnow()
        return cls(
            id=assignment.id,
            user_id=assignment.user_id,
            title=assignment.title,
            subject=assignment.subject,
            course_name=assignment.course_name,
            due_date=assignment.due_date,
            scheduled_date=assignment.scheduled_date,
            scheduled_block=assignment.scheduled_block,
            completion_status=enum_to_value(assignment.completion_status),
            completed_at=assignment.completed_at,
            detected_family=enum_to_value(assignment.detected_family),
            actual_estimated_minutes=assignment.actual_estimated_minutes,
            parent_id=assignment.parent_id,
            segment_order=assignment.segment_order,
            created_at=assignment.created_at or now,
            updated_at=assignment.updated_at or now,
        )


class ScheduleTemplateDB(Base):
    """Database model for one block of a student's weekly template."""

    __tablename__ = "schedule_template"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    student_name = Column(String, nullable=False, index=True)
    weekday = Column(String, nullable=False, index=True)
    block_number = Column(Integer, nullable=True)
    start_time = Column(String, nullable=False)
    end_time = Column(String, nullable=False)
    subject = Column(String, nullable=False, default="")
    block_name = Column(String, nullable=True)
    block_type = Column(String, nullable=False)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from studyplanner.models.schedule_block import ScheduleBlock

        return ScheduleBlock(
            id=self.id,
            student_name=self.student_name,
            weekday=self.weekday,
            block_number=self.block_number,
            start_time=self.start_time,
            end_time=self.end_time,
            subject=self.subject or "",
            block_name=self.block_name,
            block_type=self.block_type,
        )

    @classmethod
    def from_pydantic(cls, block):
        """Create database model from Pydantic model."""
        return cls(
            id=block.id,
            student_name=block.student_name,
            weekday=block.weekday,
            block_number=block.block_number,
            start_time=block.start_time,
            end_time=block.end_time,
            subject=block.subject,
            block_name=block.block_name,
            block_type=block.block_type,
        )
