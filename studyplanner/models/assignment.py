"""Assignment data model for studyplanner."""

from datetime import date, datetime
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field

from studyplanner.models.family import Family


class CompletionStatus(str, Enum):
    """Assignment completion status enumeration."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    STUCK = "stuck"  # Student escalated from focus mode


class Assignment(BaseModel):
    """Canonical Assignment model."""

    id: str = Field(..., description="Unique assignment identifier")
    user_id: str = Field(..., description="Student who owns this assignment")
    title: str = Field(..., description="Assignment title")
    subject: Optional[str] = Field(None, description="Subject label (e.g., 'History')")
    course_name: Optional[str] = Field(None, description="Course name (e.g., 'American History')")
    due_date: Optional[date] = Field(None, description="Due date (date-only)")
    scheduled_date: Optional[date] = Field(None, description="Date the assignment is placed on")
    scheduled_block: Optional[int] = Field(None, description="Block number the assignment is placed in")
    completion_status: CompletionStatus = Field(CompletionStatus.PENDING, description="Completion status")
    completed_at: Optional[datetime] = Field(None, description="Completion timestamp")
    detected_family: Optional[Family] = Field(None, description="Cached family classification")
    actual_estimated_minutes: Optional[int] = Field(None, ge=0, description="Estimated minutes to complete")

    # Segment linkage for multi-day modules (optional)
    parent_id: Optional[str] = Field(None, description="If split from a multi-day module, the parent assignment id")
    segment_order: Optional[int] = Field(None, description="If split from a multi-day module, the 1-based day number")

    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @property
    def is_completed(self) -> bool:
        return self.completion_status == CompletionStatus.COMPLETED

    @property
    def is_placed(self) -> bool:
        """Placed only when both scheduled date and scheduled block are set."""
        return self.scheduled_date is not None and self.scheduled_block is not None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
