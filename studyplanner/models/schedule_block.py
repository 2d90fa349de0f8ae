"""Schedule block data models for studyplanner."""

from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field, model_validator

from studyplanner.models.assignment import Assignment
from studyplanner.models.family import Family


class BlockType(str, Enum):
    """Well-known schedule template block types (stored lowercase)."""
    ASSIGNMENT = "assignment"
    STUDY_HALL = "study hall"
    BIBLE = "bible"
    LUNCH = "lunch"
    CO_OP = "co-op"
    MOVEMENT = "movement"
    TRAVEL = "travel"
    PREP_LOAD = "prep/load"


class ScheduleBlock(BaseModel):
    """One fixed or assignable slot of a student's weekly template."""

    id: str = Field(..., description="Unique schedule block identifier")
    student_name: str = Field(..., description="Student the template belongs to")
    weekday: str = Field(..., description="Weekday name (e.g., 'Monday')")
    block_number: Optional[int] = Field(None, description="Ordinal block number within the day (null for fixed blocks)")
    start_time: str = Field(..., description="Start time, HH:MM 24-hour")
    end_time: str = Field(..., description="End time, HH:MM 24-hour")
    subject: str = Field("", description="Subject label or display name")
    block_name: Optional[str] = Field(None, description="Optional block name")
    block_type: str = Field(..., description="Block type (see BlockType)")


class FallbackContent(BaseModel):
    """Filler activity for a block with no real assignment."""

    title: str
    minutes: int
    family: Family
    is_fallback: bool = True

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class PopulatedBlock(BaseModel):
    """A schedule block plus what placement put in it."""

    block: ScheduleBlock = Field(..., description="The untouched input block")
    assignment: Optional[Assignment] = Field(None, description="Assigned real work, if any")
    family: Optional[Family] = Field(None, description="Family resolved for this block, if any")
    fallback: Optional[FallbackContent] = Field(None, description="Filler content, if any")

    @model_validator(mode="after")
    def _assignment_or_fallback(self):
        if self.assignment is not None and self.fallback is not None:
            raise ValueError("A block holds either an assignment or fallback content, not both")
        return self

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
