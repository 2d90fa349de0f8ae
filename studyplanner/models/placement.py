"""Placement result models for studyplanner."""

from datetime import date
from typing import List, Optional
from pydantic import BaseModel, Field

from studyplanner.models.family import Family
from studyplanner.models.schedule_block import PopulatedBlock


class PlacementResult(BaseModel):
    """Result of populating one day's blocks."""

    populated_blocks: List[PopulatedBlock] = Field(default_factory=list)
    unscheduled_count: int = Field(0, description="Unplaced assignments left after this run")


class Placement(BaseModel):
    """One assignment written to a date and block by auto-fill."""

    assignment_id: str
    parent_id: Optional[str] = None
    title: str
    scheduled_date: date
    scheduled_block: int
    family: Optional[Family] = None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class PlacementFailure(BaseModel):
    """A placement auto-fill could not persist.

    Day-level failures (the day's schedule could not be loaded) carry no
    assignment id or block number.
    """

    assignment_id: Optional[str] = None
    scheduled_date: date
    scheduled_block: Optional[int] = None
    error: str


class AutoFillResult(BaseModel):
    """Best-effort outcome of an auto-fill run over one week."""

    student: str
    week_start: date
    placements: List[Placement] = Field(default_factory=list)
    failures: List[PlacementFailure] = Field(default_factory=list)
    segments_created: int = 0

    @property
    def succeeded(self) -> bool:
        return not self.failures
