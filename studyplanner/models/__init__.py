"""Data models for studyplanner."""

from studyplanner.models.family import Family
from studyplanner.models.assignment import Assignment, CompletionStatus
from studyplanner.models.schedule_block import ScheduleBlock, BlockType, FallbackContent, PopulatedBlock
from studyplanner.models.placement import PlacementResult, Placement, PlacementFailure, AutoFillResult

__all__ = [
    "Family",
    "Assignment",
    "CompletionStatus",
    "ScheduleBlock",
    "BlockType",
    "FallbackContent",
    "PopulatedBlock",
    "PlacementResult",
    "Placement",
    "PlacementFailure",
    "AutoFillResult",
]
