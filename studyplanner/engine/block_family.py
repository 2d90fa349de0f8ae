"""Block family resolution for studyplanner.

Answers three questions about a block position in a student's day:
which family the weekly rotation assigns to it, whether it is a Study Hall,
and whether a named priority override gets first claim on it.
"""

from typing import Dict, List, Optional, Sequence
from studyplanner.models.family import Family
from studyplanner.models.schedule_block import ScheduleBlock, BlockType
from studyplanner.models.constants import (
    FAMILY_PATTERNS,
    PRIORITY_OVERRIDES,
    STUDY_HALL_AFTERNOON_HOUR,
    PriorityOverride,
)


Patterns = Dict[str, Dict[str, List[Family]]]


def resolve_family(
    student_name: str,
    weekday_name: str,
    block_ordinal: Optional[int],
    patterns: Patterns = FAMILY_PATTERNS,
) -> Optional[Family]:
    """Get the family the weekly rotation assigns to a block position.

    Args:
        student_name: Student whose pattern to use
        weekday_name: Weekday name (e.g., 'Monday')
        block_ordinal: 1-based position among the day's assignable blocks
        patterns: Student -> weekday -> ordered families

    Returns:
        Family for the position, or None for a non-assignable position
    """
    pattern = patterns.get(student_name, {}).get(weekday_name)
    if not pattern or block_ordinal is None or block_ordinal < 1:
        return None
    if block_ordinal > len(pattern):
        return None
    return Family(pattern[block_ordinal - 1])


def is_study_hall(
    block_type: Optional[str],
    start_time: Optional[str] = None,
    subject: Optional[str] = None,
    block_name: Optional[str] = None,
) -> bool:
    """Check whether a block is a Study Hall.

    A block is a Study Hall if:
    1. Its type is 'study hall'
    2. OR its subject or name mentions 'study hall'
    3. OR it is an assignment block whose subject mentions 'co-op'
    4. OR its type mentions 'study' and it starts in the afternoon
    """
    type_lower = (block_type or "").strip().lower()
    subject_lower = (subject or "").lower()
    name_lower = (block_name or "").lower()

    if type_lower == BlockType.STUDY_HALL.value:
        return True

    if "study hall" in subject_lower or "study hall" in name_lower:
        return True

    if type_lower == BlockType.ASSIGNMENT.value and "co-op" in subject_lower:
        return True

    if "study" in type_lower:
        hour = _hour_of(start_time)
        return hour is not None and hour >= STUDY_HALL_AFTERNOON_HOUR

    return False


def is_study_hall_block(block: ScheduleBlock) -> bool:
    return is_study_hall(block.block_type, block.start_time, block.subject, block.block_name)


def is_assignable(block: ScheduleBlock) -> bool:
    """Assignment and Study Hall blocks can receive work; everything else is fixed."""
    if (block.block_type or "").strip().lower() == BlockType.ASSIGNMENT.value:
        return True
    return is_study_hall_block(block)


def find_override(
    student_name: str,
    weekday_name: str,
    block_ordinal: Optional[int],
    overrides: Sequence[PriorityOverride] = PRIORITY_OVERRIDES,
    patterns: Patterns = FAMILY_PATTERNS,
) -> Optional[PriorityOverride]:
    """Get the first priority override that fires for a block position."""
    if block_ordinal is None:
        return None

    for rule in overrides:
        if rule.student != student_name:
            continue
        if weekday_name not in rule.weekdays:
            continue
        if block_ordinal > rule.max_ordinal:
            continue
        if rule.family is not None and resolve_family(student_name, weekday_name, block_ordinal, patterns) != rule.family:
            continue
        return rule
    return None


def should_prioritize(
    student_name: str,
    weekday_name: str,
    block_ordinal: Optional[int],
    overrides: Sequence[PriorityOverride] = PRIORITY_OVERRIDES,
    patterns: Patterns = FAMILY_PATTERNS,
) -> bool:
    return find_override(student_name, weekday_name, block_ordinal, overrides, patterns) is not None


def time_to_minutes(value: Optional[str]) -> Optional[int]:
    """Parse 'HH:MM' (seconds ignored) into minutes since midnight.

    Returns:
        Minutes since midnight, or None if the value is missing or malformed
    """
    if not value:
        return None
    parts = value.strip().split(":")
    if len(parts) < 2:
        return None
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        return None
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        return None
    return hours * 60 + minutes


def _hour_of(value: Optional[str]) -> Optional[int]:
    minutes = time_to_minutes(value)
    return None if minutes is None else minutes // 60
