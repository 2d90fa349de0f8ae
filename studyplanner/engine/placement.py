"""Assignment placement for studyplanner.

Populates one day's schedule blocks with at most one assignment each,
following the student's weekly family rotation. This is a pure function
over its inputs: no I/O, no module-level state, same inputs -> same outputs
(fallback filler text aside).
"""

import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Set, Union

from studyplanner.models.assignment import Assignment
from studyplanner.models.family import Family
from studyplanner.models.schedule_block import ScheduleBlock, PopulatedBlock
from studyplanner.models.placement import PlacementResult
from studyplanner.models.constants import SHORT_TASK_KEYWORDS
from studyplanner.engine.family_detection import add_family, contains_any
from studyplanner.engine.block_family import (
    resolve_family,
    find_override,
    is_assignable,
    is_study_hall_block,
    time_to_minutes,
)
from studyplanner.engine.fallback import get_fallback

logger = logging.getLogger(__name__)

# Blocks with unparseable start times sort after every real time
_UNKNOWN_TIME_SORT = 24 * 60


def place_assignments(
    assignments: Optional[Iterable[Assignment]],
    schedule_blocks: Optional[Iterable[ScheduleBlock]],
    student_name: str,
    day: Union[date, str],
) -> PlacementResult:
    """Place unplaced assignments into a day's schedule blocks.

    Steps:
    1. Annotate every assignment with its family
    2. Drop completed assignments
    3. Keep only unplaced ones (missing scheduled date or block) as candidates
    4. Walk assignable blocks in input order; for each:
       - resolve its family from the weekly pattern (skip if none)
       - a priority override claims matching work first
       - Study Hall takes the first short task of its family, else fallback
       - other blocks take the earliest-due task of their family
    5. Pass fixed blocks through untouched
    6. Sort everything by start time

    No assignment is claimed twice. Missing or malformed data never raises;
    it leaves blocks empty.

    Args:
        assignments: All of the student's assignments (any state)
        schedule_blocks: The day's template blocks (fixed and assignable)
        student_name: Student whose patterns and overrides apply
        day: Date being populated, or a weekday name

    Returns:
        PlacementResult with populated blocks and remaining unscheduled count
    """
    weekday_name = _weekday_name(day)

    annotated = [add_family(a) for a in (assignments or [])]
    active = [a for a in annotated if not a.is_completed]
    # A module already split into daily segments is represented by its segments
    split_parents = {a.parent_id for a in annotated if a.parent_id}
    unplaced = [a for a in active if not a.is_placed and a.id not in split_parents]

    used: Set[str] = set()
    populated: List[PopulatedBlock] = []
    ordinal = 0

    for block in schedule_blocks or []:
        if not is_assignable(block):
            populated.append(PopulatedBlock(block=block))
            continue

        ordinal += 1
        populated.append(_populate_block(block, ordinal, unplaced, used, student_name, weekday_name))

    populated.sort(key=_start_sort_key)

    unscheduled_count = max(0, len(unplaced) - len(used))
    logger.debug(
        f"Placed {len(used)} of {len(unplaced)} unplaced assignments for {student_name} on {weekday_name} "
        f"({len(populated)} blocks)"
    )
    return PlacementResult(populated_blocks=populated, unscheduled_count=unscheduled_count)


def _populate_block(
    block: ScheduleBlock,
    ordinal: int,
    unplaced: List[Assignment],
    used: Set[str],
    student_name: str,
    weekday_name: str,
) -> PopulatedBlock:
    family = resolve_family(student_name, weekday_name, ordinal)
    study_hall = is_study_hall_block(block) or family == Family.STUDY_HALL

    if family is None and study_hall:
        family = Family.STUDY_HALL
    if family is None:
        return PopulatedBlock(block=block)

    override = find_override(student_name, weekday_name, ordinal)
    if override is not None:
        claimed = _first_available(
            (a for a in sort_by_due_date(unplaced) if _matches_course(a, override.keywords)),
            used,
        )
        if claimed is not None:
            logger.debug(f"Override {override.name} claimed {claimed.id} for block {block.id}")
            return PopulatedBlock(block=block, assignment=claimed, family=family)

    if study_hall:
        claimed = _first_available(
            (
                a for a in unplaced
                if _family_accepts(family, a) and contains_any(a.title, SHORT_TASK_KEYWORDS)
            ),
            used,
        )
        if claimed is not None:
            return PopulatedBlock(block=block, assignment=claimed, family=family)
        return PopulatedBlock(block=block, family=family, fallback=get_fallback(Family.STUDY_HALL))

    claimed = _first_available(
        (a for a in sort_by_due_date(unplaced) if _family_accepts(family, a)),
        used,
    )
    return PopulatedBlock(block=block, assignment=claimed, family=family)


def _first_available(candidates: Iterable[Assignment], used: Set[str]) -> Optional[Assignment]:
    """Claim the first candidate not already used in this run."""
    for assignment in candidates:
        if assignment.id not in used:
            used.add(assignment.id)
            return assignment
    return None


def _family_accepts(block_family: Family, assignment: Assignment) -> bool:
    # A pure Study Hall position takes short work from any family
    if block_family == Family.STUDY_HALL:
        return True
    return assignment.detected_family == block_family


def _matches_course(assignment: Assignment, keywords: Iterable[str]) -> bool:
    keywords = tuple(keywords)
    return contains_any(assignment.course_name, keywords) or contains_any(assignment.subject, keywords)


def sort_by_due_date(assignments: Iterable[Assignment]) -> List[Assignment]:
    """Sort by due date, earliest first; missing due dates go last.

    The sort is stable, so ties keep their input order.
    """
    return sorted(assignments, key=_due_date_sort_key)


def _due_date_sort_key(assignment: Assignment) -> tuple:
    if assignment.due_date:
        return (0, assignment.due_date)
    return (1, date.max)


def _start_sort_key(populated: PopulatedBlock) -> int:
    minutes = time_to_minutes(populated.block.start_time)
    return _UNKNOWN_TIME_SORT if minutes is None else minutes


def _weekday_name(day: Union[date, str]) -> str:
    if isinstance(day, (date, datetime)):
        return day.strftime("%A")
    try:
        return date.fromisoformat(str(day)).strftime("%A")
    except ValueError:
        return str(day)
