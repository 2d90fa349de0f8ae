"""Weekly auto-fill for studyplanner.

Bulk-schedules a student's unplaced backlog across Monday..Friday of one
week and persists each placement through a write collaborator. Unlike
place_assignments, the "used" state spans the whole week, Study Hall uses a
stricter short-task filter, and multi-day history modules are split into
daily segments first.

Writes are strictly sequential. Callers must not run two auto-fills for the
same student at once; a concurrent run can double-book an assignment.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional, Protocol, Set

from studyplanner.exceptions import StoreUnavailableError
from studyplanner.models.assignment import Assignment
from studyplanner.models.family import Family
from studyplanner.models.schedule_block import ScheduleBlock
from studyplanner.models.placement import AutoFillResult, Placement, PlacementFailure
from studyplanner.models.constants import (
    FAMILY_PATTERNS,
    SPECIAL_RESOURCE_KEYWORDS,
    STUDY_HALL_MAX_MINUTES,
    DEFAULT_ESTIMATED_MINUTES,
    MODULE_SPLIT_DAYS,
    MODULE_TITLE_KEYWORD,
    MODULE_COURSE_KEYWORD,
    WEEKDAYS,
)
from studyplanner.engine.family_detection import add_family, contains_any
from studyplanner.engine.block_family import find_override, is_assignable, is_study_hall_block
from studyplanner.engine.placement import sort_by_due_date

logger = logging.getLogger(__name__)


class AssignmentStore(Protocol):
    """Read/write collaborator for assignment records."""

    def get_for_student(self, user_id: str) -> List[Assignment]:
        ...

    def update_schedule(
        self,
        assignment_id: str,
        scheduled_date: date,
        scheduled_block: int,
        detected_family: Optional[Family] = None,
    ) -> Optional[Assignment]:
        ...

    def save_segment(self, segment: Assignment) -> Assignment:
        ...


class ScheduleStore(Protocol):
    """Read collaborator for schedule template blocks."""

    def get_for_day(self, student_name: str, weekday: str) -> List[ScheduleBlock]:
        ...


def is_history_module(assignment: Assignment) -> bool:
    """A history module spans several days of work."""
    if MODULE_TITLE_KEYWORD not in (assignment.title or "").lower():
        return False
    return contains_any(assignment.course_name, (MODULE_COURSE_KEYWORD,)) or contains_any(
        assignment.subject, (MODULE_COURSE_KEYWORD,)
    )


def split_history_module(assignment: Assignment, days: int = MODULE_SPLIT_DAYS) -> List[Assignment]:
    """Split a multi-day history module into daily segments.

    Each segment is titled '<title> - Day n', carries the parent's id as
    parent_id and gets 1/days of the estimated minutes. Anything that is not
    a history module is returned unchanged as a single-item list.

    Args:
        assignment: Assignment to split
        days: Number of daily segments

    Returns:
        List of segments (or [assignment])
    """
    if assignment.parent_id or not is_history_module(assignment):
        return [assignment]

    minutes = assignment.actual_estimated_minutes
    segment_minutes = None if minutes is None else minutes // days

    segments = []
    for day_number in range(1, days + 1):
        segments.append(
            assignment.model_copy(
                update={
                    "id": segment_id(assignment.id, day_number),
                    "title": f"{assignment.title} - Day {day_number}",
                    "parent_id": assignment.id,
                    "segment_order": day_number,
                    "actual_estimated_minutes": segment_minutes,
                    "scheduled_date": None,
                    "scheduled_block": None,
                    "detected_family": None,
                }
            )
        )
    return segments


def segment_id(parent_id: str, day_number: int) -> str:
    return f"{parent_id}-day-{day_number}"


def requires_special_resources(assignment: Assignment) -> bool:
    """Check whether an assignment needs equipment or supervision."""
    return contains_any(assignment.title, SPECIAL_RESOURCE_KEYWORDS)


def is_study_hall_candidate(assignment: Assignment) -> bool:
    """Short enough and resource-free enough for an unsupervised Study Hall."""
    minutes = assignment.actual_estimated_minutes
    if minutes is None:
        minutes = DEFAULT_ESTIMATED_MINUTES
    return minutes <= STUDY_HALL_MAX_MINUTES and not requires_special_resources(assignment)


class WeeklyAutoFiller:
    """Fills a student's week of assignable blocks from their backlog."""

    def __init__(self, assignment_store: AssignmentStore, schedule_store: ScheduleStore, patterns=FAMILY_PATTERNS):
        self.assignment_store = assignment_store
        self.schedule_store = schedule_store
        self.patterns = patterns

    def build_candidates(self, student: str) -> List[Assignment]:
        """Load the student's unplaced backlog, split modules and classify.

        Segments that already exist in the store (placed by an earlier run)
        are left out.
        """
        records = self.assignment_store.get_for_student(student)
        existing_ids = {a.id for a in records}

        candidates: List[Assignment] = []
        for record in records:
            if record.is_completed or record.is_placed:
                continue
            for piece in split_history_module(record):
                if piece.parent_id == record.id and piece.id in existing_ids:
                    continue
                candidates.append(add_family(piece))
        return candidates

    def fill_week(self, student: str, week_start: date) -> AutoFillResult:
        """Place the student's backlog into Monday..Friday of a week.

        Args:
            student: Student name (owner of the assignments and templates)
            week_start: Any date in the target week

        Returns:
            AutoFillResult listing placements plus per-assignment and per-day
            failures

        Raises:
            StoreUnavailableError: if the store is unreachable before any
                placement has been written
        """
        monday = week_start - timedelta(days=week_start.weekday())
        result = AutoFillResult(student=student, week_start=monday)

        candidates = self.build_candidates(student)
        used: Set[str] = set()
        logger.debug(f"Auto-fill for {student} week of {monday}: {len(candidates)} candidates")

        for day_index, weekday in enumerate(WEEKDAYS):
            pattern = self.patterns.get(student, {}).get(weekday)
            if not pattern:
                continue

            current_date = monday + timedelta(days=day_index)
            try:
                blocks = self._assignable_blocks(student, weekday)
            except StoreUnavailableError as e:
                if not result.placements:
                    logger.error(f"Schedule store unavailable before any placement for {student}")
                    raise
                logger.error(f"Skipping {weekday} {current_date} for {student}: {str(e)}")
                result.failures.append(
                    PlacementFailure(scheduled_date=current_date, error=f"StoreUnavailableError: {str(e)}")
                )
                continue

            for position, (block, family) in enumerate(zip(blocks, pattern), start=1):
                family = Family(family)
                available = [a for a in candidates if a.id not in used]

                if family == Family.STUDY_HALL or is_study_hall_block(block):
                    choice = self._pick_study_hall(available)
                else:
                    choice = self._pick_for_family(available, family, student, weekday, position)

                if choice is None:
                    continue

                used.add(choice.id)
                self._write(result, choice, current_date, block.block_number, family)

        logger.debug(
            f"Auto-fill for {student} week of {monday} finished: "
            f"{len(result.placements)} placed, {len(result.failures)} failed"
        )
        return result

    def _assignable_blocks(self, student: str, weekday: str) -> List[ScheduleBlock]:
        blocks = [
            b for b in self.schedule_store.get_for_day(student, weekday)
            if is_assignable(b) and b.block_number is not None
        ]
        return sorted(blocks, key=lambda b: b.block_number)

    def _pick_study_hall(self, available: List[Assignment]) -> Optional[Assignment]:
        candidates = sort_by_due_date(a for a in available if is_study_hall_candidate(a))
        return candidates[0] if candidates else None

    def _pick_for_family(
        self,
        available: List[Assignment],
        family: Family,
        student: str,
        weekday: str,
        position: int,
    ) -> Optional[Assignment]:
        matching = sort_by_due_date(a for a in available if a.detected_family == family)
        if not matching:
            return None

        override = find_override(student, weekday, position, patterns=self.patterns)
        if override is not None:
            for assignment in matching:
                if contains_any(assignment.course_name, override.keywords) or contains_any(
                    assignment.subject, override.keywords
                ):
                    return assignment
        return matching[0]

    def _write(
        self,
        result: AutoFillResult,
        assignment: Assignment,
        scheduled_date: date,
        scheduled_block: int,
        family: Family,
    ) -> None:
        """Persist one placement; failures are recorded, not raised."""
        try:
            if assignment.parent_id:
                segment = assignment.model_copy(
                    update={"scheduled_date": scheduled_date, "scheduled_block": scheduled_block}
                )
                self.assignment_store.save_segment(segment)
                result.segments_created += 1
            else:
                self.assignment_store.update_schedule(
                    assignment.id, scheduled_date, scheduled_block, assignment.detected_family
                )
        except StoreUnavailableError:
            if not result.placements:
                logger.error(f"Assignment store unavailable before any placement for {result.student}")
                raise
            self._record_failure(result, assignment, scheduled_date, scheduled_block, "StoreUnavailableError")
            return
        except Exception as e:
            self._record_failure(result, assignment, scheduled_date, scheduled_block, f"{type(e).__name__}: {str(e)}")
            return

        result.placements.append(
            Placement(
                assignment_id=assignment.id,
                parent_id=assignment.parent_id,
                title=assignment.title,
                scheduled_date=scheduled_date,
                scheduled_block=scheduled_block,
                family=family,
            )
        )
        logger.debug(f"Scheduled {assignment.id} on {scheduled_date} block {scheduled_block}")

    def _record_failure(
        self,
        result: AutoFillResult,
        assignment: Assignment,
        scheduled_date: date,
        scheduled_block: int,
        error: str,
    ) -> None:
        logger.error(f"Failed to schedule {assignment.id} on {scheduled_date} block {scheduled_block}: {error}")
        result.failures.append(
            PlacementFailure(
                assignment_id=assignment.id,
                scheduled_date=scheduled_date,
                scheduled_block=scheduled_block,
                error=error,
            )
        )


def auto_fill_week(
    student: str,
    week_start: date,
    assignment_store: AssignmentStore,
    schedule_store: ScheduleStore,
) -> AutoFillResult:
    """Convenience wrapper around WeeklyAutoFiller.fill_week."""
    return WeeklyAutoFiller(assignment_store, schedule_store).fill_week(student, week_start)
