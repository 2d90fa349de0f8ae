"""Tests for the placement engine.

These tests verify that placement is deterministic (same inputs → same
outputs), never double-books, and follows the weekly family rotation.
"""

import pytest
from datetime import date

from studyplanner.engine.placement import place_assignments, sort_by_due_date
from studyplanner.engine.block_family import time_to_minutes
from studyplanner.models.constants import FALLBACKS
from studyplanner.models.family import Family
from studyplanner.models.placement import PlacementResult


A, H, C = Family.ANALYTICAL, Family.HUMANITIES, Family.COMPOSITION


def _assigned_ids(result: PlacementResult):
    return [p.assignment.id for p in result.populated_blocks if p.assignment is not None]


class TestPlaceAssignments:
    """Test place_assignments() core behavior."""

    def test_blocks_follow_family_pattern(self, make_assignment, make_block, monday):
        """Abigail's Monday rotation is Analytical, Humanities, Composition."""
        a1 = make_assignment(id="a1", title="Problem set", detected_family=A, due_date=date(2025, 1, 5))
        a2 = make_assignment(id="a2", title="Chapter notes", detected_family=H, due_date=None)
        blocks = [make_block("08:00"), make_block("09:00"), make_block("10:00")]

        result = place_assignments([a1, a2], blocks, "Abigail", monday)

        first, second, third = result.populated_blocks
        assert first.assignment.id == "a1"
        assert first.family == A
        assert second.assignment.id == "a2"
        assert second.family == H
        assert third.family == C
        assert third.assignment is None
        assert third.fallback is None
        assert result.unscheduled_count == 0

    def test_earliest_due_date_wins(self, make_assignment, make_block, monday):
        """Two Humanities assignments compete for Monday's second block."""
        later = make_assignment(id="later", detected_family=H, due_date=date(2025, 1, 3))
        sooner = make_assignment(id="sooner", detected_family=H, due_date=date(2025, 1, 1))
        blocks = [make_block("08:00"), make_block("09:00")]

        result = place_assignments([later, sooner], blocks, "Abigail", monday)

        assert result.populated_blocks[1].assignment.id == "sooner"
        assert result.unscheduled_count == 1

    def test_missing_due_date_sorts_last(self, make_assignment, make_block, monday):
        undated = make_assignment(id="undated", detected_family=A, due_date=None)
        dated = make_assignment(id="dated", detected_family=A, due_date=date(2025, 1, 10))

        result = place_assignments([undated, dated], [make_block("08:00")], "Abigail", monday)

        assert result.populated_blocks[0].assignment.id == "dated"

    def test_due_date_ties_keep_input_order(self, make_assignment, make_block, monday):
        first = make_assignment(id="first", detected_family=A, due_date=date(2025, 1, 10))
        second = make_assignment(id="second", detected_family=A, due_date=date(2025, 1, 10))

        result = place_assignments([first, second], [make_block("08:00")], "Abigail", monday)

        assert result.populated_blocks[0].assignment.id == "first"

    def test_classifies_when_family_missing(self, make_assignment, make_block, monday):
        """Unclassified assignments are run through the classifier."""
        essay = make_assignment(id="essay", title="Write an essay", course_name=None, subject=None)
        blocks = [make_block("08:00"), make_block("09:00"), make_block("10:00")]

        result = place_assignments([essay], blocks, "Abigail", monday)

        assert result.populated_blocks[2].assignment.id == "essay"
        assert result.populated_blocks[2].assignment.detected_family == C

    def test_accepts_iso_string_and_weekday_name(self, make_assignment, make_block):
        a1 = make_assignment(id="a1", detected_family=A)

        by_string = place_assignments([a1], [make_block("08:00")], "Abigail", "2025-01-06")
        by_name = place_assignments([a1], [make_block("08:00")], "Abigail", "Monday")

        assert _assigned_ids(by_string) == ["a1"]
        assert _assigned_ids(by_name) == ["a1"]

    def test_none_inputs_give_empty_result(self, monday):
        result = place_assignments(None, None, "Abigail", monday)

        assert result.populated_blocks == []
        assert result.unscheduled_count == 0

    def test_unknown_student_leaves_blocks_empty(self, make_assignment, make_block, monday):
        a1 = make_assignment(id="a1", detected_family=A)

        result = place_assignments([a1], [make_block("08:00")], "Nobody", monday)

        assert result.populated_blocks[0].assignment is None
        assert result.populated_blocks[0].family is None
        assert result.unscheduled_count == 1


class TestCandidateFiltering:
    """Test which assignments are eligible for placement."""

    def test_completed_assignments_never_placed(self, make_assignment, make_block, monday):
        done = make_assignment(id="done", detected_family=A, due_date=date(2025, 1, 1), completion_status="completed")
        todo = make_assignment(id="todo", detected_family=A, due_date=date(2025, 1, 9))

        result = place_assignments([done, todo], [make_block("08:00")], "Abigail", monday)

        assert _assigned_ids(result) == ["todo"]
        assert result.unscheduled_count == 0

    def test_placed_assignments_excluded(self, make_assignment, make_block, monday):
        placed = make_assignment(
            id="placed", detected_family=A, scheduled_date=date(2025, 1, 7), scheduled_block=1
        )

        result = place_assignments([placed], [make_block("08:00")], "Abigail", monday)

        assert _assigned_ids(result) == []
        assert result.unscheduled_count == 0

    def test_partially_placed_assignment_is_unplaced(self, make_assignment, make_block, monday):
        """An assignment with a date but no block still needs a slot."""
        half = make_assignment(id="half", detected_family=A, scheduled_date=date(2025, 1, 7))

        result = place_assignments([half], [make_block("08:00")], "Abigail", monday)

        assert _assigned_ids(result) == ["half"]

    def test_split_module_parent_excluded(self, make_assignment, make_block, monday):
        """A module already split into segments is represented by its segments."""
        parent = make_assignment(id="mod", title="Module 5", course_name="American History", detected_family=A)
        segment = make_assignment(
            id="mod-day-1", title="Module 5 - Day 1", parent_id="mod", segment_order=1, detected_family=A
        )

        result = place_assignments([parent, segment], [make_block("08:00")], "Abigail", monday)

        assert _assigned_ids(result) == ["mod-day-1"]
        assert result.unscheduled_count == 0


class TestStudyHall:
    """Test Study Hall block population."""

    def test_prefers_short_task(self, make_assignment, make_block, monday):
        """A Study Hall resolved to Analytical takes the quiz review, not the essay."""
        essay = make_assignment(id="essay", title="Write essay", detected_family=A)
        quiz = make_assignment(id="quiz", title="Quiz review", detected_family=A)

        result = place_assignments([essay, quiz], [make_block("08:00", "study hall")], "Abigail", monday)

        block = result.populated_blocks[0]
        assert block.assignment.id == "quiz"
        assert block.fallback is None
        assert result.unscheduled_count == 1

    def test_short_task_must_match_family(self, make_assignment, make_block, monday):
        vocab = make_assignment(id="vocab", title="Vocab drill", detected_family=H)

        result = place_assignments([vocab], [make_block("08:00", "study hall")], "Abigail", monday)

        block = result.populated_blocks[0]
        assert block.assignment is None
        assert block.fallback is not None

    def test_fallback_when_nothing_fits(self, make_block, monday):
        result = place_assignments([], [make_block("13:00", "study hall")], "Abigail", monday)

        block = result.populated_blocks[0]
        assert block.assignment is None
        assert block.fallback.is_fallback is True
        assert block.fallback.title == FALLBACKS[Family.STUDY_HALL][0]["title"]

    def test_study_hall_past_pattern_takes_any_family(self, make_assignment, make_block, monday):
        """A Study Hall beyond the day's pattern accepts short work from any family."""
        worksheet = make_assignment(id="ws", title="Color theory worksheet", detected_family=Family.CREATIVE)
        blocks = [make_block("08:00"), make_block("09:00"), make_block("10:00"), make_block("13:00", "study hall")]

        result = place_assignments([worksheet], blocks, "Abigail", monday)

        study_hall = result.populated_blocks[3]
        assert study_hall.family == Family.STUDY_HALL
        assert study_hall.assignment.id == "ws"
        # Monday has no Creative block of its own
        assert _assigned_ids(result) == ["ws"]

    def test_study_hall_never_empty(self, make_assignment, make_block):
        """Every Study Hall gets real work or a fallback."""
        thursday = date(2025, 1, 9)
        blocks = [
            make_block("09:00", "study hall", weekday="Thursday"),
            make_block("10:00", "assignment", subject="Co-op homework", weekday="Thursday"),
            make_block("13:30", "study", weekday="Thursday"),
        ]
        quiz = make_assignment(id="quiz", title="Practice quiz", detected_family=A)

        result = place_assignments([quiz], blocks, "Abigail", thursday)

        for populated in result.populated_blocks:
            assert populated.assignment is not None or populated.fallback is not None
            assert not (populated.assignment is not None and populated.fallback is not None)
        assert _assigned_ids(result) == ["quiz"]


class TestPriorityOverride:
    """Test the Algebra-mornings override."""

    def test_override_claims_algebra_first(self, make_assignment, make_block, monday):
        geometry = make_assignment(
            id="geo", title="Proofs", course_name="Geometry", subject="Math",
            detected_family=A, due_date=date(2025, 1, 2),
        )
        algebra = make_assignment(
            id="alg", title="Linear equations", course_name="Algebra 1", subject="Math",
            detected_family=A, due_date=date(2025, 1, 9),
        )

        result = place_assignments([geometry, algebra], [make_block("08:00")], "Khalil", monday)

        assert _assigned_ids(result) == ["alg"]

    def test_override_falls_through_without_match(self, make_assignment, make_block, monday):
        geometry = make_assignment(id="geo", title="Proofs", course_name="Geometry", subject="Math", detected_family=A)

        result = place_assignments([geometry], [make_block("08:00")], "Khalil", monday)

        assert _assigned_ids(result) == ["geo"]

    def test_override_claims_only_once(self, make_assignment, make_block):
        """One algebra task fills one morning block; the next block falls back to its family."""
        wednesday = date(2025, 1, 8)
        algebra = make_assignment(id="alg", course_name="Algebra 1", detected_family=A, due_date=date(2025, 1, 9))
        science = make_assignment(id="sci", course_name="Earth Science", detected_family=A, due_date=date(2025, 1, 10))
        reading = make_assignment(id="read", title="Chapter 2", course_name="American History", detected_family=H)
        blocks = [make_block("08:00", weekday="Wednesday"), make_block("09:00", weekday="Wednesday")]

        result = place_assignments([science, algebra, reading], blocks, "Khalil", wednesday)

        assert _assigned_ids(result) == ["alg", "read"]
        assert result.unscheduled_count == 1

    def test_override_claims_both_morning_blocks(self, make_assignment, make_block):
        """Algebra takes Wednesday's second block even though the rotation says Humanities."""
        wednesday = date(2025, 1, 8)
        first = make_assignment(id="alg1", course_name="Algebra 1", detected_family=A, due_date=date(2025, 1, 9))
        second = make_assignment(id="alg2", course_name="Algebra 1", detected_family=A, due_date=date(2025, 1, 10))
        blocks = [make_block("08:00", weekday="Wednesday"), make_block("09:00", weekday="Wednesday")]

        result = place_assignments([second, first], blocks, "Khalil", wednesday)

        assert _assigned_ids(result) == ["alg1", "alg2"]
        assert result.populated_blocks[1].family == H


class TestBlockOrdering:
    """Test block ordinals, pass-through and output ordering."""

    def test_fixed_blocks_pass_through(self, make_block, monday):
        lunch = make_block("12:00", "lunch", subject="Lunch")

        result = place_assignments([], [lunch], "Abigail", monday)

        populated = result.populated_blocks[0]
        assert populated.block == lunch
        assert populated.assignment is None
        assert populated.family is None
        assert populated.fallback is None

    def test_ordinal_counts_assignable_blocks_only(self, make_assignment, make_block, monday):
        """Fixed blocks between assignable ones do not shift the rotation."""
        reading = make_assignment(id="read", detected_family=H)
        blocks = [
            make_block("07:30", "bible"),
            make_block("08:00"),
            make_block("12:00", "lunch"),
            make_block("13:00"),
        ]

        result = place_assignments([reading], blocks, "Abigail", monday)

        assert result.populated_blocks[3].family == H
        assert result.populated_blocks[3].assignment.id == "read"

    def test_output_sorted_by_start_time(self, make_block, monday):
        blocks = [
            make_block("bad-time", "travel"),
            make_block("13:00", "lunch"),
            make_block("08:00"),
            make_block("9:30", "movement"),
        ]

        result = place_assignments([], blocks, "Abigail", monday)

        starts = [p.block.start_time for p in result.populated_blocks]
        assert starts == ["08:00", "9:30", "13:00", "bad-time"]

    def test_sorted_output_is_monotonic(self, make_assignment, make_block, monday):
        blocks = [make_block(t) for t in ("10:15", "08:00", "14:45", "09:10")]
        assignments = [make_assignment(detected_family=f) for f in (A, H, C)]

        result = place_assignments(assignments, blocks, "Abigail", monday)

        minutes = [time_to_minutes(p.block.start_time) for p in result.populated_blocks]
        assert minutes == sorted(minutes)


class TestPlacementProperties:
    """Test invariants that hold for every run."""

    @pytest.fixture
    def busy_day(self, make_assignment, make_block):
        assignments = [
            make_assignment(id=f"a{i}", title=title, detected_family=family, due_date=due)
            for i, (title, family, due) in enumerate([
                ("Problem set", A, date(2025, 1, 8)),
                ("Quiz review", A, date(2025, 1, 7)),
                ("Chapter 3", H, None),
                ("Essay draft", C, date(2025, 1, 6)),
                ("Vocab check", H, date(2025, 1, 9)),
                ("Done work", A, date(2025, 1, 1)),
            ])
        ]
        assignments[-1] = assignments[-1].model_copy(update={"completion_status": "completed"})
        blocks = [
            make_block("08:00", weekday="Tuesday"),
            make_block("09:00", weekday="Tuesday"),
            make_block("10:00", "study hall", weekday="Tuesday"),
            make_block("11:00", weekday="Tuesday"),
            make_block("12:00", "lunch", weekday="Tuesday"),
            make_block("13:00", weekday="Tuesday"),
            make_block("14:00", weekday="Tuesday"),
        ]
        return assignments, blocks

    def test_no_double_booking(self, busy_day):
        assignments, blocks = busy_day

        result = place_assignments(assignments, blocks, "Abigail", "Tuesday")

        ids = _assigned_ids(result)
        assert len(ids) == len(set(ids))
        assert "a5" not in ids

    def test_family_adherence(self, busy_day):
        assignments, blocks = busy_day

        result = place_assignments(assignments, blocks, "Abigail", "Tuesday")

        for populated in result.populated_blocks:
            if populated.assignment is not None and populated.family != Family.STUDY_HALL:
                assert populated.assignment.detected_family == populated.family

    def test_idempotent(self, busy_day):
        """Same inputs give the same assignment-to-block mapping."""
        assignments, blocks = busy_day

        first = place_assignments(assignments, blocks, "Abigail", "Tuesday")
        second = place_assignments([a.model_copy() for a in assignments], blocks, "Abigail", "Tuesday")

        def mapping(result):
            return [(p.block.id, p.assignment.id if p.assignment else None) for p in result.populated_blocks]

        assert mapping(first) == mapping(second)
        assert first.unscheduled_count == second.unscheduled_count

    def test_unscheduled_count(self, busy_day):
        assignments, blocks = busy_day

        result = place_assignments(assignments, blocks, "Abigail", "Tuesday")

        assert result.unscheduled_count == 5 - len(_assigned_ids(result))


class TestSortByDueDate:
    """Test sort_by_due_date()."""

    def test_dated_before_undated(self, make_assignment):
        undated = make_assignment(id="u")
        late = make_assignment(id="late", due_date=date(2025, 2, 1))
        early = make_assignment(id="early", due_date=date(2025, 1, 1))

        assert [a.id for a in sort_by_due_date([undated, late, early])] == ["early", "late", "u"]
