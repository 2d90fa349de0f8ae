"""Placement engine for studyplanner."""

from studyplanner.engine.family_detection import detect_family, add_family
from studyplanner.engine.block_family import resolve_family, is_study_hall, should_prioritize
from studyplanner.engine.fallback import get_fallback
from studyplanner.engine.placement import place_assignments
from studyplanner.engine.autofill import WeeklyAutoFiller, auto_fill_week, split_history_module

__all__ = [
    "detect_family",
    "add_family",
    "resolve_family",
    "is_study_hall",
    "should_prioritize",
    "get_fallback",
    "place_assignments",
    "WeeklyAutoFiller",
    "auto_fill_week",
    "split_history_module",
]
