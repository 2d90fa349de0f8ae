"""Constants for studyplanner.

This module centralizes the static planning tables: keyword rules, course
defaults, weekly family patterns, priority overrides and fallback content.
Everything here is plain data so rules can be swapped out in tests.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from studyplanner.models.family import Family


WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")

# Title keyword rules (checked in order, first match wins)
CREATIVE_KEYWORDS = (
    "create", "sketch", "draw", "map", "diagram", "poster",
    "slides", "build", "design", "art", "paint", "photo",
)
COMPOSITION_KEYWORDS = (
    "essay", "write", "draft", "response", "dbq", "outline",
    "paragraph", "compose", "letter", "report",
)
READING_KEYWORDS = (
    "read", "chapter", "pages", "book", "novel", "story", "literature", "poem",
)
ANALYTICAL_KEYWORDS = (
    "solve", "calculate", "problem", "quiz", "test", "exam",
    "formula", "equation", "lab", "experiment",
)

TITLE_KEYWORD_RULES: Tuple[Tuple[Family, Tuple[str, ...]], ...] = (
    (Family.CREATIVE, CREATIVE_KEYWORDS),
    (Family.COMPOSITION, COMPOSITION_KEYWORDS),
    (Family.HUMANITIES, READING_KEYWORDS),
    (Family.ANALYTICAL, ANALYTICAL_KEYWORDS),
)

# Course defaults (exact course name, case-insensitive)
COURSE_FAMILY_MAP: Dict[str, Family] = {
    "Algebra 1": Family.ANALYTICAL,
    "Geometry": Family.ANALYTICAL,
    "Earth Science": Family.ANALYTICAL,
    "Science": Family.ANALYTICAL,
    "Forensics": Family.ANALYTICAL,
    "English Fundamentals": Family.COMPOSITION,
    "English Composition": Family.COMPOSITION,
    "Grammar": Family.COMPOSITION,
    "American History": Family.HUMANITIES,
    "American Literature": Family.HUMANITIES,
    "Literature": Family.HUMANITIES,
    "Health": Family.HUMANITIES,
    "Art": Family.CREATIVE,
    "Photography": Family.CREATIVE,
    "Baking": Family.CREATIVE,
}

# Substring course defaults for names missing from COURSE_FAMILY_MAP
COURSE_KEYWORD_FAMILIES: Tuple[Tuple[Family, Tuple[str, ...]], ...] = (
    (Family.ANALYTICAL, ("algebra", "geometry", "math", "science", "chemistry", "physics")),
    (Family.HUMANITIES, ("history", "literature", "social")),
    (Family.COMPOSITION, ("english", "grammar", "writing")),
    (Family.CREATIVE, ("art", "photo", "music", "baking", "creative")),
)

DEFAULT_FAMILY = Family.ANALYTICAL

# Weekly family rotation, one entry per assignable block position
A, H, C, CR, SH = (
    Family.ANALYTICAL,
    Family.HUMANITIES,
    Family.COMPOSITION,
    Family.CREATIVE,
    Family.STUDY_HALL,
)

# One ordered entry per assignable block. Khalil's Algebra mornings are a
# PRIORITY_OVERRIDES rule, not pattern entries.
FAMILY_PATTERNS: Dict[str, Dict[str, List[Family]]] = {
    "Abigail": {
        "Monday": [A, H, C],
        "Tuesday": [A, H, C, CR, A, H],
        "Wednesday": [A, H, C, CR, A],
        "Thursday": [SH],  # Co-op day
        "Friday": [A, H, C, CR, A, H, C],
    },
    "Khalil": {
        "Monday": [A, H, C],
        "Tuesday": [A, H, C, CR, A],
        "Wednesday": [A, H, C, CR, A],
        "Thursday": [SH, SH],  # Co-op day
        "Friday": [A, H, C, CR, A],
    },
}


@dataclass(frozen=True)
class PriorityOverride:
    """A named exception giving one subject first claim on early blocks."""
    name: str
    student: str
    weekdays: Tuple[str, ...]
    max_ordinal: int
    keywords: Tuple[str, ...]
    family: Optional[Family] = None


PRIORITY_OVERRIDES: Tuple[PriorityOverride, ...] = (
    PriorityOverride(
        name="khalil_algebra_mornings",
        student="Khalil",
        weekdays=("Monday", "Wednesday"),
        max_ordinal=2,
        keywords=("algebra",),
    ),
)

# Fallback content per family
FALLBACKS: Dict[Family, List[Dict[str, object]]] = {
    Family.CREATIVE: [
        {"title": "Sketch a map from today's history reading", "minutes": 20},
        {"title": "Draw and label a science diagram", "minutes": 20},
        {"title": "Create a narration sketch", "minutes": 15},
    ],
    Family.ANALYTICAL: [{"title": "Review math problems", "minutes": 20}],
    Family.HUMANITIES: [{"title": "Free reading", "minutes": 30}],
    Family.COMPOSITION: [{"title": "Journal entry", "minutes": 15}],
    Family.STUDY_HALL: [{"title": "Quiet review: flashcards or free reading", "minutes": 25}],
}

# Study Hall selection
SHORT_TASK_KEYWORDS = (
    "quiz", "check", "review", "practice", "worksheet", "exercise",
    "question", "problem", "drill", "vocab", "vocabulary",
)
SPECIAL_RESOURCE_KEYWORDS = (
    "video", "online", "computer", "internet", "canvas",
    "zoom", "lab", "experiment", "presentation",
)
STUDY_HALL_MAX_MINUTES = 25
STUDY_HALL_AFTERNOON_HOUR = 13

# Assignments without an estimate are treated as this long
DEFAULT_ESTIMATED_MINUTES = 30

# Multi-day history modules
MODULE_SPLIT_DAYS = 5
MODULE_TITLE_KEYWORD = "module"
MODULE_COURSE_KEYWORD = "history"
