"""Family classification for studyplanner.

Maps each assignment to one cognitive-mode family so a day can alternate
between analytical, reading, writing and hands-on work. Title keywords win
over course defaults, which lets a one-off poster in a history course land
in Creative instead of Humanities.
"""

from typing import Dict, Iterable, Optional, Sequence, Tuple
from studyplanner.models.assignment import Assignment
from studyplanner.models.family import Family
from studyplanner.models.constants import (
    TITLE_KEYWORD_RULES,
    COURSE_FAMILY_MAP,
    COURSE_KEYWORD_FAMILIES,
    DEFAULT_FAMILY,
)


KeywordRules = Sequence[Tuple[Family, Iterable[str]]]


def contains_any(text: Optional[str], keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match against a keyword list."""
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in keywords)


def detect_family(
    assignment: Assignment,
    rules: KeywordRules = TITLE_KEYWORD_RULES,
    course_map: Dict[str, Family] = COURSE_FAMILY_MAP,
    course_keywords: KeywordRules = COURSE_KEYWORD_FAMILIES,
) -> Family:
    """Classify an assignment into a family.

    Order:
    1. Title keyword rules, in order (first match wins)
    2. Exact course table, by course name then subject
    3. Course keyword table, by course name then subject
    4. DEFAULT_FAMILY

    This function is deterministic and never raises.

    Args:
        assignment: Assignment to classify
        rules: Ordered (family, keywords) title rules
        course_map: Exact course name -> family table
        course_keywords: Ordered (family, substrings) course rules

    Returns:
        Detected family
    """
    for family, keywords in rules:
        if contains_any(assignment.title, keywords):
            return Family(family)

    family = lookup_course_family(assignment.course_name, course_map, course_keywords)
    if family is None:
        family = lookup_course_family(assignment.subject, course_map, course_keywords)
    return family if family is not None else DEFAULT_FAMILY


def lookup_course_family(
    course: Optional[str],
    course_map: Dict[str, Family] = COURSE_FAMILY_MAP,
    course_keywords: KeywordRules = COURSE_KEYWORD_FAMILIES,
) -> Optional[Family]:
    """Look up a course's default family, or None if nothing matches."""
    name = (course or "").strip().lower()
    if not name:
        return None

    for course_name, family in course_map.items():
        if course_name.lower() == name:
            return Family(family)

    for family, keywords in course_keywords:
        if contains_any(name, keywords):
            return Family(family)
    return None


def add_family(assignment: Assignment) -> Assignment:
    """Return a copy of the assignment annotated with its family.

    A cached detected_family on the record is trusted; otherwise the
    classifier runs.
    """
    if assignment.detected_family:
        return assignment.model_copy()
    return assignment.model_copy(update={"detected_family": detect_family(assignment)})
