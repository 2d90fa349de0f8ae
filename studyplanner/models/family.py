"""Family data model for studyplanner."""

from enum import Enum


class Family(str, Enum):
    """Cognitive-mode category used to vary subjects across a school day."""
    ANALYTICAL = "Analytical"
    HUMANITIES = "Humanities"
    COMPOSITION = "Composition"
    CREATIVE = "Creative"
    STUDY_HALL = "Study Hall"
