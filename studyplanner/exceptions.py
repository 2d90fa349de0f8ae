"""Custom exceptions for studyplanner."""

from typing import Optional


class StudyPlannerError(Exception):
    """Base exception for studyplanner errors."""

    pass


class StoreUnavailableError(StudyPlannerError):
    """The assignment store could not be reached at all.

    Raised by persistence collaborators for connectivity loss, as opposed to a
    single record failing to save.
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        if operation:
            message = f"{operation}: {message}"
        super().__init__(message)
