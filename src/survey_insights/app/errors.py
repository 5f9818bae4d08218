from __future__ import annotations


class AppError(Exception):
    # Base class for domain errors (intended, meaningful failures).
    pass


class WorkbookError(AppError):
    # Raised when an uploaded spreadsheet is unreadable, empty or has no question columns.
    pass


class SchoolNotFound(AppError):
    pass


class SurveyNotFound(AppError):
    pass


class SurveyNotReady(AppError):
    # Raised when a survey is asked to be analyzed before it is closed.
    pass


class NoResponses(AppError):
    # Raised when there is nothing to analyze for a survey.
    pass
