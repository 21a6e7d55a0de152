"""
Exceptions raised inside the pipeline.

None of these are meant to reach the frontend export: stores and services
catch them and fall back to empty data or placeholder demographics.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for county pipeline errors."""


class MissingDataError(PipelineError):
    """A file or network source is absent for the requested key."""


class MalformedRowError(PipelineError):
    """A source line could not be read as an election row."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        super().__init__(message)
        self.line_number = line_number


class ExternalServiceError(PipelineError):
    """The Census API or the Census endpoint returned an unusable response."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
