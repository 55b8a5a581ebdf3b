"""Exception types.

Everything except ResponseFormatError is fatal for a run: the entry point
logs it and exits non-zero before (or instead of) submitting a review.
"""

from typing import Optional


class ReviewerError(Exception):
    """Base class for errors raised by the reviewer."""


class ConfigError(ReviewerError):
    pass


class EventError(ReviewerError):
    """The workflow event payload is missing, unreadable or malformed."""


class UnsupportedEventError(ReviewerError):
    pass


class DiffParseError(ReviewerError):
    """The diff text could not be parsed into files and chunks."""


class GitHubError(ReviewerError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseFormatError(ReviewerError):
    """The review service answered, but not in the expected shape."""
