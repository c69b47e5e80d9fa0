"""Error kinds raised by the lesson generation pipeline.

Every error is fatal to a run: the CLI logs it and exits with status 1.
"""

from pathlib import Path
from typing import Optional, Union


class LessonGenError(Exception):
    """Base class for all pipeline failures."""
    pass


class MissingCredentialError(LessonGenError):
    """Raised when no API key could be found in any accepted location."""
    pass


class OutlineReadError(LessonGenError):
    """Raised when the outline file is missing, malformed, or has invalid entries."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to read outline {self.path}: {reason}")


class NetworkError(LessonGenError):
    """Raised when the completion endpoint fails or returns a non-success status."""

    def __init__(
        self,
        status_code: Optional[int] = None,
        status_text: str = "",
        body: str = "",
    ):
        self.status_code = status_code
        self.status_text = status_text
        self.body = body[:500]

        if status_code is None:
            message = f"Request failed: {status_text}"
        else:
            message = f"HTTP {status_code} {status_text}: {self.body}"
        super().__init__(message)


class EmptyCompletionError(LessonGenError):
    """Raised when the completion response carries no usable text."""
    pass


class FileWriteError(LessonGenError):
    """Raised when a lesson file cannot be written."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to write {self.path}: {reason}")
