"""
Exception hierarchy for Marks.

Only query parse errors are fatal to a run. Timestamp and property errors are
recovered inside the header parser and file access errors are recovered per
file by the search runner.
"""

from typing import Optional


class MarksError(Exception):
    """Base exception for all Marks errors."""

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class QueryParseError(MarksError):
    """Raised when a query string cannot be parsed."""

    def __init__(self, message: str, query: str = None, position: Optional[int] = None, details: dict = None):
        """
        Initialize query parse error.

        Args:
            message: Error description.
            query: The offending query string.
            position: Character offset where parsing failed.
            details: Additional context.
        """
        super().__init__(message, details)
        self.query = query
        self.position = position


class TimestampParseError(MarksError):
    """Raised when a SCHEDULED/DEADLINE timestamp is malformed."""

    def __init__(self, message: str, text: str = None, details: dict = None):
        super().__init__(message, details)
        self.text = text


class PropertyParseError(MarksError):
    """Raised when a line inside a property drawer is not a `:KEY: value` pair."""

    def __init__(self, message: str, line: str = None, details: dict = None):
        super().__init__(message, details)
        self.line = line


class FileAccessError(MarksError):
    """Raised when a document cannot be opened or read."""

    def __init__(self, message: str, file_path: str = None, details: dict = None):
        """
        Initialize file access error.

        Args:
            message: Error description.
            file_path: Path to the unreadable file.
            details: Additional context.
        """
        super().__init__(message, details)
        self.file_path = file_path
