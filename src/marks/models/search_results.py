"""
Search results data models for Marks.

This module defines the data structures for representing a single matching
line and the complete, sorted result set of a run.
"""

from typing import Dict, List, Any
from datetime import datetime
from pathlib import Path
from pydantic import BaseModel, Field, field_validator


class SearchResult(BaseModel):
    """
    A single line that matched the query and the structural filters.

    Attributes:
        score: Sum of fuzzy points, 0 when the query has no fuzzy terms
        line_number: Line number of the match (1-based)
        file_path: Path of the file the line was found in
        header_chain: Heading titles from the document root to the enclosing heading
        content: Raw line text (empty for heading matches when configured)
        is_header_line: Whether the matched line is itself a heading
    """

    score: float = Field(0.0, ge=0.0, description="Fuzzy relevance score")
    line_number: int = Field(..., ge=1, description="Line number of the match")
    file_path: str = Field(..., min_length=1, description="Path of the matched file")
    header_chain: List[str] = Field(default_factory=list, description="Enclosing heading titles")
    content: str = Field("", description="Raw line text")
    is_header_line: bool = Field(False, description="Whether the line is a heading")

    @field_validator('file_path')
    @classmethod
    def validate_file_path(cls, v: str) -> str:
        """Validate the file path."""
        if not v or not v.strip():
            raise ValueError("File path cannot be empty")
        return v

    def get_filename(self) -> str:
        """Get just the filename without directory path."""
        return Path(self.file_path).name

    def get_header_path(self, separator: str = "/") -> str:
        """Get the heading chain joined with a separator."""
        return separator.join(self.header_chain)

    def to_dict(self) -> Dict[str, Any]:
        """Convert search result to dictionary representation."""
        data = self.model_dump()
        data['filename'] = self.get_filename()
        return data

    def __str__(self) -> str:
        """String representation of the search result."""
        parts = [f"{self.file_path}:{self.line_number}"]
        if self.header_chain:
            parts.append(self.get_header_path())
        parts.append(self.content)
        return ":".join(parts)


class SearchResults(BaseModel):
    """
    Complete results from a search run.

    Attributes:
        query: Raw query string that produced these results
        results: Matching lines, sorted by descending score once the run completes
        total_scanned: Number of files scanned
        execution_time: Time taken to execute the search in seconds
        timestamp: When the search was executed
        errors: Files that could not be read, one message each
    """

    query: str = Field("", description="The raw query string")
    results: List[SearchResult] = Field(default_factory=list, description="Matching lines")
    total_scanned: int = Field(0, ge=0, description="Total number of files scanned")
    execution_time: float = Field(0.0, ge=0.0, description="Time taken to execute the search")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the search was executed")
    errors: List[str] = Field(default_factory=list, description="Errors encountered during search")

    def get_result_count(self) -> int:
        """Get the total number of results."""
        return len(self.results)

    def has_errors(self) -> bool:
        """Check if any errors occurred during search."""
        return len(self.errors) > 0

    def add_error(self, error: str) -> None:
        """Add an error message to the results."""
        self.errors.append(error)

    def extend(self, results: List[SearchResult]) -> None:
        """Append the results of one file scan."""
        self.results.extend(results)

    def sort_by_score(self, reverse: bool = True) -> None:
        """Sort results by score. The sort is stable, ties keep their order."""
        self.results.sort(key=lambda r: r.score, reverse=reverse)

    def to_dict(self) -> Dict[str, Any]:
        """Convert search results to dictionary representation."""
        data = self.model_dump()
        data['results'] = [result.to_dict() for result in self.results]
        data['result_count'] = self.get_result_count()
        data['timestamp'] = self.timestamp.isoformat()
        data['has_errors'] = self.has_errors()
        return data

    def __str__(self) -> str:
        """String representation of search results."""
        parts = [f"Found {self.get_result_count()} results"]
        parts.append(f"Scanned {self.total_scanned} files")
        parts.append(f"Took {self.execution_time:.2f}s")

        if self.has_errors():
            parts.append(f"Errors: {len(self.errors)}")

        return " | ".join(parts)
