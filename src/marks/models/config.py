"""
Configuration data models for Marks.

This module defines the application configuration: which files are discovered,
how lines are searched, how results are printed and how many workers scan files.
"""

from typing import Dict, List, Optional, Any
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class DocType(Enum):
    """Supported document types and their heading markers."""
    MARKDOWN = "markdown"
    ORG = "org"

    @property
    def marker(self) -> str:
        """Character repeated at the start of a heading line."""
        return '#' if self is DocType.MARKDOWN else '*'


def _normalize_extensions(v) -> List[str]:
    if not isinstance(v, list):
        v = [v]

    normalized = []
    for ext in v:
        if not isinstance(ext, str) or not ext.strip():
            raise ValueError(f"Invalid file extension: {ext!r}")
        ext = ext.strip().lstrip('.').lower()
        if ext not in normalized:
            normalized.append(ext)
    return normalized


class DiscoveryConfig(BaseModel):
    """
    Configuration for finding documents to search.

    Attributes:
        org_extensions: Extensions (without dot) treated as org-mode documents
        md_extensions: Extensions (without dot) treated as Markdown documents
        no_org: Don't search org documents
        no_markdown: Don't search Markdown documents
        blacklist_folders: Folder names that are never descended into
        include_hidden: Whether to visit files and folders starting with a dot
    """

    model_config = ConfigDict(extra="forbid")

    org_extensions: List[str] = Field(default_factory=lambda: ["org"], description="Org file extensions")
    md_extensions: List[str] = Field(default_factory=lambda: ["md", "markdown"], description="Markdown file extensions")
    no_org: bool = Field(False, description="Don't search org files")
    no_markdown: bool = Field(False, description="Don't search markdown files")
    blacklist_folders: List[str] = Field(default_factory=lambda: ["node_modules"], description="Folders to skip")
    include_hidden: bool = Field(False, description="Whether to visit hidden files and folders")

    @field_validator('org_extensions', 'md_extensions', mode='before')
    @classmethod
    def validate_extensions(cls, v) -> List[str]:
        """Normalize extensions to lowercase without a leading dot."""
        return _normalize_extensions(v)

    def doc_type_for(self, extension: str) -> Optional[DocType]:
        """
        Get the document type for a file extension.

        Markdown wins when an extension is listed for both types.

        Args:
            extension: File extension with or without leading dot

        Returns:
            The document type or None when the file should not be searched
        """
        ext = extension.lstrip('.').lower()
        if not self.no_markdown and ext in self.md_extensions:
            return DocType.MARKDOWN
        if not self.no_org and ext in self.org_extensions:
            return DocType.ORG
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class SearchConfig(BaseModel):
    """
    Configuration for line matching.

    Attributes:
        search_filename: Whether the filename is part of the searched text
        fuzzy_score_cutoff: Minimum fuzzy score (0-100) for a term to count
        omit_header_content: Whether heading matches carry an empty content
    """

    model_config = ConfigDict(extra="forbid")

    search_filename: bool = Field(False, description="Whether to search in file names too")
    fuzzy_score_cutoff: float = Field(60.0, ge=0.0, le=100.0, description="Minimum fuzzy score")
    omit_header_content: bool = Field(False, description="Whether heading matches carry empty content")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class OutputConfig(BaseModel):
    """
    Configuration for printing results.

    Attributes:
        color: Whether to use ANSI colors
        show_headers: Whether to include the heading chain
        show_line_numbers: Whether to include line numbers
        header_separator: Separator inserted between headings
        null_separator: Use NUL instead of ':' between path and line number
        count: Maximum number of results to print (None means all)
    """

    model_config = ConfigDict(extra="forbid")

    color: bool = Field(True, description="Whether to use colors for the output")
    show_headers: bool = Field(True, description="Whether to include headers in the output")
    show_line_numbers: bool = Field(True, description="Whether to include line numbers")
    header_separator: str = Field("/", description="Separator inserted between headers")
    null_separator: bool = Field(False, description="Separate path and line number with NUL")
    count: Optional[int] = Field(None, ge=0, description="How many results to print")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class LimitsConfig(BaseModel):
    """
    Configuration for system limits.

    Attributes:
        max_concurrent: Number of files scanned in parallel
        max_bytes_per_file: Files bigger than this are skipped
    """

    model_config = ConfigDict(extra="forbid")

    max_concurrent: int = Field(4, gt=0, description="Maximum concurrent file scans")
    max_bytes_per_file: int = Field(10_000_000, gt=0, description="Maximum file size to scan (bytes)")

    def get_max_size_human_readable(self) -> str:
        """Get max file size in human-readable format."""
        size = float(self.max_bytes_per_file)
        for unit in ['B', 'KB', 'MB', 'GB']:
            if size < 1024.0:
                return f"{size:.1f} {unit}"
            size /= 1024.0
        return f"{size:.1f} TB"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data = self.model_dump()
        data['max_size_human'] = self.get_max_size_human_readable()
        return data


class LoggingConfig(BaseModel):
    """
    Configuration for logging.

    Attributes:
        level: Root logger level
        format: Log record format
    """

    model_config = ConfigDict(extra="forbid")

    level: str = Field("WARNING", description="Logging level")
    format: str = Field("[%(name)s] %(levelname)s: %(message)s", description="Log message format")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate the logging level name."""
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid logging level: {v}")
        return level

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class MarksConfig(BaseModel):
    """
    Main configuration class for Marks.

    Attributes:
        discovery: Which files are searched
        search: How lines are matched
        output: How results are printed
        limits: Concurrency and size limits
        logging: Logging setup
    """

    model_config = ConfigDict(extra="forbid")

    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig, description="File discovery configuration")
    search: SearchConfig = Field(default_factory=SearchConfig, description="Search configuration")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output configuration")
    limits: LimitsConfig = Field(default_factory=LimitsConfig, description="System limits")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")

    def validate_configuration(self) -> List[str]:
        """
        Check the configuration for settings that are valid but likely unintended.

        Returns:
            List of warning messages
        """
        warnings = []

        if self.discovery.no_org and self.discovery.no_markdown:
            warnings.append("Both org and markdown files are disabled, nothing will be searched")

        overlap = set(self.discovery.org_extensions) & set(self.discovery.md_extensions)
        if overlap:
            warnings.append(f"Extensions listed for both org and markdown are treated as markdown: {sorted(overlap)}")

        if self.search.fuzzy_score_cutoff == 0:
            warnings.append("Fuzzy score cutoff of 0 makes every fuzzy term match every line")

        if self.limits.max_concurrent > 64:
            warnings.append(f"Very high max_concurrent ({self.limits.max_concurrent}) may exhaust file handles")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {
            'discovery': self.discovery.to_dict(),
            'search': self.search.to_dict(),
            'output': self.output.to_dict(),
            'limits': self.limits.model_dump(),
            'logging': self.logging.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MarksConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the configuration."""
        parts = [f"Org: {'off' if self.discovery.no_org else ','.join(self.discovery.org_extensions)}"]
        parts.append(f"Markdown: {'off' if self.discovery.no_markdown else ','.join(self.discovery.md_extensions)}")
        parts.append(f"Workers: {self.limits.max_concurrent}")
        parts.append(f"Color: {self.output.color}")

        return " | ".join(parts)
