"""
Filesystem walker for Marks.

This module finds the Markdown and org-mode documents below a search path. It
skips hidden entries and blacklisted folders, and decides per file which
heading marker applies.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Optional

from ..models.config import DiscoveryConfig, DocType, LimitsConfig


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentFile:
    """
    A document selected for searching.

    Attributes:
        path: Path of the file
        doc_type: Markdown or org-mode
    """
    path: str
    doc_type: DocType


class FSWalker:
    """
    Filesystem walker that finds searchable documents.

    This class provides directory traversal with support for:
    - Hidden file and folder skipping
    - Folder blacklisting by name
    - Org and Markdown extension matching
    - File size limits
    """

    def __init__(self, discovery: Optional[DiscoveryConfig] = None, limits: Optional[LimitsConfig] = None):
        """
        Initialize the filesystem walker.

        Args:
            discovery: Which files to select
            limits: File size limit
        """
        self.discovery = discovery or DiscoveryConfig()
        self.limits = limits or LimitsConfig()
        self._stats = self._empty_stats()

    def discover(self, root: str) -> Iterator[DocumentFile]:
        """
        Walk a path and yield the documents to search.

        Args:
            root: A directory to walk recursively, or a single file

        Yields:
            DocumentFile objects in traversal order
        """
        root_path = Path(root).expanduser()

        if not root_path.exists():
            logger.warning(f"Search path does not exist: {root_path}")
            self._stats['errors'] += 1
            return

        if root_path.is_file():
            self._stats['files_scanned'] += 1
            document = self._select_file(root_path)
            if document:
                self._stats['files_matched'] += 1
                yield document
            return

        logger.info(f"Walking directory tree: {root_path}")
        yield from self._walk_directory(root_path)

    def _walk_directory(self, root_path: Path) -> Iterator[DocumentFile]:
        """
        Recursively walk a single directory tree.

        Args:
            root_path: Root directory to walk

        Yields:
            DocumentFile objects for selected files
        """
        def on_error(error: OSError) -> None:
            logger.warning(f"Error walking {error.filename}: {error}")
            self._stats['errors'] += 1

        for current_dir, subdirs, files in os.walk(root_path, onerror=on_error):
            current_path = Path(current_dir)
            self._stats['directories_traversed'] += 1

            # Prune in place so os.walk does not descend
            subdirs[:] = sorted(d for d in subdirs if not self._should_ignore(d))

            for filename in sorted(files):
                if self._should_ignore(filename):
                    self._stats['files_ignored'] += 1
                    continue

                self._stats['files_scanned'] += 1
                document = self._select_file(current_path / filename)
                if document:
                    self._stats['files_matched'] += 1
                    yield document

    def _should_ignore(self, name: str) -> bool:
        """
        Check if a file or folder name should be skipped.

        Args:
            name: Base name of the entry

        Returns:
            True if the entry is hidden or blacklisted
        """
        if not self.discovery.include_hidden and name.startswith('.'):
            return True
        return name in self.discovery.blacklist_folders

    def _select_file(self, file_path: Path) -> Optional[DocumentFile]:
        """
        Decide whether a file is searched and as which document type.

        Args:
            file_path: Path of the file

        Returns:
            DocumentFile or None if the file is not searched
        """
        doc_type = self.discovery.doc_type_for(file_path.suffix)
        if doc_type is None:
            return None

        try:
            size = file_path.stat().st_size
        except OSError as e:
            logger.warning(f"Error reading metadata of {file_path}: {e}")
            self._stats['errors'] += 1
            return None

        if size > self.limits.max_bytes_per_file:
            logger.debug(f"Skipping large file: {file_path} ({size} bytes)")
            self._stats['files_ignored'] += 1
            return None

        return DocumentFile(path=str(file_path), doc_type=doc_type)

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about the walk.

        Returns:
            Dictionary containing operation statistics
        """
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset the statistics counters."""
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            'files_scanned': 0,
            'files_matched': 0,
            'directories_traversed': 0,
            'files_ignored': 0,
            'errors': 0
        }
