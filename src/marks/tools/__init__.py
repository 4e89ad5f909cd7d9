"""
Search tools for Marks.

This module contains the components that find documents, scan them line by
line and run scans in parallel.
"""

from .fs_walker import DocumentFile, FSWalker
from .fuzzy import FuzzyScorer
from .searcher import Searcher, search_file
from .runner import SearchRunner

__all__ = ['DocumentFile', 'FSWalker', 'FuzzyScorer', 'Searcher', 'search_file', 'SearchRunner']
