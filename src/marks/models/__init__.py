"""
Data models for Marks.

This module contains all the core data structures used throughout the system.
"""

from .query import Query
from .org import OrgDatePlan, OrgDateTime, OrgHeader, OrgPriority, OrgTodo, TodoKeyword
from .filters import FilterCriteria, FilterKind
from .search_results import SearchResult, SearchResults
from .config import DocType, MarksConfig

__all__ = [
    'Query',
    'OrgDatePlan',
    'OrgDateTime',
    'OrgHeader',
    'OrgPriority',
    'OrgTodo',
    'TodoKeyword',
    'FilterCriteria',
    'FilterKind',
    'SearchResult',
    'SearchResults',
    'DocType',
    'MarksConfig',
]
