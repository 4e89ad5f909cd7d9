"""
Parsers for Marks.

This package turns query strings, timestamps and heading lines into the data
models the searcher works on.
"""

from .query import QueryParser, parse_query
from .timestamp import parse_org_timestamp, format_org_timestamp, timestamp_from_argument
from .cursor import LineCursor
from .header import HeaderParser, parse_tags, parse_property, parse_todo_and_priority

__all__ = [
    'QueryParser',
    'parse_query',
    'parse_org_timestamp',
    'format_org_timestamp',
    'timestamp_from_argument',
    'LineCursor',
    'HeaderParser',
    'parse_tags',
    'parse_property',
    'parse_todo_and_priority',
]
