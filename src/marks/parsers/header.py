"""
Heading parser for Marks.

A heading line starts with one or more markers (`#` for Markdown, `*` for
org-mode) followed by a space:

    ** TODO [#B] The Ego and Its Own   :books:philosophy:
    SCHEDULED: <2021-08-28 Sat>
    :PROPERTIES:
    :RATING: 10/10
    :END:

The timestamp line and the property drawer are only looked for on the lines
right after the heading, in that order.
"""

import re
import logging
from typing import Dict, List, Optional, Tuple

from ..errors import PropertyParseError
from ..models.config import DocType
from ..models.org import OrgDateTime, OrgHeader, OrgPriority, OrgTodo
from .cursor import LineCursor
from .timestamp import is_timestamp_line, try_parse_org_timestamp


logger = logging.getLogger(__name__)

HEADER_PATTERNS = {
    doc_type: re.compile(rf'^({re.escape(doc_type.marker)}+) ')
    for doc_type in DocType
}

TODO_PATTERN = re.compile(r'^([A-Z]+) ')
PRIORITY_PATTERN = re.compile(r'^\[#([^\W_]+)\]')
TAGS_PATTERN = re.compile(r'(?:^|\s)(:(?:[^\W_]+:)+)\s*$')
PROPERTY_PATTERN = re.compile(r'^\s*:([^:]+):\s*(.*?)\s*$')

PROPERTIES_START = ':PROPERTIES:'
PROPERTIES_END = ':END:'


def parse_todo_and_priority(text: str) -> Tuple[Optional[OrgTodo], Optional[OrgPriority], str]:
    """
    Strip an optional TODO word and an optional [#X] priority from the start of a title.

    Args:
        text: Heading text after the markers

    Returns:
        Tuple of (todo, priority, remaining text)
    """
    rest = text.lstrip()
    todo = None
    priority = None

    match = TODO_PATTERN.match(rest)
    if match:
        todo = OrgTodo.from_word(match.group(1))
        rest = rest[match.end():].lstrip()

    match = PRIORITY_PATTERN.match(rest)
    if match:
        priority = OrgPriority(value=match.group(1))
        rest = rest[match.end():].lstrip()

    return todo, priority, rest


def parse_tags(text: str) -> Tuple[List[str], str]:
    """
    Split a trailing :tag1:tag2: block off a heading title.

    Args:
        text: Heading title

    Returns:
        Tuple of (tags in written order, title without the tag block)
    """
    match = TAGS_PATTERN.search(text)
    if not match:
        return [], text

    tags = [tag for tag in match.group(1).split(':') if tag]
    return tags, text[:match.start()]


def parse_property(line: str) -> Tuple[str, str]:
    """
    Parse a `:KEY: value` drawer line.

    Raises:
        PropertyParseError: If the line is not a property
    """
    match = PROPERTY_PATTERN.match(line)
    if not match:
        raise PropertyParseError(f"Malformed property line: {line.strip()!r}", line=line)
    return match.group(1), match.group(2)


def _starts_with(line: Optional[str], marker: str) -> bool:
    return line is not None and line.lstrip().upper().startswith(marker)


class HeaderParser:
    """
    Recognizes heading lines of one document type.

    Timestamp and property errors never escape: a bad timestamp is dropped and a
    bad or unterminated drawer keeps the properties read so far.
    """

    def __init__(self, doc_type: DocType = DocType.ORG):
        """
        Initialize the header parser.

        Args:
            doc_type: Document type, selects the heading marker
        """
        self.doc_type = doc_type
        self._prefix = HEADER_PATTERNS[doc_type]

    def parse_header_text(self, line: str, line_number: int = 1) -> Optional[OrgHeader]:
        """
        Parse a single heading line without looking at the following lines.

        Args:
            line: The line to parse
            line_number: Line number of the line (1-based)

        Returns:
            OrgHeader or None if the line is not a heading
        """
        match = self._prefix.match(line)
        if not match:
            return None

        todo, priority, rest = parse_todo_and_priority(line[match.end():])
        tags, title = parse_tags(rest)

        return OrgHeader(
            line_number=line_number,
            depth=len(match.group(1)),
            content=title.strip(),
            tags=tags,
            todo=todo,
            priority=priority
        )

    def parse_header_line(self, cursor: LineCursor) -> Optional[OrgHeader]:
        """
        Parse the cursor's current line and consume its timestamp and drawer.

        Args:
            cursor: Cursor positioned on the line to parse

        Returns:
            OrgHeader or None if the current line is not a heading. The cursor
            is only moved past lines that belong to the heading.
        """
        if cursor.current is None:
            return None

        header = self.parse_header_text(cursor.current, cursor.line_number)
        if header is None:
            return None

        datetime = self._parse_timestamp(cursor)
        properties = self._parse_properties(cursor)
        if datetime is None and not properties:
            return header

        return header.model_copy(update={'datetime': datetime, 'properties': properties})

    def _parse_timestamp(self, cursor: LineCursor) -> Optional[OrgDateTime]:
        """Consume a SCHEDULED/DEADLINE line following the heading, if any."""
        if not is_timestamp_line(cursor.peek() or ''):
            return None

        cursor.advance()
        return try_parse_org_timestamp(cursor.current)

    def _parse_properties(self, cursor: LineCursor) -> Dict[str, str]:
        """Consume a :PROPERTIES: drawer following the heading, if any."""
        properties: Dict[str, str] = {}
        if not _starts_with(cursor.peek(), PROPERTIES_START):
            return properties

        cursor.advance()
        start_line = cursor.line_number

        while True:
            line = cursor.peek()
            if line is None:
                logger.debug(f"Property drawer at line {start_line} has no {PROPERTIES_END}")
                return properties

            if _starts_with(line, PROPERTIES_END):
                cursor.advance()
                return properties

            try:
                key, value = parse_property(line)
            except PropertyParseError as e:
                # Most likely a drawer without :END:, stop here instead of eating the file
                logger.debug(f"Property drawer at line {start_line} ends early: {e.message}")
                return properties

            cursor.advance()
            properties[key] = value
