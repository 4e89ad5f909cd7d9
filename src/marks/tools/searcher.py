"""
Per-file searcher for Marks.

Walks the lines of one document while keeping the chain of enclosing headings,
applies the structural filters to every heading, and matches the query against
the heading chain plus the current line.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

from ..errors import FileAccessError
from ..models.config import DocType, SearchConfig
from ..models.filters import FilterCriteria, FilterKind
from ..models.org import OrgHeader
from ..models.query import Query
from ..models.search_results import SearchResult
from ..parsers.cursor import LineCursor
from ..parsers.header import HeaderParser
from .fuzzy import FuzzyScorer, Scorer


logger = logging.getLogger(__name__)

SEARCH_TEXT_SEPARATOR = " / "


def _matches_tags(criteria: FilterCriteria, headers: List[OrgHeader]) -> bool:
    return all(any(header.has_tag(tag) for header in headers) for tag in criteria.tagged)


def _matches_properties(criteria: FilterCriteria, headers: List[OrgHeader]) -> bool:
    return all(
        any(header.has_property(key, value) for header in headers)
        for key, value in criteria.properties.items()
    )


def _matches_todo(criteria: FilterCriteria, headers: List[OrgHeader]) -> bool:
    todo = headers[-1].todo
    return todo is not None and any(todo.matches(state) for state in criteria.todo)


def _matches_priority(criteria: FilterCriteria, headers: List[OrgHeader]) -> bool:
    priority = headers[-1].priority
    return priority is not None and priority.value in {p.value for p in criteria.priority}


def _matches_priority_below(criteria: FilterCriteria, headers: List[OrgHeader]) -> bool:
    priority = headers[-1].priority
    return priority is not None and priority < criteria.priority_lt


def _matches_priority_above(criteria: FilterCriteria, headers: List[OrgHeader]) -> bool:
    priority = headers[-1].priority
    return priority is not None and priority > criteria.priority_gt


def _matches_schedule(criteria: FilterCriteria, headers: List[OrgHeader]) -> bool:
    datetime = headers[-1].datetime
    return datetime is not None and datetime.compare_with(criteria.schedule)


# Tags and properties are inherited from any ancestor, the rest only look at the innermost heading
PREDICATES: Dict[FilterKind, Callable[[FilterCriteria, List[OrgHeader]], bool]] = {
    FilterKind.TAGS: _matches_tags,
    FilterKind.PROPERTIES: _matches_properties,
    FilterKind.TODO: _matches_todo,
    FilterKind.PRIORITY: _matches_priority,
    FilterKind.PRIORITY_BELOW: _matches_priority_below,
    FilterKind.PRIORITY_ABOVE: _matches_priority_above,
    FilterKind.SCHEDULE: _matches_schedule,
}


class Searcher:
    """
    Stateful line walker for a single document.

    State:
        headers: Enclosing headings, outermost first
        last_depth: Depth of the most recent heading, 0 before the first one
        skip_section: Whether lines are currently suppressed by the filters
    """

    def __init__(
        self,
        query: Query,
        criteria: Optional[FilterCriteria] = None,
        doc_type: DocType = DocType.ORG,
        file_path: str = "<memory>",
        scorer: Optional[Scorer] = None,
        config: Optional[SearchConfig] = None,
    ):
        """
        Initialize the searcher.

        Args:
            query: Parsed query, shared read-only between searchers
            criteria: Structural filters, shared read-only between searchers
            doc_type: Document type, selects the heading marker
            file_path: Path reported in results
            scorer: Fuzzy scorer, defaults to FuzzyScorer
            config: Search options
        """
        self.query = query
        self.criteria = criteria or FilterCriteria()
        self.doc_type = doc_type
        self.file_path = file_path
        self.filename = Path(file_path).name
        self.config = config or SearchConfig()
        self.scorer = scorer or FuzzyScorer(self.config.fuzzy_score_cutoff)
        self.header_parser = HeaderParser(doc_type)

        self._active_filters = self.criteria.active_filters()

        self.headers: List[OrgHeader] = []
        self.last_depth = 0
        self.skip_section = False

    def search(self, lines: Iterable[str]) -> List[SearchResult]:
        """
        Search the lines of a document.

        Args:
            lines: Lines of the document, with or without trailing newlines

        Returns:
            Matching lines in document order
        """
        self.headers = []
        self.last_depth = 0
        self.skip_section = False

        results = []
        cursor = LineCursor(lines)

        while cursor.advance():
            line_number = cursor.line_number
            line = cursor.current

            header = self.header_parser.parse_header_line(cursor)
            if header is not None:
                self.handle_header(header)

            if self.last_depth == 0 and self._active_filters:
                # Text above the first heading never satisfies structural filters
                self.skip_section = True

            if self.skip_section:
                continue

            result = self.match_line(line, line_number, is_header=header is not None)
            if result is not None:
                results.append(result)

        return results

    def handle_header(self, header: OrgHeader) -> None:
        """
        Put a heading on the ancestor stack and re-evaluate the filters.

        Depth may jump (`*` followed by `***`), so a shallower heading truncates
        the stack to its own depth and then replaces the top element.
        """
        depth = header.depth

        if depth > self.last_depth:
            self.headers.append(header)
        elif depth == self.last_depth:
            self.headers[-1] = header
        else:
            del self.headers[depth:]
            self.headers[-1] = header

        self.last_depth = depth
        self.skip_section = not self.header_qualifies()

    def header_qualifies(self) -> bool:
        """Check the current ancestor chain against every configured filter."""
        for kind in self._active_filters:
            if not PREDICATES[kind](self.criteria, self.headers):
                logger.debug(f"{self.filename}:{self.headers[-1].line_number} skipped by {kind.value} filter")
                return False
        return True

    def build_search_text(self, line: str, is_header: bool) -> str:
        """
        Build the text the query is matched against.

        Heading titles are joined first; the line itself follows unless it is a
        heading (its title is already in the chain), then the filename if enabled.
        """
        parts = [SEARCH_TEXT_SEPARATOR.join(header.content for header in self.headers)]
        if not is_header:
            parts.append(line)
        if self.config.search_filename:
            parts.append(self.filename)
        return SEARCH_TEXT_SEPARATOR.join(part for part in parts if part)

    def match_line(self, line: str, line_number: int, is_header: bool = False) -> Optional[SearchResult]:
        """
        Match the query against a line that passed the structural filters.

        Returns:
            SearchResult or None if the line does not match
        """
        text = self.build_search_text(line, is_header)

        if not self.query.matches_literals(text):
            return None

        points = []
        for term in self.query.fuzzy_terms:
            score = self.scorer(text, term)
            if score is not None:
                points.append(score)

        if not points and self.query.has_fuzzy_terms():
            return None

        return SearchResult(
            score=sum(points),
            line_number=line_number,
            file_path=self.file_path,
            header_chain=[header.content for header in self.headers],
            content="" if is_header and self.config.omit_header_content else line,
            is_header_line=is_header
        )


def search_file(
    file_path: str,
    query: Query,
    criteria: Optional[FilterCriteria] = None,
    doc_type: DocType = DocType.ORG,
    scorer: Optional[Scorer] = None,
    config: Optional[SearchConfig] = None,
) -> List[SearchResult]:
    """
    Search a single file.

    Args:
        file_path: Path of the document
        query: Parsed query
        criteria: Structural filters
        doc_type: Document type of the file
        scorer: Fuzzy scorer
        config: Search options

    Returns:
        Matching lines in document order

    Raises:
        FileAccessError: If the file cannot be opened or read
    """
    searcher = Searcher(query, criteria, doc_type, str(file_path), scorer, config)
    try:
        # Undecodable bytes are replaced, not fatal
        with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
            return searcher.search(f)
    except OSError as e:
        raise FileAccessError(f"Cannot read {file_path}: {e}", file_path=str(file_path)) from e
