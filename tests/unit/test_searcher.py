"""
Unit tests for the per-file searcher.

A deterministic scorer is injected so that fuzzy matching reduces to a
case-insensitive substring check worth one point per term.
"""

import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from marks.errors import FileAccessError
from marks.models.config import DocType, SearchConfig
from marks.models.filters import FilterCriteria, FilterKind
from marks.models.org import OrgDatePlan, OrgDateTime, OrgHeader, OrgPriority
from marks.parsers.query import parse_query
from marks.tools.searcher import PREDICATES, Searcher, search_file


def substring_scorer(text, term):
    return 1.0 if term.lower() in text.lower() else None


BOOKS = """Intro line above all headings
* Books :reading:
** TODO [#B] The Ego and Its Own
DEADLINE: <2021-08-28 Sat>
:PROPERTIES:
:RATING: 10/10
:END:
Stirner wrote it
** DONE [#A] Mutual Aid
Kropotkin wrote it
* Films
A film about books
"""


def make_searcher(query="", criteria=None, doc_type=DocType.ORG, config=None):
    return Searcher(
        parse_query(query),
        criteria,
        doc_type,
        file_path="notes/books.org",
        scorer=substring_scorer,
        config=config
    )


def search(text, query="", criteria=None, doc_type=DocType.ORG, config=None):
    return make_searcher(query, criteria, doc_type, config).search(text.splitlines())


class TestSearcherMatching:
    """Test cases for query matching."""

    def test_empty_query_matches_every_line(self):
        """Test that an empty query emits all searched lines with score 0."""
        results = search("a\nb\n* H\nc")

        assert [r.line_number for r in results] == [1, 2, 3, 4]
        assert all(r.score == 0 for r in results)

    def test_fuzzy_term_scores(self):
        """Test that fuzzy points are summed per term."""
        results = search(BOOKS, "stirner wrote")

        assert [r.line_number for r in results] == [8, 10]
        assert [r.score for r in results] == [2.0, 1.0]
        assert results[0].header_chain == ["Books", "The Ego and Its Own"]
        assert results[0].content == "Stirner wrote it"

    def test_headers_take_part_in_matching(self):
        """Test that heading titles are part of the searched text."""
        results = search(BOOKS, '"Mutual"')

        assert [r.line_number for r in results] == [9, 10]
        assert results[0].is_header_line
        assert not results[1].is_header_line

    def test_header_line_text_is_not_duplicated(self):
        """Test the composite text of a heading line."""
        searcher = make_searcher()

        searcher.handle_header(OrgHeader(depth=1, content="A"))
        assert searcher.build_search_text("* A", is_header=True) == "A"
        assert searcher.build_search_text("body", is_header=False) == "A / body"

    def test_nones_exclude_lines(self):
        """Test that excluded terms drop lines."""
        results = search(BOOKS, "wrote -Kropotkin")

        assert [r.line_number for r in results] == [8]

    def test_regex_gate(self):
        """Test that regexes gate lines."""
        results = search(BOOKS, "`^Books / Mutual Aid / `")

        assert [r.line_number for r in results] == [10]

    def test_partial_fuzzy_match_is_enough(self):
        """Test that a line is emitted when some fuzzy term scores."""
        results = search(BOOKS, "kropotkin zzz")

        assert [r.line_number for r in results] == [10]
        assert results[0].score == 1.0

    def test_search_filename(self):
        """Test that the filename is appended when enabled."""
        assert search("plain line", '"books.org"') == []

        results = search("plain line", '"books.org"', config=SearchConfig(search_filename=True))
        assert [r.line_number for r in results] == [1]

    def test_omit_header_content(self):
        """Test that heading matches can carry an empty content."""
        results = search("* Heading", config=SearchConfig(omit_header_content=True))

        assert results[0].content == ""
        assert results[0].is_header_line

    def test_consumed_lines_are_not_searched(self):
        """Test that timestamp and drawer lines belong to their heading."""
        results = search(BOOKS, '"RATING"')

        assert results == []

    def test_markdown_document(self):
        """Test Markdown headings."""
        text = "# Top\n## Sub\nbody\n# Other\nbody"

        results = search(text, '"Sub"', doc_type=DocType.MARKDOWN)

        assert [r.line_number for r in results] == [2, 3]
        assert results[1].header_chain == ["Top", "Sub"]


class TestSearcherHeaderStack:
    """Test cases for the ancestor stack."""

    def test_depth_truncation(self):
        """Test that a shallower heading truncates then replaces."""
        searcher = make_searcher()

        searcher.handle_header(OrgHeader(depth=1, content="one"))
        searcher.handle_header(OrgHeader(depth=3, content="three"))
        searcher.handle_header(OrgHeader(depth=2, content="two"))

        assert [h.content for h in searcher.headers] == ["one", "two"]
        assert searcher.last_depth == 2

    def test_sibling_replaces_top(self):
        """Test that a heading at the same depth replaces the top."""
        searcher = make_searcher()

        searcher.handle_header(OrgHeader(depth=1, content="a"))
        searcher.handle_header(OrgHeader(depth=2, content="b"))
        searcher.handle_header(OrgHeader(depth=2, content="c"))

        assert [h.content for h in searcher.headers] == ["a", "c"]

    def test_back_to_top_level(self):
        """Test that a top level heading resets the chain."""
        results = search(BOOKS)

        films = [r for r in results if r.line_number == 12][0]
        assert films.header_chain == ["Films"]

    def test_search_resets_state(self):
        """Test that a searcher can be reused."""
        searcher = make_searcher()

        searcher.search(["* A", "** B"])
        results = searcher.search(["text"])

        assert results[0].header_chain == []


class TestSearcherFilters:
    """Test cases for structural filters."""

    def test_tag_inheritance(self):
        """Test that tags of any ancestor count."""
        results = search(BOOKS, criteria=FilterCriteria(tagged=["reading"]))

        assert [r.line_number for r in results] == [2, 3, 8, 9, 10]

    def test_no_match_above_first_heading(self):
        """Test that filters suppress text before any heading."""
        results = search(BOOKS, '"Intro"', criteria=FilterCriteria(todo=["TODO"]))

        assert results == []

    def test_file_tags_above_first_heading_are_not_matched(self):
        """Test that a tag filter skips file-level text before any heading."""
        text = "#+FILETAGS: :work:\n* Report :work:\nquarterly numbers"

        results = search(text, criteria=FilterCriteria(tagged=["work"]))

        assert [r.line_number for r in results] == [2, 3]
        assert search(text, '"FILETAGS"', criteria=FilterCriteria(tagged=["work"])) == []
        assert [r.line_number for r in search(text, '"FILETAGS"')] == [1]

    def test_superscript_priority_with_bound(self):
        """Test that a non-decimal digit priority does not abort the scan."""
        results = search("* [#²] odd\nbody", criteria=FilterCriteria(priority_gt="1"))

        assert [r.line_number for r in results] == [1, 2]

    def test_todo_filter(self):
        """Test that TODO filters look at the innermost heading only."""
        results = search(BOOKS, criteria=FilterCriteria(todo=["DONE"]))

        assert [r.line_number for r in results] == [9, 10]

    def test_property_filter(self):
        """Test property drawer filters."""
        results = search(BOOKS, criteria=FilterCriteria(properties={"RATING": "10/10"}))

        assert [r.line_number for r in results] == [3, 8]

    def test_property_value_must_match_exactly(self):
        """Test that a differing value does not match."""
        assert search(BOOKS, criteria=FilterCriteria(properties={"RATING": "9/10"})) == []

    def test_priority_filters(self):
        """Test priority set and bounds."""
        assert [r.line_number for r in search(BOOKS, criteria=FilterCriteria(priority=["A"]))] == [9, 10]
        assert [r.line_number for r in search(BOOKS, criteria=FilterCriteria(priority_lt="A"))] == [3, 8]
        assert [r.line_number for r in search(BOOKS, criteria=FilterCriteria(priority_gt="B"))] == [9, 10]

    def test_schedule_filter(self):
        """Test that a deadline filter matches by date."""
        deadline = OrgDateTime(plan=OrgDatePlan.DEADLINE, start=datetime(2021, 8, 28))
        scheduled = OrgDateTime(plan=OrgDatePlan.SCHEDULED, start=datetime(2021, 8, 28))

        assert [r.line_number for r in search(BOOKS, criteria=FilterCriteria(schedule=deadline))] == [3, 8]
        assert search(BOOKS, criteria=FilterCriteria(schedule=scheduled)) == []

    def test_filters_and_query_combine(self):
        """Test that lines must pass filters and query."""
        results = search(BOOKS, "stirner", criteria=FilterCriteria(tagged=["reading"], todo=["TODO"]))

        assert [r.line_number for r in results] == [8]

    def test_every_filter_kind_has_a_predicate(self):
        """Test that the predicate table is complete."""
        assert set(PREDICATES) == set(FilterKind)

    def test_header_qualifies_rejects_chain(self):
        """Test that an unqualified chain suppresses its section."""
        searcher = make_searcher(criteria=FilterCriteria(priority=[OrgPriority(value="C")]))
        searcher.handle_header(OrgHeader(depth=1, content="x", priority=OrgPriority(value="B")))

        assert searcher.skip_section is True
        assert not searcher.header_qualifies()


class TestSearchFile:
    """Test cases for search_file."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test fixtures."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)

    def test_search_file(self):
        """Test searching a file on disk."""
        path = Path(self.temp_dir) / "books.org"
        path.write_text(BOOKS, encoding="utf-8")

        results = search_file(str(path), parse_query('"Kropotkin"'), scorer=substring_scorer)

        assert [r.line_number for r in results] == [10]
        assert results[0].file_path == str(path)

    def test_invalid_utf8_is_replaced(self):
        """Test that undecodable bytes do not abort the search."""
        path = Path(self.temp_dir) / "bad.md"
        path.write_bytes(b"# Title\nbad \xff byte\n")

        results = search_file(str(path), parse_query('"byte"'), doc_type=DocType.MARKDOWN, scorer=substring_scorer)

        assert [r.line_number for r in results] == [2]
        assert "\ufffd" in results[0].content

    def test_missing_file(self):
        """Test that an unreadable file raises FileAccessError."""
        missing = os.path.join(self.temp_dir, "missing.org")

        with pytest.raises(FileAccessError) as exc_info:
            search_file(missing, parse_query("x"), scorer=substring_scorer)

        assert exc_info.value.file_path == missing
