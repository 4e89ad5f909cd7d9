"""
Unit tests for the query parser.

Tests tokenization of must, regex, excluded and fuzzy terms, the error
cases and the literal gates of the resulting Query.
"""

import pytest

from marks.errors import QueryParseError
from marks.models.query import Query
from marks.parsers.query import QueryParser, parse_query, MUST, REGEX, NONE, FUZZY


class TestQueryParser:
    """Test cases for QueryParser."""

    def setup_method(self):
        """Set up test fixtures."""
        self.parser = QueryParser()

    def test_parse_all_token_kinds(self):
        """Test a query mixing every token kind."""
        query = self.parser.parse('-badword "stuff" "another stuff" hehe `a regex`')

        assert query.nones == ["badword"]
        assert query.musts == ["stuff", "another stuff"]
        assert query.fuzzy_terms == ["hehe"]
        assert [r.pattern for r in query.regexes] == ["a regex"]

    def test_parse_empty_query(self):
        """Test that an empty string yields an empty query."""
        query = self.parser.parse("")

        assert query.is_empty()
        assert not query.has_fuzzy_terms()
        assert query.matches_literals("anything at all")

    def test_parse_whitespace_only(self):
        """Test that whitespace only is an empty query."""
        assert self.parser.parse("   \t ").is_empty()

    def test_tokens_without_spaces_between_delimited(self):
        """Test that delimited tokens need no surrounding whitespace."""
        query = self.parser.parse('"one""two"`x+`')

        assert query.musts == ["one", "two"]
        assert [r.pattern for r in query.regexes] == ["x+"]

    def test_lone_dash_is_fuzzy(self):
        """Test that a single dash is a fuzzy term, not an exclusion."""
        query = self.parser.parse("a - b")

        assert query.fuzzy_terms == ["a", "-", "b"]
        assert query.nones == []

    def test_tokenize_positions(self):
        """Test token kinds and start offsets."""
        tokens = self.parser.tokenize('word "must it" -no `re`')

        assert tokens == [
            (FUZZY, "word", 0),
            (MUST, "must it", 5),
            (NONE, "no", 15),
            (REGEX, "re", 19),
        ]

    def test_unterminated_quote(self):
        """Test that an unterminated quote is rejected."""
        with pytest.raises(QueryParseError) as exc_info:
            self.parser.parse('hello "world')

        assert exc_info.value.position == 6
        assert exc_info.value.query == 'hello "world'

    def test_unterminated_backtick(self):
        """Test that an unterminated backtick is rejected."""
        with pytest.raises(QueryParseError):
            self.parser.parse("`abc")

    def test_empty_quotes(self):
        """Test that an empty quoted token is rejected."""
        with pytest.raises(QueryParseError):
            self.parser.parse('a "" b')

    def test_invalid_regex(self):
        """Test that a regex which does not compile is rejected."""
        with pytest.raises(QueryParseError) as exc_info:
            self.parser.parse("fine `(unclosed`")

        assert exc_info.value.position == 5

    def test_parse_query_convenience(self):
        """Test the module level convenience function."""
        assert parse_query("x") == self.parser.parse("x")


class TestQueryMatching:
    """Test cases for the literal gates of Query."""

    def test_matches_literals(self):
        """Test musts, nones and regexes together."""
        query = parse_query('-badword "this" `(test|trial)` trial')

        assert query.matches_literals("this is a trial")
        assert not query.matches_literals("this is a trial with badword")
        assert not query.matches_literals("that is a trial")
        assert not query.matches_literals("this is nothing")

    def test_matching_is_case_sensitive(self):
        """Test that literal matching respects case."""
        query = parse_query('"Book"')

        assert query.matches_literals("A Book")
        assert not query.matches_literals("a book")

    def test_regex_searches_anywhere(self):
        """Test that regexes are not anchored."""
        query = parse_query("`\\d{4}`")

        assert query.matches_literals("due in 2021 maybe")

    def test_equality_compares_pattern_sources(self):
        """Test that two parses of one string are equal."""
        assert parse_query("`a+` b") == parse_query("`a+` b")
        assert parse_query("`a+` b") != parse_query("`a*` b")
        assert hash(parse_query("`a+` b")) == hash(parse_query("`a+` b"))

    def test_to_dict(self):
        """Test dictionary conversion."""
        data = parse_query('x "y" `z`').to_dict()

        assert data['regexes'] == ["z"]
        assert data['musts'] == ["y"]
        assert data['fuzzy_terms'] == ["x"]

    def test_str(self):
        """Test string representation."""
        text = str(Query(full="a b", fuzzy_terms=["a", "b"]))

        assert "Query: 'a b'" in text
        assert "Fuzzy: 2" in text
