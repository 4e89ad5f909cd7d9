"""
Query parser for Marks.

Splits a raw query string into exact-match, exclusion, regex and fuzzy tokens:

    "text"      must appear
    `pattern`   must match
    -word       must not appear
    word        fuzzy term
"""

import re
import logging
from typing import List, Tuple

from ..errors import QueryParseError
from ..models.query import Query


logger = logging.getLogger(__name__)

MUST = 'must'
REGEX = 'regex'
NONE = 'none'
FUZZY = 'fuzzy'


class QueryParser:
    """
    Tokenizes a query string and builds a Query.

    Tokens are separated by runs of whitespace. A quoted or backtick-delimited
    token runs until its closing delimiter, so it may contain whitespace; the
    other tokens run until the next whitespace.
    """

    def parse(self, raw: str) -> Query:
        """
        Parse a query string.

        Args:
            raw: Query as typed by the user

        Returns:
            The parsed Query. An empty string gives an empty Query.

        Raises:
            QueryParseError: On an unterminated quote or backtick, or a regex
                that does not compile
        """
        musts = []
        nones = []
        regexes = []
        fuzzy_terms = []

        for kind, value, position in self.tokenize(raw):
            if kind == MUST:
                musts.append(value)
            elif kind == NONE:
                nones.append(value)
            elif kind == REGEX:
                try:
                    regexes.append(re.compile(value))
                except re.error as e:
                    raise QueryParseError(
                        f"Invalid regex `{value}` at position {position}: {e}",
                        query=raw,
                        position=position
                    ) from e
            else:
                fuzzy_terms.append(value)

        query = Query(full=raw, musts=musts, nones=nones, regexes=regexes, fuzzy_terms=fuzzy_terms)
        logger.debug(f"Parsed {query}")
        return query

    def tokenize(self, raw: str) -> List[Tuple[str, str, int]]:
        """
        Split a query string into classified tokens.

        Args:
            raw: Query string

        Returns:
            List of (kind, value, position) tuples in input order

        Raises:
            QueryParseError: On an unterminated or empty delimited token
        """
        tokens = []
        pos = 0
        length = len(raw)

        while pos < length:
            if raw[pos].isspace():
                pos += 1
                continue

            char = raw[pos]
            if char == '"':
                start = pos
                value, pos = self._read_delimited(raw, pos, '"', "quote")
                tokens.append((MUST, value, start))
            elif char == '`':
                start = pos
                value, pos = self._read_delimited(raw, pos, '`', "backtick")
                tokens.append((REGEX, value, start))
            else:
                start = pos
                while pos < length and not raw[pos].isspace():
                    pos += 1
                word = raw[start:pos]
                if word.startswith('-') and len(word) > 1:
                    tokens.append((NONE, word[1:], start))
                else:
                    tokens.append((FUZZY, word, start))

        return tokens

    def _read_delimited(self, raw: str, pos: int, delimiter: str, name: str) -> Tuple[str, int]:
        """Read a token between two delimiters starting at `pos`, return it and the position after it."""
        end = raw.find(delimiter, pos + 1)
        if end == -1:
            raise QueryParseError(f"Unterminated {name} at position {pos}", query=raw, position=pos)

        value = raw[pos + 1:end]
        if not value:
            raise QueryParseError(f"Empty token between {name}s at position {pos}", query=raw, position=pos)

        return value, end + 1


def parse_query(raw: str) -> Query:
    """
    Convenience function to parse a query string.

    Args:
        raw: Query string

    Returns:
        Parsed Query

    Raises:
        QueryParseError: If the query is malformed
    """
    return QueryParser().parse(raw)
