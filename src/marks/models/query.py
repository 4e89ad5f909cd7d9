"""
Query data model for Marks.

A Query is the parsed form of the user's search string. It partitions the
tokens into literal musts, literal nones, regexes and fuzzy terms.
"""

import re
from typing import Dict, List, Any
from pydantic import BaseModel, ConfigDict, Field


class Query(BaseModel):
    """
    Represents a parsed search query.

    Attributes:
        full: Query string as the user typed it
        musts: Literal substrings that must all appear ("keyword")
        nones: Literal substrings that must not appear (-keyword)
        regexes: Compiled patterns that must all match (`regex`)
        fuzzy_terms: Remaining terms, scored by the fuzzy matcher
    """

    model_config = ConfigDict(frozen=True)

    full: str = Field("", description="Raw query string")
    musts: List[str] = Field(default_factory=list, description="Substrings that must appear")
    nones: List[str] = Field(default_factory=list, description="Substrings that must not appear")
    regexes: List[re.Pattern] = Field(default_factory=list, description="Patterns that must match")
    fuzzy_terms: List[str] = Field(default_factory=list, description="Terms matched in fuzzy fashion")

    def is_empty(self) -> bool:
        """Check if the query has no terms at all, i.e. matches everything."""
        return not (self.musts or self.nones or self.regexes or self.fuzzy_terms)

    def has_fuzzy_terms(self) -> bool:
        """Check if any fuzzy terms were requested."""
        return bool(self.fuzzy_terms)

    def matches_literals(self, text: str) -> bool:
        """
        Check the exact-match gates against a search text.

        All regexes must match, all musts must be substrings and no none may be
        a substring.
        """
        return (
            all(regex.search(text) for regex in self.regexes)
            and all(must in text for must in self.musts)
            and not any(none in text for none in self.nones)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the query to a dictionary representation."""
        data = self.model_dump()
        data['regexes'] = [regex.pattern for regex in self.regexes]
        return data

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Query):
            return NotImplemented
        # Compiled patterns compare by identity, so compare their sources
        return (
            self.full == other.full
            and self.musts == other.musts
            and self.nones == other.nones
            and [r.pattern for r in self.regexes] == [r.pattern for r in other.regexes]
            and self.fuzzy_terms == other.fuzzy_terms
        )

    def __hash__(self) -> int:
        return hash((self.full, tuple(self.musts), tuple(self.nones),
                     tuple(r.pattern for r in self.regexes), tuple(self.fuzzy_terms)))

    def __str__(self) -> str:
        """String representation of the query."""
        parts = [f"Query: '{self.full}'"]
        if self.musts:
            parts.append(f"Musts: {len(self.musts)}")
        if self.nones:
            parts.append(f"Nones: {len(self.nones)}")
        if self.regexes:
            parts.append(f"Regexes: {len(self.regexes)}")
        if self.fuzzy_terms:
            parts.append(f"Fuzzy: {len(self.fuzzy_terms)}")
        return " | ".join(parts)
