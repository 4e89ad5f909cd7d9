"""
Fuzzy scoring for Marks.

The searcher only depends on the `Scorer` call signature
`score(text, term) -> Optional[float]`; FuzzyScorer is the default
implementation backed by rapidfuzz.
"""

from typing import Callable, Optional

from rapidfuzz import fuzz, utils


Scorer = Callable[[str, str], Optional[float]]


class FuzzyScorer:
    """
    Scores how well a term approximately appears in a text.

    Uses rapidfuzz's partial ratio on case-folded, punctuation-stripped input,
    so a term scores by its best matching substring of the text.
    """

    def __init__(self, score_cutoff: float = 60.0):
        """
        Initialize the scorer.

        Args:
            score_cutoff: Minimum score (0-100) for a term to count as matched
        """
        self.score_cutoff = score_cutoff

    def __call__(self, text: str, term: str) -> Optional[float]:
        return self.score(text, term)

    def score(self, text: str, term: str) -> Optional[float]:
        """
        Score a term against a text.

        Returns:
            The score, or None when the term does not match well enough
        """
        if not term or not text:
            return None

        result = fuzz.partial_ratio(
            term,
            text,
            processor=utils.default_process,
            score_cutoff=self.score_cutoff
        )
        # rapidfuzz reports results below the cutoff as 0
        if not result:
            return None
        return result
