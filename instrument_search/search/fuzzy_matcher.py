"""
Fuzzy matching engine for instrument search.

Scores a candidate text against one keyword using exact, substring and
typo-tolerant (Levenshtein distance) rules. Scores are small discrete
integers so per-keyword results can be summed across a query.
"""

from typing import Iterable

from rapidfuzz.distance import Levenshtein

# Discrete match scores
EXACT_SCORE = 3
SUBSTRING_SCORE = 2
FUZZY_SCORE = 1
NO_MATCH = 0

# Maximum edit distance accepted for a fuzzy word match
MAX_EDIT_DISTANCE = 1


def levenshtein_distance(s1: str, s2: str) -> int:
    """
    Edit distance between two strings.

    Insertions, deletions and substitutions each cost 1, compared per code
    point. ``levenshtein_distance(a, "") == len(a)``.
    """
    return Levenshtein.distance(s1, s2)


class FuzzyMatcher:
    """
    Typo-tolerant scorer for lowercased candidate texts.

    Scoring rules, first hit wins:
    - Exact equality -> 3
    - Keyword is a substring of the candidate -> 2
    - Keyword longer than one character is within one edit of any
      whitespace-delimited word of the candidate -> 1
    - Otherwise -> 0
    """

    def __init__(self, max_distance: int = MAX_EDIT_DISTANCE):
        """
        Initialize fuzzy matcher.

        Args:
            max_distance: Largest edit distance counted as a fuzzy match
        """
        self.max_distance = max_distance

    def score(self, candidate: str, keyword: str) -> int:
        """
        Score a single candidate text against a keyword.

        Args:
            candidate: Lowercased text (e.g., "aapl", "apple inc")
            keyword: Lowercased keyword (e.g., "appl")

        Returns:
            Match score between 0 (no match) and 3 (exact match)
        """
        if candidate == keyword:
            return EXACT_SCORE
        if keyword in candidate:
            return SUBSTRING_SCORE
        if self.fuzzy_word_match(candidate.split(), keyword):
            return FUZZY_SCORE
        return NO_MATCH

    def best_score(self, candidates: Iterable[str], keyword: str) -> int:
        """
        Best score any single candidate achieves for the keyword.

        Used for list-valued fields such as tags.
        """
        best = NO_MATCH
        for candidate in candidates:
            best = max(best, self.score(candidate, keyword))
            if best == EXACT_SCORE:
                break
        return best

    def fuzzy_word_match(self, words: Iterable[str], keyword: str) -> bool:
        """
        Check whether any word is within ``max_distance`` edits of keyword.

        Single-character keywords never fuzzy-match.
        """
        if len(keyword) <= 1:
            return False
        # Words whose length differs by more than the cutoff can't qualify
        return any(
            abs(len(word) - len(keyword)) <= self.max_distance
            and Levenshtein.distance(word, keyword, score_cutoff=self.max_distance)
            <= self.max_distance
            for word in words
        )

    def get_stats(self) -> dict:
        """
        Get matcher configuration.

        Returns:
            Dictionary with matcher settings
        """
        return {
            "max_distance": self.max_distance,
            "algorithm": "rapidfuzz-levenshtein",
        }
