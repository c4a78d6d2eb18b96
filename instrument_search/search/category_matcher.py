"""
Per-category matching of one instrument against all query keywords.

An instrument qualifies under a category only when every keyword scores
above zero against that category's text; its category score is then the
sum of the keyword scores.
"""

from typing import List, Optional, Sequence

from ..domain.entities import Instrument, InstrumentKind, MatchCategory
from .fuzzy_matcher import FUZZY_SCORE, NO_MATCH, SUBSTRING_SCORE, FuzzyMatcher

# Description matches are capped below exact symbol/name matches
DESCRIPTION_WORD_SCORE = SUBSTRING_SCORE
DESCRIPTION_SUBSTRING_SCORE = 1


class CategoryMatcher:
    """
    Combine per-keyword scores into one score per instrument and category.

    Text sources:
    - SYMBOL: the symbol
    - NAME: the display name
    - STOCK_TAG / ETF_TAG: the tag list, only for stocks / ETFs respectively
    - DESCRIPTION: both description fields as a bag of words
    """

    def __init__(
        self,
        fuzzy_matcher: Optional[FuzzyMatcher] = None,
        description_fuzzy: bool = False,
    ):
        """
        Initialize category matcher.

        Args:
            fuzzy_matcher: Scorer for symbol, name and tag text
            description_fuzzy: Also accept one-edit typos of description words
        """
        self.fuzzy_matcher = fuzzy_matcher or FuzzyMatcher()
        self.description_fuzzy = description_fuzzy

    def match(
        self,
        instrument: Instrument,
        keywords: Sequence[str],
        category: MatchCategory,
    ) -> Optional[int]:
        """
        Score an instrument under one category.

        Args:
            instrument: Instrument to score
            keywords: Lowercased query keywords
            category: Category whose text is matched

        Returns:
            Sum of keyword scores, or None if any keyword fails to match or
            the category does not apply to the instrument's kind
        """
        if not keywords:
            return None

        if category is MatchCategory.STOCK_TAG and instrument.kind is not InstrumentKind.STOCK:
            return None
        if category is MatchCategory.ETF_TAG and instrument.kind is not InstrumentKind.ETF:
            return None

        scorer = self._scorer_for(instrument, category)

        total = 0
        for keyword in keywords:
            keyword_score = scorer(keyword)
            if keyword_score == NO_MATCH:
                return None
            total += keyword_score
        return total

    def _scorer_for(self, instrument: Instrument, category: MatchCategory):
        """Build a keyword -> score function for the category's text."""
        if category is MatchCategory.SYMBOL:
            symbol = instrument.symbol.lower()
            return lambda keyword: self.fuzzy_matcher.score(symbol, keyword)

        if category is MatchCategory.NAME:
            name = instrument.name.lower()
            return lambda keyword: self.fuzzy_matcher.score(name, keyword)

        if category in (MatchCategory.STOCK_TAG, MatchCategory.ETF_TAG):
            tags = [tag.lower() for tag in instrument.tags]
            return lambda keyword: self.fuzzy_matcher.best_score(tags, keyword)

        descriptions = [instrument.description1.lower(), instrument.description2.lower()]
        words = [word for text in descriptions for word in text.split()]
        return lambda keyword: self._score_description(descriptions, words, keyword)

    def _score_description(
        self, descriptions: List[str], words: List[str], keyword: str
    ) -> int:
        # A whole-word hit outranks containment inside a longer word
        if keyword in words:
            return DESCRIPTION_WORD_SCORE
        if any(keyword in text for text in descriptions):
            return DESCRIPTION_SUBSTRING_SCORE
        if self.description_fuzzy and self.fuzzy_matcher.fuzzy_word_match(words, keyword):
            return FUZZY_SCORE
        return NO_MATCH


_default_matcher = CategoryMatcher()


def match_in_category(
    instrument: Instrument, keywords: Sequence[str], category: MatchCategory
) -> Optional[int]:
    """Score an instrument under a category with default matcher settings."""
    return _default_matcher.match(instrument, keywords, category)
