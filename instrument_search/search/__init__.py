"""
Search module for grouped instrument search.

Provides tokenization, fuzzy scoring, per-category matching and ranking.
"""
from .category_matcher import CategoryMatcher, match_in_category
from .fuzzy_matcher import FuzzyMatcher, levenshtein_distance
from .ranking_engine import RankingEngine
from .tokenizer import tokenize

__all__ = [
    "CategoryMatcher",
    "FuzzyMatcher",
    "RankingEngine",
    "levenshtein_distance",
    "match_in_category",
    "tokenize",
]
