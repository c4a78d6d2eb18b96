"""Query tokenization."""

from typing import List


def tokenize(query: str) -> List[str]:
    """
    Split a raw query into lowercase keywords.

    Splits on runs of whitespace and drops empty pieces. No stemming and no
    punctuation stripping.

    Examples:
        "  Apple   Tech " -> ["apple", "tech"]
        "   " -> []
    """
    if not query:
        return []
    return [piece.lower() for piece in query.split()]
