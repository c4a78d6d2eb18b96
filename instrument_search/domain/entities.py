"""
Domain entities for instrument search.

Core business objects representing instruments, their auxiliary display data,
match categories and search results. These entities are framework-agnostic
and contain only business logic.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

# Display marker for auxiliary values that have no data behind them.
UNAVAILABLE = "--"


class InstrumentKind(str, Enum):
    """Kinds of instruments held in the corpus."""

    STOCK = "stock"
    ETF = "etf"


class MatchCategory(Enum):
    """
    Fields an instrument can be matched on.

    Each member carries a display label and a constant priority. Priorities
    only break ties between groups with the same highest score.
    """

    SYMBOL = ("symbol", "Symbol Matches", 1000)
    NAME = ("name", "Name Matches", 500)
    STOCK_TAG = ("stock_tag", "Stock Tag Matches", 800)
    ETF_TAG = ("etf_tag", "ETF Tag Matches", 700)
    DESCRIPTION = ("description", "Description Matches", 300)

    def __init__(self, key: str, label: str, priority: int):
        self.key = key
        self.label = label
        self.priority = priority


@dataclass(frozen=True)
class Instrument:
    """
    Value object for one searchable instrument.

    Immutable; owned by the corpus loaded once at startup.
    """

    symbol: str
    name: str
    kind: InstrumentKind = InstrumentKind.STOCK
    tags: Tuple[str, ...] = ()
    description1: str = ""
    description2: str = ""

    def __post_init__(self):
        """Validate and normalize fields on creation."""
        if not self.symbol or not self.symbol.strip():
            raise ValueError("Instrument symbol cannot be empty")
        # Accept any iterable of tags but store a tuple to stay hashable
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags))

    @property
    def is_etf(self) -> bool:
        return self.kind is InstrumentKind.ETF


@dataclass(frozen=True)
class AuxiliaryInfo:
    """
    Optional per-symbol display data.

    Every field may be absent; absence is valid and never fails a search.
    """

    market_cap: Optional[float] = None
    pe_ratio: Optional[float] = None
    compare_text: Optional[str] = None
    sector: Optional[str] = None

    def format_market_cap(self) -> str:
        """Market cap in billions with one decimal, e.g. ``"2800.0B"``."""
        if self.market_cap is None:
            return UNAVAILABLE
        return f"{self.market_cap / 1_000_000_000:.1f}B"

    def format_pe_ratio(self) -> str:
        if self.pe_ratio is None:
            return UNAVAILABLE
        return f"{self.pe_ratio:.2f}"


_EMPTY_AUX = AuxiliaryInfo()


class AuxiliaryIndex:
    """
    Read-only lookup of auxiliary data keyed by uppercased symbol.

    Built from the three upstream tables (market cap/PE, compare text and
    sector membership). Lookups for unknown symbols return an empty
    AuxiliaryInfo rather than failing.
    """

    def __init__(
        self,
        market_data: Optional[Dict[str, Tuple[Optional[float], Optional[float]]]] = None,
        compare_data: Optional[Dict[str, str]] = None,
        sectors: Optional[Dict[str, Iterable[str]]] = None,
    ):
        """
        Initialize auxiliary index.

        Args:
            market_data: Symbol -> (market_cap, pe_ratio)
            compare_data: Symbol -> free-form compare display string
            sectors: Sector name -> member symbols
        """
        market_data = market_data or {}
        compare_data = {k.upper(): v for k, v in (compare_data or {}).items()}

        sector_by_symbol: Dict[str, str] = {}
        for sector, symbols in (sectors or {}).items():
            for symbol in symbols:
                # First sector listing a symbol wins
                sector_by_symbol.setdefault(symbol.upper(), sector)

        market_data = {k.upper(): v for k, v in market_data.items()}
        keys = set(market_data) | set(compare_data) | set(sector_by_symbol)

        self._entries: Dict[str, AuxiliaryInfo] = {}
        for key in keys:
            market_cap, pe_ratio = market_data.get(key, (None, None))
            self._entries[key] = AuxiliaryInfo(
                market_cap=market_cap,
                pe_ratio=pe_ratio,
                compare_text=compare_data.get(key),
                sector=sector_by_symbol.get(key),
            )

    def get(self, symbol: str) -> AuxiliaryInfo:
        """Get auxiliary info for a symbol (case-insensitive)."""
        return self._entries.get(symbol.upper(), _EMPTY_AUX)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(frozen=True)
class Corpus:
    """
    The complete read-only search corpus.

    Aggregates the stock and ETF collections with their auxiliary index.
    """

    stocks: Tuple[Instrument, ...] = ()
    etfs: Tuple[Instrument, ...] = ()
    aux: AuxiliaryIndex = field(default_factory=AuxiliaryIndex)

    @property
    def size(self) -> int:
        return len(self.stocks) + len(self.etfs)


@dataclass(frozen=True)
class ScoredResult:
    """
    An instrument matched under one category, with its display fields.

    Attributes:
        instrument: The matched instrument
        score: Accumulated keyword score for the category
        market_cap: Formatted market cap or the unavailable marker
        pe_ratio: Formatted PE ratio or the unavailable marker
        compare_text: Compare display string, None when absent
        sector: Sector group name, None when absent
    """

    instrument: Instrument
    score: int
    market_cap: str = UNAVAILABLE
    pe_ratio: str = UNAVAILABLE
    compare_text: Optional[str] = None
    sector: Optional[str] = None

    @classmethod
    def build(cls, instrument: Instrument, score: int, aux: AuxiliaryInfo) -> "ScoredResult":
        return cls(
            instrument=instrument,
            score=score,
            market_cap=aux.format_market_cap(),
            pe_ratio=aux.format_pe_ratio(),
            compare_text=aux.compare_text,
            sector=aux.sector,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for the presentation layer."""
        return {
            "symbol": self.instrument.symbol,
            "name": self.instrument.name,
            "kind": self.instrument.kind.value,
            "tags": list(self.instrument.tags),
            "market_cap": self.market_cap,
            "pe_ratio": self.pe_ratio,
            "compare_text": self.compare_text,
            "sector": self.sector,
            "score": self.score,
        }


@dataclass(frozen=True)
class ResultGroup:
    """Qualifying results for one category, ordered by descending score."""

    category: MatchCategory
    results: Tuple[ScoredResult, ...]
    highest_score: int

    @property
    def symbols(self) -> List[str]:
        return [result.instrument.symbol for result in self.results]

    def to_dict(self) -> dict:
        """Convert to dictionary for the presentation layer."""
        return {
            "category": self.category.key,
            "label": self.category.label,
            "highest_score": self.highest_score,
            "results": [result.to_dict() for result in self.results],
        }
