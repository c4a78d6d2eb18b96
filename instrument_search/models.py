"""
Input models for loader-provided corpus data.

The corpus loader hands over already-decoded mappings (the shape of the
description data, market cap and compare tables). These Pydantic models
validate them and convert them into domain entities.
"""

from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from .domain.entities import AuxiliaryIndex, Corpus, Instrument, InstrumentKind
from .domain.exceptions import CorpusValidationException


class InstrumentRecord(BaseModel):
    """
    One stock or ETF entry from the description data.

    Attributes:
        symbol: Ticker symbol
        name: Display name
        tags: Category tags (``tag`` in the loader's data)
        description1: First description sentence
        description2: Second description sentence
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    symbol: str = Field(..., min_length=1, description="Ticker symbol", examples=["AAPL"])
    name: str = Field(default="", description="Display name", examples=["Apple Inc"])
    tags: List[str] = Field(default_factory=list, alias="tag", description="Category tags")
    description1: str = Field(default="", description="First description sentence")
    description2: str = Field(default="", description="Second description sentence")

    @field_validator("symbol")
    @classmethod
    def strip_symbol(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("symbol cannot be blank")
        return value

    def to_instrument(self, kind: InstrumentKind) -> Instrument:
        return Instrument(
            symbol=self.symbol,
            name=self.name,
            kind=kind,
            tags=tuple(self.tags),
            description1=self.description1,
            description2=self.description2,
        )


class MarketDataRecord(BaseModel):
    """Market cap and PE ratio for one symbol."""

    market_cap: Optional[float] = Field(default=None, alias="marketCap")
    pe_ratio: Optional[float] = Field(default=None, alias="peRatio")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class DescriptionData(BaseModel):
    """Top-level description data: the stock and ETF collections."""

    stocks: List[InstrumentRecord] = Field(default_factory=list)
    etfs: List[InstrumentRecord] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


# Symbol -> compare display string
_COMPARE_ADAPTER = TypeAdapter(Dict[str, str])
# Sector name -> member symbols
_SECTORS_ADAPTER = TypeAdapter(Dict[str, List[str]])


def build_corpus(
    description_data: Optional[Mapping] = None,
    market_data: Optional[Mapping[str, Mapping]] = None,
    compare_data: Optional[Mapping[str, str]] = None,
    sectors: Optional[Mapping[str, List[str]]] = None,
) -> Corpus:
    """
    Validate loader output and build the search corpus.

    Every argument may be omitted; an empty corpus is valid and simply
    yields no results.

    Args:
        description_data: ``{"stocks": [...], "etfs": [...]}``
        market_data: Symbol -> ``{"marketCap": ..., "peRatio": ...}``
        compare_data: Symbol -> compare display string
        sectors: Sector name -> member symbols

    Returns:
        Corpus ready for the ranking engine

    Raises:
        CorpusValidationException: If any collection is malformed
    """
    try:
        descriptions = DescriptionData.model_validate(description_data or {})
    except ValidationError as e:
        raise CorpusValidationException("description_data", str(e)) from e

    try:
        compare = _COMPARE_ADAPTER.validate_python(dict(compare_data or {}))
    except ValidationError as e:
        raise CorpusValidationException("compare_data", str(e)) from e

    try:
        sector_members = _SECTORS_ADAPTER.validate_python(dict(sectors or {}))
    except ValidationError as e:
        raise CorpusValidationException("sectors", str(e)) from e

    market: Dict[str, tuple] = {}
    for symbol, raw in (market_data or {}).items():
        try:
            record = MarketDataRecord.model_validate(raw)
        except ValidationError as e:
            raise CorpusValidationException("market_data", f"{symbol}: {e}") from e
        market[symbol] = (record.market_cap, record.pe_ratio)

    return Corpus(
        stocks=tuple(r.to_instrument(InstrumentKind.STOCK) for r in descriptions.stocks),
        etfs=tuple(r.to_instrument(InstrumentKind.ETF) for r in descriptions.etfs),
        aux=AuxiliaryIndex(
            market_data=market,
            compare_data=compare,
            sectors=sector_members,
        ),
    )
