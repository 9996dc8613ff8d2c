"""Aggregated spot coins, merged across exchanges and annotated with identity."""

from typing import List, Optional

from pydantic import BaseModel

from markethub.schemas.enums import CoinCategory, Exchange


class CandidateQuote(BaseModel):
    symbol: str
    name: Optional[str] = None
    identity_id: Optional[str] = None
    category: Optional[CoinCategory] = None


class CandidateTradingPair(BaseModel):
    quote: CandidateQuote
    exchanges: List[Exchange]


class CandidateCoin(BaseModel):
    symbol: str
    name: Optional[str] = None
    identity_id: Optional[str] = None
    category: Optional[CoinCategory] = None
    trading_pairs: List[CandidateTradingPair] = []
