"""Models exchanged with the persisted coin catalog."""

from typing import List, Optional

from pydantic import BaseModel

from markethub.schemas.enums import CoinCategory, Exchange


class QuoteCoin(BaseModel):
    id: int
    symbol: str
    name: Optional[str] = None
    category: Optional[CoinCategory] = None
    identity_id: Optional[str] = None


class TradingPair(BaseModel):
    id: int
    quote: QuoteCoin
    exchanges: List[Exchange]


class Coin(BaseModel):
    id: int
    symbol: str
    name: Optional[str] = None
    category: Optional[CoinCategory] = None
    identity_id: Optional[str] = None
    market_cap_usd: Optional[float] = None
    price_usd: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
    trading_pairs: List[TradingPair] = []


class QuoteCoinCreationRequest(BaseModel):
    symbol: str
    name: str
    category: Optional[CoinCategory] = None
    identity_id: Optional[str] = None


class TradingPairCreationRequest(BaseModel):
    main_coin_id: int
    quote_coin_id: int
    exchanges: List[Exchange]


class CoinMarketDataUpdateRequest(BaseModel):
    id: int
    market_cap_usd: Optional[float] = None
    price_usd: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None


class CoinMarketData(BaseModel):
    id: int
    market_cap_usd: Optional[float] = None
    price_usd: Optional[float] = None
    price_change_percentage_24h: Optional[float] = None
