"""Transient per-exchange listing and candle models."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, model_validator

from markethub.schemas.enums import Exchange, TradingPairStatus


class ExchangeQuote(BaseModel):
    symbol: str
    name: Optional[str] = None


class ExchangeTradingPair(BaseModel):
    quote: ExchangeQuote
    exchange: Exchange
    status: TradingPairStatus


class ExchangeSpotCoin(BaseModel):
    """One base asset as listed by a single exchange."""

    symbol: str
    name: Optional[str] = None
    trading_pairs: List[ExchangeTradingPair] = []


class Kline(BaseModel):
    """A single candle. Times are epoch milliseconds."""

    open_time: int
    open_price: Decimal
    high_price: Decimal
    low_price: Decimal
    close_price: Decimal
    volume: Decimal
    close_time: int

    @model_validator(mode="after")
    def check_times(self) -> "Kline":
        if self.open_time >= self.close_time:
            raise ValueError(f"open_time {self.open_time} must be before close_time {self.close_time}")
        return self
