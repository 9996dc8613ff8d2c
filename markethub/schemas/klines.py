"""Kline request and response shapes."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, model_validator

from markethub.schemas.enums import Exchange, KlineInterval
from markethub.schemas.exchange import Kline


class KlineWindow(BaseModel):
    start: datetime
    end: datetime

    @model_validator(mode="after")
    def check_order(self) -> "KlineWindow":
        if self.start >= self.end:
            raise ValueError("window start must be before its end")
        return self

    @property
    def start_ms(self) -> int:
        return int(self.start.timestamp() * 1000)

    @property
    def end_ms(self) -> int:
        return int(self.end.timestamp() * 1000)


class KlineRequestTradingPair(BaseModel):
    id: int
    quote_symbol: str
    exchanges: List[Exchange]


class KlineRequestCoin(BaseModel):
    id: int
    symbol: str
    name: Optional[str] = None
    trading_pairs: List[KlineRequestTradingPair] = []


class KlineBatchRequest(BaseModel):
    interval: KlineInterval
    window: KlineWindow
    limit: int = 1000
    coins: List[KlineRequestCoin]


class PairKlineResponse(BaseModel):
    trading_pair_id: int
    klines: List[Kline]


class KlineCreationRequest(BaseModel):
    trading_pair_id: int
    open_time: int
    open_price: Decimal
    high_price: Decimal
    low_price: Decimal
    close_price: Decimal
    volume: Decimal
    close_time: int
