"""Binance spot client."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from markethub.core.config import settings
from markethub.core.logging import get_logger
from markethub.schemas.enums import Exchange, KlineInterval, TradingPairStatus
from markethub.schemas.exchange import ExchangeSpotCoin, Kline
from markethub.schemas.klines import KlineWindow
from .base import BaseExchangeClient, SpotListing

log = get_logger("ingestion.binance")

STATUS_MAP = {
    "TRADING": TradingPairStatus.AVAILABLE,
    "HALT": TradingPairStatus.CURRENTLY_UNAVAILABLE,
    "BREAK": TradingPairStatus.UNAVAILABLE,
}

INTERVAL_MAP = {
    KlineInterval.ONE_MINUTE: "1m",
    KlineInterval.FIVE_MINUTES: "5m",
    KlineInterval.FIFTEEN_MINUTES: "15m",
    KlineInterval.THIRTY_MINUTES: "30m",
    KlineInterval.ONE_HOUR: "1h",
    KlineInterval.FOUR_HOURS: "4h",
    KlineInterval.ONE_DAY: "1d",
    KlineInterval.ONE_WEEK: "1w",
    KlineInterval.ONE_MONTH: "1M",
}


class BinanceClient(BaseExchangeClient):
    """Reads spot listings and candles from the public Binance API."""

    exchange = Exchange.BINANCE
    source = "Binance"

    def __init__(self, base_url: Optional[str] = None, **kwargs: Any):
        super().__init__(base_url or settings.BINANCE_BASE_URL, **kwargs)

    async def get_all_spot_coins(self) -> List[ExchangeSpotCoin]:
        data = await self.get_json("/api/v3/exchangeInfo", params={"showPermissionSets": "false"})

        listings: List[SpotListing] = []
        for item in data.get("symbols", []):
            status = STATUS_MAP.get(item.get("status"), TradingPairStatus.UNAVAILABLE)
            listings.append(SpotListing(item["baseAsset"], item["quoteAsset"], status))

        coins = self.group_listings(listings)
        log.info(f"Fetched {len(coins)} spot coins from Binance")
        return coins

    async def get_kline_data(
        self,
        main_symbol: str,
        quote_symbol: str,
        interval: KlineInterval,
        window: KlineWindow,
        limit: int,
    ) -> List[Kline]:
        params: Dict[str, Any] = {
            "symbol": f"{main_symbol}{quote_symbol}",
            "interval": INTERVAL_MAP[interval],
            "limit": limit,
            "startTime": window.start_ms,
            "endTime": window.end_ms,
        }
        rows = await self.get_json("/api/v3/klines", params=params)
        return self.parse_klines(rows, self._parse_row, params["symbol"])

    @staticmethod
    def _parse_row(row: List[Any]) -> Kline:
        return Kline(
            open_time=int(row[0]),
            open_price=Decimal(row[1]),
            high_price=Decimal(row[2]),
            low_price=Decimal(row[3]),
            close_price=Decimal(row[4]),
            volume=Decimal(row[5]),
            close_time=int(row[6]),
        )
