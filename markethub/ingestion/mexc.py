"""MEXC spot client."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from markethub.core.config import settings
from markethub.core.logging import get_logger
from markethub.schemas.enums import Exchange, KlineInterval, TradingPairStatus
from markethub.schemas.exchange import ExchangeSpotCoin, Kline
from markethub.schemas.klines import KlineWindow
from .base import BaseExchangeClient, SpotListing

log = get_logger("ingestion.mexc")

# MEXC reports status as "1" (trading), "2" (paused) or "3" (offline)
STATUS_MAP = {
    "1": TradingPairStatus.AVAILABLE,
    "2": TradingPairStatus.CURRENTLY_UNAVAILABLE,
    "3": TradingPairStatus.UNAVAILABLE,
}

INTERVAL_MAP = {
    KlineInterval.ONE_MINUTE: "1m",
    KlineInterval.FIVE_MINUTES: "5m",
    KlineInterval.FIFTEEN_MINUTES: "15m",
    KlineInterval.THIRTY_MINUTES: "30m",
    KlineInterval.ONE_HOUR: "60m",
    KlineInterval.FOUR_HOURS: "4h",
    KlineInterval.ONE_DAY: "1d",
    KlineInterval.ONE_WEEK: "1W",
    KlineInterval.ONE_MONTH: "1M",
}


class MexcClient(BaseExchangeClient):
    """Reads spot listings and candles from MEXC.

    MEXC is the only exchange that ships full asset names; a quote symbol is
    named after the base asset of the same symbol when one is listed.
    """

    exchange = Exchange.MEXC
    source = "MEXC"

    def __init__(self, base_url: Optional[str] = None, **kwargs: Any):
        super().__init__(base_url or settings.MEXC_BASE_URL, **kwargs)

    async def get_all_spot_coins(self) -> List[ExchangeSpotCoin]:
        data = await self.get_json("/api/v3/exchangeInfo")
        symbols = data.get("symbols", [])

        full_names: Dict[str, str] = {}
        for item in symbols:
            if item.get("fullName"):
                full_names.setdefault(item["baseAsset"].upper(), item["fullName"])

        listings: List[SpotListing] = []
        for item in symbols:
            status = STATUS_MAP.get(str(item.get("status")), TradingPairStatus.UNAVAILABLE)
            listings.append(
                SpotListing(
                    item["baseAsset"],
                    item["quoteAsset"],
                    status,
                    base_name=item.get("fullName") or None,
                    quote_name=full_names.get(item["quoteAsset"].upper()),
                )
            )

        coins = self.group_listings(listings)
        log.info(f"Fetched {len(coins)} spot coins from MEXC")
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
        # prices come back as strings or numbers depending on the endpoint version
        return Kline(
            open_time=int(row[0]),
            open_price=Decimal(str(row[1])),
            high_price=Decimal(str(row[2])),
            low_price=Decimal(str(row[3])),
            close_price=Decimal(str(row[4])),
            volume=Decimal(str(row[5])),
            close_time=int(row[6]),
        )
