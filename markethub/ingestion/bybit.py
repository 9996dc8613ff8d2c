"""Bybit spot client (v5 market API)."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from markethub.core.config import settings
from markethub.core.errors import UnavailableError
from markethub.core.logging import get_logger
from markethub.schemas.enums import Exchange, KlineInterval, TradingPairStatus
from markethub.schemas.exchange import ExchangeSpotCoin, Kline
from markethub.schemas.klines import KlineWindow
from .base import BaseExchangeClient, SpotListing

log = get_logger("ingestion.bybit")

STATUS_MAP = {
    "Trading": TradingPairStatus.AVAILABLE,
    "PreLaunch": TradingPairStatus.CURRENTLY_UNAVAILABLE,
    "Settling": TradingPairStatus.CURRENTLY_UNAVAILABLE,
    "Delivering": TradingPairStatus.CURRENTLY_UNAVAILABLE,
    "Closed": TradingPairStatus.UNAVAILABLE,
}

INTERVAL_MAP = {
    KlineInterval.ONE_MINUTE: "1",
    KlineInterval.FIVE_MINUTES: "5",
    KlineInterval.FIFTEEN_MINUTES: "15",
    KlineInterval.THIRTY_MINUTES: "30",
    KlineInterval.ONE_HOUR: "60",
    KlineInterval.FOUR_HOURS: "240",
    KlineInterval.ONE_DAY: "D",
    KlineInterval.ONE_WEEK: "W",
    KlineInterval.ONE_MONTH: "M",
}


class BybitClient(BaseExchangeClient):
    """Reads spot instruments and candles from Bybit.

    Bybit answers HTTP 200 even for failed requests and signals errors through
    ``retCode``; anything other than 0 is raised as UnavailableError.
    """

    exchange = Exchange.BYBIT
    source = "Bybit"

    def __init__(self, base_url: Optional[str] = None, **kwargs: Any):
        super().__init__(base_url or settings.BYBIT_BASE_URL, **kwargs)

    async def get_all_spot_coins(self) -> List[ExchangeSpotCoin]:
        result = await self._get_result("/v5/market/instruments-info", {"category": "spot"})

        listings: List[SpotListing] = []
        for item in result.get("list", []):
            status = STATUS_MAP.get(item.get("status"), TradingPairStatus.UNAVAILABLE)
            listings.append(SpotListing(item["baseCoin"], item["quoteCoin"], status))

        coins = self.group_listings(listings)
        log.info(f"Fetched {len(coins)} spot coins from Bybit")
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
            "category": "spot",
            "symbol": f"{main_symbol}{quote_symbol}",
            "interval": INTERVAL_MAP[interval],
            "start": window.start_ms,
            "end": window.end_ms,
            "limit": limit,
        }
        result = await self._get_result("/v5/market/kline", params)
        # rows arrive newest first; normalize_series restores ascending order
        return self.parse_klines(
            result.get("list"), lambda row: self._parse_row(row, interval), params["symbol"]
        )

    async def _get_result(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        data = await self.get_json(path, params=params)
        if data.get("retCode") != 0:
            raise UnavailableError(f"Bybit rejected {path}: {data.get('retMsg')} (retCode={data.get('retCode')})")
        return data.get("result") or {}

    @staticmethod
    def _parse_row(row: List[str], interval: KlineInterval) -> Kline:
        open_time = int(row[0])
        return Kline(
            open_time=open_time,
            open_price=Decimal(row[1]),
            high_price=Decimal(row[2]),
            low_price=Decimal(row[3]),
            close_price=Decimal(row[4]),
            volume=Decimal(row[5]),
            close_time=open_time + interval.minutes * 60 * 1000,
        )
