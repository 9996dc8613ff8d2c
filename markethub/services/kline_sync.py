"""Refreshes stored price history for every catalog coin that has trading pairs."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from markethub.clients.catalog import BaseCatalog
from markethub.clients.kline_store import BaseKlineStore
from markethub.core.config import settings
from markethub.core.errors import InternalError, MarketHubError
from markethub.core.logging import get_logger
from markethub.schemas.catalog import Coin
from markethub.schemas.enums import KlineInterval
from markethub.schemas.klines import (
    KlineBatchRequest,
    KlineCreationRequest,
    KlineRequestCoin,
    KlineRequestTradingPair,
    KlineWindow,
    PairKlineResponse,
)
from markethub.services.klines import KlineFallbackResolver

log = get_logger("kline_data_updater")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class KlineDataUpdater:
    def __init__(
        self,
        catalog: BaseCatalog,
        resolver: KlineFallbackResolver,
        store: BaseKlineStore,
        interval: Optional[KlineInterval] = None,
        lookback_days: Optional[int] = None,
        limit: Optional[int] = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.catalog = catalog
        self.resolver = resolver
        self.store = store
        self.interval = interval or KlineInterval(settings.KLINE_UPDATE_INTERVAL)
        self.lookback_days = lookback_days or settings.KLINE_LOOKBACK_DAYS
        self.limit = limit or settings.KLINE_LIMIT
        self._now = now

    async def update_kline_data(self) -> List[PairKlineResponse]:
        try:
            coins = await self.catalog.get_all_coins()
        except MarketHubError as exc:
            raise InternalError("Failed to retrieve coins from the catalog.", reasons=[exc]) from exc

        request = self.build_batch_request(coins)
        if not request.coins:
            log.info("No catalog coins with trading pairs; skipping kline update")
            return []

        responses = await self.resolver.get_first_successful_kline_data_per_coin(request)
        creation_requests = [
            KlineCreationRequest(trading_pair_id=response.trading_pair_id, **kline.model_dump())
            for response in responses
            for kline in response.klines
        ]
        if not creation_requests:
            log.warning("No kline data resolved for any coin; stored history left untouched")
            return []

        try:
            stored = await self.store.replace_kline_data(creation_requests)
        except MarketHubError as exc:
            raise InternalError("Failed to replace kline data.", reasons=[exc]) from exc

        log.info(f"Replaced {len(creation_requests)} klines across {len(stored)} trading pairs")
        return stored

    def build_batch_request(self, coins: List[Coin]) -> KlineBatchRequest:
        end = self._now()
        return KlineBatchRequest(
            interval=self.interval,
            window=KlineWindow(start=end - timedelta(days=self.lookback_days), end=end),
            limit=self.limit,
            coins=[
                KlineRequestCoin(
                    id=coin.id,
                    symbol=coin.symbol,
                    name=coin.name,
                    trading_pairs=[
                        KlineRequestTradingPair(id=pair.id, quote_symbol=pair.quote.symbol, exchanges=pair.exchanges)
                        for pair in coin.trading_pairs
                    ],
                )
                for coin in coins
                if coin.trading_pairs
            ],
        )
