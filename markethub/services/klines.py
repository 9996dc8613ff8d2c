"""First-success candle resolution across trading pairs and exchanges."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterator, List, Optional, Sequence

from markethub.core.concurrency import first_success
from markethub.core.errors import NotFoundError
from markethub.core.logging import get_logger
from markethub.ingestion.base import BaseExchangeClient
from markethub.schemas.enums import Exchange, KlineInterval
from markethub.schemas.exchange import Kline
from markethub.schemas.klines import (
    KlineBatchRequest,
    KlineRequestCoin,
    KlineRequestTradingPair,
    KlineWindow,
    PairKlineResponse,
)

log = get_logger("kline_resolver")

Attempt = Callable[[], Awaitable[Optional[PairKlineResponse]]]


class KlineFallbackResolver:
    """Tries (pair, exchange) combinations in request order until one has candles.

    Attempts for one coin run sequentially and stop at the first non-empty
    series. Exchange errors and timeouts count as empty results.
    """

    def __init__(self, clients: Sequence[BaseExchangeClient]):
        self.clients = list(clients)

    def client_for(self, exchange: Exchange) -> Optional[BaseExchangeClient]:
        for client in self.clients:
            if client.exchange == exchange:
                return client
        return None

    async def get_kline_data_for_pair(
        self,
        coin: KlineRequestCoin,
        trading_pair: KlineRequestTradingPair,
        interval: KlineInterval,
        window: KlineWindow,
        limit: int,
    ) -> PairKlineResponse:
        response = await first_success(
            self._pair_attempts(coin, trading_pair, interval, window, limit),
            label=f"klines for {coin.symbol}/{trading_pair.quote_symbol}",
        )
        if response is None:
            log.warning(f"No kline data found for coin {coin.symbol} (id={coin.id}, name={coin.name})")
            raise NotFoundError(f"No kline data found for trading pair with id {trading_pair.id}")
        return response

    async def get_first_successful_kline_data_per_coin(self, request: KlineBatchRequest) -> List[PairKlineResponse]:
        results = await asyncio.gather(*(self._resolve_coin(coin, request) for coin in request.coins))
        responses = [result for result in results if result is not None]
        log.info(f"Resolved kline data for {len(responses)}/{len(request.coins)} coins")
        return responses

    async def _resolve_coin(self, coin: KlineRequestCoin, request: KlineBatchRequest) -> Optional[PairKlineResponse]:
        response = await first_success(
            self._coin_attempts(coin, request),
            label=f"klines for {coin.symbol}",
        )
        if response is None:
            log.warning(f"No kline data found for coin {coin.symbol} (id={coin.id}, name={coin.name})")
        return response

    def _coin_attempts(self, coin: KlineRequestCoin, request: KlineBatchRequest) -> Iterator[Attempt]:
        for trading_pair in coin.trading_pairs:
            yield from self._pair_attempts(coin, trading_pair, request.interval, request.window, request.limit)

    def _pair_attempts(
        self,
        coin: KlineRequestCoin,
        trading_pair: KlineRequestTradingPair,
        interval: KlineInterval,
        window: KlineWindow,
        limit: int,
    ) -> Iterator[Attempt]:
        for exchange in trading_pair.exchanges:
            client = self.client_for(exchange)
            if client is None:
                log.warning(f"No client registered for {exchange.value}; skipping {coin.symbol}/{trading_pair.quote_symbol}")
                continue
            yield self._attempt(client, coin.symbol, trading_pair, interval, window, limit)

    @staticmethod
    def _attempt(
        client: BaseExchangeClient,
        main_symbol: str,
        trading_pair: KlineRequestTradingPair,
        interval: KlineInterval,
        window: KlineWindow,
        limit: int,
    ) -> Attempt:
        async def attempt() -> Optional[PairKlineResponse]:
            klines: List[Kline] = await client.get_kline_data(
                main_symbol, trading_pair.quote_symbol, interval, window, limit
            )
            if not klines:
                log.debug(f"{client.exchange.value} has no klines for {main_symbol}/{trading_pair.quote_symbol}")
                return None
            return PairKlineResponse(trading_pair_id=trading_pair.id, klines=klines)

        return attempt
