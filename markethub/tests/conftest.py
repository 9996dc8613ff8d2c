"""Shared fakes for exchange, identity, catalog and kline-store collaborators."""

from decimal import Decimal
from itertools import count
from typing import Dict, List, Optional, Sequence, Tuple, Union

import pytest
from loguru import logger

from markethub.clients.catalog import BaseCatalog
from markethub.clients.kline_store import BaseKlineStore
from markethub.ingestion.base import BaseExchangeClient, SpotListing
from markethub.schemas.catalog import (
    Coin,
    CoinMarketDataUpdateRequest,
    QuoteCoin,
    QuoteCoinCreationRequest,
    TradingPair,
    TradingPairCreationRequest,
)
from markethub.schemas.enums import Exchange, KlineInterval, TradingPairStatus
from markethub.schemas.exchange import ExchangeSpotCoin, Kline
from markethub.schemas.identity import AssetInfo, IdentityCoin
from markethub.schemas.klines import KlineCreationRequest, KlineWindow, PairKlineResponse

AVAILABLE = TradingPairStatus.AVAILABLE


def make_kline(open_time: int, close: str = "1.0") -> Kline:
    return Kline(
        open_time=open_time,
        open_price=Decimal("1.0"),
        high_price=Decimal("2.0"),
        low_price=Decimal("0.5"),
        close_price=Decimal(close),
        volume=Decimal("10"),
        close_time=open_time + 59_999,
    )


class FakeExchangeClient(BaseExchangeClient):
    """Exchange double fed with (base, quote, status[, base_name]) rows."""

    def __init__(
        self,
        exchange: Exchange,
        listings: Sequence[Tuple] = (),
        klines: Optional[Dict[Tuple[str, str], Union[List[Kline], Exception]]] = None,
        error: Optional[Exception] = None,
    ):
        super().__init__(f"http://{exchange.value.lower()}.test")
        self.exchange = exchange
        self.listings = list(listings)
        self.klines = klines or {}
        self.error = error
        self.spot_calls = 0
        self.kline_calls: List[Tuple[str, str]] = []

    async def get_all_spot_coins(self) -> List[ExchangeSpotCoin]:
        self.spot_calls += 1
        if self.error:
            raise self.error
        return self.group_listings(SpotListing(*row) for row in self.listings)

    async def get_kline_data(
        self,
        main_symbol: str,
        quote_symbol: str,
        interval: KlineInterval,
        window: KlineWindow,
        limit: int,
    ) -> List[Kline]:
        self.kline_calls.append((main_symbol, quote_symbol))
        result = self.klines.get((main_symbol, quote_symbol), [])
        if isinstance(result, Exception):
            raise result
        return list(result)


class FakeIdentityProvider:
    """Stands in for CoinGeckoClient; symbol maps are keyed by CoinGecko exchange id."""

    def __init__(
        self,
        coins: Sequence[IdentityCoin] = (),
        symbol_maps: Optional[Dict[str, Dict[str, str]]] = None,
        stablecoin_ids: Sequence[str] = (),
        assets: Sequence[AssetInfo] = (),
        error: Optional[Exception] = None,
    ):
        self.coins = list(coins)
        self.symbol_maps = symbol_maps or {}
        self.stablecoin_ids = list(stablecoin_ids)
        self.assets = list(assets)
        self.error = error
        self.asset_requests: List[List[str]] = []

    async def get_coins_list(self) -> List[IdentityCoin]:
        if self.error:
            raise self.error
        return self.coins

    async def get_stablecoin_ids(self) -> List[str]:
        return self.stablecoin_ids

    async def get_symbol_to_id_map_for_exchange(self, exchange_id: str) -> Dict[str, str]:
        return dict(self.symbol_maps.get(exchange_id, {}))

    async def get_assets_info(self, ids: Sequence[str]) -> List[AssetInfo]:
        self.asset_requests.append(list(ids))
        if self.error:
            raise self.error
        return [asset for asset in self.assets if asset.id in ids]


class FakeCatalog(BaseCatalog):
    """In-memory catalog with the coins service's replace/delete semantics."""

    def __init__(self, coins: Sequence[Coin] = ()):
        self.coins: Dict[int, Coin] = {coin.id: coin for coin in coins}
        self._ids = count(max(self.coins, default=0) + 1)
        self._pair_ids = count(1000)
        self.calls: List[str] = []
        self.created_quotes: List[QuoteCoinCreationRequest] = []
        self.fail_on: Optional[str] = None
        self.fail_with: Exception = RuntimeError("catalog failure")

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_on == name:
            raise self.fail_with

    def by_symbol(self, symbol: str) -> Optional[Coin]:
        return next((coin for coin in self.coins.values() if coin.symbol == symbol), None)

    async def get_all_coins(self) -> List[Coin]:
        self._record("get_all_coins")
        return [coin.model_copy(deep=True) for coin in self.coins.values()]

    async def get_coins_by_ids(self, ids: Sequence[int]) -> List[Coin]:
        self._record("get_coins_by_ids")
        return [self.coins[i].model_copy(deep=True) for i in ids if i in self.coins]

    async def create_quote_coins(self, requests: Sequence[QuoteCoinCreationRequest]) -> List[Coin]:
        self._record("create_quote_coins")
        created = []
        for req in requests:
            coin = Coin(
                id=next(self._ids),
                symbol=req.symbol,
                name=req.name,
                category=req.category,
                identity_id=req.identity_id,
            )
            self.coins[coin.id] = coin
            self.created_quotes.append(req)
            created.append(coin)
        return created

    async def replace_trading_pairs(self, requests: Sequence[TradingPairCreationRequest]) -> List[Coin]:
        self._record("replace_trading_pairs")
        for coin in self.coins.values():
            coin.trading_pairs = []
        for req in requests:
            quote = self.coins[req.quote_coin_id]
            self.coins[req.main_coin_id].trading_pairs.append(
                TradingPair(
                    id=next(self._pair_ids),
                    quote=QuoteCoin(id=quote.id, symbol=quote.symbol, name=quote.name),
                    exchanges=list(req.exchanges),
                )
            )
        main_ids = dict.fromkeys(req.main_coin_id for req in requests)
        return [self.coins[i].model_copy(deep=True) for i in main_ids]

    async def delete_unreferenced_coins(self) -> None:
        self._record("delete_unreferenced_coins")
        referenced = {pair.quote.id for coin in self.coins.values() for pair in coin.trading_pairs}
        self.coins = {
            coin_id: coin
            for coin_id, coin in self.coins.items()
            if coin.trading_pairs or coin_id in referenced
        }

    async def update_coins_market_data(self, requests: Sequence[CoinMarketDataUpdateRequest]) -> List[Coin]:
        self._record("update_coins_market_data")
        updated = []
        for req in requests:
            coin = self.coins[req.id]
            coin.market_cap_usd = req.market_cap_usd
            coin.price_usd = req.price_usd
            coin.price_change_percentage_24h = req.price_change_percentage_24h
            updated.append(coin.model_copy(deep=True))
        return updated


class FakeKlineStore(BaseKlineStore):
    def __init__(self):
        self.requests: List[KlineCreationRequest] = []

    async def replace_kline_data(self, requests: Sequence[KlineCreationRequest]) -> List[PairKlineResponse]:
        self.requests.extend(requests)
        grouped: Dict[int, List[Kline]] = {}
        for req in requests:
            grouped.setdefault(req.trading_pair_id, []).append(
                Kline(**req.model_dump(exclude={"trading_pair_id"}))
            )
        return [PairKlineResponse(trading_pair_id=pair_id, klines=klines) for pair_id, klines in grouped.items()]


def catalog_coin(
    coin_id: int,
    symbol: str,
    pairs: Sequence[Tuple[int, Coin, List[Exchange]]] = (),
    name: Optional[str] = None,
    **fields,
) -> Coin:
    return Coin(
        id=coin_id,
        symbol=symbol,
        name=name or symbol,
        trading_pairs=[
            TradingPair(id=pair_id, quote=QuoteCoin(id=quote.id, symbol=quote.symbol, name=quote.name), exchanges=exchanges)
            for pair_id, quote, exchanges in pairs
        ],
        **fields,
    )


@pytest.fixture
def captured_logs():
    """Collect loguru records emitted during the test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


def warnings_in(records) -> List[str]:
    return [record["message"] for record in records if record["level"].name == "WARNING"]
