"""Wires clients and services from settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from markethub.clients.catalog import BaseCatalog, CatalogClient
from markethub.clients.kline_store import BaseKlineStore, KlineStoreClient
from markethub.core.logging import get_logger
from markethub.ingestion.base import BaseExchangeClient
from markethub.ingestion.binance import BinanceClient
from markethub.ingestion.bybit import BybitClient
from markethub.ingestion.coingecko import CoinGeckoClient
from markethub.ingestion.mexc import MexcClient
from markethub.services.aggregator import SpotCoinAggregator
from markethub.services.identity import IdentityResolver
from markethub.services.kline_sync import KlineDataUpdater
from markethub.services.klines import KlineFallbackResolver
from markethub.services.market_data import MarketDataRefresher
from markethub.services.reconciler import CatalogReconciler
from markethub.services.spot_coin_cache import SpotCoinCache

log = get_logger("container")


@dataclass
class Services:
    spot_coins: SpotCoinCache
    reconciler: CatalogReconciler
    kline_resolver: KlineFallbackResolver
    kline_updater: KlineDataUpdater
    market_data: MarketDataRefresher


def build_services(
    exchange_clients: Optional[List[BaseExchangeClient]] = None,
    provider: Optional[CoinGeckoClient] = None,
    catalog: Optional[BaseCatalog] = None,
    kline_store: Optional[BaseKlineStore] = None,
) -> Services:
    """Build the service graph; any collaborator can be swapped out."""
    exchange_clients = exchange_clients or [BinanceClient(), BybitClient(), MexcClient()]
    provider = provider or CoinGeckoClient()
    catalog = catalog or CatalogClient()
    kline_store = kline_store or KlineStoreClient()

    spot_coins = SpotCoinCache(SpotCoinAggregator(exchange_clients, IdentityResolver(provider)))
    kline_resolver = KlineFallbackResolver(exchange_clients)
    log.info(f"Services built for exchanges: {', '.join(c.exchange.value for c in exchange_clients)}")
    return Services(
        spot_coins=spot_coins,
        reconciler=CatalogReconciler(catalog, spot_coins),
        kline_resolver=kline_resolver,
        kline_updater=KlineDataUpdater(catalog, kline_resolver, kline_store),
        market_data=MarketDataRefresher(catalog, provider),
    )


_services: Optional[Services] = None


def get_services() -> Services:
    """Process-wide service graph, built on first use so the spot coin cache is shared."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def reset_services() -> None:
    global _services
    _services = None
