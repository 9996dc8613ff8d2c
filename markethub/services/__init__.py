# Services package
from markethub.services.aggregator import SpotCoinAggregator
from markethub.services.container import Services, build_services, get_services, reset_services
from markethub.services.identity import IdentityResolver
from markethub.services.kline_sync import KlineDataUpdater
from markethub.services.klines import KlineFallbackResolver
from markethub.services.market_data import MarketDataRefresher
from markethub.services.reconciler import CatalogReconciler
from markethub.services.spot_coin_cache import SpotCoinCache

__all__ = [
    "SpotCoinAggregator",
    "IdentityResolver",
    "SpotCoinCache",
    "CatalogReconciler",
    "KlineFallbackResolver",
    "KlineDataUpdater",
    "MarketDataRefresher",
    "Services",
    "build_services",
    "get_services",
    "reset_services",
]
