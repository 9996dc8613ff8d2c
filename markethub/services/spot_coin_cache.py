"""Cached access to the aggregated spot coin list."""

from __future__ import annotations

from typing import List, Optional

from markethub.core.cache import SingleFlightCache
from markethub.core.config import settings
from markethub.core.logging import get_logger
from markethub.schemas.candidates import CandidateCoin
from markethub.services.aggregator import SpotCoinAggregator

log = get_logger("spot_coin_cache")

CACHE_KEY = "all_current_active_spot_coins"


class SpotCoinCache:
    """Memoizes ``SpotCoinAggregator.get_active_spot_coins`` under one key.

    Concurrent callers share one aggregation. A failed aggregation is handed
    to everyone waiting on it and is not stored.
    """

    def __init__(
        self,
        aggregator: SpotCoinAggregator,
        cache: Optional[SingleFlightCache] = None,
        ttl_seconds: Optional[float] = None,
    ):
        self.aggregator = aggregator
        self.cache = cache or SingleFlightCache()
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.SPOT_COINS_CACHE_TTL_SECONDS

    async def get_or_refresh(self) -> List[CandidateCoin]:
        return await self.cache.get_or_create(CACHE_KEY, self._compute, self.ttl_seconds)

    def invalidate(self) -> None:
        self.cache.invalidate(CACHE_KEY)

    async def _compute(self) -> List[CandidateCoin]:
        log.info("Refreshing active spot coins")
        return await self.aggregator.get_active_spot_coins()
