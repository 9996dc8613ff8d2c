"""Persisted coin catalog: interface and HTTP client for the coins service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from markethub.core.config import settings
from markethub.core.http import HttpJsonClient
from markethub.core.logging import get_logger
from markethub.schemas.catalog import (
    Coin,
    CoinMarketDataUpdateRequest,
    QuoteCoinCreationRequest,
    TradingPairCreationRequest,
)

log = get_logger("clients.catalog")


class BaseCatalog(ABC):
    """Operations the pipeline needs from the persisted catalog."""

    @abstractmethod
    async def get_all_coins(self) -> List[Coin]:
        ...

    @abstractmethod
    async def get_coins_by_ids(self, ids: Sequence[int]) -> List[Coin]:
        ...

    @abstractmethod
    async def create_quote_coins(self, requests: Sequence[QuoteCoinCreationRequest]) -> List[Coin]:
        ...

    @abstractmethod
    async def replace_trading_pairs(self, requests: Sequence[TradingPairCreationRequest]) -> List[Coin]:
        """Replace the whole trading-pair graph; pairs absent from ``requests`` are removed."""

    @abstractmethod
    async def delete_unreferenced_coins(self) -> None:
        ...

    @abstractmethod
    async def update_coins_market_data(self, requests: Sequence[CoinMarketDataUpdateRequest]) -> List[Coin]:
        ...


class CatalogClient(BaseCatalog, HttpJsonClient):
    source = "coins service"

    def __init__(self, base_url: Optional[str] = None, **kwargs: Any):
        HttpJsonClient.__init__(self, base_url or settings.CATALOG_SERVICE_URL, **kwargs)

    async def get_all_coins(self) -> List[Coin]:
        return _to_coins(await self.get_json("/coins"))

    async def get_coins_by_ids(self, ids: Sequence[int]) -> List[Coin]:
        if not ids:
            return []
        return _to_coins(await self.get_json("/coins", params={"ids": list(ids)}))

    async def create_quote_coins(self, requests: Sequence[QuoteCoinCreationRequest]) -> List[Coin]:
        payload = [req.model_dump(mode="json") for req in requests]
        coins = _to_coins(await self.request_json("POST", "/coins/quote", json=payload))
        log.info(f"Created {len(coins)} quote coins")
        return coins

    async def replace_trading_pairs(self, requests: Sequence[TradingPairCreationRequest]) -> List[Coin]:
        payload = [req.model_dump(mode="json") for req in requests]
        return _to_coins(await self.request_json("PUT", "/coins/trading-pairs", json=payload))

    async def delete_unreferenced_coins(self) -> None:
        await self.request_json("DELETE", "/coins/unreferenced")

    async def update_coins_market_data(self, requests: Sequence[CoinMarketDataUpdateRequest]) -> List[Coin]:
        payload = [req.model_dump(mode="json") for req in requests]
        return _to_coins(await self.request_json("PATCH", "/coins/market-data", json=payload))


def _to_coins(data: Any) -> List[Coin]:
    return [Coin.model_validate(item) for item in data or []]
