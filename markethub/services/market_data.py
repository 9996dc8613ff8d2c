"""Refreshes price, market cap and 24h change of catalog coins from CoinGecko."""

from __future__ import annotations

from typing import Dict, List

from markethub.clients.catalog import BaseCatalog
from markethub.core.errors import InternalError, MarketHubError
from markethub.core.logging import get_logger
from markethub.ingestion.coingecko import CoinGeckoClient
from markethub.schemas.catalog import Coin, CoinMarketData, CoinMarketDataUpdateRequest
from markethub.schemas.identity import AssetInfo

log = get_logger("market_data_refresher")


class MarketDataRefresher:
    def __init__(self, catalog: BaseCatalog, provider: CoinGeckoClient):
        self.catalog = catalog
        self.provider = provider

    async def refresh_market_data(self) -> List[CoinMarketData]:
        try:
            coins = await self.catalog.get_all_coins()
        except MarketHubError as exc:
            raise InternalError("Failed to retrieve coins from the catalog.", reasons=[exc]) from exc

        tracked = [coin for coin in coins if coin.identity_id and coin.identity_id.strip()]
        if not tracked:
            log.info("No catalog coins carry a CoinGecko id; skipping market data refresh")
            return []

        ids = list(dict.fromkeys(coin.identity_id for coin in tracked))
        try:
            assets = await self.provider.get_assets_info(ids)
        except MarketHubError as exc:
            raise InternalError("Failed to retrieve CoinGecko assets info.", reasons=[exc]) from exc

        requests = self._update_requests(tracked, assets)
        if not requests:
            log.info("CoinGecko returned no market data for tracked coins")
            return []

        try:
            updated = await self.catalog.update_coins_market_data(requests)
        except MarketHubError as exc:
            raise InternalError("Failed to update coins market data.", reasons=[exc]) from exc

        log.info(f"Updated market data for {len(updated)} coins")
        return [
            CoinMarketData(
                id=coin.id,
                market_cap_usd=coin.market_cap_usd,
                price_usd=coin.price_usd,
                price_change_percentage_24h=coin.price_change_percentage_24h,
            )
            for coin in updated
        ]

    @staticmethod
    def _update_requests(coins: List[Coin], assets: List[AssetInfo]) -> List[CoinMarketDataUpdateRequest]:
        by_id: Dict[str, AssetInfo] = {asset.id: asset for asset in assets}
        requests: List[CoinMarketDataUpdateRequest] = []
        for coin in coins:
            asset = by_id.get(coin.identity_id)
            if asset is None:
                continue
            requests.append(
                CoinMarketDataUpdateRequest(
                    id=coin.id,
                    market_cap_usd=asset.market_cap_usd,
                    price_usd=asset.price_usd,
                    price_change_percentage_24h=asset.price_change_percentage_24h,
                )
            )
        return requests
