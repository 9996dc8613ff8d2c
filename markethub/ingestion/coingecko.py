"""CoinGecko identity and market-data client."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from markethub.core.concurrency import gather_all
from markethub.core.config import settings
from markethub.core.errors import BadRequestError
from markethub.core.http import HttpJsonClient
from markethub.core.logging import get_logger
from markethub.schemas.enums import Exchange
from markethub.schemas.identity import AssetInfo, IdentityCoin

log = get_logger("ingestion.coingecko")

MAX_IDS_PER_REQUEST = 250
MAX_TICKERS_PER_REQUEST = 100

# Exchange ids as CoinGecko knows them
EXCHANGE_IDS: Dict[Exchange, str] = {
    Exchange.BINANCE: "binance",
    Exchange.MEXC: "mxc",
    Exchange.BYBIT: "bybit_spot",
}


class CoinGeckoClient(HttpJsonClient):
    """Identity provider: coin list, per-exchange symbol maps and market snapshots."""

    source = "CoinGecko"

    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None, **kwargs: Any):
        api_key = api_key if api_key is not None else settings.COINGECKO_API_KEY
        headers = {"x-cg-demo-api-key": api_key} if api_key else None
        super().__init__(base_url or settings.COINGECKO_BASE_URL, headers=headers, **kwargs)

    async def get_coins_list(self) -> List[IdentityCoin]:
        data = await self.get_json("/api/v3/coins/list")
        coins = [IdentityCoin(id=item["id"], symbol=item["symbol"], name=item["name"]) for item in data]
        log.info(f"Fetched {len(coins)} coins from CoinGecko")
        return coins

    async def get_symbol_to_id_map_for_exchange(self, exchange_id: str) -> Dict[str, str]:
        """Map every base and target symbol traded on ``exchange_id`` to a CoinGecko id.

        Keys are upper-cased. The first ticker carrying a non-empty id wins.
        """
        symbol_map: Dict[str, str] = {}
        page = 1
        while True:
            data = await self.get_json(
                f"/api/v3/exchanges/{exchange_id}/tickers",
                params={"depth": "false", "order": "volume_desc", "page": page},
            )
            tickers = data.get("tickers") or []
            for ticker in tickers:
                for symbol, coin_id in (
                    (ticker.get("base"), ticker.get("coin_id")),
                    (ticker.get("target"), ticker.get("target_coin_id")),
                ):
                    if symbol and coin_id:
                        symbol_map.setdefault(symbol.upper(), coin_id)

            if len(tickers) < MAX_TICKERS_PER_REQUEST:
                break
            page += 1

        log.info(f"Mapped {len(symbol_map)} symbols for {exchange_id} over {page} page(s)")
        return symbol_map

    async def get_market_data_for_coins(self, ids: Sequence[str]) -> List[Dict[str, Any]]:
        if not ids:
            raise BadRequestError("No CoinGecko ids provided")

        results: List[Dict[str, Any]] = []
        for start in range(0, len(ids), MAX_IDS_PER_REQUEST):
            chunk = ids[start : start + MAX_IDS_PER_REQUEST]
            data = await self.get_json(
                "/api/v3/coins/markets",
                params={"vs_currency": "usd", "per_page": MAX_IDS_PER_REQUEST, "ids": ",".join(chunk)},
            )
            results.extend(data or [])
        return results

    async def get_stablecoin_ids(self) -> List[str]:
        ids: List[str] = []
        page = 1
        while True:
            data = await self.get_json(
                "/api/v3/coins/markets",
                params={
                    "vs_currency": "usd",
                    "category": "stablecoins",
                    "per_page": MAX_IDS_PER_REQUEST,
                    "page": page,
                    "sparkline": "false",
                },
            )
            data = data or []
            ids.extend(item["id"] for item in data)
            if len(data) < MAX_IDS_PER_REQUEST:
                break
            page += 1
        return ids

    async def get_assets_info(self, ids: Sequence[str]) -> List[AssetInfo]:
        """Market snapshot for ``ids``, flagged with stablecoin membership."""
        if not ids:
            raise BadRequestError("No CoinGecko ids provided")

        markets, stablecoin_ids = await gather_all(
            self.get_market_data_for_coins(ids),
            self.get_stablecoin_ids(),
            message="Failed to retrieve CoinGecko assets info.",
        )
        stable = set(stablecoin_ids)
        return [
            AssetInfo(
                id=item["id"],
                market_cap_usd=item.get("market_cap"),
                price_usd=item.get("current_price"),
                price_change_percentage_24h=item.get("price_change_percentage_24h"),
                is_stablecoin=item["id"] in stable,
            )
            for item in markets
        ]
