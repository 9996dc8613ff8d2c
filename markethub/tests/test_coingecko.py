"""CoinGecko client tests"""

import httpx
import pytest

from markethub.core.errors import BadRequestError, InternalError, UnavailableError
from markethub.ingestion.coingecko import MAX_TICKERS_PER_REQUEST, CoinGeckoClient


def router(routes, seen):
    """Dispatch by path; a route value may be a callable of the request."""

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        payload = routes[request.url.path]
        if callable(payload):
            payload = payload(request)
        if isinstance(payload, httpx.Response):
            return payload
        return httpx.Response(200, json=payload)

    return httpx.MockTransport(handler)


class TestCoinGeckoClient:
    @pytest.mark.asyncio
    async def test_api_key_is_sent_as_header(self):
        seen = []
        client = CoinGeckoClient(
            "https://cg.test",
            api_key="demo-key",
            transport=router({"/api/v3/coins/list": [{"id": "bitcoin", "symbol": "btc", "name": "Bitcoin"}]}, seen),
        )

        coins = await client.get_coins_list()

        assert coins[0].name == "Bitcoin"
        assert seen[0].headers["x-cg-demo-api-key"] == "demo-key"

    @pytest.mark.asyncio
    async def test_symbol_map_pages_until_short_page(self):
        full_page = [
            {"base": f"C{i}", "target": "USDT", "coin_id": f"coin-{i}", "target_coin_id": "tether"}
            for i in range(MAX_TICKERS_PER_REQUEST)
        ]
        last_page = [
            {"base": "C0", "target": "EUR", "coin_id": "other-id", "target_coin_id": ""},
            {"base": "btc", "target": "USDT", "coin_id": "bitcoin", "target_coin_id": "tether"},
        ]

        def tickers(request):
            return {"tickers": full_page if request.url.params["page"] == "1" else last_page}

        seen = []
        client = CoinGeckoClient("https://cg.test", api_key="", transport=router({"/api/v3/exchanges/binance/tickers": tickers}, seen))

        mapping = await client.get_symbol_to_id_map_for_exchange("binance")

        assert len(seen) == 2
        assert mapping["C0"] == "coin-0"
        assert mapping["USDT"] == "tether"
        assert mapping["BTC"] == "bitcoin"
        assert "EUR" not in mapping

    @pytest.mark.asyncio
    async def test_assets_info_flags_stablecoins(self):
        def markets(request):
            if request.url.params.get("category") == "stablecoins":
                return [{"id": "tether"}]
            return [
                {"id": "bitcoin", "market_cap": 1.0e12, "current_price": 60000.0, "price_change_percentage_24h": 2.5},
                {"id": "tether", "market_cap": 1.1e11, "current_price": 1.0, "price_change_percentage_24h": 0.01},
            ]

        seen = []
        client = CoinGeckoClient("https://cg.test", api_key="", transport=router({"/api/v3/coins/markets": markets}, seen))

        assets = await client.get_assets_info(["bitcoin", "tether"])

        assert [(a.id, a.is_stablecoin) for a in assets] == [("bitcoin", False), ("tether", True)]
        assert assets[0].price_usd == 60000.0

    @pytest.mark.asyncio
    async def test_assets_info_chunks_ids(self):
        ids = [f"coin-{i}" for i in range(300)]

        def markets(request):
            if request.url.params.get("category") == "stablecoins":
                return []
            return [{"id": coin_id} for coin_id in request.url.params["ids"].split(",")]

        seen = []
        client = CoinGeckoClient("https://cg.test", api_key="", transport=router({"/api/v3/coins/markets": markets}, seen))

        assets = await client.get_assets_info(ids)

        chunk_sizes = [len(r.url.params["ids"].split(",")) for r in seen if "ids" in r.url.params]
        assert sorted(chunk_sizes) == [50, 250]
        assert len(assets) == 300

    @pytest.mark.asyncio
    async def test_empty_ids_are_rejected(self):
        client = CoinGeckoClient("https://cg.test", api_key="", transport=router({}, []))

        with pytest.raises(BadRequestError):
            await client.get_assets_info([])

    @pytest.mark.asyncio
    async def test_rate_limit_surfaces_inside_internal_error(self):
        def markets(request):
            return httpx.Response(429, json={"status": {"error_code": 429}})

        client = CoinGeckoClient("https://cg.test", api_key="", transport=router({"/api/v3/coins/markets": markets}, []))

        with pytest.raises(InternalError) as exc_info:
            await client.get_assets_info(["bitcoin"])

        assert all(isinstance(reason, UnavailableError) for reason in exc_info.value.reasons)
