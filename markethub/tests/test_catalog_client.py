"""Coins service client tests against mocked HTTP"""

import json

import httpx
import pytest

from markethub.clients.catalog import CatalogClient
from markethub.core.errors import ConflictError, NotFoundError
from markethub.schemas.catalog import TradingPairCreationRequest
from markethub.schemas.enums import Exchange

BTC = {
    "id": 1,
    "symbol": "BTC",
    "name": "Bitcoin",
    "trading_pairs": [{"id": 10, "quote": {"id": 2, "symbol": "USDT", "name": "Tether"}, "exchanges": ["Binance"]}],
}


def client_returning(payload, status=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=payload)

    return CatalogClient("http://coins.test", transport=httpx.MockTransport(handler))


class TestCatalogClient:
    @pytest.mark.asyncio
    async def test_coins_by_ids_sends_each_id(self):
        seen = []
        client = client_returning([BTC], seen=seen)

        [coin] = await client.get_coins_by_ids([1, 2])

        assert seen[0].method == "GET"
        assert seen[0].url.path == "/coins"
        assert seen[0].url.params.get_list("ids") == ["1", "2"]
        assert coin.trading_pairs[0].quote.symbol == "USDT"
        assert coin.trading_pairs[0].exchanges == [Exchange.BINANCE]

    @pytest.mark.asyncio
    async def test_coins_by_ids_without_ids_skips_the_request(self):
        seen = []

        assert await client_returning([BTC], seen=seen).get_coins_by_ids([]) == []
        assert seen == []

    @pytest.mark.asyncio
    async def test_replace_trading_pairs_puts_the_whole_graph(self):
        seen = []
        client = client_returning([BTC], seen=seen)

        await client.replace_trading_pairs(
            [TradingPairCreationRequest(main_coin_id=1, quote_coin_id=2, exchanges=[Exchange.BINANCE])]
        )

        assert (seen[0].method, seen[0].url.path) == ("PUT", "/coins/trading-pairs")
        assert json.loads(seen[0].content) == [{"main_coin_id": 1, "quote_coin_id": 2, "exchanges": ["Binance"]}]

    @pytest.mark.asyncio
    async def test_service_errors_keep_their_kind(self):
        with pytest.raises(NotFoundError):
            await client_returning({"detail": "missing"}, status=404).get_all_coins()
        with pytest.raises(ConflictError):
            await client_returning({"detail": "duplicate"}, status=409).create_quote_coins([])
