"""Abstract exchange client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional

from markethub.core.errors import InternalError
from markethub.core.http import HttpJsonClient
from markethub.schemas.enums import Exchange, KlineInterval, TradingPairStatus
from markethub.schemas.exchange import ExchangeQuote, ExchangeSpotCoin, ExchangeTradingPair, Kline
from markethub.schemas.klines import KlineWindow


class SpotListing:
    """One spot instrument as parsed from an exchange's listing endpoint."""

    __slots__ = ("base", "quote", "status", "base_name", "quote_name")

    def __init__(
        self,
        base: str,
        quote: str,
        status: TradingPairStatus,
        base_name: Optional[str] = None,
        quote_name: Optional[str] = None,
    ):
        self.base = base
        self.quote = quote
        self.status = status
        self.base_name = base_name
        self.quote_name = quote_name


class BaseExchangeClient(HttpJsonClient, ABC):
    """Abstract base class for exchange clients."""

    exchange: Exchange

    @abstractmethod
    async def get_all_spot_coins(self) -> List[ExchangeSpotCoin]:
        """List every spot base asset with its pairs and their trading status."""

    @abstractmethod
    async def get_kline_data(
        self,
        main_symbol: str,
        quote_symbol: str,
        interval: KlineInterval,
        window: KlineWindow,
        limit: int,
    ) -> List[Kline]:
        """Fetch candles for main/quote, normalized by ``normalize_series``."""

    def group_listings(self, listings: Iterable[SpotListing]) -> List[ExchangeSpotCoin]:
        coins: Dict[str, ExchangeSpotCoin] = {}
        for listing in listings:
            coin = coins.get(listing.base)
            if coin is None:
                coin = ExchangeSpotCoin(symbol=listing.base, name=listing.base_name, trading_pairs=[])
                coins[listing.base] = coin
            coin.trading_pairs.append(
                ExchangeTradingPair(
                    quote=ExchangeQuote(symbol=listing.quote, name=listing.quote_name),
                    exchange=self.exchange,
                    status=listing.status,
                )
            )
        return list(coins.values())

    def parse_klines(self, rows: Iterable[Any], parse: Callable[[Any], Kline], pair: str) -> List[Kline]:
        """Parse raw candle rows and normalize them; one malformed row fails the series."""
        try:
            klines = [parse(row) for row in rows or []]
        except (ArithmeticError, LookupError, TypeError, ValueError) as exc:
            raise InternalError(f"{self.exchange.value} returned malformed klines for {pair}: {exc}") from exc
        return self.normalize_series(klines)

    @staticmethod
    def normalize_series(klines: Iterable[Kline]) -> List[Kline]:
        """Sort by open time and keep the first candle seen for each open time."""
        seen: Dict[int, Kline] = {}
        for kline in klines:
            seen.setdefault(kline.open_time, kline)
        return [seen[open_time] for open_time in sorted(seen)]
