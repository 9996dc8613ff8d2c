"""Builds the list of active spot coins across every registered exchange."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from markethub.core.concurrency import gather_all
from markethub.core.logging import get_logger
from markethub.ingestion.base import BaseExchangeClient
from markethub.schemas.candidates import CandidateCoin, CandidateQuote, CandidateTradingPair
from markethub.schemas.enums import Exchange, TradingPairStatus
from markethub.schemas.exchange import ExchangeSpotCoin
from markethub.schemas.identity import IdentitySnapshot, ResolvedIdentity
from markethub.services.identity import IdentityResolver

log = get_logger("spot_coin_aggregator")


class _Annotated:
    """Identity fields filled first-come across exchanges."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        self.exchange_name: Optional[str] = None
        self.identity = ResolvedIdentity()

    def absorb(self, exchange_name: Optional[str], resolved: Optional[ResolvedIdentity]) -> None:
        if self.exchange_name is None and exchange_name:
            self.exchange_name = exchange_name
        if resolved is None:
            return
        if self.identity.name is None and resolved.name:
            self.identity.name = resolved.name
        if self.identity.identity_id is None and resolved.identity_id:
            self.identity.identity_id = resolved.identity_id
        if self.identity.category is None and resolved.category:
            self.identity.category = resolved.category

    @property
    def name(self) -> Optional[str]:
        return self.identity.name or self.exchange_name


class _MergedPair:
    def __init__(self, quote_symbol: str):
        self.quote = _Annotated(quote_symbol)
        self.exchanges: List[Exchange] = []

    def to_candidate(self) -> CandidateTradingPair:
        return CandidateTradingPair(
            quote=CandidateQuote(
                symbol=self.quote.symbol,
                name=self.quote.name,
                identity_id=self.quote.identity.identity_id,
                category=self.quote.identity.category,
            ),
            exchanges=list(self.exchanges),
        )


class _MergedCoin:
    def __init__(self, symbol: str):
        self.main = _Annotated(symbol)
        self.pairs: Dict[str, _MergedPair] = {}

    def to_candidate(self) -> CandidateCoin:
        return CandidateCoin(
            symbol=self.main.symbol,
            name=self.main.name,
            identity_id=self.main.identity.identity_id,
            category=self.main.identity.category,
            trading_pairs=[pair.to_candidate() for pair in self.pairs.values()],
        )


class SpotCoinAggregator:
    """Fans out to every exchange and CoinGecko, then merges listings by symbol.

    Only Available legs survive the merge; a pair's exchanges are exactly the
    exchanges that reported it as Available. Any failing upstream call fails
    the whole aggregation.
    """

    def __init__(self, clients: Sequence[BaseExchangeClient], identity: IdentityResolver):
        self.clients = list(clients)
        self.identity = identity

    async def get_active_spot_coins(self) -> List[CandidateCoin]:
        exchanges = [client.exchange for client in self.clients]
        *listings, snapshot = await gather_all(
            *(client.get_all_spot_coins() for client in self.clients),
            self.identity.fetch_snapshot(exchanges),
            message="No coins found for one or more exchanges. See reasons for more information.",
        )

        merged: Dict[str, _MergedCoin] = {}
        for exchange, coins in zip(exchanges, listings):
            self._merge_exchange(merged, exchange, self._only_available(coins), snapshot)

        candidates = [coin.to_candidate() for coin in merged.values()]
        log.info(f"Aggregated {len(candidates)} active spot coins from {len(self.clients)} exchanges")
        return candidates

    @staticmethod
    def _only_available(coins: List[ExchangeSpotCoin]) -> List[ExchangeSpotCoin]:
        active: List[ExchangeSpotCoin] = []
        for coin in coins:
            legs = [leg for leg in coin.trading_pairs if leg.status == TradingPairStatus.AVAILABLE]
            if legs:
                active.append(coin.model_copy(update={"trading_pairs": legs}))
        return active

    def _merge_exchange(
        self,
        merged: Dict[str, _MergedCoin],
        exchange: Exchange,
        coins: List[ExchangeSpotCoin],
        snapshot: IdentitySnapshot,
    ) -> None:
        if not coins:
            return

        mains = self.identity.resolve_symbols(snapshot, exchange, (coin.symbol for coin in coins))
        quotes = self.identity.resolve_symbols(
            snapshot,
            exchange,
            (leg.quote.symbol for coin in coins for leg in coin.trading_pairs),
            quote=True,
        )

        for coin in coins:
            target = merged.get(coin.symbol)
            if target is None:
                target = merged[coin.symbol] = _MergedCoin(coin.symbol)
            target.main.absorb(coin.name, mains.get(coin.symbol))

            for leg in coin.trading_pairs:
                pair = target.pairs.get(leg.quote.symbol)
                if pair is None:
                    pair = target.pairs[leg.quote.symbol] = _MergedPair(leg.quote.symbol)
                pair.quote.absorb(leg.quote.name, quotes.get(leg.quote.symbol))
                if exchange not in pair.exchanges:
                    pair.exchanges.append(exchange)
