"""Resolves exchange symbols to canonical names and CoinGecko identities."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from markethub.core.concurrency import gather_all
from markethub.core.logging import get_logger
from markethub.ingestion.coingecko import EXCHANGE_IDS, CoinGeckoClient
from markethub.ingestion.fiat_currencies import fiat_name
from markethub.schemas.enums import CoinCategory, Exchange
from markethub.schemas.identity import IdentitySnapshot, ResolvedIdentity

log = get_logger("identity_resolver")


class IdentityResolver:
    """Looks symbols up in a per-exchange CoinGecko snapshot.

    A symbol resolves in three stages:
    1. the exchange's symbol -> id map, validated against the full coin list
       (a mapped id missing from the list marks the symbol inactive);
    2. the fiat registry, for symbols CoinGecko could not map;
    3. anything left is reported as missing a name.
    """

    def __init__(self, provider: CoinGeckoClient):
        self.provider = provider

    async def fetch_snapshot(self, exchanges: Sequence[Exchange]) -> IdentitySnapshot:
        coins, stablecoin_ids, *symbol_maps = await gather_all(
            self.provider.get_coins_list(),
            self.provider.get_stablecoin_ids(),
            *(self.provider.get_symbol_to_id_map_for_exchange(EXCHANGE_IDS[exchange]) for exchange in exchanges),
            message="Failed to retrieve identity data from CoinGecko.",
        )
        return IdentitySnapshot(
            coins_by_id={coin.id: coin for coin in coins},
            stablecoin_ids=set(stablecoin_ids),
            symbol_maps={
                exchange: {symbol.upper(): coin_id for symbol, coin_id in mapping.items()}
                for exchange, mapping in zip(exchanges, symbol_maps)
            },
        )

    def resolve_symbols(
        self,
        snapshot: IdentitySnapshot,
        exchange: Exchange,
        symbols: Iterable[str],
        quote: bool = False,
    ) -> Dict[str, ResolvedIdentity]:
        """Resolve distinct ``symbols`` listed on ``exchange``.

        Only symbols that got a name are returned. Inactive and unnamed
        symbols are logged as data-quality warnings.
        """
        exchange_id = EXCHANGE_IDS[exchange]
        symbol_map = snapshot.symbol_maps.get(exchange, {})

        resolved: Dict[str, ResolvedIdentity] = {}
        inactive: List[str] = []
        unresolved: List[str] = []

        for symbol in dict.fromkeys(symbols):
            coin_id = symbol_map.get(symbol.upper())
            if not coin_id:
                unresolved.append(symbol)
                continue

            coin = snapshot.coins_by_id.get(coin_id)
            if coin is None:
                inactive.append(f"{symbol} (coinGeckoId:{coin_id})")
                continue

            category = CoinCategory.STABLECOIN if coin_id in snapshot.stablecoin_ids else None
            resolved[symbol] = ResolvedIdentity(name=coin.name, identity_id=coin.id, category=category)

        if inactive:
            log.warning(f"The following coins from {exchange_id} are inactive on CoinGecko: {', '.join(inactive)}")

        missing: List[str] = []
        for symbol in unresolved:
            name = fiat_name(symbol)
            if name is None:
                missing.append(symbol)
                continue
            resolved[symbol] = ResolvedIdentity(name=name, category=CoinCategory.FIAT)

        if missing:
            kind = "quote symbols" if quote else "symbols"
            log.warning(f"Could not find names for the following {kind} in {exchange_id}: {', '.join(missing)}")

        return resolved
