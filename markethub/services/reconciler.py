"""Syncs the catalog's trading-pair graph with what exchanges currently trade."""

from __future__ import annotations

import asyncio
from typing import Dict, List

from markethub.clients.catalog import BaseCatalog
from markethub.core.errors import InternalError, MarketHubError
from markethub.core.logging import get_logger
from markethub.schemas.candidates import CandidateCoin, CandidateQuote
from markethub.schemas.catalog import Coin, QuoteCoinCreationRequest, TradingPairCreationRequest
from markethub.services.spot_coin_cache import SpotCoinCache

log = get_logger("catalog_reconciler")


class CatalogReconciler:
    """Diffs candidate spot coins against the catalog and rewrites its pairs.

    The steps after the initial fetch run strictly in order and stop at the
    first failure. There is no rollback: every step matches by symbol, so the
    next successful run repairs whatever a failed run left behind.
    """

    def __init__(self, catalog: BaseCatalog, spot_coins: SpotCoinCache):
        self.catalog = catalog
        self.spot_coins = spot_coins

    async def reconcile_trading_pairs(self) -> List[Coin]:
        catalog_result, candidates_result = await asyncio.gather(
            self.catalog.get_all_coins(),
            self.spot_coins.get_or_refresh(),
            return_exceptions=True,
        )
        for result, message in (
            (catalog_result, "Failed to retrieve coins from the catalog."),
            (candidates_result, "Failed to retrieve active spot coins."),
        ):
            if isinstance(result, Exception):
                log.error(f"{message} {result}")
                raise InternalError(message, reasons=[result]) from result
            if isinstance(result, BaseException):
                raise result

        coins: List[Coin] = catalog_result
        main_coins = {coin.symbol: coin for coin in coins if coin.trading_pairs}
        matched = [candidate for candidate in candidates_result if candidate.symbol in main_coins]
        if not any(candidate.trading_pairs for candidate in matched):
            log.info("No candidate trading pairs match catalog main coins; nothing to reconcile")
            return []

        coin_ids: Dict[str, int] = {coin.symbol: coin.id for coin in coins}

        # ------------------------------------------------------------------
        # Step 1: create quote coins the catalog does not know yet
        # ------------------------------------------------------------------
        new_quotes = self._new_quote_requests(matched, coin_ids)
        if new_quotes:
            try:
                created = await self.catalog.create_quote_coins(new_quotes)
            except MarketHubError as exc:
                raise _step_failed("Failed to create new quote coins.", exc) from exc
            for coin in created:
                coin_ids[coin.symbol] = coin.id
            log.info(f"Created quote coins: {', '.join(coin.symbol for coin in created)}")

        # ------------------------------------------------------------------
        # Step 2: replace the whole pair graph
        # ------------------------------------------------------------------
        requests = self._pair_requests(matched, main_coins, coin_ids)
        if not requests:
            # replace_trading_pairs is replace-all; an empty plan would wipe the graph
            log.warning("No trading pairs could be resolved against catalog coins; leaving the catalog untouched")
            return []
        try:
            updated = await self.catalog.replace_trading_pairs(requests)
        except MarketHubError as exc:
            raise _step_failed("Failed to replace trading pairs.", exc) from exc

        # ------------------------------------------------------------------
        # Step 3: drop coins no pair refers to anymore
        # ------------------------------------------------------------------
        try:
            await self.catalog.delete_unreferenced_coins()
        except MarketHubError as exc:
            raise _step_failed("Failed to delete unreferenced coins.", exc) from exc

        changed = [coin for coin in updated if coin.trading_pairs]
        log.info(f"Reconciled {len(requests)} trading pairs across {len(changed)} coins")
        return changed

    @staticmethod
    def _new_quote_requests(
        candidates: List[CandidateCoin], coin_ids: Dict[str, int]
    ) -> List[QuoteCoinCreationRequest]:
        pending: Dict[str, CandidateQuote] = {}
        for candidate in candidates:
            for pair in candidate.trading_pairs:
                symbol = pair.quote.symbol
                if symbol not in coin_ids and symbol not in pending:
                    pending[symbol] = pair.quote

        return [
            QuoteCoinCreationRequest(
                symbol=quote.symbol,
                name=quote.name or quote.symbol,
                category=quote.category,
                identity_id=quote.identity_id,
            )
            for quote in pending.values()
        ]

    @staticmethod
    def _pair_requests(
        candidates: List[CandidateCoin],
        main_coins: Dict[str, Coin],
        coin_ids: Dict[str, int],
    ) -> List[TradingPairCreationRequest]:
        requests: List[TradingPairCreationRequest] = []
        for candidate in candidates:
            main_id = main_coins[candidate.symbol].id
            for pair in candidate.trading_pairs:
                quote_id = coin_ids.get(pair.quote.symbol)
                if quote_id is None:
                    log.warning(
                        f"Quote coin {pair.quote.symbol} was not created; "
                        f"skipping {candidate.symbol}/{pair.quote.symbol}"
                    )
                    continue
                requests.append(
                    TradingPairCreationRequest(
                        main_coin_id=main_id,
                        quote_coin_id=quote_id,
                        exchanges=list(pair.exchanges),
                    )
                )
        return requests


def _step_failed(message: str, cause: MarketHubError) -> InternalError:
    log.error(f"{message} {cause}")
    return InternalError(message, reasons=[cause])
