"""Named one-shot jobs over the service graph, with timing and outcome logging."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from markethub.core.errors import MarketHubError
from markethub.core.logging import get_logger
from markethub.services.container import Services

log = get_logger("jobs")

# Pipeline order: pairs first so kline and market-data jobs see the fresh graph
JOB_NAMES = ["spot-coins-warmup", "trading-pairs", "kline-data", "market-data"]


@dataclass
class JobOutcome:
    name: str
    success: bool
    elapsed_ms: int
    items: int = 0
    error: Optional[str] = None


class JobRunner:
    def __init__(self, services: Services):
        self.jobs: Dict[str, Callable[[], Awaitable[List[Any]]]] = {
            "spot-coins-warmup": services.spot_coins.get_or_refresh,
            "trading-pairs": services.reconciler.reconcile_trading_pairs,
            "kline-data": services.kline_updater.update_kline_data,
            "market-data": services.market_data.refresh_market_data,
        }

    async def run(self, name: str) -> JobOutcome:
        job = self.jobs.get(name)
        if job is None:
            raise ValueError(f"Unknown job: {name}. Must be one of: {', '.join(JOB_NAMES)}")

        log.info(f"Starting job {name}")
        started = time.perf_counter()
        try:
            result = await job()
        except MarketHubError as exc:
            elapsed = int((time.perf_counter() - started) * 1000)
            log.error(f"Job {name} failed after {elapsed}ms:\n{exc.describe()}")
            return JobOutcome(name=name, success=False, elapsed_ms=elapsed, error=str(exc))
        except Exception as exc:  # noqa: BLE001
            elapsed = int((time.perf_counter() - started) * 1000)
            log.exception(f"Job {name} crashed after {elapsed}ms: {exc}")
            return JobOutcome(name=name, success=False, elapsed_ms=elapsed, error=str(exc))

        elapsed = int((time.perf_counter() - started) * 1000)
        items = len(result) if result is not None else 0
        log.info(f"Job {name} finished in {elapsed}ms | items={items}")
        return JobOutcome(name=name, success=True, elapsed_ms=elapsed, items=items)

    async def run_all(self, names: Optional[List[str]] = None) -> List[JobOutcome]:
        outcomes: List[JobOutcome] = []
        for name in names or JOB_NAMES:
            outcomes.append(await self.run(name))
        return outcomes
