"""Fan-out and ordered fallback helpers."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Sized, TypeVar

from markethub.core.errors import InternalError, MarketHubError
from markethub.core.logging import get_logger

log = get_logger("core.concurrency")

T = TypeVar("T")


async def gather_all(*aws: Awaitable[Any], message: str) -> List[Any]:
    """Await every leg, then fail as a whole if any leg failed.

    Results keep the order of ``aws``. Cancellation is not folded into the
    returned error.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)

    failures: List[BaseException] = []
    for result in results:
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            failures.append(result)

    if failures:
        raise InternalError(message, reasons=failures) from failures[0]
    return list(results)


async def first_success(
    attempts: Iterable[Callable[[], Awaitable[Optional[T]]]],
    label: str = "attempt",
) -> Optional[T]:
    """Run attempts one at a time and return the first non-empty result.

    ``attempts`` is consumed lazily so nothing past the winning attempt is
    created or started. A MarketHubError from an attempt counts as empty.
    """
    for attempt in attempts:
        try:
            result = await attempt()
        except MarketHubError as exc:
            log.info(f"{label} failed, falling back: {exc}")
            continue
        if result is None:
            continue
        if isinstance(result, Sized) and len(result) == 0:
            continue
        return result
    return None
