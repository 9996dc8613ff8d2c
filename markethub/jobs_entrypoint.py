"""Jobs entrypoint - Standalone script for running catalog maintenance jobs.

Usage:
    python -m markethub.jobs_entrypoint                     # Run every job in pipeline order
    python -m markethub.jobs_entrypoint trading-pairs       # Reconcile trading pairs
    python -m markethub.jobs_entrypoint kline-data          # Refresh price history
    python -m markethub.jobs_entrypoint market-data         # Refresh market snapshot
    python -m markethub.jobs_entrypoint spot-coins-warmup   # Aggregate spot coins only
"""

import asyncio
import sys
from typing import List, Optional

from markethub.core.logging import get_logger
from markethub.jobs import JOB_NAMES, JobOutcome, JobRunner
from markethub.services.container import get_services

logger = get_logger("jobs_entrypoint")


async def run_jobs(names: List[str]) -> List[JobOutcome]:
    runner = JobRunner(get_services())
    return await runner.run_all(names)


def main(argv: Optional[List[str]] = None) -> List[JobOutcome]:
    """Main entry point for the job pipeline."""
    names = list(sys.argv[1:] if argv is None else argv)

    invalid = [name for name in names if name not in JOB_NAMES]
    if invalid:
        logger.error(f"Invalid job(s): {', '.join(invalid)}. Must be one of: {', '.join(JOB_NAMES)}")
        sys.exit(1)

    logger.info(f"Job pipeline starting: {', '.join(names or JOB_NAMES)}")
    outcomes = asyncio.run(run_jobs(names))

    for outcome in outcomes:
        status = "ok" if outcome.success else f"failed ({outcome.error})"
        logger.info(f"{outcome.name}: {status} | items={outcome.items} | {outcome.elapsed_ms}ms")

    if any(not outcome.success for outcome in outcomes):
        sys.exit(1)
    return outcomes


if __name__ == "__main__":
    main()
