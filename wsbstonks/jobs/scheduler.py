from __future__ import annotations

import asyncio
import logging
import traceback
from typing import Awaitable, Callable, Optional

log = logging.getLogger("scheduler")


async def run_every(
    job: Callable[[], Awaitable[object]],
    interval_ms: int,
    iterations: Optional[int] = None,
) -> None:
    """
    Background loop:
    run `job` right away, then once every `interval_ms`.

    Runs are aligned to the start time. A run that takes longer than the
    interval pushes the next one back instead of overlapping it. Errors are
    logged and never stop the loop; cancel the task to stop it.
    `iterations` caps the number of runs (None = forever).
    """
    loop = asyncio.get_running_loop()
    interval_s = interval_ms / 1000.0
    next_run = loop.time()
    runs = 0

    while iterations is None or runs < iterations:
        try:
            await job()
        except Exception as e:
            log.error("Scheduled job failed error=%s", repr(e))
            log.error(traceback.format_exc())
        runs += 1

        if iterations is not None and runs >= iterations:
            break

        next_run += interval_s
        delay = next_run - loop.time()
        if delay < 0:
            log.warning("Scheduled job overran its interval by %.1fs", -delay)
            next_run = loop.time()
            delay = 0
        await asyncio.sleep(delay)
