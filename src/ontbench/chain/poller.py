"""
Confirmation Poller - Wait for the chain to produce a new block.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ..errors import PollTimeout

DEFAULT_POLL_INTERVAL = 1.0

log = logging.getLogger("ontbench.poller")


async def wait_for_next_block(
    get_height: Callable[[], Awaitable[int]],
    interval: float = DEFAULT_POLL_INTERVAL,
    timeout: Optional[float] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> int:
    """
    Suspend until the reported height exceeds its value at call time.

    Args:
        get_height: Coroutine function returning the current block height
        interval: Seconds to sleep between non-advancing polls
        timeout: Maximum wait in seconds (default: wait forever)
        sleep: Sleep coroutine, injectable for tests

    Returns:
        The first observed height greater than the baseline

    Raises:
        PollTimeout: If ``timeout`` elapses before the height advances
    """
    loop = asyncio.get_running_loop()
    deadline = None if timeout is None else loop.time() + timeout

    baseline = await get_height()
    while True:
        height = await get_height()
        log.debug("poll height=%d baseline=%d", height, baseline)
        if height > baseline:
            return height
        if deadline is None:
            await sleep(interval)
            continue
        remaining = deadline - loop.time()
        if remaining <= 0:
            raise PollTimeout(baseline, timeout)
        # The last sleep ends at the deadline, followed by one final poll.
        await sleep(min(interval, remaining))
