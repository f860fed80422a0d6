"""Run asynchronous thunks with a cap on how many are in flight."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence

from pkgtest_runner.runners.base import Outcome

log = logging.getLogger(__name__)

Thunk = Callable[[], Awaitable[Outcome]]


async def pool(thunks: Sequence[Thunk], max_concurrency: int) -> Outcome:
    """Run ``thunks`` in order with at most ``max_concurrency`` in flight.

    A thunk returning ``Outcome.STOP`` keeps any further thunk from being
    dispatched. A thunk raising does not: the remaining thunks still run
    and the first exception is re-raised at the end. Every started thunk is
    awaited before this returns or raises.

    Args:
        thunks: Zero-argument callables returning awaitables, in dispatch order
        max_concurrency: Maximum number of thunks running at once

    Returns:
        ``Outcome.STOP`` if any thunk asked to stop, else ``Outcome.CONTINUE``

    Raises:
        ValueError: If max_concurrency is less than 1

    """
    if max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")

    capacity = asyncio.Semaphore(max_concurrency)
    errors: list[BaseException] = []
    stopped = False

    async def run(thunk: Thunk) -> Outcome:
        nonlocal stopped
        try:
            outcome = await thunk()
        except Exception as exc:
            errors.append(exc)
            raise
        finally:
            capacity.release()
        if outcome is Outcome.STOP:
            stopped = True
        return outcome

    started: list[asyncio.Task[Outcome]] = []
    try:
        for idx, thunk in enumerate(thunks):
            await capacity.acquire()
            if stopped:
                capacity.release()
                log.debug("Not dispatching %d remaining thunk(s)", len(thunks) - idx)
                break
            task = asyncio.create_task(run(thunk))
            started.append(task)
    finally:
        await asyncio.gather(*started, return_exceptions=True)

    if errors:
        raise errors[0]
    return Outcome.STOP if stopped else Outcome.CONTINUE
