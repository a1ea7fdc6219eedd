"""
Bounded concurrent fan-out for repository lookups.

Report builds issue one lookup per question, per class and per user. The
lookups are independent reads, so they run concurrently; a semaphore caps how
many are in flight. ``asyncio.gather`` returns results in input order, which
keeps the assembly step independent of completion order.
"""

import asyncio
from typing import Awaitable, Callable, Iterable, List, TypeVar

from tutor_analytics.core.config import settings

K = TypeVar("K")
T = TypeVar("T")


async def gather_bounded(
    func: Callable[[K], Awaitable[T]],
    keys: Iterable[K],
    limit: int | None = None,
) -> List[T]:
    """
    Call ``func`` for every key concurrently, at most ``limit`` at a time.

    Args:
        func: Async lookup taking one key
        keys: Keys to look up; order is preserved in the result
        limit: Maximum lookups in flight (defaults to MAX_CONCURRENT_LOOKUPS)

    Returns:
        One result per key, in the order of ``keys``

    Raises:
        Whatever ``func`` raises. The first failure propagates and the
        remaining lookups are cancelled.
    """
    keys = list(keys)
    if not keys:
        return []

    semaphore = asyncio.Semaphore(limit or settings.MAX_CONCURRENT_LOOKUPS)

    async def _run(key: K) -> T:
        async with semaphore:
            return await func(key)

    tasks = [asyncio.ensure_future(_run(key)) for key in keys]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
