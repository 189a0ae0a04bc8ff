"""Bounded fan-out for per-cue lookups."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_CONCURRENCY = 8


async def map_bounded(
    items: list[T],
    func: Callable[[T], Awaitable[R]],
    concurrency: int = DEFAULT_CONCURRENCY,
) -> list[R]:
    """Run ``func`` over ``items`` with at most ``concurrency`` calls in flight.

    Results come back in input order.
    """
    semaphore = asyncio.Semaphore(max(concurrency, 1))

    async def run_one(item: T) -> R:
        async with semaphore:
            return await func(item)

    return list(await asyncio.gather(*(run_one(item) for item in items)))
