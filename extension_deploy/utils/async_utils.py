# extension_deploy/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
import threading
from typing import Any, Coroutine, List, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    When called from inside a running event loop (e.g. a notebook), the
    coroutine runs on its own loop in a helper thread.

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    result = None
    exception = None

    def run_in_thread():
        nonlocal result, exception
        try:
            result = asyncio.run(coro)
        except BaseException as e:
            exception = e

    thread = threading.Thread(target=run_in_thread)
    thread.start()
    thread.join()

    if exception:
        raise exception
    return result


class AsyncPool:
    """Bounded async task pool

    At most ``max_workers`` submitted coroutines run at the same time.
    ``wait_all`` joins every task and returns results in submission order,
    with exceptions returned in place of results.
    """

    def __init__(self, max_workers: int = 4):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self.semaphore = asyncio.Semaphore(max_workers)
        self.tasks: List[asyncio.Task] = []

    def submit(self, coro: Coroutine) -> asyncio.Task:
        """Submit task to pool"""

        async def wrapped():
            async with self.semaphore:
                return await coro

        task = asyncio.create_task(wrapped())
        self.tasks.append(task)
        return task

    async def wait_all(self) -> List[Any]:
        """Wait for all tasks to complete"""
        results = await asyncio.gather(*self.tasks, return_exceptions=True)
        self.tasks.clear()
        return results

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.wait_all()
