"""
Once-per-scope memoized async values.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class AsyncLazy(Generic[T]):
    """
    Memoize the result of an async factory.

    The factory runs at most once, even when several coroutines await
    ``get()`` concurrently. A failure is memoized too: every later
    ``get()`` re-raises it.

    Example:
        ```python
        block = AsyncLazy(lambda: get_block(client))
        first = await block.get()   # RPC round-trip
        again = await block.get()   # cached
        ```
    """

    def __init__(self, factory: Callable[[], Awaitable[T]]) -> None:
        self._factory = factory
        self._task: Optional["asyncio.Future[T]"] = None

    @property
    def started(self) -> bool:
        """Whether the factory has been invoked."""
        return self._task is not None

    async def get(self) -> T:
        if self._task is None:
            self._task = asyncio.ensure_future(self._factory())
        return await asyncio.shield(self._task)

    def cancel(self) -> None:
        """Cancel the factory if it is still running; later ``get()`` calls raise."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
