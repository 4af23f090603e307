"""TaskSupervisor: owns the background units that run deferred deliveries."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


class TaskSupervisor:
    """Long-lived coordinator for independently scheduled asyncio tasks.

    Create one at application start and hand it to every mailer that delivers
    in the background.  A child that raises terminates on its own: the error
    is logged and counted, but never reaches the supervisor, its siblings, or
    the code that started it.  Failed work is not retried.

    ``max_concurrency`` bounds how many children run their body at once;
    extra children wait for a free slot.  ``None`` means unbounded.
    """

    def __init__(self, *, max_concurrency: int | None = None, name: str = "mailroom") -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be a positive integer or None")
        self.name = name
        self.max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None
        self._tasks: set[asyncio.Task[Any]] = set()
        self.completed_count = 0
        self.failed_count = 0

    @property
    def active_count(self) -> int:
        return len(self._tasks)

    async def _guarded(self, coro: Coroutine[Any, Any, T]) -> T:
        if self._semaphore is None:
            return await coro
        async with self._semaphore:
            return await coro

    def start_child(self, coro: Coroutine[Any, Any, T], *, name: str | None = None) -> asyncio.Task[T]:
        """Schedule *coro* as a supervised task and return it immediately.

        Must be called from a running event loop.
        """
        task = asyncio.get_running_loop().create_task(self._guarded(coro), name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_child_done)
        return task

    def _on_child_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning("background_task_cancelled", supervisor=self.name, task=task.get_name())
            return
        exc = task.exception()
        if exc is None:
            self.completed_count += 1
            return
        self.failed_count += 1
        logger.error(
            "background_delivery_failed",
            supervisor=self.name,
            task=task.get_name(),
            error=str(exc),
            exc_info=exc,
        )

    async def join(self) -> None:
        """Wait until every child started so far has finished."""
        while self._tasks:
            await asyncio.wait(list(self._tasks))

    async def __aenter__(self) -> TaskSupervisor:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.join()
