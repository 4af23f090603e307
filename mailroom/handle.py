"""Awaitable handle returned by ``Mailer.deliver_later``."""

from __future__ import annotations

import asyncio
from collections.abc import Generator
from typing import Any

from .models import DeliveryResult


class DeliveryHandle:
    """Reference to a delivery that may still be running.

    ``await handle`` yields the :class:`DeliveryResult` or raises the
    transport's error.  Not awaiting it is fine: the delivery still runs and
    its outcome is discarded.  Awaiting is shielded, so cancelling the
    awaiting task does not cancel the delivery.
    """

    def __init__(self, future: asyncio.Future[DeliveryResult]) -> None:
        self._future = future

    @classmethod
    def completed(cls, result: DeliveryResult) -> DeliveryHandle:
        future: asyncio.Future[DeliveryResult] = asyncio.get_running_loop().create_future()
        future.set_result(result)
        return cls(future)

    def done(self) -> bool:
        return self._future.done()

    async def wait(self) -> DeliveryResult:
        return await asyncio.shield(self._future)

    def __await__(self) -> Generator[Any, None, DeliveryResult]:
        return self.wait().__await__()

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"<DeliveryHandle {state}>"
