"""Timeout governor — races pipeline stages against deadlines.

Two kinds of race:
    - ``within_budget``: the request-wide budget; losing is fatal
      (RenderTimeoutError).
    - ``best_effort``: a short, fixed ceiling; losing only truncates the stage
      and yields a fallback value.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from app.domain.exceptions import RenderTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TimeoutGovernor:
    """Tracks one request's wall-clock budget."""

    def __init__(self, budget_seconds: float):
        self._budget = budget_seconds
        self._deadline: float | None = None

    @property
    def budget_seconds(self) -> float:
        return self._budget

    def start(self) -> None:
        self._deadline = asyncio.get_running_loop().time() + self._budget

    def remaining(self) -> float:
        if self._deadline is None:
            return self._budget
        return max(0.0, self._deadline - asyncio.get_running_loop().time())

    async def within_budget(
        self,
        awaitable: Awaitable[T],
        stage: str,
        on_late_result: Callable[[T], Awaitable[Any]] | None = None,
    ) -> T:
        """Await ``awaitable`` unless the remaining budget runs out first.

        When the deadline wins, or the caller itself is cancelled, the work is
        cancelled and awaited. If it still produced a result (it finished while
        being cancelled), the result is handed to ``on_late_result`` so it can
        be released before the timeout or cancellation propagates.
        """
        if self._deadline is None:
            self.start()

        task = asyncio.ensure_future(awaitable)
        try:
            done, _ = await asyncio.wait({task}, timeout=self.remaining())
        except asyncio.CancelledError:
            await self._abandon(task, stage, on_late_result)
            raise

        if task in done:
            return task.result()

        await self._abandon(task, stage, on_late_result)
        raise RenderTimeoutError(stage, self._budget)

    @staticmethod
    async def _abandon(
        task: "asyncio.Future[T]",
        stage: str,
        on_late_result: Callable[[T], Awaitable[Any]] | None,
    ) -> None:
        task.cancel()
        await asyncio.wait({task})
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.debug("Stage %s failed after its deadline: %s", stage, error)
        elif on_late_result is not None:
            await on_late_result(task.result())

    @staticmethod
    async def best_effort(
        awaitable: Awaitable[T],
        ceiling_seconds: float,
        stage: str,
        default: T | None = None,
    ) -> T | None:
        """Await ``awaitable`` for at most ``ceiling_seconds``.

        Returns its result, or ``default`` when the ceiling expired first.
        """
        try:
            return await asyncio.wait_for(awaitable, timeout=ceiling_seconds)
        except asyncio.TimeoutError:
            logger.warning("Stage %s exceeded %.1fs ceiling — continuing", stage, ceiling_seconds)
            return default
