"""Fire-and-forget task tracking for a discovery session."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class BackgroundTasks:
    """Holds strong references to fire-and-forget tasks.

    Failures are logged when the task finishes and never re-raised, so a
    failing network push cannot escape into the interaction loop.
    ``close`` is called on unmount so nothing new starts; shutdown gives
    outstanding work a grace period with ``wait`` and then calls ``cancel_all``.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    @property
    def closed(self) -> bool:
        return self._closed

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str) -> asyncio.Task[Any] | None:
        if self._closed:
            coro.close()
            return None
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(LogTemplates.TASK_FAILED, task.get_name(), exc_info=exc)

    async def wait(self) -> None:
        """Wait until every task (including ones spawned meanwhile) has finished."""
        while outstanding := [task for task in self._tasks if not task.done()]:
            await asyncio.gather(*outstanding, return_exceptions=True)

    def close(self) -> None:
        """Refuse new work; tasks already running are left to finish."""
        self._closed = True

    async def cancel_all(self) -> int:
        tasks = [task for task in self._tasks if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug(LogTemplates.TASKS_CANCELLED, len(tasks))
        return len(tasks)
