from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)

# Called when the timer wakes. Returns the milliseconds still to wait before
# calling again, or None once the timer is finished.
RoundCallback = Callable[[], Awaitable[Optional[float]]]


class RoundTimer:
    """One deferred round-end task per room.

    A new schedule for a room replaces the tracked task but does not cancel the
    old one; callbacks are expected to notice they are stale and return None.
    """

    def __init__(self):
        self._tasks: Dict[str, asyncio.Task] = {}

    def schedule(self, room_id: str, delay_ms: float, callback: RoundCallback) -> asyncio.Task:
        task = asyncio.create_task(self._run(room_id, delay_ms, callback))
        self._tasks[room_id] = task
        return task

    def pending(self, room_id: str) -> Optional[asyncio.Task]:
        task = self._tasks.get(room_id)
        if task and not task.done():
            return task
        return None

    async def _run(self, room_id: str, delay_ms: float, callback: RoundCallback):
        try:
            wait: Optional[float] = delay_ms
            while wait is not None:
                await asyncio.sleep(max(0.0, wait) / 1000)
                wait = await callback()
        except asyncio.CancelledError:
            return
        except Exception:
            logger.exception("Round timer for room %s failed", room_id)
        finally:
            if self._tasks.get(room_id) is asyncio.current_task():
                del self._tasks[room_id]

    async def shutdown(self):
        tasks = [t for t in self._tasks.values() if not t.done()]
        for t in tasks:
            t.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
