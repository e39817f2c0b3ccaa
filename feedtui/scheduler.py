"""
Feed scheduler: one polling task per widget, all publishing into one queue.

Each loop fetches, wraps the result (or the failure) in a RoutedMessage,
publishes it and waits for the refresh interval. A failure never ends a loop;
it becomes a FeedError payload and the widget is polled again next interval.
"""

from __future__ import annotations

import asyncio
import collections
import logging

from feedtui.feeds import FeedError, FeedFetcher, RoutedMessage

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_CAPACITY = 256


class FeedQueue:
    """Multi-producer, single-consumer queue with a drop-oldest overflow policy.

    ``put_nowait`` never blocks; when full, the oldest message is discarded.
    Messages from one producer keep their relative order.
    """

    def __init__(self, capacity: int = DEFAULT_QUEUE_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self.dropped = 0
        self._messages: collections.deque[RoutedMessage] = collections.deque()
        self._ready = asyncio.Event()

    def __len__(self) -> int:
        return len(self._messages)

    def put_nowait(self, message: RoutedMessage) -> None:
        if len(self._messages) >= self.capacity:
            dropped = self._messages.popleft()
            self.dropped += 1
            logger.warning(
                "Feed queue full (%d); dropped message for %s",
                self.capacity,
                dropped.widget_id,
            )
        self._messages.append(message)
        self._ready.set()

    def get_nowait(self) -> RoutedMessage:
        if not self._messages:
            raise asyncio.QueueEmpty
        message = self._messages.popleft()
        if not self._messages:
            self._ready.clear()
        return message

    async def get(self) -> RoutedMessage:
        while not self._messages:
            await self._ready.wait()
        return self.get_nowait()


class FeedScheduler:
    """Owns the polling loops. Create and start it from inside the event loop."""

    def __init__(self, queue: FeedQueue, interval: float) -> None:
        self.queue = queue
        self.interval = interval
        self._tasks: dict[str, asyncio.Task] = {}
        self._wake: dict[str, asyncio.Event] = {}

    @property
    def running(self) -> list[str]:
        return [wid for wid, task in self._tasks.items() if not task.done()]

    def start(self, fetchers: dict[str, FeedFetcher]) -> None:
        """Spawn one polling loop per widget id."""
        for widget_id, fetcher in fetchers.items():
            if widget_id in self._tasks:
                continue
            self._wake[widget_id] = asyncio.Event()
            self._tasks[widget_id] = asyncio.create_task(
                self._poll(widget_id, fetcher), name=f"feed:{widget_id}"
            )
        logger.info("Started %d feed loop(s), interval %ss", len(fetchers), self.interval)

    async def _poll(self, widget_id: str, fetcher: FeedFetcher) -> None:
        wake = self._wake[widget_id]
        while True:
            wake.clear()
            try:
                payload = await fetcher.fetch()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning("Fetch for %s failed: %s", widget_id, e)
                payload = FeedError(str(e) or type(e).__name__)

            self.queue.put_nowait(RoutedMessage(widget_id, payload))

            try:
                await asyncio.wait_for(wake.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

    def refresh_all(self) -> None:
        """Ask every loop for an immediate fetch cycle."""
        for event in self._wake.values():
            event.set()
        logger.info("Refresh requested for all feeds")

    async def stop(self) -> None:
        """Cancel every loop and wait for them to finish."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self._wake.clear()
