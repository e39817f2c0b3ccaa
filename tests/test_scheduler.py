"""Tests for the feed queue and polling scheduler."""

import asyncio

import pytest

from feedtui.feeds import FeedError, HackerNewsData, Loading, RoutedMessage, StocksData
from feedtui.scheduler import FeedQueue, FeedScheduler


class CountingFetcher:
    """Each fetch returns one more quote slot than the last."""

    def __init__(self) -> None:
        self.calls = 0

    async def fetch(self):
        self.calls += 1
        return StocksData((None,) * self.calls)


class FailingFetcher:
    def __init__(self) -> None:
        self.calls = 0

    async def fetch(self):
        self.calls += 1
        raise RuntimeError("upstream down")


class TestFeedQueue:
    """Tests for FeedQueue."""

    def test_fifo(self) -> None:
        queue = FeedQueue(capacity=4)
        queue.put_nowait(RoutedMessage("a", Loading()))
        queue.put_nowait(RoutedMessage("b", Loading()))
        assert queue.get_nowait().widget_id == "a"
        assert queue.get_nowait().widget_id == "b"

    def test_full_queue_drops_oldest(self) -> None:
        queue = FeedQueue(capacity=2)
        for wid in ("a", "b", "c"):
            queue.put_nowait(RoutedMessage(wid, Loading()))

        assert len(queue) == 2
        assert queue.dropped == 1
        assert [queue.get_nowait().widget_id for _ in range(2)] == ["b", "c"]

    def test_empty_get_nowait_raises(self) -> None:
        with pytest.raises(asyncio.QueueEmpty):
            FeedQueue().get_nowait()

    def test_capacity_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            FeedQueue(capacity=0)

    @pytest.mark.asyncio
    async def test_get_waits_for_put(self) -> None:
        queue = FeedQueue()

        async def produce() -> None:
            await asyncio.sleep(0.01)
            queue.put_nowait(RoutedMessage("late", Loading()))

        producer = asyncio.create_task(produce())
        message = await asyncio.wait_for(queue.get(), timeout=1)
        await producer
        assert message.widget_id == "late"


class TestFeedScheduler:
    """Tests for FeedScheduler polling loops."""

    @pytest.mark.asyncio
    async def test_each_widget_publishes(self) -> None:
        queue = FeedQueue()
        scheduler = FeedScheduler(queue, interval=60)
        scheduler.start({"a": CountingFetcher(), "b": CountingFetcher()})

        messages = [await asyncio.wait_for(queue.get(), timeout=1) for _ in range(2)]
        await scheduler.stop()

        assert {m.widget_id for m in messages} == {"a", "b"}

    @pytest.mark.asyncio
    async def test_failure_becomes_error_and_polling_continues(self) -> None:
        queue = FeedQueue()
        failing = FailingFetcher()
        scheduler = FeedScheduler(queue, interval=0.01)
        scheduler.start({"bad": failing, "good": CountingFetcher()})

        seen: dict[str, list] = {"bad": [], "good": []}
        while len(seen["bad"]) < 3 or len(seen["good"]) < 3:
            message = await asyncio.wait_for(queue.get(), timeout=1)
            seen[message.widget_id].append(message.payload)
        await scheduler.stop()

        assert all(isinstance(p, FeedError) for p in seen["bad"])
        assert "upstream down" in seen["bad"][0].message
        assert all(isinstance(p, StocksData) for p in seen["good"])
        assert failing.calls >= 3

    @pytest.mark.asyncio
    async def test_messages_from_one_widget_stay_ordered(self) -> None:
        queue = FeedQueue()
        scheduler = FeedScheduler(queue, interval=0.001)
        scheduler.start({"a": CountingFetcher()})

        sizes = []
        for _ in range(5):
            message = await asyncio.wait_for(queue.get(), timeout=1)
            sizes.append(len(message.payload.quotes))
        await scheduler.stop()

        assert sizes == sorted(sizes)
        assert sizes[0] == 1

    @pytest.mark.asyncio
    async def test_refresh_all_triggers_immediate_fetch(self) -> None:
        queue = FeedQueue()
        fetcher = CountingFetcher()
        scheduler = FeedScheduler(queue, interval=3600)
        scheduler.start({"a": fetcher})

        await asyncio.wait_for(queue.get(), timeout=1)
        scheduler.refresh_all()
        message = await asyncio.wait_for(queue.get(), timeout=1)
        await scheduler.stop()

        assert fetcher.calls == 2
        assert len(message.payload.quotes) == 2

    @pytest.mark.asyncio
    async def test_stop_cancels_loops(self) -> None:
        scheduler = FeedScheduler(FeedQueue(), interval=3600)
        scheduler.start({"a": CountingFetcher()})
        assert scheduler.running == ["a"]

        await scheduler.stop()
        assert scheduler.running == []

    @pytest.mark.asyncio
    async def test_start_ignores_known_ids(self) -> None:
        queue = FeedQueue()
        scheduler = FeedScheduler(queue, interval=3600)
        first = CountingFetcher()
        second = CountingFetcher()
        scheduler.start({"a": first})
        scheduler.start({"a": second})

        await asyncio.wait_for(queue.get(), timeout=1)
        await scheduler.stop()

        assert second.calls == 0

    @pytest.mark.asyncio
    async def test_payload_types_pass_through(self) -> None:
        class HnFetcher:
            async def fetch(self):
                return HackerNewsData(())

        queue = FeedQueue()
        scheduler = FeedScheduler(queue, interval=3600)
        scheduler.start({"hn": HnFetcher()})
        message = await asyncio.wait_for(queue.get(), timeout=1)
        await scheduler.stop()

        assert message == RoutedMessage("hn", HackerNewsData(()))
