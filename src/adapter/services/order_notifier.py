"""In-process realtime notifier

Fan-out of order snapshots to websocket handlers in this process. publish
only enqueues: every subscriber has a bounded backlog drained by its own
task, so a slow client delays nobody but itself. Deliveries are bounded by
delivery_timeout; failures and timeouts are logged and dropped.
"""

import asyncio
import itertools
import logging
from typing import Dict, Optional
from src.app.services.order_notifier import (
    OrderNotifier,
    OrderSnapshot,
    OrderCallback,
    Subscription,
    order_channel,
    tenant_channel,
)

logger = logging.getLogger(__name__)


class _InMemorySubscription(Subscription):
    def __init__(
        self,
        notifier: "InMemoryOrderNotifier",
        channel: str,
        key: int,
        callback: OrderCallback,
        max_backlog: int,
    ):
        self._notifier = notifier
        self._channel = channel
        self._key = key
        self._callback = callback
        self._queue: "asyncio.Queue[OrderSnapshot]" = asyncio.Queue(maxsize=max_backlog)
        self._worker: Optional[asyncio.Task] = None
        self._active = True

    def offer(self, snapshot: OrderSnapshot) -> None:
        if not self._active:
            return
        if self._queue.full():
            # Drop the oldest update
            self._queue.get_nowait()
            self._queue.task_done()
            logger.warning(f"Subscriber #{self._key} on {self._channel} lagging, dropped oldest update")
        self._queue.put_nowait(snapshot)
        if self._worker is None:
            self._worker = asyncio.create_task(self._deliver())
            self._worker.add_done_callback(self._worker_done)

    async def _deliver(self) -> None:
        while True:
            snapshot = await self._queue.get()
            try:
                await asyncio.wait_for(self._callback(snapshot), timeout=self._notifier.delivery_timeout)
            except asyncio.TimeoutError:
                logger.warning(f"Subscriber #{self._key} on {self._channel} timed out, update dropped")
            except Exception as e:
                logger.warning(f"Subscriber #{self._key} on {self._channel} failed: {e}")
            finally:
                self._queue.task_done()

    def _worker_done(self, task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Delivery worker for #{self._key} on {self._channel} died: {task.exception()}")

    async def join(self) -> None:
        await self._queue.join()

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        if self._worker is not None:
            self._worker.cancel()
        self._notifier._remove(self._channel, self._key)


class InMemoryOrderNotifier(OrderNotifier):
    def __init__(self, delivery_timeout: float = 5.0, max_backlog: int = 100):
        self.delivery_timeout = delivery_timeout
        self.max_backlog = max_backlog
        self._subscribers: Dict[str, Dict[int, _InMemorySubscription]] = {}
        self._keys = itertools.count(1)

    def subscribe(self, channel: str, callback: OrderCallback) -> Subscription:
        key = next(self._keys)
        subscription = _InMemorySubscription(self, channel, key, callback, self.max_backlog)
        self._subscribers.setdefault(channel, {})[key] = subscription
        logger.debug(f"Subscribed #{key} to {channel}")
        return subscription

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, {}))

    async def publish(self, snapshot: OrderSnapshot) -> None:
        for channel in (order_channel(snapshot.id), tenant_channel(snapshot.tenant_id)):
            for subscription in list(self._subscribers.get(channel, {}).values()):
                subscription.offer(snapshot)

    async def drain(self) -> None:
        """Wait until every queued update has been delivered, dropped or timed out"""
        subscriptions = [s for callbacks in self._subscribers.values() for s in callbacks.values()]
        await asyncio.gather(*(s.join() for s in subscriptions))

    async def close(self) -> None:
        for callbacks in list(self._subscribers.values()):
            for subscription in list(callbacks.values()):
                subscription.unsubscribe()

    def _remove(self, channel: str, key: int) -> None:
        callbacks = self._subscribers.get(channel)
        if not callbacks:
            return
        callbacks.pop(key, None)
        if not callbacks:
            del self._subscribers[channel]
