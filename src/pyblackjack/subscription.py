"""Contract event subscription.

Owns:
- starting/stopping the threaded MQTT runtime for one identity
- normalizing MQTT payloads into :class:`~pyblackjack.models.events.GameEvent`
- the async event sequence consumed by the session
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Callable
from typing import Any

from pyblackjack._mqtt import GameMqttRuntime, MqttEvent, build_bootstrap
from pyblackjack.config import BlackjackConfig
from pyblackjack.exceptions import BlackjackSubscriptionError
from pyblackjack.ingestion.events import event_from_payload
from pyblackjack.models.events import GameEvent, UnknownEvent
from pyblackjack.models.identity import Identity

_logger = logging.getLogger(__name__)

_CLOSED = object()

RuntimeFactory = Callable[..., GameMqttRuntime]


class EventSubscription:
    """Lazy, infinite, single-use sequence of normalized events.

    Events are buffered from the moment the subscription exists; nothing is
    consumed until iteration starts.  Iterating a second time raises
    :class:`BlackjackSubscriptionError`.  The sequence ends only when the
    subscription is closed.
    """

    def __init__(self, identity: Identity, topic: str) -> None:
        self.identity = identity
        self.topic = topic
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._iterated = False
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, event: GameEvent) -> None:
        if self._closed:
            _logger.debug("Dropping event on closed subscription topic=%s kind=%s", self.topic, event.kind)
            return
        self._queue.put_nowait(event)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> AsyncIterator[GameEvent]:
        if self._iterated:
            raise BlackjackSubscriptionError("Event subscription cannot be restarted; subscribe again")
        self._iterated = True
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[GameEvent]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item


class EventSubscriptionManager:
    """Follows the contract event channel for one identity at a time.

    A subscription is never renewed automatically: on identity or network
    change the owner must :meth:`close` and :meth:`subscribe` again.
    """

    def __init__(
        self,
        config: BlackjackConfig,
        *,
        runtime_factory: RuntimeFactory = GameMqttRuntime,
    ) -> None:
        self._config = config
        self._runtime_factory = runtime_factory
        self._runtime: GameMqttRuntime | None = None
        self._subscription: EventSubscription | None = None

    @property
    def subscription(self) -> EventSubscription | None:
        return self._subscription

    @property
    def runtime(self) -> GameMqttRuntime | None:
        return self._runtime

    async def subscribe(self, identity: Identity) -> EventSubscription:
        """Open the event channel for *identity*.

        MQTT startup is best-effort: if the broker is unreachable the
        subscription stays open but silent, and the session relies on
        actions and timers to refresh.
        """
        if self._subscription is not None and not self._subscription.closed:
            raise BlackjackSubscriptionError("A subscription is already active; close it first")

        bootstrap = build_bootstrap(self._config, identity)
        subscription = EventSubscription(identity, bootstrap.topic)
        self._subscription = subscription

        if not self._config.mqtt_enabled:
            return subscription

        loop = asyncio.get_running_loop()
        runtime = self._runtime_factory(
            loop=loop,
            on_event=self._on_mqtt_event,
            on_malformed=self._on_malformed,
            keepalive=self._config.mqtt_keepalive,
            logger=_logger,
        )
        try:
            await loop.run_in_executor(None, runtime.start, bootstrap)
            self._runtime = runtime
        except Exception:
            _logger.warning("MQTT event feed unavailable topic=%s", bootstrap.topic, exc_info=True)
        return subscription

    async def close(self) -> None:
        """Tear down the runtime and end the current sequence."""
        runtime = self._runtime
        self._runtime = None
        subscription = self._subscription
        self._subscription = None
        if subscription is not None:
            subscription.close()
        if runtime is None:
            return
        try:
            await asyncio.get_running_loop().run_in_executor(None, runtime.stop)
        except Exception:
            _logger.debug("MQTT runtime stop failed", exc_info=True)

    def _on_mqtt_event(self, event: MqttEvent) -> None:
        subscription = self._subscription
        if subscription is None:
            return
        if event.topic != subscription.topic:
            _logger.debug("Ignoring message on foreign topic=%s", event.topic)
            return
        subscription.push(event_from_payload(event.payload))

    def _on_malformed(self, topic: str, payload: bytes) -> None:
        subscription = self._subscription
        if subscription is None or topic != subscription.topic:
            return
        subscription.push(
            UnknownEvent(
                error="undecodable payload",
                payload={"size": len(payload)},
                raw={},
            )
        )
