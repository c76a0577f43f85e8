"""Internal MQTT parsing and runtime helpers for the contract event feed."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, cast

import paho.mqtt.client as mqtt

from pyblackjack.config import BlackjackConfig
from pyblackjack.exceptions import BlackjackError
from pyblackjack.models.identity import Identity


@dataclass(frozen=True)
class MqttBootstrap:
    """Broker/topic data required to follow one contract channel."""

    broker_host: str
    broker_port: int
    topic: str
    client_id: str
    tls: bool = False


@dataclass(frozen=True)
class MqttEvent:
    """Decoded MQTT message."""

    topic: str
    payload: dict[str, Any]


def build_bootstrap(config: BlackjackConfig, identity: Identity) -> MqttBootstrap:
    """Connection details for *identity*'s view of the contract channel."""
    account = identity.account.lower().removeprefix("0x")
    return MqttBootstrap(
        broker_host=config.mqtt_host,
        broker_port=config.mqtt_port,
        topic=config.event_topic(identity.chain_id),
        client_id=f"pyblackjack_{identity.chain_id}_{account[:16]}",
        tls=config.mqtt_tls,
    )


def decode_mqtt_payload(payload: bytes) -> dict[str, Any]:
    """Parse MQTT payload bytes into a JSON object."""
    parsed = json.loads(payload.decode("utf-8"))
    if not isinstance(parsed, dict):
        raise BlackjackError("MQTT payload decoded to non-object JSON")
    return parsed


class GameMqttRuntime:
    """paho-mqtt client on its own network thread.

    Decoded messages are handed to the asyncio loop with
    ``call_soon_threadsafe``; callbacks never run on the paho thread.
    """

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        on_event: Callable[[MqttEvent], None],
        on_malformed: Callable[[str, bytes], None] | None = None,
        keepalive: int = 60,
        qos: int = 1,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loop = loop
        self._on_event = on_event
        self._on_malformed = on_malformed
        self._keepalive = keepalive
        self._qos = qos
        self._log = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._bootstrap: MqttBootstrap | None = None

    @property
    def is_running(self) -> bool:
        return self._client is not None

    @property
    def topic(self) -> str | None:
        return self._bootstrap.topic if self._bootstrap else None

    def start(self, bootstrap: MqttBootstrap) -> None:
        """Connect to the broker and follow ``bootstrap.topic``.

        Blocking; call from an executor.  Restarts cleanly if already running.
        """
        self.stop()
        self._log.debug(
            "Event feed connecting broker=%s:%s topic=%s client_id=%s tls=%s",
            bootstrap.broker_host,
            bootstrap.broker_port,
            bootstrap.topic,
            bootstrap.client_id,
            bootstrap.tls,
        )
        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=bootstrap.client_id,
            protocol=mqtt.MQTTv5,
        )
        client.enable_logger(self._log)
        if bootstrap.tls:
            client.tls_set()
        client.reconnect_delay_set(min_delay=1, max_delay=30)
        client.on_connect = self._handle_connect
        client.on_message = self._handle_message
        client.on_disconnect = self._handle_disconnect

        self._bootstrap = bootstrap
        client.connect(bootstrap.broker_host, bootstrap.broker_port, keepalive=self._keepalive)
        client.loop_start()
        self._client = client

    def stop(self) -> None:
        """Disconnect and join the network thread.  No-op when idle."""
        client, self._client = self._client, None
        self._bootstrap = None
        if client is None:
            return
        try:
            client.disconnect()
        finally:
            client.loop_stop()
            self._log.debug("Event feed stopped")

    # paho callbacks (network thread)

    def _handle_connect(
        self,
        client: mqtt.Client,
        _userdata: Any,
        _flags: Any,
        reason_code: Any,
        _properties: Any,
    ) -> None:
        if reason_code.is_failure:
            self._log.warning("Event feed connection refused: %s", reason_code)
            return
        topic = self.topic
        if topic is None:
            return
        # Also runs after every automatic reconnect.
        client.subscribe(topic, qos=self._qos)
        self._log.debug("Event feed subscribed topic=%s qos=%d", topic, self._qos)

    def _handle_message(self, _client: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
        try:
            parsed = decode_mqtt_payload(msg.payload)
        except (BlackjackError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            self._log.debug("Undecodable event on topic=%s: %s", msg.topic, exc)
            if self._on_malformed is not None:
                self._loop.call_soon_threadsafe(self._on_malformed, msg.topic, bytes(msg.payload))
            return
        self._log.debug("Event on topic=%s: %s", msg.topic, parsed.get("event"))
        self._loop.call_soon_threadsafe(self._on_event, MqttEvent(topic=msg.topic, payload=parsed))

    def _handle_disconnect(
        self,
        _client: mqtt.Client,
        _userdata: Any,
        _flags: Any,
        reason_code: Any,
        _properties: Any,
    ) -> None:
        if self._client is not None:
            self._log.debug("Event feed dropped (%s); paho will reconnect", reason_code)
