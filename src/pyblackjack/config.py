"""Client configuration for pyblackjack."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyblackjack._constants import DEFAULT_CONTRACT_ADDRESS, DEFAULT_GATEWAY_URL, DEFAULT_TOPIC_PREFIX
from pyblackjack.exceptions import BlackjackConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class BlackjackConfig:
    """Client configuration.

    Parameters
    ----------
    gateway_url : str
        Base URL of the JSON gateway fronting the ledger node.
    contract_address : str
        Address of the blackjack contract.
    mqtt_enabled : bool
        Subscribe to contract events over MQTT.  When disabled the session
        only refreshes on actions and timer ticks.
    mqtt_host : str
        MQTT broker host relaying contract events.
    mqtt_port : int
        MQTT broker port.
    mqtt_tls : bool
        Enable TLS on the broker connection.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    topic_prefix : str
        First segment of the event topic
        (``{prefix}/{chain_id}/{contract}/events``).
    receipt_poll_interval : float
        Seconds between confirmation polls of a submitted transaction.
    error_status_delay : float
        Seconds after a failed action before the status line is restored
        from the contract.
    bust_refresh_delay : float
        Seconds after a bust advisory before an extra refresh runs.
    poll_interval : float
        Timer-driven refresh period in seconds.  ``0`` disables polling.
    """

    gateway_url: str = DEFAULT_GATEWAY_URL
    contract_address: str = DEFAULT_CONTRACT_ADDRESS
    mqtt_enabled: bool = True
    mqtt_host: str = "127.0.0.1"
    mqtt_port: int = 1883
    mqtt_tls: bool = False
    mqtt_keepalive: int = 60
    topic_prefix: str = DEFAULT_TOPIC_PREFIX
    receipt_poll_interval: float = 1.0
    error_status_delay: float = 3.0
    bust_refresh_delay: float = 1.0
    poll_interval: float = 0.0

    def __post_init__(self) -> None:
        if not self.gateway_url:
            raise BlackjackConfigError("gateway_url must be set")
        address = self.contract_address.strip()
        if not address.startswith("0x") or len(address) != 42:
            raise BlackjackConfigError(f"contract_address is not a 20-byte hex address: {self.contract_address!r}")
        if self.receipt_poll_interval <= 0:
            raise BlackjackConfigError("receipt_poll_interval must be positive")

    @property
    def base_url(self) -> str:
        return self.gateway_url.rstrip("/")

    def event_topic(self, chain_id: int) -> str:
        """MQTT topic carrying this contract's events on *chain_id*."""
        return f"{self.topic_prefix}/{chain_id}/{self.contract_address.lower()}/events"

    @classmethod
    def from_env(cls, **overrides: Any) -> BlackjackConfig:
        """Create configuration from ``BLACKJACK_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "BLACKJACK_GATEWAY_URL": "gateway_url",
            "BLACKJACK_CONTRACT_ADDRESS": "contract_address",
            "BLACKJACK_MQTT_HOST": "mqtt_host",
            "BLACKJACK_TOPIC_PREFIX": "topic_prefix",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        port_env = env.get("BLACKJACK_MQTT_PORT")
        if port_env is not None and "mqtt_port" not in overrides:
            config_kwargs["mqtt_port"] = int(port_env)

        keepalive_env = env.get("BLACKJACK_MQTT_KEEPALIVE")
        if keepalive_env is not None and "mqtt_keepalive" not in overrides:
            config_kwargs["mqtt_keepalive"] = int(keepalive_env)

        poll_env = env.get("BLACKJACK_POLL_INTERVAL")
        if poll_env is not None and "poll_interval" not in overrides:
            config_kwargs["poll_interval"] = float(poll_env)

        if "mqtt_enabled" not in overrides:
            config_kwargs["mqtt_enabled"] = _env_bool(env.get("BLACKJACK_MQTT_ENABLED"), True)
        if "mqtt_tls" not in overrides:
            config_kwargs["mqtt_tls"] = _env_bool(env.get("BLACKJACK_MQTT_TLS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
