"""Convert raw event-feed payloads into normalized :mod:`pyblackjack.models.events`.

Payload shape: ``{"event": "PlayerHit", "args": {"card": "10", "total": "25"},
"txHash": "0x..."}``.  Numbers arrive as decimal strings, hex strings or JSON
numbers.  Nothing in here raises: unusable payloads become
:class:`UnknownEvent`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from pyblackjack.ingestion.normalize import require_int, safe_address
from pyblackjack.models.events import (
    DealerHit,
    EventKind,
    GameEvent,
    GameFinished,
    GameStarted,
    PayoutSent,
    PlayerHit,
    UnknownEvent,
)

_logger = logging.getLogger(__name__)


def _address(args: Mapping[str, Any], key: str) -> str:
    value = safe_address(args.get(key))
    if value is None:
        raise ValueError(f"{key}: expected an address, got {args.get(key)!r}")
    return value


def _game_started(args: Mapping[str, Any]) -> dict[str, Any]:
    return {"player": _address(args, "player"), "bet": require_int(args.get("bet"), field="bet")}


def _draw(args: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "card": require_int(args.get("card"), field="card"),
        "total": require_int(args.get("total"), field="total"),
    }


def _game_finished(args: Mapping[str, Any]) -> dict[str, Any]:
    return {"player": _address(args, "player"), "result": require_int(args.get("result"), field="result")}


def _payout(args: Mapping[str, Any]) -> dict[str, Any]:
    return {"player": _address(args, "player"), "amount": require_int(args.get("amount"), field="amount")}


_PARSERS: dict[EventKind, tuple[type[GameEvent], Callable[[Mapping[str, Any]], dict[str, Any]]]] = {
    EventKind.GAME_STARTED: (GameStarted, _game_started),
    EventKind.PLAYER_HIT: (PlayerHit, _draw),
    EventKind.DEALER_HIT: (DealerHit, _draw),
    EventKind.GAME_FINISHED: (GameFinished, _game_finished),
    EventKind.PAYOUT: (PayoutSent, _payout),
}


def _unknown(payload: Mapping[str, Any], name: str, error: str) -> UnknownEvent:
    tx_hash = payload.get("txHash")
    return UnknownEvent(
        name=name,
        error=error,
        payload=dict(payload),
        tx_hash=tx_hash if isinstance(tx_hash, str) else None,
        raw=dict(payload),
    )


def event_from_payload(payload: Any) -> GameEvent:
    """Normalize one decoded event payload."""
    if not isinstance(payload, Mapping):
        return UnknownEvent(error="payload is not an object", payload={"value": payload}, raw={})

    name = str(payload.get("event") or "")
    try:
        kind = EventKind(name)
    except ValueError:
        _logger.debug("Ignoring unknown event name=%r", name)
        return _unknown(payload, name, "unknown event name")

    if kind is EventKind.UNKNOWN:
        return _unknown(payload, name, "unknown event name")

    args = payload.get("args")
    if not isinstance(args, Mapping):
        return _unknown(payload, name, "missing args")

    model_cls, parse = _PARSERS[kind]
    try:
        fields = parse(args)
    except ValueError as exc:
        _logger.debug("Malformed %s payload: %s", name, exc)
        return _unknown(payload, name, str(exc))

    tx_hash = payload.get("txHash")
    return model_cls(
        **fields,
        tx_hash=tx_hash if isinstance(tx_hash, str) else None,
        raw=dict(payload),
    )
