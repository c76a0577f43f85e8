"""Normalized contract events.

All push notifications are converted into one of these frozen models by
:mod:`pyblackjack.ingestion.events`.  Payloads that cannot be parsed become
:class:`UnknownEvent` so a bad message never breaks the stream.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import Field

from pyblackjack.models._base import BlackjackBaseModel


class EventKind(enum.StrEnum):
    """Contract event names as emitted on-chain."""

    GAME_STARTED = "GameStarted"
    PLAYER_HIT = "PlayerHit"
    DEALER_HIT = "DealerHit"
    GAME_FINISHED = "GameFinished"
    PAYOUT = "Payout"
    UNKNOWN = "Unknown"


class GameEvent(BlackjackBaseModel):
    """Common fields of every normalized event."""

    kind: EventKind
    tx_hash: str | None = None


class GameStarted(GameEvent):
    kind: EventKind = EventKind.GAME_STARTED
    player: str
    bet: int


class PlayerHit(GameEvent):
    kind: EventKind = EventKind.PLAYER_HIT
    card: int
    total: int


class DealerHit(GameEvent):
    kind: EventKind = EventKind.DEALER_HIT
    card: int
    total: int


class GameFinished(GameEvent):
    kind: EventKind = EventKind.GAME_FINISHED
    player: str
    result: int


class PayoutSent(GameEvent):
    kind: EventKind = EventKind.PAYOUT
    player: str
    amount: int


class UnknownEvent(GameEvent):
    """Unrecognised or malformed notification."""

    kind: EventKind = EventKind.UNKNOWN
    name: str = ""
    error: str = ""
    payload: dict[str, Any] = Field(default_factory=dict)
