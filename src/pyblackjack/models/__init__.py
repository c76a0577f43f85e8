"""Data models for contract state, events and derived views."""

from pyblackjack.models._base import BlackjackBaseModel, BlackjackEnum
from pyblackjack.models.card import Card, CardColor, card_name
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
from pyblackjack.models.game import PAYABLE_RESULTS, GameResult, GameSnapshot, GameState
from pyblackjack.models.identity import Identity, NetworkInfo, same_account
from pyblackjack.models.transaction import (
    ContractAction,
    SubmitResponse,
    TransactionReceipt,
    TransactionStatus,
)
from pyblackjack.models.view import Action, CardView, GameView, StatusTone

__all__ = [
    "PAYABLE_RESULTS",
    "Action",
    "BlackjackBaseModel",
    "BlackjackEnum",
    "Card",
    "CardColor",
    "CardView",
    "ContractAction",
    "DealerHit",
    "EventKind",
    "GameEvent",
    "GameFinished",
    "GameResult",
    "GameSnapshot",
    "GameStarted",
    "GameState",
    "GameView",
    "Identity",
    "NetworkInfo",
    "PayoutSent",
    "PlayerHit",
    "StatusTone",
    "SubmitResponse",
    "TransactionReceipt",
    "TransactionStatus",
    "UnknownEvent",
    "card_name",
    "same_account",
]
