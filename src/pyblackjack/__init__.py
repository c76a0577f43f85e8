"""pyblackjack - Async Python client mirroring an on-chain blackjack contract."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyblackjack")
except PackageNotFoundError:
    __version__ = "0+local"
from pyblackjack.actions import ActionLifecycleController, ActionOutcome
from pyblackjack.config import BlackjackConfig
from pyblackjack.display import Display, LoggingDisplay
from pyblackjack.exceptions import (
    BlackjackActionRejectedError,
    BlackjackConfigError,
    BlackjackError,
    BlackjackProviderError,
    BlackjackReadError,
    BlackjackRemoteError,
    BlackjackStakeError,
    BlackjackSubscriptionError,
    BlackjackTransportError,
)
from pyblackjack.models import (
    Action,
    Card,
    CardColor,
    CardView,
    EventKind,
    GameEvent,
    GameResult,
    GameSnapshot,
    GameState,
    GameView,
    Identity,
    StatusTone,
)
from pyblackjack.remote import PendingTransaction, RemoteStateClient
from pyblackjack.session import GameSession
from pyblackjack.state.reconciler import StateReconciler
from pyblackjack.subscription import EventSubscription, EventSubscriptionManager
from pyblackjack.view import derive_view

__all__ = [
    "__version__",
    "Action",
    "ActionLifecycleController",
    "ActionOutcome",
    "BlackjackActionRejectedError",
    "BlackjackConfig",
    "BlackjackConfigError",
    "BlackjackError",
    "BlackjackProviderError",
    "BlackjackReadError",
    "BlackjackRemoteError",
    "BlackjackStakeError",
    "BlackjackSubscriptionError",
    "BlackjackTransportError",
    "Card",
    "CardColor",
    "CardView",
    "Display",
    "EventKind",
    "EventSubscription",
    "EventSubscriptionManager",
    "GameEvent",
    "GameResult",
    "GameSession",
    "GameSnapshot",
    "GameState",
    "GameView",
    "Identity",
    "LoggingDisplay",
    "PendingTransaction",
    "RemoteStateClient",
    "StateReconciler",
    "StatusTone",
    "derive_view",
]
