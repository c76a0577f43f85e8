"""Game snapshot models.

A :class:`GameSnapshot` is the immutable local copy of the contract state
taken at reconciliation time.  It is replaced wholesale on every successful
refresh and never mutated.
"""

from __future__ import annotations

from pydantic import Field

from pyblackjack.models._base import BlackjackBaseModel, BlackjackEnum
from pyblackjack.models.card import Card


class GameState(BlackjackEnum):
    """``gameState()`` codes."""

    UNKNOWN = -1
    IDLE = 0
    PLAYER_TURN = 1
    DEALER_TURN = 2
    FINISHED = 3


class GameResult(BlackjackEnum):
    """``gameResult()`` codes."""

    UNKNOWN = -1
    NONE = 0
    PLAYER_WIN = 1
    DEALER_WIN = 2
    PUSH = 3


#: Results that entitle the recorded player to a payout.
PAYABLE_RESULTS: frozenset[GameResult] = frozenset({GameResult.PLAYER_WIN, GameResult.PUSH})


class GameSnapshot(BlackjackBaseModel):
    """Canonical contract state at one point in time.

    ``state_code`` and ``result_code`` keep the raw contract codes so that
    unmapped values can still be displayed; use :attr:`state` and
    :attr:`result` for the typed view.
    """

    state_code: int = 0
    result_code: int = 0
    bet: int = 0
    recorded_player: str = ""
    player_cards: tuple[Card, ...] = ()
    dealer_cards: tuple[Card, ...] = ()
    player_score: int = 0
    dealer_score: int = 0
    generation: int = Field(default=0, description="Monotonic refresh counter within a session")

    @property
    def state(self) -> GameState:
        return GameState(self.state_code)

    @property
    def result(self) -> GameResult:
        return GameResult(self.result_code)

    @property
    def is_finished(self) -> bool:
        return self.state is GameState.FINISHED
