"""UI-facing directives derived from a snapshot."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict

from pyblackjack.models.card import CardColor


class Action(enum.StrEnum):
    """User actions a display may offer."""

    START = "start"
    HIT = "hit"
    STAND = "stand"
    PAYOUT = "payout"
    RESET = "reset"


class StatusTone(enum.StrEnum):
    INFO = "info"
    TURN = "turn"
    WAIT = "wait"
    WIN = "win"
    LOSE = "lose"
    PUSH = "push"
    ERROR = "error"


class CardView(BaseModel):
    """One card slot as it should be rendered."""

    model_config = ConfigDict(frozen=True)

    label: str
    hidden: bool = False
    color: CardColor | None = None


class GameView(BaseModel):
    """Everything a display needs to render the table."""

    model_config = ConfigDict(frozen=True)

    enabled_actions: frozenset[Action]
    player_cards: tuple[CardView, ...]
    dealer_cards: tuple[CardView, ...]
    state_label: str
    result_label: str
    status_text: str
    status_tone: StatusTone
    player_score: str
    dealer_score: str
    bet: str
    result_banner: str | None = None
    claim_hint: str | None = None
    is_recorded_player: bool = False

    @property
    def start_enabled(self) -> bool:
        return Action.START in self.enabled_actions

    def can(self, action: Action) -> bool:
        return action in self.enabled_actions
