"""View-model derivation.

Everything here is a pure function of a :class:`GameSnapshot`, the local
:class:`Identity` and (for notices) a :class:`GameEvent`.  Displays render
the returned directives and never look at contract data directly.
"""

from __future__ import annotations

from collections.abc import Sequence

from pyblackjack._constants import BUST_THRESHOLD, CURRENCY_SYMBOL, HIDDEN_CARD, format_native
from pyblackjack.models.card import Card, card_name
from pyblackjack.models.events import (
    DealerHit,
    GameEvent,
    GameFinished,
    GameStarted,
    PayoutSent,
    PlayerHit,
    UnknownEvent,
)
from pyblackjack.models.game import PAYABLE_RESULTS, GameResult, GameSnapshot, GameState
from pyblackjack.models.identity import Identity
from pyblackjack.models.view import Action, CardView, GameView, StatusTone

GAME_STATE_LABELS: dict[GameState, str] = {
    GameState.IDLE: "Idle",
    GameState.PLAYER_TURN: "Your Turn",
    GameState.DEALER_TURN: "Dealer Turn",
    GameState.FINISHED: "Finished",
}

GAME_RESULT_LABELS: dict[GameResult, str] = {
    GameResult.NONE: "None",
    GameResult.PLAYER_WIN: "You Win!",
    GameResult.DEALER_WIN: "Dealer Wins",
    GameResult.PUSH: "Push",
}

BUST_ADVISORY = "Bust! You went over 21."
CLAIM_HINT = 'Click "Claim Winnings" to get your payout!'
NO_CARDS = "No cards yet"


def state_label(code: int) -> str:
    return GAME_STATE_LABELS.get(GameState(code), str(code))


def result_label(code: int) -> str:
    return GAME_RESULT_LABELS.get(GameResult(code), str(code))


def format_amount(amount: int) -> str:
    return f"{format_native(amount)} {CURRENCY_SYMBOL}"


# ------------------------------------------------------------------
# Actions
# ------------------------------------------------------------------


def enabled_actions(state: GameState, result: GameResult, *, is_recorded_player: bool) -> frozenset[Action]:
    """Button-visibility state machine.

    ============  =====================================================
    state         enabled
    ============  =====================================================
    Idle          start
    PlayerTurn    hit, stand
    DealerTurn    (none)
    Finished      reset, start; payout for the recorded player on a
                  win or push
    ============  =====================================================
    """
    if state is GameState.IDLE:
        return frozenset({Action.START})
    if state is GameState.PLAYER_TURN:
        return frozenset({Action.HIT, Action.STAND})
    if state is GameState.FINISHED:
        actions = {Action.RESET, Action.START}
        if is_recorded_player and result in PAYABLE_RESULTS:
            actions.add(Action.PAYOUT)
        return frozenset(actions)
    return frozenset()


def payout_enabled(snapshot: GameSnapshot, identity: Identity | None) -> bool:
    is_player = identity is not None and identity.owns(snapshot.recorded_player)
    return Action.PAYOUT in enabled_actions(snapshot.state, snapshot.result, is_recorded_player=is_player)


# ------------------------------------------------------------------
# Cards
# ------------------------------------------------------------------


def is_dealer_card_hidden(state: GameState, index: int) -> bool:
    """The dealer's first card is face down only during the player's turn."""
    return index == 0 and state is GameState.PLAYER_TURN


def card_views(cards: Sequence[Card], *, state: GameState, dealer: bool) -> tuple[CardView, ...]:
    views: list[CardView] = []
    for index, card in enumerate(cards):
        if dealer and is_dealer_card_hidden(state, index):
            views.append(CardView(label=HIDDEN_CARD, hidden=True))
        else:
            views.append(CardView(label=card.name, color=card.color))
    return tuple(views)


# ------------------------------------------------------------------
# Status
# ------------------------------------------------------------------


def status_line(state_code: int, result_code: int) -> tuple[str, StatusTone]:
    """Status text and tone for a state/result pair."""
    state = GameState(state_code)
    if state is GameState.IDLE:
        return "Ready to play! Place your bet.", StatusTone.INFO
    if state is GameState.PLAYER_TURN:
        return "Your turn! Hit or Stand?", StatusTone.TURN
    if state is GameState.DEALER_TURN:
        return "Dealer is playing...", StatusTone.WAIT
    if state is GameState.FINISHED:
        result = GameResult(result_code)
        tone = {
            GameResult.PLAYER_WIN: StatusTone.WIN,
            GameResult.DEALER_WIN: StatusTone.LOSE,
            GameResult.PUSH: StatusTone.PUSH,
        }.get(result, StatusTone.INFO)
        return result_label(result_code), tone
    return f"Game state {state_code}", StatusTone.INFO


def result_banner(snapshot: GameSnapshot) -> str | None:
    if not snapshot.is_finished:
        return None
    player, dealer = snapshot.player_score, snapshot.dealer_score
    result = snapshot.result
    if result is GameResult.PLAYER_WIN:
        return f"You Win! {player} vs {dealer}"
    if result is GameResult.DEALER_WIN:
        banner = f"Dealer Wins! {dealer} vs {player}"
        if player > BUST_THRESHOLD:
            banner += " (Bust!)"
        return banner
    if result is GameResult.PUSH:
        return f"Push! {player} vs {dealer}"
    return None


def claim_hint(snapshot: GameSnapshot) -> str | None:
    """Payout reminder shown under a finished winning hand."""
    if snapshot.is_finished and snapshot.result is GameResult.PLAYER_WIN:
        return CLAIM_HINT
    return None


def derive_view(snapshot: GameSnapshot, identity: Identity | None) -> GameView:
    """Compute display directives for *snapshot* as seen by *identity*."""
    state = snapshot.state
    is_player = identity is not None and identity.owns(snapshot.recorded_player)
    text, tone = status_line(snapshot.state_code, snapshot.result_code)
    return GameView(
        enabled_actions=enabled_actions(state, snapshot.result, is_recorded_player=is_player),
        player_cards=card_views(snapshot.player_cards, state=state, dealer=False),
        dealer_cards=card_views(snapshot.dealer_cards, state=state, dealer=True),
        state_label=state_label(snapshot.state_code),
        result_label=result_label(snapshot.result_code),
        status_text=text,
        status_tone=tone,
        player_score=str(snapshot.player_score),
        dealer_score=str(snapshot.dealer_score),
        bet=format_amount(snapshot.bet),
        result_banner=result_banner(snapshot),
        claim_hint=claim_hint(snapshot),
        is_recorded_player=is_player,
    )


# ------------------------------------------------------------------
# Event notices
# ------------------------------------------------------------------


def describe_event(event: GameEvent) -> str:
    """Transient notice text for a push event."""
    if isinstance(event, GameStarted):
        return f"Game started! Bet: {format_amount(event.bet)}"
    if isinstance(event, PlayerHit):
        return f"You drew: {card_name(event.card)}"
    if isinstance(event, DealerHit):
        return f"Dealer drew: {card_name(event.card)}"
    if isinstance(event, GameFinished):
        return f"Game finished! Result: {result_label(event.result)}"
    if isinstance(event, PayoutSent):
        return f"Payout received: {format_amount(event.amount)}"
    if isinstance(event, UnknownEvent):
        return f"Unrecognised event {event.name or '?'}: {event.payload}"
    return f"Event {event.kind}"


def bust_advisory(event: GameEvent) -> str | None:
    """Advisory raised as soon as a player draw goes over 21.

    The contract's own Finished/DealerWin report remains authoritative.
    """
    if isinstance(event, PlayerHit) and event.total > BUST_THRESHOLD:
        return BUST_ADVISORY
    return None


def finish_outcome(result_code: int) -> tuple[str, StatusTone] | None:
    """Follow-up message for a finished round."""
    result = GameResult(result_code)
    if result is GameResult.PLAYER_WIN:
        return "You Win!", StatusTone.WIN
    if result is GameResult.DEALER_WIN:
        return "Dealer wins", StatusTone.LOSE
    if result is GameResult.PUSH:
        return "Push! It's a tie.", StatusTone.PUSH
    return None
