"""Snapshot reconciliation.

This module only translates raw contract reads into a
:class:`~pyblackjack.models.game.GameSnapshot`.  It holds no game rules and
has no side effects.
"""

from __future__ import annotations

from pyblackjack.exceptions import BlackjackReadError
from pyblackjack.ingestion.normalize import int_sequence, require_int, safe_address
from pyblackjack.models.card import Card
from pyblackjack.models.game import GameSnapshot
from pyblackjack.remote import ContractReads


def build_snapshot(reads: ContractReads, *, generation: int = 0) -> GameSnapshot:
    """Convert one batch of reads into an immutable snapshot.

    Scores and bet keep full integer precision.  Raises
    :class:`BlackjackReadError` when a value cannot be interpreted.
    """
    try:
        state_code = require_int(reads.game_state, field="gameState")
        result_code = require_int(reads.game_result, field="gameResult")
        player_score = require_int(reads.player_score, field="playerScore")
        dealer_score = require_int(reads.dealer_score, field="dealerScore")
        bet = require_int(reads.bet, field="bet")
        player_ranks = int_sequence(reads.player_cards, field="getPlayerCards")
        dealer_ranks = int_sequence(reads.dealer_cards, field="getDealerCards")
    except ValueError as exc:
        raise BlackjackReadError(f"Unreadable contract value: {exc}") from exc

    return GameSnapshot(
        state_code=state_code,
        result_code=result_code,
        bet=bet,
        recorded_player=safe_address(reads.player) or "",
        player_cards=tuple(Card(rank=rank) for rank in player_ranks),
        dealer_cards=tuple(Card(rank=rank) for rank in dealer_ranks),
        player_score=player_score,
        dealer_score=dealer_score,
        generation=generation,
        raw={
            "gameState": reads.game_state,
            "gameResult": reads.game_result,
            "playerScore": reads.player_score,
            "dealerScore": reads.dealer_score,
            "bet": reads.bet,
            "player": reads.player,
            "playerCards": reads.player_cards,
            "dealerCards": reads.dealer_cards,
        },
    )


class StateReconciler:
    """Holds the current snapshot reference for one session.

    Completions replace the reference in arrival order (last completion
    wins); superseded snapshots are simply dropped.
    """

    def __init__(self) -> None:
        self._current: GameSnapshot | None = None
        self._generation = 0

    @property
    def current(self) -> GameSnapshot | None:
        return self._current

    def reconcile(self, reads: ContractReads) -> GameSnapshot:
        """Build a snapshot from *reads* and make it current."""
        snapshot = build_snapshot(reads, generation=self._generation + 1)
        self._generation = snapshot.generation
        self._current = snapshot
        return snapshot

    def clear(self) -> None:
        self._current = None
