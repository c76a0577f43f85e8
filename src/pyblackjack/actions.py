"""User action lifecycle: notice → submit/confirm → refresh.

Actions are not serialized here.  Callers are expected to offer only the
actions in the current :attr:`GameView.enabled_actions`; an action outside
that set is still sent and the contract decides.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from pyblackjack._constants import parse_stake
from pyblackjack.exceptions import BlackjackError, BlackjackStakeError
from pyblackjack.models.transaction import ContractAction
from pyblackjack.models.view import Action

if TYPE_CHECKING:
    from pyblackjack.session import GameSession

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _ActionSpec:
    contract_action: ContractAction
    pending_notice: str
    failure_verb: str
    success_notice: str | None = None


_ACTIONS: dict[Action, _ActionSpec] = {
    Action.START: _ActionSpec(
        ContractAction.START_GAME,
        "Starting game...",
        "start game",
        "Game started successfully!",
    ),
    Action.HIT: _ActionSpec(ContractAction.HIT, "Taking a card...", "hit"),
    Action.STAND: _ActionSpec(ContractAction.STAND, "Standing...", "stand"),
    Action.PAYOUT: _ActionSpec(ContractAction.PAYOUT, "Claiming winnings...", "claim"),
    Action.RESET: _ActionSpec(ContractAction.RESET_GAME, "Resetting game...", "reset"),
}


@dataclass(frozen=True, slots=True)
class ActionOutcome:
    """What happened to one user action."""

    action: Action
    confirmed: bool
    tx_hash: str | None = None
    error: BlackjackError | None = None


class ActionLifecycleController:
    """Runs user actions against the session's remote client."""

    def __init__(self, session: GameSession) -> None:
        self._session = session

    async def run(self, action: Action, *, stake: str | Decimal | int | None = None) -> ActionOutcome:
        """Notice, submit + confirm, then refresh unconditionally.

        On a rejected/failed action the error is shown and a delayed status
        refresh is scheduled so the error text does not stick.  The error is
        returned in the outcome, not raised.
        """
        spec = _ACTIONS[action]
        value = 0
        if action is Action.START:
            value = self._stake_value(stake)

        view = self._session.view
        if view is not None and not view.can(action):
            _logger.debug("Action %s sent while not enabled (state=%s)", action.value, view.state_label)

        remote = self._session.require_remote()
        display = self._session.display
        display.show_notice(spec.pending_notice)

        tx_hash: str | None = None
        error: BlackjackError | None = None
        try:
            try:
                pending = await remote.submit(spec.contract_action, value=value)
                tx_hash = pending.tx_hash
                await pending.wait()
            except BlackjackError as exc:
                _logger.warning("Action %s failed tx=%s: %s", action.value, tx_hash, exc)
                error = exc
            else:
                _logger.debug("Action %s confirmed tx=%s", action.value, tx_hash)
                if spec.success_notice:
                    display.show_notice(spec.success_notice)
        finally:
            if action is Action.PAYOUT:
                await self._session.refresh_balance()
            await self._session.refresh()

        if error is not None:
            # Must follow the refresh; show_view overwrites the status line.
            self._session.report_error(f"Failed to {spec.failure_verb}: {error}")
            return ActionOutcome(action=action, confirmed=False, tx_hash=tx_hash, error=error)
        return ActionOutcome(action=action, confirmed=True, tx_hash=tx_hash)

    def _stake_value(self, stake: str | Decimal | int | None) -> int:
        if stake is None:
            raise BlackjackStakeError("A stake is required to start a game")
        try:
            return parse_stake(stake)
        except ValueError as exc:
            self._session.report_error(f"Failed to start game: {exc}", schedule_fallback=False)
            raise BlackjackStakeError(str(exc)) from exc

    async def start(self, stake: str | Decimal | int) -> ActionOutcome:
        return await self.run(Action.START, stake=stake)

    async def hit(self) -> ActionOutcome:
        return await self.run(Action.HIT)

    async def stand(self) -> ActionOutcome:
        return await self.run(Action.STAND)

    async def claim_payout(self) -> ActionOutcome:
        return await self.run(Action.PAYOUT)

    async def reset(self) -> ActionOutcome:
        return await self.run(Action.RESET)
