"""Reads and two-phase writes against the blackjack contract."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from pyblackjack._api import contract as _contract_api
from pyblackjack._constants import CARD_READS, SCALAR_READS
from pyblackjack._transport import Transport
from pyblackjack.config import BlackjackConfig
from pyblackjack.exceptions import BlackjackError, BlackjackReadError
from pyblackjack.models.identity import NetworkInfo
from pyblackjack.models.transaction import ContractAction, TransactionReceipt

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ContractReads:
    """Raw, unconverted values from one batch of view calls.

    The six scalar reads are issued concurrently and may be torn (state can
    advance mid-batch); the next refresh corrects it.
    """

    game_state: Any
    game_result: Any
    player_score: Any
    dealer_score: Any
    bet: Any
    player: Any
    player_cards: Any
    dealer_cards: Any


class PendingTransaction:
    """Handle for a submitted write.

    The action must not be treated as applied until :meth:`wait` returns.
    """

    def __init__(
        self,
        action: ContractAction,
        tx_hash: str,
        *,
        transport: Transport,
        poll_interval: float,
    ) -> None:
        self.action = action
        self.tx_hash = tx_hash
        self._transport = transport
        self._poll_interval = poll_interval
        self._receipt: TransactionReceipt | None = None

    @property
    def confirmed(self) -> bool:
        return self._receipt is not None

    async def wait(self) -> TransactionReceipt:
        """Suspend until the transaction is final (no local timeout)."""
        if self._receipt is None:
            self._receipt = await _contract_api.wait_for_confirmation(
                self._transport,
                self.tx_hash,
                poll_interval=self._poll_interval,
            )
        return self._receipt

    def __repr__(self) -> str:
        return f"PendingTransaction(action={self.action.value!r}, tx_hash={self.tx_hash!r})"


class RemoteStateClient:
    """Idempotent reads and submit/confirm writes for one account."""

    def __init__(self, config: BlackjackConfig, transport: Transport, *, account: str) -> None:
        self._config = config
        self._transport = transport
        self._account = account

    @property
    def account(self) -> str:
        return self._account

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def _read(self, function: str) -> Any:
        return await _contract_api.call_view(self._config, self._transport, function)

    async def game_state(self) -> Any:
        return await self._read("gameState")

    async def game_result(self) -> Any:
        return await self._read("gameResult")

    async def player_score(self) -> Any:
        return await self._read("playerScore")

    async def dealer_score(self) -> Any:
        return await self._read("dealerScore")

    async def bet(self) -> Any:
        return await self._read("bet")

    async def player(self) -> Any:
        return await self._read("player")

    async def player_cards(self) -> Any:
        return await self._read("getPlayerCards")

    async def dealer_cards(self) -> Any:
        return await self._read("getDealerCards")

    async def read_status(self) -> tuple[Any, Any]:
        """Read just ``(gameState, gameResult)``."""
        try:
            state, result = await asyncio.gather(self.game_state(), self.game_result())
        except BlackjackError as exc:
            raise BlackjackReadError(f"Status read failed: {exc}") from exc
        return state, result

    async def read_all(self) -> ContractReads:
        """Read every view the snapshot needs.

        Raises :class:`BlackjackReadError` if any read fails; no partial
        result is returned.
        """
        try:
            scalars = await asyncio.gather(*(self._read(name) for name in SCALAR_READS))
            player_cards = await self._read(CARD_READS[0])
            dealer_cards = await self._read(CARD_READS[1])
        except BlackjackError as exc:
            raise BlackjackReadError(f"Refresh read failed: {exc}") from exc
        values = dict(zip(SCALAR_READS, scalars, strict=True))
        return ContractReads(
            game_state=values["gameState"],
            game_result=values["gameResult"],
            player_score=values["playerScore"],
            dealer_score=values["dealerScore"],
            bet=values["bet"],
            player=values["player"],
            player_cards=player_cards,
            dealer_cards=dealer_cards,
        )

    async def get_balance(self, account: str | None = None) -> int:
        return await _contract_api.fetch_balance(self._transport, account or self._account)

    async def get_network(self) -> NetworkInfo:
        return await _contract_api.fetch_network(self._transport)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _submit(self, action: ContractAction, *, value: int = 0) -> PendingTransaction:
        tx_hash = await _contract_api.submit_transaction(
            self._config,
            self._transport,
            action,
            sender=self._account,
            value=value,
        )
        return PendingTransaction(
            action,
            tx_hash,
            transport=self._transport,
            poll_interval=self._config.receipt_poll_interval,
        )

    async def start_game(self, stake: int) -> PendingTransaction:
        """Submit ``startGame`` with *stake* in the native unit."""
        if stake < 0:
            raise ValueError("stake must not be negative")
        return await self._submit(ContractAction.START_GAME, value=stake)

    async def hit(self) -> PendingTransaction:
        return await self._submit(ContractAction.HIT)

    async def stand(self) -> PendingTransaction:
        return await self._submit(ContractAction.STAND)

    async def payout(self) -> PendingTransaction:
        return await self._submit(ContractAction.PAYOUT)

    async def reset_game(self) -> PendingTransaction:
        return await self._submit(ContractAction.RESET_GAME)

    async def submit(self, action: ContractAction, *, value: int = 0) -> PendingTransaction:
        """Dispatch *action* to the matching write entry point."""
        if action is ContractAction.START_GAME:
            return await self.start_game(value)
        writers = {
            ContractAction.HIT: self.hit,
            ContractAction.STAND: self.stand,
            ContractAction.PAYOUT: self.payout,
            ContractAction.RESET_GAME: self.reset_game,
        }
        return await writers[action]()
