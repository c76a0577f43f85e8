from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pyblackjack.config import BlackjackConfig
from pyblackjack.exceptions import BlackjackRemoteError, BlackjackTransportError
from pyblackjack.models.identity import Identity
from pyblackjack.models.view import GameView, StatusTone

CONTRACT = "0xc55A8A148D768A315b21ec8a321E59d46AE5dA72"
PLAYER = "0xAbCdEf0000000000000000000000000000001234"
OTHER = "0x9999999999999999999999999999999999999999"
CHAIN_ID = 31337
WEI = 10**18


def _score(cards: list[int]) -> int:
    return sum(min(rank, 10) for rank in cards)


@dataclass
class FakeContract:
    """Scripted contract state behind :class:`FakeGateway`.

    Card draws come from ``deck`` in order; outcomes on stand come from
    ``stand_result``.  Only here to drive the client, not a rules engine.
    """

    state: int = 0
    result: int = 0
    bet: int = 0
    player: str = "0x0000000000000000000000000000000000000000"
    player_cards: list[int] = field(default_factory=list)
    dealer_cards: list[int] = field(default_factory=list)
    deck: list[int] = field(default_factory=list)
    stand_result: int = 1

    def _draw(self) -> int:
        return self.deck.pop(0) if self.deck else 2

    @property
    def player_score(self) -> int:
        return _score(self.player_cards)

    @property
    def dealer_score(self) -> int:
        return _score(self.dealer_cards)

    def apply(self, function: str, sender: str, value: int) -> None:
        if function == "startGame":
            self.state, self.result, self.bet, self.player = 1, 0, value, sender
            self.player_cards = [self._draw(), self._draw()]
            self.dealer_cards = [self._draw(), self._draw()]
        elif function == "hit":
            self.player_cards.append(self._draw())
            if self.player_score > 21:
                self.state, self.result = 3, 2
        elif function == "stand":
            self.state, self.result = 3, self.stand_result
        elif function == "payout":
            self.bet = 0
        elif function == "resetGame":
            self.state, self.result, self.bet = 0, 0, 0
            self.player_cards, self.dealer_cards = [], []

    def view(self, function: str) -> Any:
        values: dict[str, Any] = {
            "gameState": str(self.state),
            "gameResult": str(self.result),
            "playerScore": str(self.player_score),
            "dealerScore": str(self.dealer_score),
            "bet": str(self.bet),
            "player": self.player,
            "getPlayerCards": [str(card) for card in self.player_cards],
            "getDealerCards": [hex(card) for card in self.dealer_cards],
        }
        return values[function]


class FakeGateway:
    """In-memory implementation of the ``Transport`` protocol."""

    def __init__(self, contract: FakeContract | None = None) -> None:
        self.contract = contract or FakeContract()
        self.reachable = True
        self.fail_reads = False
        self.revert_next: str | None = None
        self.reject_submit_next: str | None = None
        self.pending_polls = 0
        self.balances: dict[str, int] = {PLAYER.lower(): 5 * WEI}
        self.submitted: list[dict[str, Any]] = []
        self.calls: list[str] = []
        self._receipts: dict[str, dict[str, Any]] = {}
        self._polls: dict[str, int] = {}

    async def get_json(self, endpoint: str) -> dict[str, Any]:
        self.calls.append(endpoint)
        if endpoint == "/network":
            if not self.reachable:
                raise BlackjackTransportError("connection refused", endpoint=endpoint)
            return {"chainId": CHAIN_ID, "name": "hardhat"}
        if endpoint.startswith(f"/contracts/{CONTRACT}/call/"):
            if self.fail_reads:
                raise BlackjackTransportError("HTTP 502", status_code=502, endpoint=endpoint)
            return {"result": self.contract.view(endpoint.rsplit("/", 1)[1])}
        if endpoint.startswith("/transactions/"):
            tx_hash = endpoint.rsplit("/", 1)[1]
            polls = self._polls.get(tx_hash, 0)
            self._polls[tx_hash] = polls + 1
            if polls < self.pending_polls:
                return {"txHash": tx_hash, "status": "pending"}
            return self._receipts[tx_hash]
        if endpoint.startswith("/accounts/"):
            account = endpoint.split("/")[2].lower()
            return {"balance": str(self.balances.get(account, 0))}
        raise BlackjackTransportError(f"HTTP 404 from {endpoint}", status_code=404, endpoint=endpoint)

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        assert endpoint == f"/contracts/{CONTRACT}/transactions"
        if self.reject_submit_next is not None:
            message, self.reject_submit_next = self.reject_submit_next, None
            raise BlackjackRemoteError(message, code="-32000", endpoint=endpoint)
        tx_hash = f"0x{len(self.submitted) + 1:064x}"
        self.submitted.append(dict(payload))
        if self.revert_next is not None:
            self._receipts[tx_hash] = {"txHash": tx_hash, "status": "reverted", "reason": self.revert_next}
            self.revert_next = None
        else:
            function = str(payload["function"])
            sender = str(payload["from"])
            if function == "payout":
                multiplier = 2 if self.contract.result == 1 else 1
                amount = self.contract.bet * multiplier
                self.balances[sender.lower()] = self.balances.get(sender.lower(), 0) + amount
            self.contract.apply(function, sender, int(payload["value"]))
            self._receipts[tx_hash] = {"txHash": tx_hash, "status": "confirmed", "blockNumber": len(self.submitted)}
        return {"txHash": tx_hash}


class RecordingDisplay:
    """Display sink that keeps every directive for assertions."""

    def __init__(self) -> None:
        self.views: list[GameView] = []
        self.statuses: list[tuple[str, StatusTone]] = []
        self.notices: list[str] = []
        self.banners: list[str] = []
        self.wallets: list[tuple[str, str, str]] = []
        self.clears = 0

    def show_view(self, view: GameView) -> None:
        self.views.append(view)
        self.statuses.append((view.status_text, view.status_tone))

    def show_status(self, text: str, tone: StatusTone) -> None:
        self.statuses.append((text, tone))

    def show_notice(self, text: str) -> None:
        self.notices.append(text)

    def show_banner(self, text: str) -> None:
        self.banners.append(text)

    def show_wallet(self, account: str, balance: str, network: str) -> None:
        self.wallets.append((account, balance, network))

    def clear(self) -> None:
        self.clears += 1

    @property
    def status(self) -> str:
        return self.statuses[-1][0] if self.statuses else ""


@pytest.fixture
def config() -> BlackjackConfig:
    return BlackjackConfig(
        contract_address=CONTRACT,
        mqtt_enabled=False,
        receipt_poll_interval=0.001,
        error_status_delay=0.01,
        bust_refresh_delay=0.01,
    )


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def identity() -> Identity:
    return Identity(account=PLAYER, chain_id=CHAIN_ID, network_name="hardhat")
