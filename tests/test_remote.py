from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import pytest

from conftest import CONTRACT, PLAYER, FakeGateway
from pyblackjack.config import BlackjackConfig
from pyblackjack.exceptions import BlackjackActionRejectedError, BlackjackReadError
from pyblackjack.models.transaction import ContractAction, TransactionStatus
from pyblackjack.remote import RemoteStateClient


class _ConcurrencyProbe:
    """Transport that records how many view calls overlap."""

    def __init__(self) -> None:
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_json(self, endpoint: str) -> dict[str, Any]:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0)
        self.in_flight -= 1
        if endpoint.endswith(("getPlayerCards", "getDealerCards")):
            return {"result": []}
        if endpoint.endswith("/player"):
            return {"result": PLAYER}
        return {"result": "0"}

    async def post_json(self, endpoint: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        raise AssertionError("no writes expected")


@pytest.mark.asyncio
async def test_six_scalar_reads_issued_concurrently(config: BlackjackConfig) -> None:
    probe = _ConcurrencyProbe()
    client = RemoteStateClient(config, probe, account=PLAYER)

    reads = await client.read_all()

    assert probe.max_in_flight == 6
    assert reads.player == PLAYER
    assert reads.player_cards == []


@pytest.mark.asyncio
async def test_read_all_uses_contract_endpoints(config: BlackjackConfig, gateway: FakeGateway) -> None:
    client = RemoteStateClient(config, gateway, account=PLAYER)
    await client.read_all()

    called = sorted(path.rsplit("/", 1)[1] for path in gateway.calls)
    assert called == sorted(
        ["gameState", "gameResult", "playerScore", "dealerScore", "bet", "player", "getPlayerCards", "getDealerCards"]
    )
    assert all(path.startswith(f"/contracts/{CONTRACT}/call/") for path in gateway.calls)


@pytest.mark.asyncio
async def test_read_failure_raises_read_error(config: BlackjackConfig, gateway: FakeGateway) -> None:
    gateway.fail_reads = True
    client = RemoteStateClient(config, gateway, account=PLAYER)

    with pytest.raises(BlackjackReadError):
        await client.read_all()
    with pytest.raises(BlackjackReadError):
        await client.read_status()


@pytest.mark.asyncio
async def test_write_is_two_phase(config: BlackjackConfig, gateway: FakeGateway) -> None:
    gateway.pending_polls = 3
    client = RemoteStateClient(config, gateway, account=PLAYER)

    pending = await client.start_game(50_000_000_000_000_000)

    assert not pending.confirmed
    assert gateway.submitted == [{"function": "startGame", "from": PLAYER, "value": "50000000000000000"}]

    receipt = await pending.wait()

    assert pending.confirmed
    assert receipt.status is TransactionStatus.CONFIRMED
    assert receipt.tx_hash == pending.tx_hash
    polls = [path for path in gateway.calls if path.startswith("/transactions/")]
    assert len(polls) == 4

    # A second wait does not poll again.
    await pending.wait()
    assert len([path for path in gateway.calls if path.startswith("/transactions/")]) == 4


@pytest.mark.asyncio
async def test_reverted_transaction_raises(config: BlackjackConfig, gateway: FakeGateway) -> None:
    gateway.revert_next = "Not your turn"
    client = RemoteStateClient(config, gateway, account=PLAYER)

    pending = await client.hit()
    with pytest.raises(BlackjackActionRejectedError) as exc_info:
        await pending.wait()

    assert exc_info.value.reason == "Not your turn"
    assert exc_info.value.tx_hash == pending.tx_hash


@pytest.mark.asyncio
async def test_rejected_submission_raises(config: BlackjackConfig, gateway: FakeGateway) -> None:
    gateway.reject_submit_next = "execution reverted"
    client = RemoteStateClient(config, gateway, account=PLAYER)

    with pytest.raises(BlackjackActionRejectedError):
        await client.stand()
    assert gateway.submitted == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("action", "function"),
    [
        (ContractAction.HIT, "hit"),
        (ContractAction.STAND, "stand"),
        (ContractAction.PAYOUT, "payout"),
        (ContractAction.RESET_GAME, "resetGame"),
    ],
)
async def test_submit_dispatches_by_action(
    config: BlackjackConfig,
    gateway: FakeGateway,
    action: ContractAction,
    function: str,
) -> None:
    client = RemoteStateClient(config, gateway, account=PLAYER)
    pending = await client.submit(action)
    assert pending.action is action
    assert gateway.submitted[-1]["function"] == function
    assert gateway.submitted[-1]["value"] == "0"


@pytest.mark.asyncio
async def test_negative_stake_rejected_locally(config: BlackjackConfig, gateway: FakeGateway) -> None:
    client = RemoteStateClient(config, gateway, account=PLAYER)
    with pytest.raises(ValueError):
        await client.start_game(-1)
    assert gateway.submitted == []


@pytest.mark.asyncio
async def test_balance_and_network(config: BlackjackConfig, gateway: FakeGateway) -> None:
    client = RemoteStateClient(config, gateway, account=PLAYER)
    assert await client.get_balance() == 5 * 10**18
    network = await client.get_network()
    assert network.chain_id == 31337
