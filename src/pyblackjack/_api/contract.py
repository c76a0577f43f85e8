"""Contract gateway endpoints.

Endpoints:
  - /network (provider probe)
  - /contracts/{address}/call/{function} (view reads)
  - /contracts/{address}/transactions (submit)
  - /transactions/{hash} (confirmation poll)
  - /accounts/{account}/balance
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from pyblackjack._transport import Transport
from pyblackjack.config import BlackjackConfig
from pyblackjack.exceptions import BlackjackActionRejectedError, BlackjackRemoteError, BlackjackTransportError
from pyblackjack.ingestion.normalize import require_int
from pyblackjack.models.identity import NetworkInfo
from pyblackjack.models.transaction import (
    ContractAction,
    SubmitResponse,
    TransactionReceipt,
    TransactionStatus,
)

_logger = logging.getLogger(__name__)

NETWORK_ENDPOINT = "/network"


def _contract_path(config: BlackjackConfig) -> str:
    return f"/contracts/{config.contract_address}"


async def fetch_network(transport: Transport) -> NetworkInfo:
    response = await transport.get_json(NETWORK_ENDPOINT)
    try:
        return NetworkInfo.model_validate(response)
    except ValidationError as exc:
        raise BlackjackTransportError(
            f"Malformed network info: {response!r}",
            endpoint=NETWORK_ENDPOINT,
        ) from exc


async def call_view(config: BlackjackConfig, transport: Transport, function: str) -> Any:
    """Call a view function and return its raw ``result`` value."""
    endpoint = f"{_contract_path(config)}/call/{function}"
    response = await transport.get_json(endpoint)
    if "result" not in response:
        raise BlackjackTransportError(f"Missing 'result' field from {endpoint}", endpoint=endpoint)
    return response["result"]


async def fetch_balance(transport: Transport, account: str) -> int:
    endpoint = f"/accounts/{account}/balance"
    response = await transport.get_json(endpoint)
    try:
        return require_int(response.get("balance"), field="balance")
    except ValueError as exc:
        raise BlackjackTransportError(str(exc), endpoint=endpoint) from exc


async def submit_transaction(
    config: BlackjackConfig,
    transport: Transport,
    action: ContractAction,
    *,
    sender: str,
    value: int = 0,
) -> str:
    """Submit a contract write and return its transaction hash.

    A gateway error at this stage (e.g. gas estimation hitting a revert) is
    reported as :class:`BlackjackActionRejectedError`.
    """
    endpoint = f"{_contract_path(config)}/transactions"
    payload = {"function": action.value, "from": sender, "value": str(value)}
    try:
        response = await transport.post_json(endpoint, payload)
    except BlackjackRemoteError as exc:
        raise BlackjackActionRejectedError(
            f"{action.value} rejected: {exc}",
            reason=str(exc),
        ) from exc
    try:
        submitted = SubmitResponse.model_validate(response)
    except ValidationError as exc:
        raise BlackjackTransportError(f"Missing 'txHash' field from {endpoint}", endpoint=endpoint) from exc
    _logger.debug("Submitted %s tx=%s value=%d", action.value, submitted.tx_hash, value)
    return submitted.tx_hash


async def fetch_receipt(transport: Transport, tx_hash: str) -> TransactionReceipt:
    endpoint = f"/transactions/{tx_hash}"
    response = await transport.get_json(endpoint)
    try:
        receipt = TransactionReceipt.model_validate(response)
    except ValidationError as exc:
        raise BlackjackTransportError(f"Malformed receipt from {endpoint}", endpoint=endpoint) from exc
    if not receipt.tx_hash:
        receipt = receipt.model_copy(update={"tx_hash": tx_hash})
    return receipt


async def wait_for_confirmation(
    transport: Transport,
    tx_hash: str,
    *,
    poll_interval: float,
) -> TransactionReceipt:
    """Poll until the transaction is final.

    No local timeout; a stuck confirmation stalls only the awaiting flow.
    Raises :class:`BlackjackActionRejectedError` when the transaction
    reverted.
    """
    attempt = 0
    while True:
        attempt += 1
        receipt = await fetch_receipt(transport, tx_hash)
        if receipt.status is TransactionStatus.CONFIRMED:
            _logger.debug("tx=%s confirmed attempt=%d block=%s", tx_hash, attempt, receipt.block_number)
            return receipt
        if receipt.status is TransactionStatus.REVERTED:
            raise BlackjackActionRejectedError(
                f"Transaction {tx_hash} reverted: {receipt.reason or 'no reason given'}",
                tx_hash=tx_hash,
                reason=receipt.reason,
            )
        await asyncio.sleep(poll_interval)
