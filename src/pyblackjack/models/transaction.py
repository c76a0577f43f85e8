"""Transaction submission and receipt models."""

from __future__ import annotations

import enum

from pyblackjack.models._base import BlackjackBaseModel


class ContractAction(enum.StrEnum):
    """Mutating contract entry points."""

    START_GAME = "startGame"
    HIT = "hit"
    STAND = "stand"
    PAYOUT = "payout"
    RESET_GAME = "resetGame"


class TransactionStatus(enum.StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REVERTED = "reverted"


class SubmitResponse(BlackjackBaseModel):
    """``POST /contracts/{address}/transactions`` response."""

    tx_hash: str


class TransactionReceipt(BlackjackBaseModel):
    """``GET /transactions/{hash}`` response."""

    tx_hash: str = ""
    status: TransactionStatus = TransactionStatus.PENDING
    block_number: int | None = None
    reason: str = ""

    @property
    def is_final(self) -> bool:
        return self.status is not TransactionStatus.PENDING
