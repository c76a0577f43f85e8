"""Local identity (account + network) and gateway network info."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from pyblackjack.models._base import BlackjackBaseModel


def same_account(left: str | None, right: str | None) -> bool:
    """Case-insensitive comparison of hex account addresses."""
    if not left or not right:
        return False
    return left.strip().lower() == right.strip().lower()


class NetworkInfo(BlackjackBaseModel):
    """``GET /network`` response."""

    chain_id: int
    name: str = "unknown"


class Identity(BaseModel):
    """The local account on a given network.

    Any change of account or chain is a hard reset for a session.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    account: str
    chain_id: int
    network_name: str = "unknown"

    @field_validator("account")
    @classmethod
    def _require_account(cls, value: str) -> str:
        if not value:
            raise ValueError("account must be non-empty")
        return value

    def owns(self, address: str | None) -> bool:
        return same_account(self.account, address)
