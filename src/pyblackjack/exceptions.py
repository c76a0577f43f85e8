"""Custom exception hierarchy for pyblackjack."""

from __future__ import annotations


class BlackjackError(Exception):
    """Base exception for all pyblackjack errors."""


class BlackjackConfigError(BlackjackError):
    """Invalid or missing configuration."""


class BlackjackStakeError(BlackjackError, ValueError):
    """Stake could not be converted to the contract's native unit."""


class BlackjackTransportError(BlackjackError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class BlackjackRemoteError(BlackjackError):
    """Gateway answered with an application-level error body."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class BlackjackProviderError(BlackjackError):
    """No reachable gateway/provider.

    Fatal to session start; the display keeps a persistent banner until a
    new session is opened.
    """


class BlackjackActionRejectedError(BlackjackError):
    """A submitted action was rejected or reverted by the contract."""

    def __init__(
        self,
        message: str,
        *,
        tx_hash: str | None = None,
        reason: str = "",
    ) -> None:
        self.tx_hash = tx_hash
        self.reason = reason
        super().__init__(message)


class BlackjackReadError(BlackjackError):
    """A read failed during a refresh cycle; the cycle is abandoned."""


class BlackjackSubscriptionError(BlackjackError):
    """Misuse of an event subscription (restart, closed stream)."""
