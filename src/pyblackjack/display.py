"""Display sink protocol.

Rendering is not part of this library.  A session pushes directives to any
object implementing :class:`Display`; :class:`LoggingDisplay` is a minimal
text implementation used by the bundled script.
"""

from __future__ import annotations

import logging
from typing import Protocol

from pyblackjack.models.view import CardView, GameView, StatusTone
from pyblackjack.view import NO_CARDS

_logger = logging.getLogger(__name__)


class Display(Protocol):
    def show_view(self, view: GameView) -> None:
        """Render table, buttons and the derived status line."""

    def show_status(self, text: str, tone: StatusTone) -> None:
        """Override the status line (errors, advisories, outcomes)."""

    def show_notice(self, text: str) -> None:
        """Transient transaction/event notice."""

    def show_banner(self, text: str) -> None:
        """Persistent banner (no reachable provider)."""

    def show_wallet(self, account: str, balance: str, network: str) -> None:
        """Account/balance/network line."""

    def clear(self) -> None:
        """Reset to the disconnected state."""


def render_cards(cards: tuple[CardView, ...]) -> str:
    if not cards:
        return NO_CARDS
    return " ".join(card.label for card in cards)


class LoggingDisplay:
    """Writes every directive to a logger, one line each."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger

    def show_view(self, view: GameView) -> None:
        actions = ", ".join(sorted(action.value for action in view.enabled_actions)) or "wait"
        self._logger.info(
            "[%s] dealer: %s (%s) | you: %s (%s) | bet %s | actions: %s",
            view.state_label,
            render_cards(view.dealer_cards),
            view.dealer_score,
            render_cards(view.player_cards),
            view.player_score,
            view.bet,
            actions,
        )
        self.show_status(view.status_text, view.status_tone)
        if view.result_banner:
            self._logger.info("%s", view.result_banner)
        if view.claim_hint:
            self._logger.info("%s", view.claim_hint)

    def show_status(self, text: str, tone: StatusTone) -> None:
        level = logging.WARNING if tone in (StatusTone.ERROR, StatusTone.LOSE) else logging.INFO
        self._logger.log(level, "status: %s", text)

    def show_notice(self, text: str) -> None:
        self._logger.info("notice: %s", text)

    def show_banner(self, text: str) -> None:
        self._logger.error("%s", text)

    def show_wallet(self, account: str, balance: str, network: str) -> None:
        self._logger.info("wallet %s balance %s on %s", account, balance, network)

    def clear(self) -> None:
        self._logger.info("Wallet disconnected. Connect to play.")
