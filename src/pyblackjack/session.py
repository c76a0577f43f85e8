"""Session context tying the components together.

A :class:`GameSession` owns everything that changes over the lifetime of a
connection: identity, remote client, event subscription, the current
snapshot and view, and pending timers.  Sessions are independent of each
other; nothing is kept at module level.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp

from pyblackjack._api.contract import fetch_network
from pyblackjack._redact import short_address
from pyblackjack._transport import GatewayTransport, Transport
from pyblackjack.actions import ActionLifecycleController
from pyblackjack.config import BlackjackConfig
from pyblackjack.display import Display, LoggingDisplay
from pyblackjack.exceptions import BlackjackError, BlackjackProviderError, BlackjackReadError
from pyblackjack.ingestion.normalize import require_int
from pyblackjack.models.events import GameEvent, GameFinished, PayoutSent
from pyblackjack.models.game import GameSnapshot
from pyblackjack.models.identity import Identity, NetworkInfo
from pyblackjack.models.view import GameView, StatusTone
from pyblackjack.remote import RemoteStateClient
from pyblackjack.state.reconciler import StateReconciler
from pyblackjack.subscription import EventSubscription, EventSubscriptionManager
from pyblackjack.view import (
    bust_advisory,
    derive_view,
    describe_event,
    finish_outcome,
    format_amount,
    status_line,
)

_logger = logging.getLogger(__name__)


class GameSession:
    """One connection to the blackjack contract.

    Usage::

        async with GameSession(config, display=my_display) as session:
            await session.connect("0xabc...")
            await session.actions.start("0.05")
            await session.run_events()
    """

    def __init__(
        self,
        config: BlackjackConfig,
        *,
        display: Display | None = None,
        http_session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        subscriptions: EventSubscriptionManager | None = None,
    ) -> None:
        self._config = config
        self.display: Display = display or LoggingDisplay()
        self._external_session = http_session is not None
        self._http_session = http_session
        self._transport = transport
        self._subscriptions = subscriptions or EventSubscriptionManager(config)
        self._reconciler = StateReconciler()
        self._identity: Identity | None = None
        self._network: NetworkInfo | None = None
        self._remote: RemoteStateClient | None = None
        self._subscription: EventSubscription | None = None
        self._view: GameView | None = None
        self._advisory: str | None = None
        self._timers: set[asyncio.Task[Any]] = set()
        self._poller: asyncio.Task[None] | None = None
        self.actions = ActionLifecycleController(self)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> GameSession:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = GatewayTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> BlackjackConfig:
        return self._config

    @property
    def identity(self) -> Identity | None:
        return self._identity

    @property
    def snapshot(self) -> GameSnapshot | None:
        return self._reconciler.current

    @property
    def view(self) -> GameView | None:
        return self._view

    @property
    def advisory(self) -> str | None:
        return self._advisory

    @property
    def subscription(self) -> EventSubscription | None:
        return self._subscription

    @property
    def is_open(self) -> bool:
        return self._remote is not None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise BlackjackError("Session not initialized. Use 'async with GameSession(...) as session:'")
        return self._transport

    def require_remote(self) -> RemoteStateClient:
        if self._remote is None:
            raise BlackjackError("Session is not connected")
        return self._remote

    # ------------------------------------------------------------------
    # Open / close / identity changes
    # ------------------------------------------------------------------

    async def _probe(self) -> NetworkInfo:
        transport = self._require_transport()
        try:
            return await fetch_network(transport)
        except BlackjackError as exc:
            message = f"No reachable provider at {self._config.base_url}: {exc}"
            self.display.show_banner(message)
            raise BlackjackProviderError(message) from exc

    async def connect(self, account: str) -> Identity:
        """Open the session for *account* on whatever network the gateway serves."""
        network = await self._probe()
        identity = Identity(account=account, chain_id=network.chain_id, network_name=network.name)
        await self._open(identity, network)
        return identity

    async def open(self, identity: Identity) -> None:
        """Open the session for an identity reported by the wallet.

        Raises :class:`BlackjackProviderError` when the gateway is
        unreachable or serves a different chain.
        """
        network = await self._probe()
        if network.chain_id != identity.chain_id:
            message = f"Gateway serves chain {network.chain_id}, wallet is on chain {identity.chain_id}"
            self.display.show_banner(message)
            raise BlackjackProviderError(message)
        await self._open(identity, network)

    async def _open(self, identity: Identity, network: NetworkInfo) -> None:
        if self.is_open:
            await self.close()
        self._identity = identity
        self._network = network
        self._remote = RemoteStateClient(self._config, self._require_transport(), account=identity.account)
        self._subscription = await self._subscriptions.subscribe(identity)
        _logger.debug("Session open account=%s chain=%s", short_address(identity.account), identity.chain_id)

        self.display.show_status("Connected", StatusTone.INFO)
        await self.refresh_balance()
        await self.refresh()
        if self._config.poll_interval > 0:
            self._poller = asyncio.create_task(self.poll_forever(self._config.poll_interval))

    async def close(self) -> None:
        """Tear down subscription and timers and drop the snapshot."""
        poller = self._poller
        self._poller = None
        timers = list(self._timers)
        self._timers.clear()
        for task in (poller, *timers):
            if task is not None and not task.done():
                task.cancel()
        for task in (poller, *timers):
            if task is not None:
                with contextlib.suppress(asyncio.CancelledError):
                    await task

        was_open = self.is_open
        await self._subscriptions.close()
        self._subscription = None
        self._remote = None
        self._identity = None
        self._network = None
        self._view = None
        self._advisory = None
        self._reconciler.clear()
        if was_open:
            self.display.clear()

    async def switch_identity(self, identity: Identity | None) -> None:
        """Account or network changed: teardown, then reinitialize.

        ``None`` (wallet reports no accounts) leaves the session closed.
        """
        _logger.debug("Identity change -> %s", identity)
        await self.close()
        if identity is not None:
            await self.open(identity)

    # ------------------------------------------------------------------
    # Refresh paths
    # ------------------------------------------------------------------

    async def refresh(self) -> GameSnapshot | None:
        """Run one full refresh cycle.

        Returns the new snapshot, or ``None`` when the cycle was abandoned
        (read failure, or the session changed identity while reading).
        """
        remote = self._remote
        if remote is None:
            return None
        try:
            reads = await remote.read_all()
            if remote is not self._remote:
                _logger.debug("Discarding refresh for superseded identity")
                return None
            snapshot = self._reconciler.reconcile(reads)
        except BlackjackReadError as exc:
            _logger.warning("Refresh cycle abandoned: %s", exc)
            self.report_error(f"Failed to update game state: {exc}")
            return None

        view = derive_view(snapshot, self._identity)
        self._view = view
        _logger.debug(
            "Snapshot gen=%d state=%s result=%s player=%s dealer=%s",
            snapshot.generation,
            snapshot.state_code,
            snapshot.result_code,
            [card.rank for card in snapshot.player_cards],
            [card.rank for card in snapshot.dealer_cards],
        )
        self.display.show_view(view)
        if self._advisory is not None:
            if snapshot.is_finished:
                self._advisory = None
            else:
                self.display.show_status(self._advisory, StatusTone.ERROR)
        return snapshot

    async def refresh_status(self) -> None:
        """Restore the status line from the contract (state + result only)."""
        remote = self._remote
        if remote is None:
            return
        try:
            state, result = await remote.read_status()
            text, tone = status_line(
                require_int(state, field="gameState"),
                require_int(result, field="gameResult"),
            )
        except (BlackjackError, ValueError):
            _logger.debug("Failed to update status", exc_info=True)
            return
        self.display.show_status(text, tone)

    async def refresh_balance(self) -> None:
        remote = self._remote
        identity = self._identity
        if remote is None or identity is None:
            return
        try:
            balance = await remote.get_balance()
        except BlackjackError:
            _logger.debug("Failed to get balance", exc_info=True)
            return
        self.display.show_wallet(
            short_address(identity.account),
            format_amount(balance),
            f"{identity.network_name} (Chain ID: {identity.chain_id})",
        )

    async def poll_forever(self, interval: float) -> None:
        """Timer-driven refresh loop; runs until cancelled."""
        while True:
            await asyncio.sleep(interval)
            await self.refresh()

    # ------------------------------------------------------------------
    # Errors and timers
    # ------------------------------------------------------------------

    def report_error(self, message: str, *, schedule_fallback: bool = True) -> None:
        """Show *message* and restore the status line after a fixed delay."""
        self.display.show_status(message, StatusTone.ERROR)
        if schedule_fallback:
            self.schedule(self._config.error_status_delay, self.refresh_status)

    def schedule(self, delay: float, callback: Callable[[], Awaitable[Any]]) -> asyncio.Task[Any]:
        """Run *callback* once after *delay* seconds; cancelled on close."""

        async def _later() -> None:
            await asyncio.sleep(delay)
            try:
                await callback()
            except Exception:
                _logger.warning("Scheduled %s failed", getattr(callback, "__name__", callback), exc_info=True)

        task = asyncio.create_task(_later())
        self._timers.add(task)
        task.add_done_callback(self._timers.discard)
        return task

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def handle_event(self, event: GameEvent) -> None:
        """React to one push event with a notice and a full refresh."""
        _logger.debug("Event %s tx=%s", event.kind, event.tx_hash)
        self.display.show_notice(describe_event(event))
        if isinstance(event, GameFinished):
            self._advisory = None

        # Raised before the refresh; a Finished snapshot clears it.
        advisory = bust_advisory(event)
        if advisory is not None:
            self._advisory = advisory
            self.display.show_status(advisory, StatusTone.ERROR)

        await self.refresh()

        if advisory is not None:
            self.schedule(self._config.bust_refresh_delay, self.refresh)

        if isinstance(event, GameFinished):
            outcome = finish_outcome(event.result)
            if outcome is not None:
                self.display.show_status(*outcome)
                self.schedule(self._config.error_status_delay, self.refresh_status)

        if isinstance(event, PayoutSent):
            await self.refresh_balance()

    async def run_events(self) -> None:
        """Consume the current subscription until it is closed."""
        subscription = self._subscription
        if subscription is None:
            raise BlackjackError("Session is not connected")
        async for event in subscription:
            await self.handle_event(event)
