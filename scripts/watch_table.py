#!/usr/bin/env python3
"""Follow the blackjack table for one account from the terminal.

Connects through the JSON gateway, prints every view/status/notice the
session emits, optionally sends one action, then keeps following contract
events until interrupted.

Usage
-----
::

    export BLACKJACK_GATEWAY_URL="http://127.0.0.1:8545/api"
    python scripts/watch_table.py --account 0xAbC...123
    python scripts/watch_table.py --account 0xAbC...123 --action start --stake 0.05

Options::

    --account ADDR      Account to play as (or BLACKJACK_ACCOUNT)
    --contract ADDR     Contract address override
    --action NAME       Send one action after connecting (start/hit/stand/payout/reset)
    --stake AMOUNT      Stake for --action start, in ether
    --poll SECONDS      Timer-driven refresh period (0 disables)
    --no-mqtt           Do not subscribe to the event feed
    --verbose           Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyblackjack import BlackjackConfig, BlackjackError, GameSession, LoggingDisplay  # noqa: E402
from pyblackjack.models.view import Action  # noqa: E402

_LOG = logging.getLogger("watch_table")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Follow the on-chain blackjack table for one account.")
    parser.add_argument("--account", default=os.environ.get("BLACKJACK_ACCOUNT"), help="Account to play as")
    parser.add_argument("--contract", help="Contract address override")
    parser.add_argument("--action", choices=[action.value for action in Action], help="Send one action")
    parser.add_argument("--stake", help="Stake for --action start, in ether")
    parser.add_argument("--poll", type=float, help="Timer-driven refresh period in seconds")
    parser.add_argument("--no-mqtt", action="store_true", help="Do not subscribe to the event feed")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()
    if not args.account:
        parser.error("--account is required (or set BLACKJACK_ACCOUNT)")
    if args.action == Action.START.value and args.stake is None:
        parser.error("--stake is required with --action start")
    return args


async def run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.contract:
        overrides["contract_address"] = args.contract
    if args.poll is not None:
        overrides["poll_interval"] = args.poll
    if args.no_mqtt:
        overrides["mqtt_enabled"] = False
    config = BlackjackConfig.from_env(**overrides)

    async with GameSession(config, display=LoggingDisplay(_LOG)) as session:
        try:
            identity = await session.connect(args.account)
        except BlackjackError as exc:
            _LOG.error("Could not connect: %s", exc)
            return 1
        _LOG.info("Following table as %s on %s", identity.account, identity.network_name)

        if args.action:
            outcome = await session.actions.run(Action(args.action), stake=args.stake)
            if outcome.error is not None:
                _LOG.warning("%s failed: %s", args.action, outcome.error)

        await session.run_events()
    return 0


def main() -> None:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        sys.exit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        _LOG.info("Interrupted")


if __name__ == "__main__":
    main()
