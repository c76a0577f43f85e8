from __future__ import annotations

from decimal import Decimal

import pytest

from pyblackjack._constants import format_native, parse_stake
from pyblackjack.ingestion.events import event_from_payload
from pyblackjack.ingestion.normalize import int_sequence, require_int, safe_int
from pyblackjack.models.events import (
    DealerHit,
    EventKind,
    GameFinished,
    GameStarted,
    PayoutSent,
    PlayerHit,
    UnknownEvent,
)

PLAYER = "0xAbCdEf0000000000000000000000000000001234"


class TestSafeInt:
    def test_accepts_remote_encodings(self) -> None:
        assert safe_int(7) == 7
        assert safe_int("42") == 42
        assert safe_int(" 0x1a ") == 26
        assert safe_int(3.0) == 3

    def test_rejects_garbage(self) -> None:
        assert safe_int(None) is None
        assert safe_int("") is None
        assert safe_int("abc") is None
        assert safe_int(2.5) is None
        assert safe_int(True) is None
        assert safe_int([1]) is None

    def test_large_values_keep_precision(self) -> None:
        big = "123456789012345678901234567890"
        assert safe_int(big) == 123456789012345678901234567890

    def test_require_int_raises(self) -> None:
        with pytest.raises(ValueError, match="bet"):
            require_int("nope", field="bet")

    def test_int_sequence(self) -> None:
        assert int_sequence(["1", "0xd", 5], field="cards") == [1, 13, 5]
        with pytest.raises(ValueError):
            int_sequence("1,2", field="cards")


class TestStakeConversion:
    def test_parse_stake(self) -> None:
        assert parse_stake("0.05") == 50_000_000_000_000_000
        assert parse_stake(Decimal("1")) == 10**18
        assert parse_stake(0) == 0
        assert parse_stake("0.000000000000000001") == 1

    @pytest.mark.parametrize("value", ["-1", "abc", "0.0000000000000000001", "NaN", "Infinity"])
    def test_parse_stake_rejects(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_stake(value)

    def test_format_native(self) -> None:
        assert format_native(50_000_000_000_000_000) == "0.05"
        assert format_native(10**18) == "1.0"
        assert format_native(10 * 10**18) == "10.0"
        assert format_native(0) == "0.0"
        assert format_native(1) == "0.000000000000000001"

    def test_large_stake_is_exact(self) -> None:
        assert parse_stake("12345678901.123456789012345678") == 12345678901123456789012345678
        assert parse_stake("98765432109876543210.5") == 98765432109876543210500000000000000000
        assert parse_stake("1.100000000000000000000") == 1_100_000_000_000_000_000
        with pytest.raises(ValueError):
            parse_stake("12345678901.1234567890123456789")

    def test_format_native_large_balance(self) -> None:
        assert format_native(12345678901123456789012345678) == "12345678901.123456789012345678"
        assert format_native(98765432109876543210 * 10**18) == "98765432109876543210.0"


class TestEventFromPayload:
    def test_game_started(self) -> None:
        event = event_from_payload(
            {"event": "GameStarted", "args": {"player": PLAYER, "bet": "50000000000000000"}, "txHash": "0x01"}
        )
        assert isinstance(event, GameStarted)
        assert event.kind is EventKind.GAME_STARTED
        assert event.bet == 50_000_000_000_000_000
        assert event.tx_hash == "0x01"
        assert event.raw["event"] == "GameStarted"

    def test_draws(self) -> None:
        player = event_from_payload({"event": "PlayerHit", "args": {"card": "0xa", "total": "25"}})
        dealer = event_from_payload({"event": "DealerHit", "args": {"card": 1, "total": 11}})
        assert isinstance(player, PlayerHit)
        assert (player.card, player.total) == (10, 25)
        assert isinstance(dealer, DealerHit)
        assert (dealer.card, dealer.total) == (1, 11)

    def test_finish_and_payout(self) -> None:
        finished = event_from_payload({"event": "GameFinished", "args": {"player": PLAYER, "result": "3"}})
        payout = event_from_payload({"event": "Payout", "args": {"player": PLAYER, "amount": "100"}})
        assert isinstance(finished, GameFinished)
        assert finished.result == 3
        assert isinstance(payout, PayoutSent)
        assert payout.amount == 100

    def test_unknown_result_code_is_kept(self) -> None:
        finished = event_from_payload({"event": "GameFinished", "args": {"player": PLAYER, "result": 9}})
        assert isinstance(finished, GameFinished)
        assert finished.result == 9

    @pytest.mark.parametrize(
        "payload",
        [
            {"event": "Approval", "args": {}},
            {"event": "Unknown", "args": {}},
            {"event": "PlayerHit"},
            {"event": "PlayerHit", "args": {"card": "ten", "total": 25}},
            {"event": "GameStarted", "args": {"player": 5, "bet": "1"}},
            {"args": {"card": 1}},
            ["not", "a", "dict"],
            None,
        ],
    )
    def test_malformed_payloads_become_unknown(self, payload: object) -> None:
        event = event_from_payload(payload)
        assert isinstance(event, UnknownEvent)
        assert event.error
