"""Tests for card, snapshot and identity models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pyblackjack.models.card import Card, CardColor, card_name
from pyblackjack.models.game import GameResult, GameSnapshot, GameState
from pyblackjack.models.identity import Identity, NetworkInfo, same_account

# ------------------------------------------------------------------
# Card
# ------------------------------------------------------------------


class TestCard:
    @pytest.mark.parametrize(
        ("rank", "name"),
        [
            (1, "A"),
            (2, "2"),
            (3, "3"),
            (4, "4"),
            (5, "5"),
            (6, "6"),
            (7, "7"),
            (8, "8"),
            (9, "9"),
            (10, "10"),
            (11, "J"),
            (12, "Q"),
            (13, "K"),
        ],
    )
    def test_name_table(self, rank: int, name: str) -> None:
        assert Card(rank=rank).name == name
        assert card_name(rank) == name

    @pytest.mark.parametrize("rank", [0, 14, 52, -3])
    def test_out_of_range_rank_falls_back_to_numeral(self, rank: int) -> None:
        card = Card(rank=rank)
        assert card.name == str(rank)
        assert not card.is_known_rank

    def test_color_follows_rank_parity(self) -> None:
        assert [Card(rank=r).color for r in (1, 2, 11, 12, 13)] == [
            CardColor.RED,
            CardColor.BLACK,
            CardColor.RED,
            CardColor.BLACK,
            CardColor.RED,
        ]

    def test_card_is_frozen(self) -> None:
        card = Card(rank=5)
        with pytest.raises(ValidationError):
            card.rank = 6  # type: ignore[misc]


# ------------------------------------------------------------------
# Enums / snapshot
# ------------------------------------------------------------------


class TestGameEnums:
    def test_unknown_state_falls_back(self) -> None:
        assert GameState(9) == GameState.UNKNOWN

    def test_unknown_result_falls_back(self) -> None:
        assert GameResult(42) == GameResult.UNKNOWN

    def test_known_values(self) -> None:
        assert GameState(1) == GameState.PLAYER_TURN
        assert GameResult(3) == GameResult.PUSH


class TestGameSnapshot:
    def test_defaults_are_idle(self) -> None:
        snapshot = GameSnapshot()
        assert snapshot.state is GameState.IDLE
        assert snapshot.result is GameResult.NONE
        assert snapshot.player_cards == ()

    def test_raw_codes_are_preserved(self) -> None:
        snapshot = GameSnapshot(state_code=7, result_code=9)
        assert snapshot.state is GameState.UNKNOWN
        assert snapshot.state_code == 7
        assert snapshot.result_code == 9

    def test_snapshot_is_immutable(self) -> None:
        snapshot = GameSnapshot(state_code=1)
        with pytest.raises(ValidationError):
            snapshot.state_code = 3  # type: ignore[misc]

    def test_validate_from_camel_case(self) -> None:
        snapshot = GameSnapshot.model_validate({"stateCode": 3, "resultCode": 1, "playerCards": [{"rank": 1}]})
        assert snapshot.is_finished
        assert snapshot.player_cards[0].name == "A"
        assert snapshot.raw["stateCode"] == 3


# ------------------------------------------------------------------
# Identity
# ------------------------------------------------------------------


class TestIdentity:
    def test_owns_is_case_insensitive(self) -> None:
        identity = Identity(account="0xAbCd00000000000000000000000000000000Ef12", chain_id=1)
        assert identity.owns("0xabcd00000000000000000000000000000000ef12")
        assert not identity.owns("0x0000000000000000000000000000000000000000")
        assert not identity.owns("")

    def test_empty_account_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Identity(account="  ", chain_id=1)

    def test_same_account_handles_missing_values(self) -> None:
        assert not same_account(None, "0x1")
        assert same_account(" 0xAB ", "0xab")

    def test_network_info_from_gateway_keys(self) -> None:
        info = NetworkInfo.model_validate({"chainId": 11155111, "name": "sepolia"})
        assert info.chain_id == 11155111
        assert info.name == "sepolia"
