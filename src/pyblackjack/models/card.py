"""Card model."""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict

from pyblackjack._constants import CARD_NAMES


class CardColor(enum.StrEnum):
    """Cosmetic colour used when rendering a card face.

    Derived from rank parity only; the contract does not model suits.
    """

    RED = "red"
    BLACK = "black"


class Card(BaseModel):
    """A dealt card as reported by the contract (rank only)."""

    model_config = ConfigDict(frozen=True)

    rank: int

    @property
    def is_known_rank(self) -> bool:
        return self.rank in CARD_NAMES

    @property
    def name(self) -> str:
        """``A``, ``2``..``10``, ``J``, ``Q``, ``K``; raw numeral otherwise."""
        return CARD_NAMES.get(self.rank, str(self.rank))

    @property
    def color(self) -> CardColor:
        # Odd ranks render red.
        return CardColor.RED if self.rank % 2 == 1 else CardColor.BLACK

    def __str__(self) -> str:
        return self.name


def card_name(rank: int) -> str:
    """Display name for a raw rank code."""
    return CARD_NAMES.get(rank, str(rank))
