"""Internal constants shared across the library."""

from __future__ import annotations

from decimal import Context, Decimal, InvalidOperation

DEFAULT_GATEWAY_URL = "http://127.0.0.1:8545/gateway"
DEFAULT_CONTRACT_ADDRESS = "0xc55A8A148D768A315b21ec8a321E59d46AE5dA72"
DEFAULT_TOPIC_PREFIX = "blackjack"
USER_AGENT = "pyblackjack/1"

#: Highest running total that is not a bust.
BUST_THRESHOLD = 21

#: Native unit scale (wei per ether).
NATIVE_DECIMALS = 18
CURRENCY_SYMBOL = "ETH"

# ------------------------------------------------------------------
# Contract surface
# ------------------------------------------------------------------

SCALAR_READS: tuple[str, ...] = (
    "gameState",
    "gameResult",
    "playerScore",
    "dealerScore",
    "bet",
    "player",
)
CARD_READS: tuple[str, ...] = ("getPlayerCards", "getDealerCards")

# ------------------------------------------------------------------
# Display tables
# ------------------------------------------------------------------

CARD_NAMES: dict[int, str] = {
    1: "A",
    2: "2",
    3: "3",
    4: "4",
    5: "5",
    6: "6",
    7: "7",
    8: "8",
    9: "9",
    10: "10",
    11: "J",
    12: "Q",
    13: "K",
}

HIDDEN_CARD = "?"

# ------------------------------------------------------------------
# Native unit conversion  (decimal ether <-> integer wei)
# ------------------------------------------------------------------


def _exact_context(amount: Decimal) -> Context:
    """Context wide enough that shifting *amount* by 18 places never rounds."""
    return Context(prec=len(amount.as_tuple().digits) + NATIVE_DECIMALS + 2)


def parse_stake(value: str | Decimal | int) -> int:
    """Convert a decimal stake (e.g. ``"0.05"``) to the native integer unit.

    Raises :class:`ValueError` for non-numeric, negative, non-finite or
    over-precise (more than 18 decimals) input.
    """
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"stake must be a decimal number, got {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"stake must be finite, got {value!r}")
    if amount < 0:
        raise ValueError(f"stake must not be negative, got {value!r}")
    context = _exact_context(amount)
    scaled = amount.scaleb(NATIVE_DECIMALS, context=context)
    if scaled != scaled.to_integral_value(context=context):
        raise ValueError(f"stake supports at most {NATIVE_DECIMALS} decimals, got {value!r}")
    return int(scaled)


def format_native(amount: int) -> str:
    """Format a native integer amount as a decimal ether string.

    Always keeps at least one fractional digit (``1`` ether → ``"1.0"``).
    """
    exact = Decimal(amount)
    context = _exact_context(exact)
    text = format(exact.scaleb(-NATIVE_DECIMALS, context=context).normalize(context=context), "f")
    if "." not in text:
        text += ".0"
    return text
