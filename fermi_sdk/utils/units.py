from __future__ import annotations

from decimal import ROUND_DOWN, Decimal, InvalidOperation

from fermi_sdk.errors import DecimalConversionError

# Collateral (USDC) precision used for margin amounts.
COLLATERAL_DECIMALS = 6

U64_MAX = 2**64 - 1


def _to_decimal(value: float | int | str | Decimal, what: str) -> Decimal:
    # str() of a float is its shortest repr, so 185.5 stays 185.5 and not
    # 185.499999... once scaled.
    try:
        d = Decimal(str(value))
    except InvalidOperation as exc:
        raise DecimalConversionError(f"{what} is not a number: {value!r}") from exc
    if not d.is_finite():
        raise DecimalConversionError(f"{what} must be finite; got {value!r}")
    if d < 0:
        raise DecimalConversionError(f"{what} must be non-negative; got {value!r}")
    return d


def _to_u64(d: Decimal, what: str) -> int:
    out = int(d.to_integral_value(rounding=ROUND_DOWN))
    if out > U64_MAX:
        raise DecimalConversionError(f"{what} overflows u64: {out}")
    return out


def to_canonical(value: float | int | str | Decimal, decimals: int) -> int:
    """value * 10^decimals, truncated toward zero."""
    if decimals < 0:
        raise DecimalConversionError(f"decimals must be non-negative; got {decimals}")
    d = _to_decimal(value, "value")
    return _to_u64(d.scaleb(int(decimals)), "canonical value")


def to_canonical_pair(price: float, quantity: float, *, quote_decimals: int, base_decimals: int) -> tuple[int, int]:
    """Price is scaled by the quote token's decimals, quantity by the base token's."""
    return to_canonical(price, quote_decimals), to_canonical(quantity, base_decimals)


def calculate_margin(
    price: float,
    quantity: float,
    leverage: int,
    collateral_decimals: int = COLLATERAL_DECIMALS,
) -> int:
    """
    Initial margin for an order in collateral base units.

    notional = price * quantity; margin = notional / leverage, scaled by
    10^collateral_decimals and truncated. 185.50 x 0.1 at 10x -> 1_855_000.
    """
    if int(leverage) <= 0:
        raise DecimalConversionError(f"leverage must be positive; got {leverage}")
    notional = _to_decimal(price, "price") * _to_decimal(quantity, "quantity")
    margin = notional / Decimal(int(leverage))
    return _to_u64(margin.scaleb(int(collateral_decimals)), "margin amount")


def from_canonical(value: int, decimals: int) -> Decimal:
    return Decimal(int(value)).scaleb(-int(decimals))
