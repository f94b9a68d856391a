from decimal import Decimal

import pytest

from fermi_sdk.errors import DecimalConversionError
from fermi_sdk.utils.units import U64_MAX, calculate_margin, from_canonical, to_canonical, to_canonical_pair


def test_to_canonical_scales_by_decimals():
    assert to_canonical(200.0, 6) == 200_000_000
    assert to_canonical(1.0, 9) == 1_000_000_000
    assert to_canonical(185.5, 6) == 185_500_000
    assert to_canonical(0.1, 9) == 100_000_000


def test_to_canonical_truncates():
    assert to_canonical(1.0000009, 6) == 1_000_000
    assert to_canonical("0.0000001", 6) == 0


def test_pair_uses_quote_then_base_decimals():
    assert to_canonical_pair(200.0, 1.0, quote_decimals=6, base_decimals=9) == (200_000_000, 1_000_000_000)


def test_margin():
    assert calculate_margin(185.50, 0.1, 10) == 1_855_000
    assert calculate_margin(200.0, 1.0, 5) == 40_000_000
    assert calculate_margin(3.0, 1.0, 7) == 428_571


@pytest.mark.parametrize("leverage", [0, -1])
def test_margin_rejects_non_positive_leverage(leverage):
    with pytest.raises(DecimalConversionError):
        calculate_margin(100.0, 1.0, leverage)


@pytest.mark.parametrize("value", [-1.0, float("nan"), float("inf"), "abc"])
def test_rejects_bad_values(value):
    with pytest.raises(DecimalConversionError):
        to_canonical(value, 6)


def test_overflow():
    with pytest.raises(DecimalConversionError):
        to_canonical(U64_MAX, 1)


def test_from_canonical():
    assert from_canonical(185_500_000, 6) == Decimal("185.5")
