"""Unit tests for rate normalization"""

from decimal import Decimal
from financing_service.domain.models import RateConvention
from financing_service.domain.rates import to_monthly_rate


def test_monthly_decimal_is_unchanged():
    assert to_monthly_rate(Decimal("0.01")) == Decimal("0.01")


def test_monthly_percent_divided_by_100():
    assert to_monthly_rate(Decimal("1.5"), RateConvention.MONTHLY_PERCENT) == Decimal("0.015")


def test_annual_decimal_divided_by_12():
    """Test annual fraction maps to its monthly twelfth"""
    assert to_monthly_rate(Decimal("0.12"), "annual_decimal") == Decimal("0.01")


def test_zero_rate_supported():
    assert to_monthly_rate(0) == 0


def test_float_rate_converted_exactly():
    """Test 0.1 float does not carry binary representation noise"""
    assert to_monthly_rate(0.1) == Decimal("0.1")
