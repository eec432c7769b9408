"""Interest rate normalization"""

from decimal import Decimal

from financing_service.domain.models import RateConvention
from financing_service.utils.money import Number, to_decimal


def to_monthly_rate(
    period_rate: Number,
    convention: RateConvention | str = RateConvention.MONTHLY_DECIMAL,
) -> Decimal:
    """
    Normalize a stored rate to the monthly decimal fraction used by the engine.

    Conventions:
    - monthly_decimal: 0.01 means 1% per month (returned unchanged)
    - monthly_percent: 1 means 1% per month (divided by 100)
    - annual_decimal:  0.12 means 12% per year (divided by 12)

    Zero is a valid rate. The input is assumed non-negative and finite.
    """
    rate = to_decimal(period_rate)
    convention = RateConvention(convention)

    if convention is RateConvention.MONTHLY_PERCENT:
        return rate / Decimal(100)
    if convention is RateConvention.ANNUAL_DECIMAL:
        return rate / Decimal(12)
    return rate
