"""Installment composition for SAC and Price amortization"""

from decimal import Decimal

from financing_service.domain.exceptions import InvalidTermsError
from financing_service.domain.models import AmortizationMethod, InstallmentBreakdown
from financing_service.utils.money import Number, is_whole_cents, to_decimal

MAX_TERM_MONTHS = 600


def validate_terms(principal: Number, term_months: int, method: AmortizationMethod | str) -> AmortizationMethod:
    """
    Reject terms the engine cannot amortize.

    Returns the parsed method so callers can dispatch on the enum.

    Raises:
        InvalidTermsError: non-positive or sub-cent principal, term outside 1..600, unknown method
    """
    if to_decimal(principal) <= 0:
        raise InvalidTermsError(f"Principal must be positive, got {principal}")
    if not is_whole_cents(principal):
        raise InvalidTermsError(f"Principal must be a whole number of cents, got {principal}")
    if not 1 <= term_months <= MAX_TERM_MONTHS:
        raise InvalidTermsError(f"Term must be between 1 and {MAX_TERM_MONTHS} months, got {term_months}")
    return AmortizationMethod.parse(method)


def sac_installment(
    principal: Number,
    monthly_rate: Number,
    term_months: int,
    installment_index: int,
) -> InstallmentBreakdown:
    """
    SAC (constant amortization) installment for a given index.

    The principal portion is the same every period; interest is charged on
    the balance left after the previous (index - 1) quotas, so the total
    decreases over time.

    Example:
        100000 at 1%/month over 120 months, index 1
        principal 833.33..., interest 1000.00, total 1833.33...
    """
    principal = to_decimal(principal)
    validate_terms(principal, term_months, AmortizationMethod.SAC)
    if not 1 <= installment_index <= term_months:
        raise InvalidTermsError(f"Installment index {installment_index} outside 1..{term_months}")

    principal_portion = principal / term_months
    balance_before = principal - principal_portion * (installment_index - 1)
    interest_portion = balance_before * to_decimal(monthly_rate)

    return InstallmentBreakdown(
        principal_portion=principal_portion,
        interest_portion=interest_portion,
        total=principal_portion + interest_portion,
    )


def price_installment(principal: Number, monthly_rate: Number, term_months: int) -> Decimal:
    """
    Fixed Price (annuity) installment.

    fixed = P * r * (1+r)^n / ((1+r)^n - 1), or P / n when r == 0
    """
    principal = to_decimal(principal)
    rate = to_decimal(monthly_rate)
    validate_terms(principal, term_months, AmortizationMethod.PRICE)

    if rate == 0:
        return principal / term_months

    factor = (1 + rate) ** term_months
    return principal * (rate * factor) / (factor - 1)


def price_installment_breakdown(
    balance_before: Number,
    monthly_rate: Number,
    fixed_total: Number,
) -> InstallmentBreakdown:
    """Split a fixed Price installment into interest on the open balance and principal"""
    balance_before = to_decimal(balance_before)
    fixed_total = to_decimal(fixed_total)
    interest_portion = balance_before * to_decimal(monthly_rate)

    return InstallmentBreakdown(
        principal_portion=fixed_total - interest_portion,
        interest_portion=interest_portion,
        total=fixed_total,
    )


def first_installment_amount(
    principal: Number,
    monthly_rate: Number,
    term_months: int,
    method: AmortizationMethod | str,
) -> Decimal:
    """Total of the first installment under the given method (unrounded)"""
    method = validate_terms(principal, term_months, method)

    if method is AmortizationMethod.SAC:
        return sac_installment(principal, monthly_rate, term_months, 1).total
    if method is AmortizationMethod.PRICE:
        return price_installment(principal, monthly_rate, term_months)
    raise InvalidTermsError(f"Unsupported amortization method: {method!r}")
