"""Amortization table generation"""

from decimal import Decimal
from typing import Iterator, Optional, Tuple

from financing_service.domain.exceptions import InvalidTermsError
from financing_service.domain.installments import (
    price_installment,
    price_installment_breakdown,
    sac_installment,
    validate_terms,
)
from financing_service.domain.models import (
    AmortizationMethod,
    AmortizationRow,
    AmortizationSchedule,
    FinancingTerms,
    RateConvention,
    ScheduleSummary,
)
from financing_service.domain.rates import to_monthly_rate
from financing_service.utils.date_utils import generate_due_dates
from financing_service.utils.money import ZERO, Number, floor_money, round_money, to_decimal

# (principal_portion, interest_portion, total_payment, balance_after), all in cents
RowValues = Tuple[Decimal, Decimal, Decimal, Decimal]


def _retires_early(balance: Decimal, monthly_rate: Decimal, fixed_total: Decimal, term_months: int) -> bool:
    """True when rows 1..term_months-1 paying fixed_total would leave nothing for the final row"""
    for _ in range(term_months - 1):
        principal_portion = fixed_total - round_money(balance * monthly_rate)
        if principal_portion >= balance:
            return True
        balance -= max(ZERO, principal_portion)
    return False


def _price_fixed_total(balance: Decimal, monthly_rate: Decimal, term_months: int) -> Decimal:
    """
    Cent-rounded Price installment.

    Rounded half-up unless the extra fraction of a cent, compounded over the
    term, would pay the loan off before the final row; then truncated, so the
    final row takes the shortfall instead.
    """
    exact = price_installment(balance, monthly_rate, term_months)
    fixed_total = round_money(exact)
    if _retires_early(balance, monthly_rate, fixed_total, term_months):
        fixed_total = floor_money(exact)
    return fixed_total


def _amortize(
    principal: Number,
    monthly_rate: Number,
    term_months: int,
    method: AmortizationMethod,
    principal_quota: Optional[Number] = None,
    fixed_payment: Optional[Number] = None,
) -> Iterator[RowValues]:
    """
    Yield rounded row values for installments 1..term_months.

    Every amount is rounded to cents per row and the running balance is kept
    in cents. The final row takes whatever balance is left as its principal
    portion, so principal portions always add up to the rounded principal and
    the last balance is exactly zero. A principal portion never exceeds the
    balance it pays down.

    principal_quota overrides the SAC per-period principal and fixed_payment
    overrides the Price installment; both are used when re-amortizing after
    an extra payment with the installment kept.
    """
    rate = to_decimal(monthly_rate)
    balance = round_money(principal)

    if method is AmortizationMethod.PRICE:
        if fixed_payment is not None:
            fixed_total = round_money(fixed_payment)
        else:
            fixed_total = _price_fixed_total(balance, rate, term_months)
    elif method is not AmortizationMethod.SAC:
        raise InvalidTermsError(f"Unsupported amortization method: {method!r}")

    for index in range(1, term_months + 1):
        if method is AmortizationMethod.SAC:
            if principal_quota is None:
                breakdown = sac_installment(principal, rate, term_months, index)
                # Truncated so rows before the last can never retire the whole balance
                principal_portion = floor_money(breakdown.principal_portion)
                interest_portion = round_money(breakdown.interest_portion)
            else:
                principal_portion = round_money(principal_quota)
                interest_portion = round_money(balance * rate)
        else:
            breakdown = price_installment_breakdown(balance, rate, fixed_total)
            interest_portion = round_money(breakdown.interest_portion)
            principal_portion = breakdown.total - interest_portion

        # Last row absorbs rounding drift
        if index == term_months:
            principal_portion = balance
        principal_portion = round_money(max(ZERO, min(principal_portion, balance)))

        balance -= principal_portion
        yield principal_portion, interest_portion, principal_portion + interest_portion, balance


def generate_schedule(
    terms: FinancingTerms,
    convention: RateConvention | str = RateConvention.MONTHLY_DECIMAL,
) -> AmortizationSchedule:
    """
    Build the full amortization table for a financing.

    Due dates fall on start_date + N months for installment N. Output depends
    only on the inputs, so two calls with the same terms compare equal.

    Raises:
        InvalidTermsError: non-positive principal, term outside 1..600, unknown method
    """
    method = validate_terms(terms.principal, terms.term_months, terms.method)
    monthly_rate = to_monthly_rate(terms.period_rate, convention)
    due_dates = generate_due_dates(terms.start_date, terms.term_months)

    rows = tuple(
        AmortizationRow(
            installment_index=index,
            due_date=due_date,
            principal_portion=principal_portion,
            interest_portion=interest_portion,
            total_payment=total_payment,
            balance_after=balance_after,
        )
        for index, due_date, (principal_portion, interest_portion, total_payment, balance_after) in zip(
            range(1, terms.term_months + 1),
            due_dates,
            _amortize(terms.principal, monthly_rate, terms.term_months, method),
        )
    )

    summary = ScheduleSummary(
        total_principal=sum((r.principal_portion for r in rows), ZERO),
        total_interest=sum((r.interest_portion for r in rows), ZERO),
        total_payments=sum((r.total_payment for r in rows), ZERO),
    )

    return AmortizationSchedule(terms=terms, monthly_rate=monthly_rate, rows=rows, summary=summary)


def projected_interest(
    balance: Number,
    monthly_rate: Number,
    months: int,
    method: AmortizationMethod | str,
    principal_quota: Optional[Number] = None,
    fixed_payment: Optional[Number] = None,
) -> Decimal:
    """Total interest a balance accrues when amortized over the given months"""
    if to_decimal(balance) <= 0 or months <= 0:
        return ZERO
    method = validate_terms(balance, months, method)
    return sum(
        (interest for _, interest, _, _ in _amortize(balance, monthly_rate, months, method, principal_quota, fixed_payment)),
        ZERO,
    )
