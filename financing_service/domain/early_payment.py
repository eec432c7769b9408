"""Early (extra) payment simulation"""

from decimal import Decimal

from financing_service.domain.exceptions import InvalidPaymentError
from financing_service.domain.installments import (
    first_installment_amount,
    price_installment,
    validate_terms,
)
from financing_service.domain.models import (
    AmortizationMethod,
    EarlyPaymentResult,
    SimulationPreference,
)
from financing_service.domain.schedule import projected_interest
from financing_service.utils.money import CENT, ZERO, Number, ceil_int, floor_money, round_money, to_decimal

# Fractional periods below this are floating residue of the closed form, not a real extra period
PERIOD_TOLERANCE = Decimal("1e-6")


def _price_periods(balance: Decimal, monthly_rate: Decimal, installment: Decimal) -> int:
    """Periods needed to amortize balance with a fixed Price installment"""
    if monthly_rate == 0:
        exact = balance / installment
    else:
        exact = -(1 - balance * monthly_rate / installment).ln() / (1 + monthly_rate).ln()
    return ceil_int(exact - PERIOD_TOLERANCE)


def _sac_periods(balance: Decimal, principal_quota: Decimal) -> int:
    """Periods a SAC schedule with a fixed principal quota runs; a last-cent residue does not add one"""
    return ceil_int((balance - CENT) / principal_quota)


def simulate_early_payment(
    current_balance: Number,
    monthly_rate: Number,
    remaining_months: int,
    method: AmortizationMethod | str,
    extra_payment: Number,
    preference: SimulationPreference | str,
) -> EarlyPaymentResult:
    """
    Simulate applying an extra payment to the outstanding balance.

    Preferences:
    - shortenTerm: keep the current installment (Price) or principal quota
      (SAC) and count how many periods the reduced balance needs
    - reduceInstallment: keep the remaining periods and recompute the
      installment for the reduced balance

    interest_saved compares the interest projected for the current balance
    over the remaining term with the interest projected after the payment.

    Raises:
        InvalidPreferenceError: preference is not shortenTerm/reduceInstallment
        InvalidTermsError: unknown method, non-positive balance, remaining term outside 1..600
        InvalidPaymentError: extra payment is not positive
    """
    preference = SimulationPreference.parse(preference)
    balance = round_money(current_balance)
    method = validate_terms(balance, remaining_months, method)

    extra = round_money(extra_payment)
    rate = to_decimal(monthly_rate)
    if extra <= 0:
        raise InvalidPaymentError(f"Extra payment must be positive, got {extra_payment}")

    current_installment = round_money(first_installment_amount(balance, rate, remaining_months, method))
    original_interest = projected_interest(balance, rate, remaining_months, method)
    new_balance = max(ZERO, balance - extra)

    result = dict(
        original_balance=balance,
        extra_payment_amount=extra,
        new_balance=new_balance,
        preference=preference,
        remaining_installments=remaining_months,
        current_installment_amount=current_installment,
    )
    shorten = preference is SimulationPreference.SHORTEN_TERM

    # Settled: nothing left to amortize
    if new_balance == 0:
        return EarlyPaymentResult(
            interest_saved=original_interest,
            new_remaining_installments=0 if shorten else None,
            new_installment_amount=None if shorten else ZERO,
            **result,
        )

    if shorten:
        if method is AmortizationMethod.SAC:
            quota = max(floor_money(balance / remaining_months), CENT)
            new_term = min(max(_sac_periods(new_balance, quota), 1), remaining_months)
            new_interest = projected_interest(new_balance, rate, new_term, method, principal_quota=quota)
        else:
            installment = price_installment(balance, rate, remaining_months)
            new_term = min(max(_price_periods(new_balance, rate, installment), 1), remaining_months)
            new_interest = projected_interest(new_balance, rate, new_term, method, fixed_payment=installment)

        return EarlyPaymentResult(
            interest_saved=original_interest - new_interest,
            new_remaining_installments=new_term,
            **result,
        )

    new_installment = round_money(first_installment_amount(new_balance, rate, remaining_months, method))
    new_interest = projected_interest(new_balance, rate, remaining_months, method)

    return EarlyPaymentResult(
        interest_saved=original_interest - new_interest,
        new_installment_amount=new_installment,
        **result,
    )
