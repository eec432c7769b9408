"""Replay recorded payments against the amortization schedule"""

import logging
from decimal import Decimal
from typing import List, Set

from financing_service.domain.models import (
    AmortizationSchedule,
    FinancingTerms,
    PaymentRecord,
    PaymentType,
    RateConvention,
    ReconciledBalance,
)
from financing_service.domain.schedule import generate_schedule
from financing_service.utils.money import ZERO, round_money

logger = logging.getLogger(__name__)


def _covered_installments(schedule: AmortizationSchedule, principal_retired: Decimal) -> int:
    """Count leading rows whose principal is fully covered by the principal retired so far"""
    covered = 0
    cumulative = ZERO
    for row in schedule.rows:
        cumulative += row.principal_portion
        if cumulative > principal_retired:
            break
        covered += 1
    return covered


def reconcile_balance(
    terms: FinancingTerms,
    payments: List[PaymentRecord],
    convention: RateConvention | str = RateConvention.MONTHLY_DECIMAL,
) -> ReconciledBalance:
    """
    Compute the live state of a financing from its payment history.

    Rules:
    - Payments are replayed in ascending date order whatever the input order
    - An installment payment for an unpaid index retires that row's principal
      portion, plus anything paid above the row total
    - Partial and early payments (and installment payments that cannot be
      matched to an unpaid row) go straight to principal, net of any declared
      interest component; a declared principal component is retired in full
      even when the amount paid is lower (discounted early payoff)
    - The balance never goes below zero: the excess is reported as
      overpaid_amount and the financing is fully paid
    - paid_installments is the larger of the explicitly paid rows and the rows
      the retired principal covers in schedule order

    Raises:
        InvalidTermsError: terms the schedule generator rejects
    """
    schedule = generate_schedule(terms, convention)
    principal = schedule.summary.total_principal

    balance = principal
    overpaid = ZERO
    total_paid = ZERO
    total_interest_paid = ZERO
    paid_indexes: Set[int] = set()

    for payment in sorted(payments, key=lambda p: p.date):
        amount = round_money(payment.amount)
        payment_type = PaymentType.parse(payment.payment_type)
        declared_interest = (
            round_money(payment.interest_component) if payment.interest_component is not None else None
        )
        total_paid += amount

        row = None
        if payment_type is PaymentType.INSTALLMENT and payment.installment_index is not None:
            row = schedule.row(payment.installment_index)
            if row is not None and row.installment_index in paid_indexes:
                row = None

        if row is not None:
            paid_indexes.add(row.installment_index)
            reduction = row.principal_portion + max(ZERO, amount - row.total_payment)
            total_interest_paid += declared_interest if declared_interest is not None else row.interest_portion
        else:
            reduction = amount - (declared_interest or ZERO)
            if payment.principal_component is not None:
                # Declared principal is retired as booked, plus any amount it does not explain
                declared_principal = round_money(payment.principal_component)
                reduction = declared_principal + max(ZERO, reduction - declared_principal)
            if declared_interest is not None:
                total_interest_paid += declared_interest
            reduction = max(ZERO, reduction)

        if reduction > balance:
            excess = reduction - balance
            overpaid += excess
            logger.warning(
                "Payment exceeds outstanding balance, clamping at zero",
                extra={
                    "step": "balance_clamped",
                    "payment_date": payment.date.isoformat(),
                    "payment_type": payment_type.value,
                    "excess": str(excess),
                },
            )
            reduction = balance

        balance -= reduction

    fully_paid = balance <= 0
    principal_retired = principal - balance
    if fully_paid:
        paid_installments = terms.term_months
    else:
        paid_installments = max(len(paid_indexes), _covered_installments(schedule, principal_retired))

    scheduled_total = schedule.summary.total_payments
    percentage_paid = round_money(total_paid / scheduled_total * 100) if scheduled_total > 0 else ZERO

    return ReconciledBalance(
        current_balance=round_money(balance),
        paid_installments=paid_installments,
        remaining_installments=terms.term_months - paid_installments,
        total_paid=total_paid,
        total_principal_paid=round_money(principal_retired),
        total_interest_paid=total_interest_paid,
        percentage_paid=percentage_paid,
        fully_paid=fully_paid,
        overpaid_amount=overpaid,
    )
