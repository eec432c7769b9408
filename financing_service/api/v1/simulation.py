"""POST /v1/financings/simulate-early-payment - Extra payment what-if"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from financing_service.api.v1.schemas import SimulationRequest, SimulationResponse, to_money
from financing_service.api.dependencies import get_rate_convention, get_request_id
from financing_service.domain.early_payment import simulate_early_payment
from financing_service.domain.exceptions import DomainException
from financing_service.domain.models import RateConvention
from financing_service.domain.rates import to_monthly_rate
from financing_service.domain.reconciliation import reconcile_balance
from financing_service.infrastructure.observability.logging import log_simulation
from financing_service.infrastructure.observability.metrics import record_simulation

router = APIRouter()


@router.post("/financings/simulate-early-payment", response_model=SimulationResponse)
def simulate(
    request_body: SimulationRequest,
    request: Request,
    convention: RateConvention = Depends(get_rate_convention),
):
    """
    Simulate an extra payment on a financing.

    Flow:
    1. Reconcile recorded payments to get the outstanding balance
    2. Remaining term = term_months - paid_installments
    3. Apply the extra payment under the requested preference
    """
    start_time = time.time()
    request_id = get_request_id(request)
    terms = request_body.terms.to_domain()

    try:
        status = reconcile_balance(terms, [p.to_domain() for p in request_body.payments], convention)
        if status.fully_paid:
            raise HTTPException(status_code=409, detail="Financing is already fully paid")

        result = simulate_early_payment(
            current_balance=status.current_balance,
            monthly_rate=to_monthly_rate(terms.period_rate, convention),
            remaining_months=status.remaining_installments,
            method=terms.method,
            extra_payment=request_body.extra_payment,
            preference=request_body.preference,
        )
    except DomainException as e:
        logging.warning(f"Invalid simulation request: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    interest_saved = to_money(result.interest_saved)
    record_simulation(terms.method.value, result.preference.value, interest_saved)
    duration_ms = (time.time() - start_time) * 1000
    log_simulation(request_id, terms.method.value, result.preference.value, interest_saved, duration_ms)

    return SimulationResponse(
        original_balance=to_money(result.original_balance),
        extra_payment_amount=to_money(result.extra_payment_amount),
        new_balance=to_money(result.new_balance),
        interest_saved=interest_saved,
        preference=result.preference.value,
        remaining_installments=result.remaining_installments,
        current_installment_amount=to_money(result.current_installment_amount),
        new_remaining_installments=result.new_remaining_installments,
        new_installment_amount=(
            to_money(result.new_installment_amount) if result.new_installment_amount is not None else None
        ),
    )
