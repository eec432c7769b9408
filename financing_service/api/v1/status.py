"""POST /v1/financings/status - Current balance from payment history"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from financing_service.api.v1.schemas import StatusRequest, StatusResponse, to_money
from financing_service.api.dependencies import get_rate_convention, get_request_id
from financing_service.domain.exceptions import DomainException
from financing_service.domain.models import RateConvention, ReconciledBalance
from financing_service.domain.reconciliation import reconcile_balance
from financing_service.infrastructure.observability.logging import log_reconciliation
from financing_service.infrastructure.observability.metrics import record_reconciliation

router = APIRouter()


def to_status_response(status: ReconciledBalance) -> StatusResponse:
    return StatusResponse(
        current_balance=to_money(status.current_balance),
        paid_installments=status.paid_installments,
        remaining_installments=status.remaining_installments,
        total_paid=to_money(status.total_paid),
        total_principal_paid=to_money(status.total_principal_paid),
        total_interest_paid=to_money(status.total_interest_paid),
        percentage_paid=to_money(status.percentage_paid),
        fully_paid=status.fully_paid,
        overpaid_amount=to_money(status.overpaid_amount),
    )


@router.post("/financings/status", response_model=StatusResponse)
def get_status(
    request_body: StatusRequest,
    request: Request,
    convention: RateConvention = Depends(get_rate_convention),
):
    """
    Reconcile recorded payments against the schedule.

    The returned current_balance is what the caller caches as the
    financing's current balance.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        status = reconcile_balance(
            request_body.terms.to_domain(),
            [p.to_domain() for p in request_body.payments],
            convention,
        )
    except DomainException as e:
        logging.warning(f"Cannot reconcile financing: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    record_reconciliation(status.fully_paid, status.overpaid_amount > 0)
    duration_ms = (time.time() - start_time) * 1000
    log_reconciliation(
        request_id,
        len(request_body.payments),
        status.paid_installments,
        status.fully_paid,
        duration_ms,
    )

    return to_status_response(status)
