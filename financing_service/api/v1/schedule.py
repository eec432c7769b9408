"""POST /v1/financings/schedule - Amortization table endpoint"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from financing_service.api.v1.schemas import (
    AmortizationRowSchema,
    FinancingTermsSchema,
    ScheduleResponse,
    ScheduleSummarySchema,
    to_money,
)
from financing_service.api.dependencies import get_rate_convention, get_request_id
from financing_service.domain.exceptions import DomainException
from financing_service.domain.models import RateConvention
from financing_service.domain.schedule import generate_schedule
from financing_service.infrastructure.observability.logging import log_schedule
from financing_service.infrastructure.observability.metrics import schedule_counter

router = APIRouter()


@router.post("/financings/schedule", response_model=ScheduleResponse)
def create_schedule(
    terms: FinancingTermsSchema,
    request: Request,
    convention: RateConvention = Depends(get_rate_convention),
):
    """
    Generate the full amortization table for a financing.

    Used at origination (to snapshot the monthly payment) and for read-only
    table requests. Nothing is persisted.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        schedule = generate_schedule(terms.to_domain(), convention)
    except DomainException as e:
        logging.warning(f"Invalid financing terms: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    schedule_counter.labels(method=terms.method.value).inc()
    duration_ms = (time.time() - start_time) * 1000
    log_schedule(
        request_id,
        terms.method.value,
        terms.term_months,
        to_money(schedule.summary.total_interest),
        duration_ms,
    )

    return ScheduleResponse(
        method=terms.method,
        monthly_rate=float(schedule.monthly_rate),
        installment_amount=to_money(schedule.installment_amount),
        rows=[
            AmortizationRowSchema(
                installment_index=row.installment_index,
                due_date=row.due_date,
                principal_portion=to_money(row.principal_portion),
                interest_portion=to_money(row.interest_portion),
                total_payment=to_money(row.total_payment),
                balance_after=to_money(row.balance_after),
            )
            for row in schedule.rows
        ],
        summary=ScheduleSummarySchema(
            total_principal=to_money(schedule.summary.total_principal),
            total_interest=to_money(schedule.summary.total_interest),
            total_payments=to_money(schedule.summary.total_payments),
        ),
    )
