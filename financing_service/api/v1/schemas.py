"""Pydantic schemas for API request/response validation"""

import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from financing_service.domain.exceptions import DomainException
from financing_service.domain.models import (
    AmortizationMethod,
    FinancingTerms,
    PaymentRecord,
    PaymentType,
)


def to_money(value: Decimal) -> float:
    """Render a currency amount for JSON, rounded to cents"""
    return round(float(value), 2)


class FinancingTermsSchema(BaseModel):
    """Financing terms as stored at origination"""

    principal: Decimal = Field(..., gt=0, le=Decimal("999999999999.99"), decimal_places=2, description="Amount financed")
    period_rate: Decimal = Field(..., ge=0, description="Interest rate per period, read per RATE_CONVENTION")
    term_months: int = Field(..., ge=1, le=600, description="Number of monthly installments")
    start_date: datetime.date
    method: AmortizationMethod = AmortizationMethod.SAC

    @field_validator("method", mode="before")
    @classmethod
    def parse_method(cls, value):
        try:
            return AmortizationMethod.parse(value)
        except DomainException as e:
            raise ValueError(str(e)) from e

    def to_domain(self) -> FinancingTerms:
        return FinancingTerms(
            principal=self.principal,
            period_rate=self.period_rate,
            term_months=self.term_months,
            start_date=self.start_date,
            method=self.method,
        )


class PaymentRecordSchema(BaseModel):
    """Payment already recorded against the financing"""

    amount: Decimal = Field(..., gt=0)
    date: datetime.date
    payment_type: PaymentType = PaymentType.INSTALLMENT
    installment_index: Optional[int] = Field(None, ge=1)
    principal_component: Optional[Decimal] = Field(None, ge=0)
    interest_component: Optional[Decimal] = Field(None, ge=0)

    @field_validator("payment_type", mode="before")
    @classmethod
    def parse_payment_type(cls, value):
        # Accepts the legacy labels still present in older payment rows
        try:
            return PaymentType.parse(value)
        except DomainException as e:
            raise ValueError(str(e)) from e

    def to_domain(self) -> PaymentRecord:
        return PaymentRecord(
            amount=self.amount,
            date=self.date,
            payment_type=self.payment_type,
            installment_index=self.installment_index,
            principal_component=self.principal_component,
            interest_component=self.interest_component,
        )


class AmortizationRowSchema(BaseModel):
    installment_index: int
    due_date: datetime.date
    principal_portion: float
    interest_portion: float
    total_payment: float
    balance_after: float


class ScheduleSummarySchema(BaseModel):
    total_principal: float
    total_interest: float
    total_payments: float


class ScheduleResponse(BaseModel):
    """Response for POST /v1/financings/schedule"""

    method: AmortizationMethod
    monthly_rate: float
    installment_amount: float
    rows: List[AmortizationRowSchema]
    summary: ScheduleSummarySchema


class StatusRequest(BaseModel):
    """Request body for POST /v1/financings/status"""

    terms: FinancingTermsSchema
    payments: List[PaymentRecordSchema] = Field(default_factory=list)


class StatusResponse(BaseModel):
    """Response for POST /v1/financings/status"""

    current_balance: float
    paid_installments: int
    remaining_installments: int
    total_paid: float
    total_principal_paid: float
    total_interest_paid: float
    percentage_paid: float
    fully_paid: bool
    overpaid_amount: float


class SimulationRequest(StatusRequest):
    """Request body for POST /v1/financings/simulate-early-payment"""

    extra_payment: Decimal = Field(..., gt=0, description="Extra amount applied to principal")
    preference: str = Field(..., description="shortenTerm or reduceInstallment")


class SimulationResponse(BaseModel):
    """Response for POST /v1/financings/simulate-early-payment"""

    original_balance: float
    extra_payment_amount: float
    new_balance: float
    interest_saved: float
    preference: str
    remaining_installments: int
    current_installment_amount: float
    new_remaining_installments: Optional[int] = None
    new_installment_amount: Optional[float] = None
