"""Domain models - pure Python dataclasses representing financing entities"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from financing_service.domain.exceptions import (
    InvalidPaymentError,
    InvalidPreferenceError,
    InvalidTermsError,
)


class AmortizationMethod(str, Enum):
    """Amortization regime of a financing"""

    SAC = "SAC"  # constant principal, decreasing installment
    PRICE = "Price"  # constant installment (French system)

    @classmethod
    def parse(cls, value: "AmortizationMethod | str") -> "AmortizationMethod":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        raise InvalidTermsError(f"Unsupported amortization method: {value!r}")


class PaymentType(str, Enum):
    """How a recorded payment relates to the schedule"""

    INSTALLMENT = "installment"
    PARTIAL = "partial"
    EARLY = "early"

    @classmethod
    def parse(cls, value: "PaymentType | str") -> "PaymentType":
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        # Values stored by earlier versions of the payments table
        legacy = {
            "parcela": cls.INSTALLMENT,
            "regular": cls.INSTALLMENT,
            "parcial": cls.PARTIAL,
            "antecipado": cls.EARLY,
        }
        if normalized in legacy:
            return legacy[normalized]
        try:
            return cls(normalized)
        except ValueError:
            raise InvalidPaymentError(f"Unsupported payment type: {value!r}") from None


class SimulationPreference(str, Enum):
    """Borrower preference when applying an extra payment"""

    SHORTEN_TERM = "shortenTerm"
    REDUCE_INSTALLMENT = "reduceInstallment"

    @classmethod
    def parse(cls, value: "SimulationPreference | str") -> "SimulationPreference":
        if isinstance(value, cls):
            return value
        aliases = {
            "shortenterm": cls.SHORTEN_TERM,
            "shorten_term": cls.SHORTEN_TERM,
            "reducao_prazo": cls.SHORTEN_TERM,
            "reduceinstallment": cls.REDUCE_INSTALLMENT,
            "reduce_installment": cls.REDUCE_INSTALLMENT,
            "reducao_parcela": cls.REDUCE_INSTALLMENT,
        }
        if isinstance(value, str) and value.strip().lower() in aliases:
            return aliases[value.strip().lower()]
        raise InvalidPreferenceError(f"Unsupported early payment preference: {value!r}")


class RateConvention(str, Enum):
    """How a stored period rate is interpreted"""

    MONTHLY_DECIMAL = "monthly_decimal"  # 0.01 == 1% per month
    MONTHLY_PERCENT = "monthly_percent"  # 1 == 1% per month
    ANNUAL_DECIMAL = "annual_decimal"  # 0.12 == 12% per year, 1% per month


@dataclass(frozen=True)
class FinancingTerms:
    """Terms fixed at origination"""

    principal: Decimal
    period_rate: Decimal
    term_months: int
    start_date: date
    method: AmortizationMethod


@dataclass(frozen=True)
class InstallmentBreakdown:
    """Unrounded composition of a single installment"""

    principal_portion: Decimal
    interest_portion: Decimal
    total: Decimal


@dataclass(frozen=True)
class AmortizationRow:
    """One line of the amortization table"""

    installment_index: int
    due_date: date
    principal_portion: Decimal
    interest_portion: Decimal
    total_payment: Decimal
    balance_after: Decimal


@dataclass(frozen=True)
class ScheduleSummary:
    total_principal: Decimal
    total_interest: Decimal
    total_payments: Decimal


@dataclass(frozen=True)
class AmortizationSchedule:
    """Full amortization table plus totals"""

    terms: FinancingTerms
    monthly_rate: Decimal
    rows: Tuple[AmortizationRow, ...]
    summary: ScheduleSummary

    @property
    def installment_amount(self) -> Decimal:
        """First installment total, the value stored as the financing's monthly payment"""
        return self.rows[0].total_payment

    def row(self, installment_index: int) -> Optional[AmortizationRow]:
        if 1 <= installment_index <= len(self.rows):
            return self.rows[installment_index - 1]
        return None


@dataclass(frozen=True)
class PaymentRecord:
    """Payment recorded against a financing"""

    amount: Decimal
    date: date
    payment_type: PaymentType = PaymentType.INSTALLMENT
    installment_index: Optional[int] = None  # None for extra payments not tied to an installment
    principal_component: Optional[Decimal] = None
    interest_component: Optional[Decimal] = None


@dataclass(frozen=True)
class ReconciledBalance:
    """Live state of a financing after replaying its payments"""

    current_balance: Decimal
    paid_installments: int
    remaining_installments: int
    total_paid: Decimal
    total_principal_paid: Decimal
    total_interest_paid: Decimal
    percentage_paid: Decimal
    fully_paid: bool
    overpaid_amount: Decimal  # principal applied past a zero balance


@dataclass(frozen=True)
class EarlyPaymentResult:
    """
    Outcome of an extra payment simulation.

    Exactly one of new_remaining_installments (shorten term) or
    new_installment_amount (reduce installment) is set.
    """

    original_balance: Decimal
    extra_payment_amount: Decimal
    new_balance: Decimal
    interest_saved: Decimal
    preference: SimulationPreference
    remaining_installments: int
    current_installment_amount: Decimal
    new_remaining_installments: Optional[int] = None
    new_installment_amount: Optional[Decimal] = None
