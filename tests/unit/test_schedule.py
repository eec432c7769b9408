"""Unit tests for amortization table generation"""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal
from financing_service.domain.exceptions import InvalidTermsError
from financing_service.domain.models import AmortizationMethod, FinancingTerms, RateConvention
from financing_service.domain.schedule import generate_schedule, projected_interest


def test_sac_first_row(sac_terms: FinancingTerms):
    """Test SAC row 1 for 100k at 1% over 120 months"""
    schedule = generate_schedule(sac_terms)
    first = schedule.rows[0]

    assert first.installment_index == 1
    assert first.principal_portion == Decimal("833.33")
    assert first.interest_portion == Decimal("1000.00")
    assert first.total_payment == Decimal("1833.33")
    assert first.balance_after == Decimal("99166.67")


def test_price_constant_installment(price_terms: FinancingTerms):
    """Test Price totals are 1434.71 on every row but the last"""
    schedule = generate_schedule(price_terms)

    assert all(row.total_payment == Decimal("1434.71") for row in schedule.rows[:-1])
    assert abs(schedule.rows[-1].total_payment - Decimal("1434.71")) < Decimal("1.00")
    assert schedule.installment_amount == Decimal("1434.71")


@pytest.mark.parametrize("method", [AmortizationMethod.SAC, AmortizationMethod.PRICE])
@pytest.mark.parametrize(
    "principal,rate,term_months",
    [
        (Decimal("100000.00"), Decimal("0.01"), 120),
        (Decimal("1000.00"), Decimal("0.0299"), 7),
        (Decimal("250000.55"), Decimal("0.0075"), 360),
        (Decimal("999.99"), Decimal("0"), 13),
        (Decimal("5000.00"), Decimal("0.05"), 600),
    ],
)
def test_principal_portions_sum_exactly(method, principal, rate, term_months):
    """Test rounding drift is absorbed so principal is repaid to the cent"""
    terms = FinancingTerms(principal, rate, term_months, date(2024, 1, 1), method)
    schedule = generate_schedule(terms)

    assert sum(row.principal_portion for row in schedule.rows) == principal
    assert schedule.summary.total_principal == principal
    assert schedule.rows[-1].balance_after == Decimal("0.00")
    assert len(schedule.rows) == term_months


@pytest.mark.parametrize("method", [AmortizationMethod.SAC, AmortizationMethod.PRICE])
def test_balance_non_increasing(sac_terms: FinancingTerms, method):
    """Test balance only moves down and never goes negative"""
    schedule = generate_schedule(replace(sac_terms, method=method))
    balances = [row.balance_after for row in schedule.rows]

    assert all(a >= b for a, b in zip(balances, balances[1:]))
    assert min(balances) >= 0


def test_summary_totals(price_terms: FinancingTerms):
    """Test summary adds up row values"""
    schedule = generate_schedule(price_terms)

    assert schedule.summary.total_interest == sum(r.interest_portion for r in schedule.rows)
    assert schedule.summary.total_payments == schedule.summary.total_principal + schedule.summary.total_interest


def test_sac_interest_lower_than_price(sac_terms: FinancingTerms, price_terms: FinancingTerms):
    """Test SAC pays down principal faster so total interest is lower"""
    sac = generate_schedule(sac_terms)
    price = generate_schedule(price_terms)

    assert sac.summary.total_interest < price.summary.total_interest


def test_zero_rate_is_straight_line():
    """Test zero interest splits principal evenly with no interest"""
    terms = FinancingTerms(Decimal("1200.00"), Decimal("0"), 12, date(2024, 1, 1), AmortizationMethod.PRICE)
    schedule = generate_schedule(terms)

    assert all(row.total_payment == Decimal("100.00") for row in schedule.rows)
    assert schedule.summary.total_interest == 0


def test_due_dates_monthly_from_start(sac_terms: FinancingTerms):
    """Test installment N falls N months after start"""
    schedule = generate_schedule(sac_terms)

    assert schedule.rows[0].due_date == date(2024, 2, 15)
    assert schedule.rows[11].due_date == date(2025, 1, 15)
    assert schedule.rows[-1].due_date == date(2034, 1, 15)


def test_due_dates_clamp_to_month_end():
    """Test a start on the 31st lands on the last day of shorter months"""
    terms = FinancingTerms(Decimal("3000.00"), Decimal("0.01"), 3, date(2024, 1, 31), AmortizationMethod.SAC)
    schedule = generate_schedule(terms)

    assert [row.due_date for row in schedule.rows] == [date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30)]


def test_rate_convention_applied(price_terms: FinancingTerms):
    """Test percent convention reads 1 as 1% per month"""
    as_percent = replace(price_terms, period_rate=Decimal("1"))

    from_percent = generate_schedule(as_percent, RateConvention.MONTHLY_PERCENT)
    from_decimal = generate_schedule(price_terms)

    assert from_percent.monthly_rate == Decimal("0.01")
    assert from_percent.rows == from_decimal.rows


def test_generate_is_idempotent(sac_terms: FinancingTerms):
    """Test identical inputs give identical output"""
    assert generate_schedule(sac_terms) == generate_schedule(sac_terms)


def test_generate_rejects_invalid_terms(sac_terms: FinancingTerms):
    with pytest.raises(InvalidTermsError):
        generate_schedule(replace(sac_terms, principal=Decimal("0")))
    with pytest.raises(InvalidTermsError):
        generate_schedule(replace(sac_terms, term_months=0))
    with pytest.raises(InvalidTermsError):
        generate_schedule(replace(sac_terms, method="Bullet"))


def test_projected_interest_matches_schedule(price_terms: FinancingTerms):
    """Test projected interest equals the schedule's interest total"""
    schedule = generate_schedule(price_terms)

    assert projected_interest(Decimal("100000"), Decimal("0.01"), 120, "Price") == schedule.summary.total_interest


def test_projected_interest_empty_balance():
    assert projected_interest(Decimal("0"), Decimal("0.01"), 12, "SAC") == 0


@pytest.mark.parametrize(
    "method,principal,rate",
    [
        (AmortizationMethod.SAC, Decimal("1000.00"), Decimal("0.01")),
        (AmortizationMethod.SAC, Decimal("5.00"), Decimal("0.0001")),
        (AmortizationMethod.PRICE, Decimal("1000.00"), Decimal("0.01")),
        (AmortizationMethod.PRICE, Decimal("5.00"), Decimal("0.0001")),
    ],
)
def test_final_row_absorbs_drift_on_long_terms(method, principal, rate):
    """Test small principals over 600 months keep a balance until the final row"""
    terms = FinancingTerms(principal, rate, 600, date(2024, 1, 1), method)
    schedule = generate_schedule(terms)

    assert all(row.balance_after > 0 for row in schedule.rows[:-1])
    assert schedule.rows[-1].principal_portion > 0
    assert schedule.summary.total_principal == principal
    if method is AmortizationMethod.PRICE:
        assert len({row.total_payment for row in schedule.rows[:-1]}) == 1


def test_row_amounts_always_carry_cents():
    """Test zero principal portions are rendered as 0.00"""
    terms = FinancingTerms(Decimal("5000.00"), Decimal("0.05"), 600, date(2024, 1, 1), AmortizationMethod.PRICE)
    schedule = generate_schedule(terms)

    assert str(schedule.rows[0].principal_portion) == "0.00"
    assert all(row.principal_portion.as_tuple().exponent == -2 for row in schedule.rows)


def test_generate_rejects_sub_cent_principal(sac_terms: FinancingTerms):
    """Test a principal that is not a whole number of cents cannot be repaid exactly"""
    with pytest.raises(InvalidTermsError):
        generate_schedule(replace(sac_terms, principal=Decimal("1000.005")))
