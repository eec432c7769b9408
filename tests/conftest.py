"""Pytest fixtures for testing"""

import pytest
from datetime import date
from decimal import Decimal
from fastapi.testclient import TestClient
from financing_service.api.main import create_app
from financing_service.domain.models import AmortizationMethod, FinancingTerms


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def sac_terms() -> FinancingTerms:
    """100k at 1%/month over 10 years, constant amortization"""
    return FinancingTerms(
        principal=Decimal("100000.00"),
        period_rate=Decimal("0.01"),
        term_months=120,
        start_date=date(2024, 1, 15),
        method=AmortizationMethod.SAC,
    )


@pytest.fixture
def price_terms() -> FinancingTerms:
    """100k at 1%/month over 10 years, constant installment"""
    return FinancingTerms(
        principal=Decimal("100000.00"),
        period_rate=Decimal("0.01"),
        term_months=120,
        start_date=date(2024, 1, 15),
        method=AmortizationMethod.PRICE,
    )


@pytest.fixture
def short_price_terms() -> FinancingTerms:
    """Small 12-month loan used for payment replay scenarios"""
    return FinancingTerms(
        principal=Decimal("12000.00"),
        period_rate=Decimal("0.02"),
        term_months=12,
        start_date=date(2024, 3, 1),
        method=AmortizationMethod.PRICE,
    )


@pytest.fixture
def terms_payload() -> dict:
    """JSON body for financing terms"""
    return {
        "principal": 100000,
        "period_rate": 0.01,
        "term_months": 120,
        "start_date": "2024-01-15",
        "method": "SAC",
    }
