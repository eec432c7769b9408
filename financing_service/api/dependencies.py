"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from financing_service.config import settings
from financing_service.domain.models import RateConvention


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_rate_convention() -> RateConvention:
    """Provide the configured interpretation of stored interest rates"""
    return settings.rate_convention
