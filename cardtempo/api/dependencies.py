"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional

from fastapi import Request

from cardtempo.config import settings
from cardtempo.domain.optimizer import OptimizerSettings


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_optimizer_settings() -> OptimizerSettings:
    """Provide optimizer constants from configuration"""
    return settings.optimizer_settings()


def resolve_reference_date(reference_date: Optional[date]) -> date:
    """Requests may pin 'today'; otherwise the server date is used"""
    return reference_date or date.today()


def resolve_target_utilization(target_utilization: Optional[float]) -> float:
    """Requested target, or the configured default"""
    if target_utilization is None:
        return settings.default_target_utilization
    return target_utilization
