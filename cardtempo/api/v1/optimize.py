"""POST /v1/optimize - Portfolio payment plan endpoint"""

import time

from fastapi import APIRouter, Depends, Request

from cardtempo.api.dependencies import (
    get_optimizer_settings,
    get_request_id,
    resolve_reference_date,
    resolve_target_utilization,
)
from cardtempo.api.v1.schemas import OptimizationResponse, OptimizeRequest
from cardtempo.domain.optimizer import OptimizerSettings, optimize_portfolio
from cardtempo.infrastructure.observability.logging import log_optimization
from cardtempo.infrastructure.observability.metrics import record_optimization

router = APIRouter()


@router.post("/optimize", response_model=OptimizationResponse)
def create_optimization(
    request_body: OptimizeRequest,
    request: Request,
    optimizer_settings: OptimizerSettings = Depends(get_optimizer_settings),
):
    """
    Compute when and how much to pay on every card.

    Flow:
    1. Resolve target utilization and reference date (defaults from config / server clock)
    2. Plan each card: optimization payment before the statement, balance by the due date
    3. Aggregate portfolio utilization before/after and the estimated score impact
    """
    start_time = time.time()
    request_id = get_request_id(request)

    result = optimize_portfolio(
        request_body.domain_cards(),
        resolve_target_utilization(request_body.target_utilization),
        resolve_reference_date(request_body.reference_date),
        optimizer_settings,
    )

    duration_ms = (time.time() - start_time) * 1000
    record_optimization([plan.utilization_status.value for plan in result.cards])
    log_optimization(
        request_id,
        len(result.cards),
        result.target_utilization,
        result.current_overall_utilization,
        result.optimized_overall_utilization,
        duration_ms,
    )

    return OptimizationResponse.model_validate(result)
