"""POST /v1/priority/allocate - Budget allocation endpoint"""

import logging

from fastapi import APIRouter, Request

from cardtempo.api.dependencies import get_request_id, resolve_reference_date, resolve_target_utilization
from cardtempo.api.v1.schemas import AllocateRequest, AllocationResponse
from cardtempo.domain.priority import allocate
from cardtempo.infrastructure.observability.metrics import allocation_counter

router = APIRouter()


@router.post("/priority/allocate", response_model=AllocationResponse)
def allocate_budget(request_body: AllocateRequest, request: Request):
    """
    Split a payment budget that cannot cover every card's optimization.

    Returns:
        Allocations in funding order, priority scores with reasoning, and the
        expected portfolio impact
    """
    result = allocate(
        request_body.domain_cards(),
        request_body.total_budget,
        resolve_reference_date(request_body.reference_date),
        resolve_target_utilization(request_body.target_utilization),
        request_body.strategy,
    )

    allocation_counter.labels(strategy=result.strategy.value).inc()
    logging.info(
        "Budget allocated",
        extra={
            "request_id": get_request_id(request),
            "strategy": result.strategy.value,
            "card_count": len(result.allocations),
            "total_payment": result.expected_impact.total_payment,
        },
    )

    return AllocationResponse.model_validate(result)
