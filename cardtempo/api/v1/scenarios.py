"""POST /v1/scenarios/simulate - What-if scenario endpoint"""

import logging

from fastapi import APIRouter, Depends, Request

from cardtempo.api.dependencies import (
    get_optimizer_settings,
    get_request_id,
    resolve_reference_date,
    resolve_target_utilization,
)
from cardtempo.api.v1.schemas import ScenarioRequest, ScenarioResponse
from cardtempo.domain.optimizer import OptimizerSettings
from cardtempo.domain.scenarios import calculate_baseline, compare_scenarios, simulate
from cardtempo.infrastructure.observability.metrics import scenario_counter

router = APIRouter()


@router.post("/scenarios/simulate", response_model=ScenarioResponse)
def simulate_scenario(
    request_body: ScenarioRequest,
    request: Request,
    optimizer_settings: OptimizerSettings = Depends(get_optimizer_settings),
):
    """
    Apply one change to the card set and compare it with the current state.

    Supported mutations: limit_increase, balance_paydown, card_removal,
    purchase, new_card, balance_transfer.
    """
    cards = request_body.domain_cards()
    target = resolve_target_utilization(request_body.target_utilization)
    reference_date = resolve_reference_date(request_body.reference_date)

    baseline = calculate_baseline(cards, target, reference_date, optimizer_settings)
    scenario = simulate(cards, request_body.mutation.to_domain(), target, reference_date, optimizer_settings)
    comparison = compare_scenarios(baseline, scenario)

    scenario_counter.labels(scenario_type=scenario.scenario_type).inc()
    logging.info(
        "Scenario simulated",
        extra={
            "request_id": get_request_id(request),
            "scenario_type": scenario.scenario_type,
            "utilization_change": round(scenario.utilization_change, 2),
            "net_change": comparison.net_change.value,
        },
    )

    return ScenarioResponse.model_validate(comparison)
