"""Payment optimization engine - schedules payments so the reported balance hits a target utilization"""

import logging
import math
from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import List, Sequence

from cardtempo.domain.models import (
    CardPaymentPlan,
    CreditCard,
    OptimizationResult,
    Payment,
    PaymentPurpose,
    ScoreImpact,
)
from cardtempo.domain.utilization import calculate_utilization, classify, sanitize_amount
from cardtempo.utils.date_utils import clamp_day_of_month, days_between, next_occurrence

logger = logging.getLogger(__name__)

DEFAULT_TARGET_UTILIZATION = 5.0  # percent

# Improvement bands in percentage points -> (min, max) score points.
# Regressions use the mirror image of the same band.
SCORE_IMPACT_BANDS = [
    (5, 5, 15),
    (10, 10, 25),
    (20, 25, 45),
    (30, 45, 70),
    (40, 70, 100),
    (50, 100, 130),
]
SCORE_IMPACT_CEILING = (130, 160)


@dataclass(frozen=True)
class OptimizerSettings:
    """Tunable constants of the single-card optimizer"""

    optimization_days_before: int = 2
    over_limit_paydown_ratio: float = 0.9
    interest_free_threshold: float | None = None


DEFAULT_SETTINGS = OptimizerSettings()


def normalize_target_utilization(target_utilization) -> float:
    """Target as a percentage clamped to 0-100; unusable input falls back to the default"""
    try:
        target = float(target_utilization)
    except (TypeError, ValueError):
        return DEFAULT_TARGET_UTILIZATION
    if math.isnan(target):
        return DEFAULT_TARGET_UTILIZATION
    return max(0.0, min(target, 100.0))


def sanitize_card(card: CreditCard) -> CreditCard:
    """Copy of card with numeric fields coerced to safe values"""
    apr = None if card.apr is None else sanitize_amount(card.apr)
    clean = replace(
        card,
        credit_limit=sanitize_amount(card.credit_limit),
        current_balance=sanitize_amount(card.current_balance),
        statement_date=clamp_day_of_month(card.statement_date),
        due_date=clamp_day_of_month(card.due_date),
        apr=apr,
    )
    if clean != card:
        logger.debug("Sanitized card input", extra={"card_id": card.id})
    return clean


def calculate_target_balance(credit_limit: float, target_utilization: float) -> float:
    """Balance that reports exactly target_utilization percent"""
    return credit_limit * target_utilization / 100


def calculate_score_impact(utilization_improvement: float) -> ScoreImpact:
    """
    Estimate credit-score change from a drop in overall utilization.

    Utilization drives roughly 30% of a FICO score, so the bands below are
    deliberately conservative and assume a clean payment history:
    - 0-5 points drop:   +5 to +15
    - 5-10:              +10 to +25
    - 10-20:             +25 to +45
    - 20-30:             +45 to +70
    - 30-40:             +70 to +100
    - 40-50:             +100 to +130
    - 50+:               +130 to +160

    A negative improvement (utilization went up) returns the negated range
    of the same band, so impact(-x) == -impact(x).
    """
    if not math.isfinite(utilization_improvement) or utilization_improvement == 0:
        return ScoreImpact(min=0, max=0)

    magnitude = abs(utilization_improvement)
    low, high = SCORE_IMPACT_CEILING
    for upper_bound, band_min, band_max in SCORE_IMPACT_BANDS:
        if magnitude <= upper_bound:
            low, high = band_min, band_max
            break

    if utilization_improvement < 0:
        return ScoreImpact(min=-high, max=-low)
    return ScoreImpact(min=low, max=high)


def _optimization_date(
    next_statement_date: date,
    reference_date: date,
    days_before: int,
) -> tuple[date, bool]:
    """Pay days_before the statement closes, never earlier than today; flag when squeezed"""
    scheduled = next_statement_date - timedelta(days=days_before)
    if scheduled < reference_date:
        return reference_date, True
    return scheduled, days_between(reference_date, scheduled) < days_before


def optimize_card(
    card: CreditCard,
    target_utilization: float = DEFAULT_TARGET_UTILIZATION,
    reference_date: date | None = None,
    settings: OptimizerSettings = DEFAULT_SETTINGS,
) -> CardPaymentPlan:
    """
    Build the payment plan for a single card.

    Strategy:
    1. Resolve the next statement date and the due date that follows it
    2. Over limit: pay down to over_limit_paydown_ratio of the limit today
    3. Above target: pay the excess over the target balance a few days
       before the statement closes, so the bureaus see the target
    4. Pay whatever remains by the due date to avoid interest
    Already-optimal cards get a single balance payment on the due date.

    reference_date stands in for "today" and is required for deterministic
    plans; it only defaults to date.today() for interactive use.
    """
    if reference_date is None:
        reference_date = date.today()

    card = sanitize_card(card)
    target = normalize_target_utilization(target_utilization)
    balance = card.current_balance
    limit = card.credit_limit

    next_statement_date = next_occurrence(card.statement_date, reference_date)
    next_due_date = next_occurrence(card.due_date, next_statement_date)

    current = classify(balance, limit)
    target_balance = calculate_target_balance(limit, target)

    is_over_limit = limit > 0 and balance > limit
    within_target = balance <= target_balance
    within_threshold = (
        settings.interest_free_threshold is None
        or balance <= settings.interest_free_threshold
    )
    is_already_optimal = within_target and within_threshold
    needs_optimization = not within_target and balance > 0

    payments: List[Payment] = []
    urgent_amount = 0.0
    optimization_amount = 0.0

    if is_already_optimal:
        if balance > 0:
            payments.append(
                Payment(
                    date=next_due_date,
                    amount=balance,
                    purpose=PaymentPurpose.BALANCE,
                    description="Pay balance by due date - already optimally utilized!",
                )
            )
    else:
        if is_over_limit:
            urgent_amount = balance - limit * settings.over_limit_paydown_ratio
            payments.append(
                Payment(
                    date=reference_date,
                    amount=urgent_amount,
                    purpose=PaymentPurpose.OPTIMIZATION,
                    description="URGENT: Pay immediately to get under credit limit",
                )
            )

        optimization_amount = max(0.0, balance - urgent_amount - target_balance)
        if optimization_amount > 0:
            pay_date, squeezed = _optimization_date(
                next_statement_date, reference_date, settings.optimization_days_before
            )
            description = f"Optimization payment - reduces reported balance to {target:g}%"
            if squeezed:
                description += " (statement date is very close!)"
            payments.append(
                Payment(
                    date=pay_date,
                    amount=optimization_amount,
                    purpose=PaymentPurpose.OPTIMIZATION,
                    description=description,
                )
            )

        remaining_balance = balance - urgent_amount - optimization_amount
        if remaining_balance > 0:
            payments.append(
                Payment(
                    date=next_due_date,
                    amount=remaining_balance,
                    purpose=PaymentPurpose.BALANCE,
                    description="Pay remaining balance to avoid interest",
                )
            )

    reported_balance = balance - urgent_amount - optimization_amount

    return CardPaymentPlan(
        card=card,
        payments=sorted(payments, key=lambda p: p.date),
        current_utilization=current.percentage,
        target_utilization=target,
        new_utilization=calculate_utilization(reported_balance, limit),
        reported_balance=reported_balance,
        utilization_status=current.status,
        next_statement_date=next_statement_date,
        next_due_date=next_due_date,
        is_already_optimal=is_already_optimal,
        is_over_limit=is_over_limit,
        needs_optimization=needs_optimization,
    )


def optimize_portfolio(
    cards: Sequence[CreditCard],
    target_utilization: float = DEFAULT_TARGET_UTILIZATION,
    reference_date: date | None = None,
    settings: OptimizerSettings = DEFAULT_SETTINGS,
) -> OptimizationResult:
    """
    Main entry point: plan payments for every card and aggregate the portfolio.

    Overall utilization is weighted by limit (sum of balances over sum of
    limits), both before and after the optimization payments land. Plans
    are ordered by current utilization, highest first.
    """
    if reference_date is None:
        reference_date = date.today()

    target = normalize_target_utilization(target_utilization)
    plans = [optimize_card(card, target, reference_date, settings) for card in cards]

    total_credit_limit = sum(plan.card.credit_limit for plan in plans)
    total_current_balance = sum(plan.card.current_balance for plan in plans)
    total_optimized_balance = sum(plan.reported_balance for plan in plans)

    current_overall = calculate_utilization(total_current_balance, total_credit_limit)
    optimized_overall = calculate_utilization(total_optimized_balance, total_credit_limit)
    improvement = current_overall - optimized_overall

    return OptimizationResult(
        cards=sorted(plans, key=lambda plan: plan.current_utilization, reverse=True),
        target_utilization=target,
        total_credit_limit=total_credit_limit,
        total_current_balance=total_current_balance,
        total_optimized_balance=total_optimized_balance,
        current_overall_utilization=current_overall,
        optimized_overall_utilization=optimized_overall,
        utilization_improvement=improvement,
        estimated_score_impact=calculate_score_impact(improvement),
    )
