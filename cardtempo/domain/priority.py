"""Priority allocation - spend a limited payment budget where it moves the score most"""

from datetime import date
from typing import Dict, List, Sequence

from cardtempo.domain.models import (
    AllocationResult,
    AllocationStrategy,
    CardAllocation,
    CreditCard,
    ImpactSummary,
    PriorityScore,
    ScoreBreakdown,
)
from cardtempo.domain.optimizer import (
    DEFAULT_TARGET_UTILIZATION,
    calculate_score_impact,
    calculate_target_balance,
    normalize_target_utilization,
    sanitize_card,
)
from cardtempo.domain.utilization import calculate_utilization, sanitize_amount
from cardtempo.utils.date_utils import days_between, next_occurrence

MAX_UTILIZATION_IMPACT = 40
MAX_APR_WEIGHT = 25
MAX_TIME_URGENCY = 20
MAX_CREDIT_LIMIT_WEIGHT = 15

# (utilization above, points, reason) - first match wins
UTILIZATION_THRESHOLDS = [
    (90, 40, "Critical: Over 90% utilization"),
    (75, 35, "Very high utilization (over 75%)"),
    (50, 30, "High utilization (over 50%)"),
    (30, 20, "Above optimal threshold (30%)"),
    (10, 10, "In acceptable range but not optimal"),
]
OPTIMAL_RANGE = (5, "Already in optimal range")

# (days to statement at most, points)
TIME_URGENCY_THRESHOLDS = [
    (3, 20),
    (7, 15),
    (14, 10),
]
TIME_URGENCY_FLOOR = 5

STRATEGY_REASONS = {
    AllocationStrategy.MAX_SCORE: "Highest priority score",
    AllocationStrategy.MIN_INTEREST: "Highest APR - saves most interest",
    AllocationStrategy.UTILIZATION_FOCUS: "Highest utilization",
    AllocationStrategy.EQUAL_DISTRIBUTION: "Equal distribution",
}


def _utilization_impact(utilization: float, reasoning: List[str]) -> int:
    points, reason = OPTIMAL_RANGE
    for threshold, threshold_points, threshold_reason in UTILIZATION_THRESHOLDS:
        if utilization > threshold:
            points, reason = threshold_points, threshold_reason
            break
    reasoning.append(reason)

    # Cards just over a reporting threshold are cheap wins
    if 30 < utilization <= 35:
        points += 5
        reasoning.append("Just above 30% threshold - easy win")
    if 50 < utilization <= 55:
        points += 3
        reasoning.append("Just above 50% - high impact opportunity")

    return min(points, MAX_UTILIZATION_IMPACT)


def _apr_weight(apr: float, max_apr: float, reasoning: List[str]) -> int:
    if apr > 25:
        reasoning.append(f"Very high APR ({apr:.2f}%)")
    elif apr > 20:
        reasoning.append(f"High APR ({apr:.2f}%)")
    elif apr > 15:
        reasoning.append(f"Moderate APR ({apr:.2f}%)")

    if max_apr <= 0:
        return 0
    return round(apr / max_apr * MAX_APR_WEIGHT)


def _time_urgency(days_to_statement: int, reasoning: List[str]) -> int:
    points = TIME_URGENCY_FLOOR
    for max_days, threshold_points in TIME_URGENCY_THRESHOLDS:
        if days_to_statement <= max_days:
            points = threshold_points
            break

    if points == MAX_TIME_URGENCY:
        reasoning.append(f"Urgent: Statement closes in {days_to_statement} days")
    elif days_to_statement <= 7:
        reasoning.append(f"Statement closes soon ({days_to_statement} days)")
    elif days_to_statement <= 14:
        reasoning.append(f"Statement closes in {days_to_statement} days")
    else:
        reasoning.append("Statement date not urgent")
    return points


def _credit_limit_weight(limit: float, max_limit: float, reasoning: List[str]) -> int:
    if limit >= 10_000:
        reasoning.append(f"Large credit limit (${limit / 1000:.0f}k) - high score impact")
    elif limit >= 5_000:
        reasoning.append(f"Medium credit limit (${limit / 1000:.0f}k)")

    if max_limit <= 0:
        return 0
    return round(limit / max_limit * MAX_CREDIT_LIMIT_WEIGHT)


def calculate_priority_score(
    card: CreditCard,
    all_cards: Sequence[CreditCard],
    reference_date: date,
) -> PriorityScore:
    """
    Score how urgently a card should receive budget (0-100).

    Weights:
    - 40: utilization impact (higher utilization, and cards just over a
      30% / 50% reporting threshold, score higher)
    - 25: APR relative to the highest APR in the portfolio
    - 20: time urgency (statement closing within 3 / 7 / 14 days)
    - 15: credit limit relative to the largest limit (bigger limits move
      overall utilization more)

    Reasoning strings are emitted in that order.
    """
    card = sanitize_card(card)
    reasoning: List[str] = []

    utilization = calculate_utilization(card.current_balance, card.credit_limit)
    utilization_impact = _utilization_impact(utilization, reasoning)

    max_apr = max((sanitize_amount(c.apr) for c in all_cards), default=0.0)
    apr_weight = _apr_weight(sanitize_amount(card.apr), max_apr, reasoning)

    days_to_statement = days_between(reference_date, next_occurrence(card.statement_date, reference_date))
    time_urgency = _time_urgency(days_to_statement, reasoning)

    max_limit = max((sanitize_amount(c.credit_limit) for c in all_cards), default=0.0)
    credit_limit_weight = _credit_limit_weight(card.credit_limit, max_limit, reasoning)

    breakdown = ScoreBreakdown(
        utilization_impact=utilization_impact,
        apr_weight=apr_weight,
        time_urgency=time_urgency,
        credit_limit_weight=credit_limit_weight,
    )
    total = utilization_impact + apr_weight + time_urgency + credit_limit_weight

    return PriorityScore(
        card_id=card.id,
        total_score=max(0, min(total, 100)),
        breakdown=breakdown,
        reasoning=reasoning,
        days_to_statement=days_to_statement,
    )


def rank_cards_by_priority(cards: Sequence[CreditCard], reference_date: date) -> List[PriorityScore]:
    """Scores sorted best first with 1-based ranks; ties go to the nearer statement, then card id"""
    scores = [calculate_priority_score(card, cards, reference_date) for card in cards]
    scores.sort(key=lambda s: (-s.total_score, s.days_to_statement, s.card_id))
    for index, score in enumerate(scores):
        score.rank = index + 1
    return scores


def _strategy_order(
    strategy: AllocationStrategy,
    cards: Sequence[CreditCard],
    scores: List[PriorityScore],
) -> List[str]:
    """Card ids in the order a strategy funds them"""
    if strategy is AllocationStrategy.MIN_INTEREST:
        ordered = sorted(cards, key=lambda c: (-sanitize_amount(c.apr), c.id))
        return [c.id for c in ordered]
    if strategy is AllocationStrategy.UTILIZATION_FOCUS:
        ordered = sorted(cards, key=lambda c: (-calculate_utilization(c.current_balance, c.credit_limit), c.id))
        return [c.id for c in ordered]
    return [s.card_id for s in scores]


def _calculate_impact(
    cards: Sequence[CreditCard],
    allocations: List[CardAllocation],
    optimization_total: float,
) -> ImpactSummary:
    by_id: Dict[str, CreditCard] = {card.id: card for card in cards}
    total_limit = sum(card.credit_limit for card in cards)
    balance_before = sum(card.current_balance for card in cards)
    balance_after = sum(a.new_balance for a in allocations)
    total_payment = sum(a.amount for a in allocations)

    before = calculate_utilization(balance_before, total_limit)
    after = calculate_utilization(balance_after, total_limit)

    interest_saved = sum(
        a.amount * sanitize_amount(by_id[a.card_id].apr) / 100 / 12 for a in allocations
    )
    percent_of_optimal = 100.0 if optimization_total <= 0 else min(total_payment / optimization_total * 100, 100.0)

    return ImpactSummary(
        total_payment=total_payment,
        overall_utilization_before=round(before, 1),
        overall_utilization_after=round(after, 1),
        estimated_score_impact=calculate_score_impact(before - after),
        interest_saved=round(interest_saved, 2),
        cards_under_30_percent=sum(1 for a in allocations if a.new_utilization < 30),
        cards_optimal=sum(1 for a in allocations if a.new_utilization < 10),
        percent_of_optimal_achieved=round(percent_of_optimal),
    )


def allocate(
    cards: Sequence[CreditCard],
    total_budget: float,
    reference_date: date | None = None,
    target_utilization: float = DEFAULT_TARGET_UTILIZATION,
    strategy: AllocationStrategy = AllocationStrategy.MAX_SCORE,
) -> AllocationResult:
    """
    Distribute a payment budget across cards as a strict waterfall.

    Each card's need is its optimization amount (balance above the target
    utilization). Cards are funded in strategy order, each receiving
    min(remaining budget, need), so a card only gets money once every card
    ahead of it is fully funded. EQUAL_DISTRIBUTION instead gives every card
    an even share capped at its need. Every card is ranked, funded or not;
    the allocations are returned in rank order.
    """
    if reference_date is None:
        reference_date = date.today()

    clean = [sanitize_card(card) for card in cards]
    target = normalize_target_utilization(target_utilization)
    budget = sanitize_amount(total_budget)

    scores = rank_cards_by_priority(clean, reference_date)
    order = _strategy_order(strategy, clean, scores)
    by_id = {card.id: card for card in clean}
    needs = {
        card.id: max(0.0, card.current_balance - calculate_target_balance(card.credit_limit, target))
        for card in clean
    }

    amounts: Dict[str, float] = {}
    if strategy is AllocationStrategy.EQUAL_DISTRIBUTION:
        share = budget / len(clean) if clean else 0.0
        amounts = {card_id: min(share, needs[card_id]) for card_id in order}
    else:
        remaining = budget
        for card_id in order:
            amount = min(remaining, needs[card_id])
            amounts[card_id] = amount
            remaining -= amount

    reason = STRATEGY_REASONS[strategy]
    allocations: List[CardAllocation] = []
    for rank, card_id in enumerate(order, start=1):
        card = by_id[card_id]
        amount = amounts[card_id]
        new_balance = card.current_balance - amount
        if amount > 0:
            note = reason
        elif needs[card_id] <= 0:
            note = "Already at target utilization"
        else:
            note = "No budget remaining"
        allocations.append(
            CardAllocation(
                card_id=card.id,
                card_name=card.nickname,
                amount=amount,
                new_balance=new_balance,
                new_utilization=calculate_utilization(new_balance, card.credit_limit),
                priority_rank=rank,
                reasoning=note,
            )
        )

    return AllocationResult(
        strategy=strategy,
        allocations=allocations,
        scores=scores,
        expected_impact=_calculate_impact(clean, allocations, sum(needs.values())),
    )
