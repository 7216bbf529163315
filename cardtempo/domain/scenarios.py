"""What-if scenario simulator - recompute the portfolio against a modified card set"""

from dataclasses import dataclass, replace
from datetime import date
from typing import List, Sequence, Union

from cardtempo.domain.models import (
    CreditCard,
    NetChange,
    ScenarioComparison,
    ScenarioMetrics,
    ScenarioResult,
    ScoreImpact,
)
from cardtempo.domain.optimizer import (
    DEFAULT_SETTINGS,
    DEFAULT_TARGET_UTILIZATION,
    OptimizerSettings,
    calculate_score_impact,
    optimize_portfolio,
    sanitize_card,
)
from cardtempo.domain.utilization import calculate_utilization, sanitize_amount
from cardtempo.utils.date_utils import days_between, next_occurrence

MINIMUM_PAYMENT_RATE = 0.02
ASSUMED_APR = 20.0  # percent, used when a card has no APR on file
HARD_INQUIRY_PENALTY = (-10, -5)
HIGH_LIMIT_THRESHOLD = 5000.0


@dataclass(frozen=True)
class LimitIncrease:
    card_id: str
    new_limit: float


@dataclass(frozen=True)
class BalancePaydown:
    card_id: str
    amount: float


@dataclass(frozen=True)
class CardRemoval:
    card_id: str


@dataclass(frozen=True)
class Purchase:
    card_id: str
    amount: float
    purchase_date: date


@dataclass(frozen=True)
class NewCard:
    credit_limit: float
    starting_balance: float = 0.0
    include_hard_inquiry: bool = True
    card_id: str = "new-card"
    nickname: str = "New Card"


@dataclass(frozen=True)
class BalanceTransfer:
    from_card_id: str
    to_card_id: str
    amount: float
    fee_percent: float = 3.0


Mutation = Union[LimitIncrease, BalancePaydown, CardRemoval, Purchase, NewCard, BalanceTransfer]


@dataclass
class _Outcome:
    """Modified card set plus narration produced by a mutation"""

    cards: List[CreditCard]
    warnings: List[str]
    recommendations: List[str]
    score_adjustment: tuple[int, int] = (0, 0)


def _find(cards: Sequence[CreditCard], card_id: str) -> CreditCard | None:
    return next((card for card in cards if card.id == card_id), None)


def _replace_card(cards: Sequence[CreditCard], updated: CreditCard) -> List[CreditCard]:
    return [updated if card.id == updated.id else card for card in cards]


def _rejected(cards: Sequence[CreditCard], warning: str) -> _Outcome:
    return _Outcome(cards=list(cards), warnings=[warning], recommendations=[])


def _apr(card: CreditCard) -> float:
    return card.apr if card.apr is not None else ASSUMED_APR


def calculate_metrics(cards: Sequence[CreditCard]) -> ScenarioMetrics:
    """Totals and threshold counts used by comparison views"""
    total_limit = sum(card.credit_limit for card in cards)
    total_balance = sum(card.current_balance for card in cards)
    utilizations = [calculate_utilization(card.current_balance, card.credit_limit) for card in cards]

    return ScenarioMetrics(
        total_credit_limit=total_limit,
        total_balance=total_balance,
        total_available_credit=max(0.0, total_limit - total_balance),
        cards_over_30_percent=sum(1 for u in utilizations if u > 30),
        cards_over_50_percent=sum(1 for u in utilizations if u > 50),
        average_utilization=calculate_utilization(total_balance, total_limit),
    )


def _limit_increase(cards: List[CreditCard], mutation: LimitIncrease, reference_date: date) -> _Outcome:
    card = _find(cards, mutation.card_id)
    if card is None:
        return _rejected(cards, "Card not found")

    warnings: List[str] = []
    recommendations: List[str] = []
    new_limit = sanitize_amount(mutation.new_limit)
    if new_limit < card.current_balance:
        warnings.append(
            f"New limit (${new_limit:,.0f}) cannot be lower than current balance "
            f"(${card.current_balance:,.0f}); using the balance as the limit."
        )
        new_limit = card.current_balance

    if new_limit == card.credit_limit:
        return _Outcome(cards=cards, warnings=warnings, recommendations=recommendations)

    old_utilization = calculate_utilization(card.current_balance, card.credit_limit)
    new_utilization = calculate_utilization(card.current_balance, new_limit)
    if card.credit_limit > 0:
        percent_increase = (new_limit - card.credit_limit) / card.credit_limit * 100
        recommendations.append(
            f"Credit limit increase of {percent_increase:.0f}% drops this card's utilization "
            f"from {old_utilization:.1f}% to {new_utilization:.1f}%."
        )
    if new_utilization < 10:
        recommendations.append("Excellent! New utilization under 10% is optimal for credit scores.")
    recommendations.append(
        "Best time to request: 6-12 months after your last increase, or after a significant income increase."
    )

    return _Outcome(
        cards=_replace_card(cards, replace(card, credit_limit=new_limit)),
        warnings=warnings,
        recommendations=recommendations,
    )


def _balance_paydown(cards: List[CreditCard], mutation: BalancePaydown, reference_date: date) -> _Outcome:
    card = _find(cards, mutation.card_id)
    if card is None:
        return _rejected(cards, "Card not found")

    warnings: List[str] = []
    recommendations: List[str] = []
    payment = min(sanitize_amount(mutation.amount), card.current_balance)
    remaining = card.current_balance - payment
    new_utilization = calculate_utilization(remaining, card.credit_limit)

    minimum_payment = card.current_balance * MINIMUM_PAYMENT_RATE
    if payment < minimum_payment:
        warnings.append(
            f"Payment below minimum (${minimum_payment:,.0f}). You'll be charged a late fee (~$25-40)."
        )
    if new_utilization > 30:
        warnings.append(
            f"Card utilization will be {new_utilization:.1f}%, which may hurt your score. Consider paying more."
        )
    elif new_utilization < 10:
        recommendations.append(
            f"Excellent! This payment brings utilization to {new_utilization:.1f}%, optimal for credit scores."
        )

    if remaining > 0:
        monthly_interest = remaining * _apr(card) / 100 / 12
        warnings.append(
            f"Remaining balance of ${remaining:,.2f} will accrue ~${monthly_interest:,.2f} in interest this month."
        )
    else:
        recommendations.append("Paying in full means zero interest charges!")

    return _Outcome(
        cards=_replace_card(cards, replace(card, current_balance=remaining)),
        warnings=warnings,
        recommendations=recommendations,
    )


def _card_removal(cards: List[CreditCard], mutation: CardRemoval, reference_date: date) -> _Outcome:
    card = _find(cards, mutation.card_id)
    if card is None:
        return _rejected(cards, "Card not found")

    if card.current_balance > 0:
        return _rejected(
            cards,
            f"You cannot close a card with an outstanding balance of ${card.current_balance:,.2f}. Pay it off first.",
        )

    remaining = [c for c in cards if c.id != card.id]
    warnings = [f"Closing this card will reduce your total available credit by ${card.credit_limit:,.2f}."]
    recommendations = [
        "Alternative: Keep the card open with a $0 balance and a small recurring charge on autopay "
        "to prevent closure due to inactivity."
    ]
    if card.credit_limit > HIGH_LIMIT_THRESHOLD:
        recommendations.append(
            "This card has a high credit limit. Consider a product change to a no-annual-fee version instead of closing."
        )

    return _Outcome(cards=remaining, warnings=warnings, recommendations=recommendations)


def _purchase(cards: List[CreditCard], mutation: Purchase, reference_date: date) -> _Outcome:
    card = _find(cards, mutation.card_id)
    if card is None:
        return _rejected(cards, "Card not found")

    amount = sanitize_amount(mutation.amount)
    new_balance = card.current_balance + amount
    if new_balance > card.credit_limit:
        return _rejected(
            cards,
            f"This purchase would exceed your credit limit by ${new_balance - card.credit_limit:,.2f}. "
            "Transaction will be declined.",
        )

    warnings: List[str] = []
    recommendations: List[str] = []
    new_utilization = calculate_utilization(new_balance, card.credit_limit)
    statement_date = next_occurrence(card.statement_date, reference_date)

    if mutation.purchase_date <= statement_date:
        warnings.append(
            f"Purchase before statement date means {new_utilization:.1f}% utilization will be reported to credit bureaus."
        )
        if new_utilization > 30:
            wait_days = days_between(mutation.purchase_date, statement_date) + 1
            recommendations.append(
                f"Consider waiting {wait_days} days until after your statement date "
                f"({statement_date.isoformat()}) to make this purchase."
            )
    else:
        recommendations.append(
            "Good timing! Purchase after statement date means the current balance is reported, not the higher amount."
        )

    return _Outcome(
        cards=_replace_card(cards, replace(card, current_balance=new_balance)),
        warnings=warnings,
        recommendations=recommendations,
    )


def _new_card(cards: List[CreditCard], mutation: NewCard, reference_date: date) -> _Outcome:
    card_id = mutation.card_id
    suffix = 1
    while _find(cards, card_id) is not None:
        suffix += 1
        card_id = f"{mutation.card_id}-{suffix}"

    added = sanitize_card(
        CreditCard(
            id=card_id,
            nickname=mutation.nickname,
            credit_limit=mutation.credit_limit,
            current_balance=mutation.starting_balance,
            statement_date=reference_date.day,
            due_date=reference_date.day,
        )
    )

    warnings: List[str] = []
    recommendations: List[str] = []
    adjustment = (0, 0)
    if mutation.include_hard_inquiry:
        adjustment = HARD_INQUIRY_PENALTY
        warnings.append("Hard inquiry will temporarily decrease your score by 5-10 points for ~12 months.")
    if cards:
        warnings.append(
            "Opening a new card will lower your average account age, which may temporarily reduce your score."
        )
    recommendations.append(f"Credit mix benefit: Having {len(cards) + 1} cards shows diverse credit management.")

    return _Outcome(
        cards=[*cards, added],
        warnings=warnings,
        recommendations=recommendations,
        score_adjustment=adjustment,
    )


def _balance_transfer(cards: List[CreditCard], mutation: BalanceTransfer, reference_date: date) -> _Outcome:
    source = _find(cards, mutation.from_card_id)
    destination = _find(cards, mutation.to_card_id)
    if source is None or destination is None or source.id == destination.id:
        return _rejected(cards, "Card not found")

    amount = sanitize_amount(mutation.amount)
    if amount > source.current_balance:
        return _rejected(
            cards,
            f"Transfer amount (${amount:,.2f}) exceeds available balance on source card "
            f"(${source.current_balance:,.2f}).",
        )

    fee = amount * sanitize_amount(mutation.fee_percent) / 100
    if destination.current_balance + amount + fee > destination.credit_limit:
        maximum = max(0.0, destination.credit_limit - destination.current_balance - fee)
        return _rejected(
            cards,
            f"Transfer would exceed destination card's credit limit. Maximum you can transfer: ${maximum:,.2f}.",
        )

    new_source = replace(source, current_balance=source.current_balance - amount)
    new_destination = replace(destination, current_balance=destination.current_balance + amount + fee)

    warnings = [f"Balance transfer fee: ${fee:,.2f} ({mutation.fee_percent:g}% of transfer amount)."]
    recommendations = [
        f"{source.nickname}: Utilization drops from "
        f"{calculate_utilization(source.current_balance, source.credit_limit):.1f}% to "
        f"{calculate_utilization(new_source.current_balance, source.credit_limit):.1f}%."
    ]
    destination_utilization = calculate_utilization(new_destination.current_balance, destination.credit_limit)
    if destination_utilization > 30:
        warnings.append(
            f"{destination.nickname}: Utilization increases to {destination_utilization:.1f}%. This may hurt your score."
        )

    yearly_interest = amount * _apr(source) / 100
    if yearly_interest > fee:
        recommendations.append(
            f"Potential interest savings: ${yearly_interest:,.2f}/year. Net benefit after fee: ${yearly_interest - fee:,.2f}."
        )
    else:
        warnings.append(f"Fee (${fee:,.2f}) may outweigh interest savings (${yearly_interest:,.2f}/year).")

    updated = _replace_card(_replace_card(cards, new_source), new_destination)
    return _Outcome(cards=updated, warnings=warnings, recommendations=recommendations)


_HANDLERS = {
    LimitIncrease: ("limit_increase", _limit_increase),
    BalancePaydown: ("balance_paydown", _balance_paydown),
    CardRemoval: ("card_removal", _card_removal),
    Purchase: ("purchase", _purchase),
    NewCard: ("new_card", _new_card),
    BalanceTransfer: ("balance_transfer", _balance_transfer),
}


def scenario_type(mutation: Mutation) -> str:
    """Stable name of a mutation, used for labels and metrics"""
    return _HANDLERS[type(mutation)][0]


def _build_result(
    name: str,
    cards: List[CreditCard],
    baseline_utilization: float,
    target_utilization: float,
    reference_date: date,
    settings: OptimizerSettings,
    score_adjustment: tuple[int, int] = (0, 0),
    warnings: List[str] | None = None,
    recommendations: List[str] | None = None,
) -> ScenarioResult:
    optimization = optimize_portfolio(cards, target_utilization, reference_date, settings)
    overall = optimization.current_overall_utilization
    change = baseline_utilization - overall
    impact = calculate_score_impact(change).shift(*score_adjustment)

    return ScenarioResult(
        scenario_type=name,
        cards=cards,
        optimization=optimization,
        overall_utilization=overall,
        utilization_change=change,
        estimated_score_impact=impact,
        score_change=impact,
        metrics=calculate_metrics(cards),
        warnings=warnings or [],
        recommendations=recommendations or [],
    )


def calculate_baseline(
    cards: Sequence[CreditCard],
    target_utilization: float = DEFAULT_TARGET_UTILIZATION,
    reference_date: date | None = None,
    settings: OptimizerSettings = DEFAULT_SETTINGS,
) -> ScenarioResult:
    """Current state of the portfolio expressed as a zero-change scenario"""
    if reference_date is None:
        reference_date = date.today()
    clean = [sanitize_card(card) for card in cards]
    utilization = calculate_metrics(clean).average_utilization
    return _build_result("baseline", clean, utilization, target_utilization, reference_date, settings)


def simulate(
    baseline_cards: Sequence[CreditCard],
    mutation: Mutation,
    target_utilization: float = DEFAULT_TARGET_UTILIZATION,
    reference_date: date | None = None,
    settings: OptimizerSettings = DEFAULT_SETTINGS,
) -> ScenarioResult:
    """
    Apply one mutation to a copy of the cards and diff against the baseline.

    utilization_change is baseline minus scenario (positive = improvement)
    and score_change is the scenario's score range minus the baseline's,
    which is zero by definition. Unknown card ids and rejected mutations
    return a scenario identical to the baseline with a warning attached.
    The caller's sequence is never modified.
    """
    if reference_date is None:
        reference_date = date.today()

    baseline = calculate_baseline(baseline_cards, target_utilization, reference_date, settings)
    name, handler = _HANDLERS[type(mutation)]
    outcome = handler(list(baseline.cards), mutation, reference_date)

    result = _build_result(
        name,
        outcome.cards,
        baseline.overall_utilization,
        target_utilization,
        reference_date,
        settings,
        score_adjustment=outcome.score_adjustment,
        warnings=outcome.warnings,
        recommendations=outcome.recommendations,
    )
    result.score_change = result.estimated_score_impact - baseline.estimated_score_impact
    return result


def compare_scenarios(
    baseline: ScenarioResult,
    scenario: ScenarioResult,
    tolerance: float = 0.01,
) -> ScenarioComparison:
    """
    Narrate which metrics improved or declined.

    Net change is NEGATIVE when anything declined beyond tolerance, otherwise
    POSITIVE when something improved, otherwise NEUTRAL.
    """
    improvements: List[str] = []
    declines: List[str] = []

    before, after = baseline.overall_utilization, scenario.overall_utilization
    if after < before - tolerance:
        improvements.append(f"Utilization improves: {before:.1f}% → {after:.1f}%")
    elif after > before + tolerance:
        declines.append(f"Utilization worsens: {before:.1f}% → {after:.1f}%")

    over_before = baseline.metrics.cards_over_30_percent
    over_after = scenario.metrics.cards_over_30_percent
    if over_after < over_before:
        improvements.append(f"Cards over 30%: {over_before} → {over_after}")
    elif over_after > over_before:
        declines.append(f"Cards over 30%: {over_before} → {over_after}")

    credit_before = baseline.metrics.total_available_credit
    credit_after = scenario.metrics.total_available_credit
    if credit_after > credit_before + tolerance:
        improvements.append(f"Available credit increases: ${credit_before:,.0f} → ${credit_after:,.0f}")
    elif credit_after < credit_before - tolerance:
        declines.append(f"Available credit decreases: ${credit_before:,.0f} → ${credit_after:,.0f}")

    score_before = baseline.estimated_score_impact.midpoint
    score_after = scenario.estimated_score_impact.midpoint
    if score_after > score_before:
        improvements.append(f"Score impact improves: {score_before:+.0f} pts → {score_after:+.0f} pts")
    elif score_after < score_before:
        declines.append(f"Score impact worsens: {score_before:+.0f} pts → {score_after:+.0f} pts")

    if declines:
        net_change = NetChange.NEGATIVE
    elif improvements:
        net_change = NetChange.POSITIVE
    else:
        net_change = NetChange.NEUTRAL

    return ScenarioComparison(
        baseline=baseline,
        scenario=scenario,
        improvements=improvements,
        declines=declines,
        net_change=net_change,
    )
