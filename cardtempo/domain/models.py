"""Domain models - pure Python dataclasses representing cards and payment plans"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class UtilizationStatus(str, Enum):
    """Utilization band a balance/limit ratio falls into"""

    GOOD = "good"
    MEDIUM = "medium"
    HIGH = "high"
    OVERLIMIT = "overlimit"


class PaymentPurpose(str, Enum):
    """Why a payment is scheduled"""

    OPTIMIZATION = "optimization"  # before statement closes, lowers reported balance
    BALANCE = "balance"  # remainder, by due date


class AllocationStrategy(str, Enum):
    """Ordering used to spend a limited payment budget"""

    MAX_SCORE = "max_score"
    MIN_INTEREST = "min_interest"
    UTILIZATION_FOCUS = "utilization_focus"
    EQUAL_DISTRIBUTION = "equal_distribution"


class NetChange(str, Enum):
    """Overall verdict of a scenario comparison"""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class CreditCard:
    """A user's credit card as supplied by the caller"""

    id: str
    nickname: str
    credit_limit: float
    current_balance: float
    statement_date: int  # day of month (1-31)
    due_date: int  # day of month (1-31)
    apr: Optional[float] = None


@dataclass(frozen=True)
class UtilizationInfo:
    """Classifier output: percentage plus display metadata"""

    percentage: float
    status: UtilizationStatus
    badge_label: str
    color_token: str
    badge_variant: str


@dataclass(frozen=True)
class ScoreImpact:
    """Estimated credit-score change range in points"""

    min: int
    max: int

    def __sub__(self, other: "ScoreImpact") -> "ScoreImpact":
        return ScoreImpact(min=self.min - other.min, max=self.max - other.max)

    def shift(self, min_delta: int, max_delta: int) -> "ScoreImpact":
        return ScoreImpact(min=self.min + min_delta, max=self.max + max_delta)

    @property
    def midpoint(self) -> float:
        return (self.min + self.max) / 2


@dataclass(frozen=True)
class Payment:
    """Single scheduled payment in a card plan"""

    date: date
    amount: float
    purpose: PaymentPurpose
    description: str


@dataclass
class CardPaymentPlan:
    """Optimizer output for one card"""

    card: CreditCard
    payments: List[Payment]
    current_utilization: float
    target_utilization: float
    new_utilization: float
    reported_balance: float
    utilization_status: UtilizationStatus
    next_statement_date: date
    next_due_date: date
    is_already_optimal: bool
    is_over_limit: bool
    needs_optimization: bool

    @property
    def total_payment(self) -> float:
        return sum(p.amount for p in self.payments)

    @property
    def optimization_amount(self) -> float:
        return sum(p.amount for p in self.payments if p.purpose is PaymentPurpose.OPTIMIZATION)


@dataclass
class OptimizationResult:
    """Portfolio-level aggregate of card plans"""

    cards: List[CardPaymentPlan]
    target_utilization: float
    total_credit_limit: float
    total_current_balance: float
    total_optimized_balance: float
    current_overall_utilization: float
    optimized_overall_utilization: float
    utilization_improvement: float
    estimated_score_impact: ScoreImpact


@dataclass(frozen=True)
class ScenarioMetrics:
    """Comparison metrics for a card set"""

    total_credit_limit: float
    total_balance: float
    total_available_credit: float
    cards_over_30_percent: int
    cards_over_50_percent: int
    average_utilization: float


@dataclass
class ScenarioResult:
    """What-if outcome relative to a baseline card set"""

    scenario_type: str
    cards: List[CreditCard]
    optimization: OptimizationResult
    overall_utilization: float
    utilization_change: float
    estimated_score_impact: ScoreImpact
    score_change: ScoreImpact
    metrics: ScenarioMetrics
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)


@dataclass
class ScenarioComparison:
    """Narrated diff between a baseline and a scenario"""

    baseline: ScenarioResult
    scenario: ScenarioResult
    improvements: List[str]
    declines: List[str]
    net_change: NetChange


@dataclass(frozen=True)
class ScoreBreakdown:
    """Weighted sub-scores of a priority score"""

    utilization_impact: int  # 0-40
    apr_weight: int  # 0-25
    time_urgency: int  # 0-20
    credit_limit_weight: int  # 0-15


@dataclass
class PriorityScore:
    """Urgency score for paying down one card"""

    card_id: str
    total_score: int
    breakdown: ScoreBreakdown
    reasoning: List[str]
    days_to_statement: int
    rank: int = 0


@dataclass
class CardAllocation:
    """Share of a payment budget assigned to one card"""

    card_id: str
    card_name: str
    amount: float
    new_balance: float
    new_utilization: float
    priority_rank: int
    reasoning: str


@dataclass(frozen=True)
class ImpactSummary:
    """Expected effect of an allocation on the whole portfolio"""

    total_payment: float
    overall_utilization_before: float
    overall_utilization_after: float
    estimated_score_impact: ScoreImpact
    interest_saved: float
    cards_under_30_percent: int
    cards_optimal: int
    percent_of_optimal_achieved: float


@dataclass
class AllocationResult:
    """Priority allocator output"""

    strategy: AllocationStrategy
    allocations: List[CardAllocation]
    scores: List[PriorityScore]
    expected_impact: ImpactSummary


@dataclass(frozen=True)
class PaymentReminderDraft:
    """Reminder derived from a scheduled payment, not yet persisted"""

    card_id: str
    card_name: str
    payment_date: date
    reminder_date: date
    amount: float
    purpose: PaymentPurpose
    description: str
