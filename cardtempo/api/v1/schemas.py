"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from cardtempo.domain import scenarios
from cardtempo.domain.models import (
    AllocationStrategy,
    CreditCard,
    NetChange,
    PaymentPurpose,
    UtilizationStatus,
)


class DomainSchema(BaseModel):
    """Base for responses built straight from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


class CardSchema(DomainSchema):
    """Credit card as sent by the client"""

    id: str = Field(..., min_length=1, description="Card identifier, unique per portfolio")
    nickname: str = Field(..., min_length=1)
    credit_limit: float = Field(..., ge=0, description="Credit limit in dollars")
    current_balance: float = Field(..., ge=0, description="Balance in dollars, may exceed the limit")
    statement_date: int = Field(..., ge=1, le=31, description="Statement day of month")
    due_date: int = Field(..., ge=1, le=31, description="Due day of month")
    apr: Optional[float] = Field(None, ge=0, description="Annual percentage rate")

    def to_domain(self) -> CreditCard:
        return CreditCard(**self.model_dump())


class PortfolioRequest(BaseModel):
    """Fields shared by every request that plans over a card set"""

    cards: List[CardSchema]
    target_utilization: Optional[float] = Field(None, ge=0, le=100, description="Target utilization percent")
    reference_date: Optional[date] = Field(None, description="Date treated as today (defaults to server date)")

    def domain_cards(self) -> List[CreditCard]:
        return [card.to_domain() for card in self.cards]


class OptimizeRequest(PortfolioRequest):
    """Request body for POST /v1/optimize"""


class PaymentSchema(DomainSchema):
    date: date
    amount: float
    purpose: PaymentPurpose
    description: str


class ScoreImpactSchema(DomainSchema):
    min: int
    max: int


class CardPlanSchema(DomainSchema):
    """Payment plan for a single card"""

    card: CardSchema
    payments: List[PaymentSchema]
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


class OptimizationResponse(DomainSchema):
    """Response for POST /v1/optimize"""

    cards: List[CardPlanSchema]
    target_utilization: float
    total_credit_limit: float
    total_current_balance: float
    total_optimized_balance: float
    current_overall_utilization: float
    optimized_overall_utilization: float
    utilization_improvement: float
    estimated_score_impact: ScoreImpactSchema


class LimitIncreaseSchema(BaseModel):
    type: Literal["limit_increase"]
    card_id: str
    new_limit: float = Field(..., ge=0)

    def to_domain(self) -> scenarios.Mutation:
        return scenarios.LimitIncrease(card_id=self.card_id, new_limit=self.new_limit)


class BalancePaydownSchema(BaseModel):
    type: Literal["balance_paydown"]
    card_id: str
    amount: float = Field(..., ge=0)

    def to_domain(self) -> scenarios.Mutation:
        return scenarios.BalancePaydown(card_id=self.card_id, amount=self.amount)


class CardRemovalSchema(BaseModel):
    type: Literal["card_removal"]
    card_id: str

    def to_domain(self) -> scenarios.Mutation:
        return scenarios.CardRemoval(card_id=self.card_id)


class PurchaseSchema(BaseModel):
    type: Literal["purchase"]
    card_id: str
    amount: float = Field(..., ge=0)
    purchase_date: date

    def to_domain(self) -> scenarios.Mutation:
        return scenarios.Purchase(card_id=self.card_id, amount=self.amount, purchase_date=self.purchase_date)


class NewCardSchema(BaseModel):
    type: Literal["new_card"]
    credit_limit: float = Field(..., gt=0)
    starting_balance: float = Field(0.0, ge=0)
    include_hard_inquiry: bool = True

    def to_domain(self) -> scenarios.Mutation:
        return scenarios.NewCard(
            credit_limit=self.credit_limit,
            starting_balance=self.starting_balance,
            include_hard_inquiry=self.include_hard_inquiry,
        )


class BalanceTransferSchema(BaseModel):
    type: Literal["balance_transfer"]
    from_card_id: str
    to_card_id: str
    amount: float = Field(..., ge=0)
    fee_percent: float = Field(3.0, ge=0, le=100)

    def to_domain(self) -> scenarios.Mutation:
        return scenarios.BalanceTransfer(
            from_card_id=self.from_card_id,
            to_card_id=self.to_card_id,
            amount=self.amount,
            fee_percent=self.fee_percent,
        )


MutationSchema = Annotated[
    Union[
        LimitIncreaseSchema,
        BalancePaydownSchema,
        CardRemovalSchema,
        PurchaseSchema,
        NewCardSchema,
        BalanceTransferSchema,
    ],
    Field(discriminator="type"),
]


class ScenarioRequest(PortfolioRequest):
    """Request body for POST /v1/scenarios/simulate"""

    mutation: MutationSchema


class ScenarioMetricsSchema(DomainSchema):
    total_credit_limit: float
    total_balance: float
    total_available_credit: float
    cards_over_30_percent: int
    cards_over_50_percent: int
    average_utilization: float


class ScenarioSchema(DomainSchema):
    scenario_type: str
    cards: List[CardSchema]
    optimization: OptimizationResponse
    overall_utilization: float
    utilization_change: float
    estimated_score_impact: ScoreImpactSchema
    score_change: ScoreImpactSchema
    metrics: ScenarioMetricsSchema
    warnings: List[str]
    recommendations: List[str]


class ScenarioResponse(DomainSchema):
    """Response for POST /v1/scenarios/simulate"""

    baseline: ScenarioSchema
    scenario: ScenarioSchema
    improvements: List[str]
    declines: List[str]
    net_change: NetChange


class AllocateRequest(PortfolioRequest):
    """Request body for POST /v1/priority/allocate"""

    total_budget: float = Field(..., ge=0, description="Money available to pay down cards")
    strategy: AllocationStrategy = AllocationStrategy.MAX_SCORE


class ScoreBreakdownSchema(DomainSchema):
    utilization_impact: int
    apr_weight: int
    time_urgency: int
    credit_limit_weight: int


class PriorityScoreSchema(DomainSchema):
    card_id: str
    total_score: int
    breakdown: ScoreBreakdownSchema
    reasoning: List[str]
    days_to_statement: int
    rank: int


class CardAllocationSchema(DomainSchema):
    card_id: str
    card_name: str
    amount: float
    new_balance: float
    new_utilization: float
    priority_rank: int
    reasoning: str


class ImpactSummarySchema(DomainSchema):
    total_payment: float
    overall_utilization_before: float
    overall_utilization_after: float
    estimated_score_impact: ScoreImpactSchema
    interest_saved: float
    cards_under_30_percent: int
    cards_optimal: int
    percent_of_optimal_achieved: float


class AllocationResponse(DomainSchema):
    """Response for POST /v1/priority/allocate"""

    strategy: AllocationStrategy
    allocations: List[CardAllocationSchema]
    scores: List[PriorityScoreSchema]
    expected_impact: ImpactSummarySchema


class ReminderRequest(PortfolioRequest):
    """Request body for POST /v1/reminders"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    days_before: Optional[int] = Field(None, ge=1, le=14, description="Days ahead of each payment to remind")


class ReminderSchema(DomainSchema):
    id: str
    card_id: str
    card_name: str
    payment_date: date
    reminder_date: date
    amount: float
    purpose: PaymentPurpose
    description: Optional[str] = None
    status: str


class ReminderListResponse(BaseModel):
    """Response for POST /v1/reminders and GET /v1/reminders"""

    user_id: str
    reminders: List[ReminderSchema]


class ReminderStatusUpdate(BaseModel):
    """Request body for PATCH /v1/reminders/{reminder_id}"""

    status: Literal["pending", "sent", "dismissed"]
