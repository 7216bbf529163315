"""Prometheus metrics for monitoring optimization, scenario and allocation traffic"""

from prometheus_client import Counter, Histogram

# Optimization metrics
optimization_counter = Counter(
    "cardtempo_optimization_total",
    "Total portfolio optimizations computed",
)

utilization_band_counter = Counter(
    "cardtempo_card_utilization_band",
    "Cards optimized by current utilization band",
    ["band"],  # good | medium | high | overlimit
)

portfolio_size_histogram = Histogram(
    "cardtempo_portfolio_cards",
    "Number of cards per optimization request",
    buckets=[1, 2, 3, 5, 8, 13, 21, 50],
)

# Scenario / allocation metrics
scenario_counter = Counter(
    "cardtempo_scenario_total",
    "Scenarios simulated",
    ["scenario_type"],
)

allocation_counter = Counter(
    "cardtempo_allocation_total",
    "Budget allocations computed",
    ["strategy"],
)

# Reminder metrics
reminders_created_counter = Counter(
    "cardtempo_reminders_created_total",
    "Payment reminders persisted",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_optimization(card_statuses: list[str]) -> None:
    """Record one optimization and the utilization band of every card in it"""
    optimization_counter.inc()
    portfolio_size_histogram.observe(len(card_statuses))
    for status in card_statuses:
        utilization_band_counter.labels(band=status).inc()
