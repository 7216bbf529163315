"""Unit tests for what-if scenario simulation"""

from datetime import date

import pytest
from cardtempo.domain.models import NetChange, ScoreImpact
from cardtempo.domain.scenarios import (
    BalancePaydown,
    BalanceTransfer,
    CardRemoval,
    LimitIncrease,
    NewCard,
    Purchase,
    calculate_baseline,
    calculate_metrics,
    compare_scenarios,
    simulate,
)


def balances(result):
    return {card.id: card.current_balance for card in result.cards}


def test_calculate_baseline(sample_cards, today):
    baseline = calculate_baseline(sample_cards, reference_date=today)

    assert baseline.scenario_type == "baseline"
    assert baseline.overall_utilization == pytest.approx(9_000 / 17_000 * 100)
    assert baseline.utilization_change == 0
    assert baseline.score_change == ScoreImpact(0, 0)
    assert baseline.metrics.cards_over_30_percent == 2
    assert baseline.metrics.total_available_credit == 8_000
    assert len(baseline.optimization.cards) == 3


def test_limit_to_current_value_is_neutral(sample_cards, today):
    """Re-applying the current limit changes nothing"""
    result = simulate(sample_cards, LimitIncrease("sapphire", 10_000), reference_date=today)

    assert result.utilization_change == 0
    assert result.score_change == ScoreImpact(0, 0)
    assert result.warnings == []


def test_limit_increase_improves_utilization(sample_cards, today):
    result = simulate(sample_cards, LimitIncrease("sapphire", 20_000), reference_date=today)

    assert result.scenario_type == "limit_increase"
    assert result.overall_utilization == pytest.approx(9_000 / 27_000 * 100)
    assert result.utilization_change == pytest.approx(9_000 / 17_000 * 100 - 9_000 / 27_000 * 100)
    assert result.score_change == ScoreImpact(25, 45)
    assert result.metrics.total_credit_limit == 27_000
    assert any("100%" in r for r in result.recommendations)


def test_limit_below_balance_is_clamped(sample_cards, today):
    result = simulate(sample_cards, LimitIncrease("sapphire", 1_000), reference_date=today)

    sapphire = next(card for card in result.cards if card.id == "sapphire")
    assert sapphire.credit_limit == 5_000
    assert result.warnings
    assert result.utilization_change < 0
    assert result.score_change.max < 0


def test_balance_paydown(sample_cards, today):
    result = simulate(sample_cards, BalancePaydown("freedom", 4_000), reference_date=today)

    assert balances(result)["freedom"] == 0
    assert result.overall_utilization == pytest.approx(5_000 / 17_000 * 100)
    assert result.score_change == ScoreImpact(45, 70)
    assert result.metrics.cards_over_30_percent == 1
    assert "Paying in full means zero interest charges!" in result.recommendations


def test_balance_paydown_larger_than_balance(sample_cards, today):
    result = simulate(sample_cards, BalancePaydown("freedom", 10_000), reference_date=today)
    assert balances(result)["freedom"] == 0


def test_partial_paydown_warns_about_interest(sample_cards, today):
    result = simulate(sample_cards, BalancePaydown("freedom", 1_000), reference_date=today)

    assert balances(result)["freedom"] == 3_000
    assert any("interest" in w for w in result.warnings)


def test_card_removal_raises_utilization(sample_cards, today):
    result = simulate(sample_cards, CardRemoval("discover"), reference_date=today)

    assert [card.id for card in result.cards] == ["sapphire", "freedom"]
    assert result.overall_utilization == pytest.approx(60.0)
    assert result.utilization_change < 0
    assert result.score_change == ScoreImpact(-25, -10)


def test_card_removal_with_balance_is_rejected(sample_cards, today):
    result = simulate(sample_cards, CardRemoval("sapphire"), reference_date=today)

    assert len(result.cards) == 3
    assert result.utilization_change == 0
    assert "outstanding balance" in result.warnings[0]


def test_unknown_card_returns_baseline(sample_cards, today):
    result = simulate(sample_cards, BalancePaydown("missing", 500), reference_date=today)

    assert result.warnings == ["Card not found"]
    assert result.utilization_change == 0
    assert result.score_change == ScoreImpact(0, 0)


def test_purchase_before_statement(sample_cards, today):
    result = simulate(sample_cards, Purchase("freedom", 500, date(2025, 1, 12)), reference_date=today)

    assert balances(result)["freedom"] == 4_500
    assert any("reported to credit bureaus" in w for w in result.warnings)
    assert result.utilization_change < 0


def test_purchase_after_statement(sample_cards, today):
    result = simulate(sample_cards, Purchase("freedom", 500, date(2025, 1, 16)), reference_date=today)

    assert any("Good timing" in r for r in result.recommendations)


def test_purchase_over_limit_is_declined(sample_cards, today):
    result = simulate(sample_cards, Purchase("freedom", 2_000, date(2025, 1, 12)), reference_date=today)

    assert balances(result)["freedom"] == 4_000
    assert "declined" in result.warnings[0]


def test_new_card_with_hard_inquiry(sample_cards, today):
    result = simulate(sample_cards, NewCard(credit_limit=10_000), reference_date=today)

    assert len(result.cards) == 4
    assert result.cards[-1].id == "new-card"
    assert result.overall_utilization == pytest.approx(9_000 / 27_000 * 100)
    # (25, 45) for the utilization drop, shifted by the inquiry penalty
    assert result.score_change == ScoreImpact(15, 40)


def test_new_card_without_hard_inquiry(sample_cards, today):
    result = simulate(sample_cards, NewCard(credit_limit=10_000, include_hard_inquiry=False), reference_date=today)
    assert result.score_change == ScoreImpact(25, 45)


def test_balance_transfer_moves_balance_plus_fee(sample_cards, today):
    result = simulate(
        sample_cards,
        BalanceTransfer("sapphire", "discover", 1_000, fee_percent=3),
        reference_date=today,
    )

    assert balances(result)["sapphire"] == 4_000
    assert balances(result)["discover"] == pytest.approx(1_030)
    assert any("fee" in w for w in result.warnings)


def test_balance_transfer_exceeding_source_is_rejected(sample_cards, today):
    result = simulate(sample_cards, BalanceTransfer("sapphire", "discover", 6_000), reference_date=today)

    assert balances(result)["sapphire"] == 5_000
    assert result.utilization_change == 0


def test_balance_transfer_exceeding_destination_limit_is_rejected(sample_cards, today):
    result = simulate(sample_cards, BalanceTransfer("sapphire", "discover", 2_500), reference_date=today)

    assert balances(result)["discover"] == 0
    assert "Maximum you can transfer" in result.warnings[0]


def test_simulate_does_not_mutate_input(sample_cards, today):
    snapshot = list(sample_cards)
    simulate(sample_cards, CardRemoval("discover"), reference_date=today)
    simulate(sample_cards, BalancePaydown("freedom", 100), reference_date=today)
    assert sample_cards == snapshot


def test_calculate_metrics_counts_thresholds(sample_cards):
    metrics = calculate_metrics(sample_cards)

    assert metrics.total_credit_limit == 17_000
    assert metrics.total_balance == 9_000
    assert metrics.cards_over_30_percent == 2
    assert metrics.cards_over_50_percent == 1


def test_compare_scenarios_positive(sample_cards, today):
    baseline = calculate_baseline(sample_cards, reference_date=today)
    scenario = simulate(sample_cards, BalancePaydown("freedom", 4_000), reference_date=today)

    comparison = compare_scenarios(baseline, scenario)

    assert comparison.net_change is NetChange.POSITIVE
    assert comparison.declines == []
    assert any(line.startswith("Utilization improves") for line in comparison.improvements)


def test_compare_scenarios_negative_when_anything_declines(sample_cards, today):
    baseline = calculate_baseline(sample_cards, reference_date=today)
    scenario = simulate(sample_cards, CardRemoval("discover"), reference_date=today)

    comparison = compare_scenarios(baseline, scenario)

    assert comparison.net_change is NetChange.NEGATIVE
    assert any(line.startswith("Available credit decreases") for line in comparison.declines)


def test_compare_scenarios_neutral(sample_cards, today):
    baseline = calculate_baseline(sample_cards, reference_date=today)
    scenario = simulate(sample_cards, LimitIncrease("sapphire", 10_000), reference_date=today)

    comparison = compare_scenarios(baseline, scenario)

    assert comparison.net_change is NetChange.NEUTRAL
    assert comparison.improvements == comparison.declines == []
