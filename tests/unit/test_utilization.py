"""Unit tests for the utilization classifier"""

import math

import pytest
from cardtempo.domain.models import UtilizationStatus
from cardtempo.domain.utilization import (
    calculate_utilization,
    classify,
    sanitize_amount,
    utilization_status,
)


def test_calculate_utilization_percentage():
    """Balance over limit as a percentage"""
    assert calculate_utilization(2500, 10000) == 25.0
    assert calculate_utilization(0, 10000) == 0.0
    assert calculate_utilization(12000, 10000) == 120.0  # over limit is representable


@pytest.mark.parametrize("limit", [0, -500, float("nan"), float("inf"), None])
def test_calculate_utilization_unusable_limit_is_zero(limit):
    """Zero, negative or non-finite limits never divide"""
    result = calculate_utilization(1000, limit)
    assert result == 0.0
    assert math.isfinite(result)


def test_sanitize_amount():
    """Bad amounts collapse to zero"""
    assert sanitize_amount(125.5) == 125.5
    assert sanitize_amount("40") == 40.0
    assert sanitize_amount(-10) == 0.0
    assert sanitize_amount(float("nan")) == 0.0
    assert sanitize_amount(None) == 0.0
    assert sanitize_amount("abc") == 0.0


def test_utilization_status_boundaries():
    """Upper bound of each band is inclusive"""
    assert utilization_status(0) is UtilizationStatus.GOOD
    assert utilization_status(10) is UtilizationStatus.GOOD
    assert utilization_status(10.01) is UtilizationStatus.MEDIUM
    assert utilization_status(30) is UtilizationStatus.MEDIUM
    assert utilization_status(30.01) is UtilizationStatus.HIGH
    assert utilization_status(100) is UtilizationStatus.HIGH
    assert utilization_status(100.01) is UtilizationStatus.OVERLIMIT


def test_classify_display_metadata():
    """Badge and colour follow the same four-state status"""
    good = classify(500, 10000)
    assert good.percentage == 5.0
    assert good.status is UtilizationStatus.GOOD
    assert (good.badge_label, good.color_token, good.badge_variant) == ("Good", "green", "default")

    medium = classify(2000, 10000)
    assert (medium.badge_label, medium.color_token) == ("Medium", "yellow")

    high = classify(5000, 10000)
    assert (high.badge_label, high.badge_variant) == ("High", "destructive")

    over = classify(11000, 10000)
    assert over.status is UtilizationStatus.OVERLIMIT
    assert over.badge_label == "Over Limit"
    assert over.color_token == "red"
