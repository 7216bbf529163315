"""Utilization classifier shared by the optimizer and presentation layers"""

import math

from cardtempo.domain.models import UtilizationInfo, UtilizationStatus

GOOD_THRESHOLD = 10.0
MEDIUM_THRESHOLD = 30.0
OVERLIMIT_THRESHOLD = 100.0

# status -> (badge label, color token, badge variant)
_DISPLAY = {
    UtilizationStatus.GOOD: ("Good", "green", "default"),
    UtilizationStatus.MEDIUM: ("Medium", "yellow", "secondary"),
    UtilizationStatus.HIGH: ("High", "red", "destructive"),
    UtilizationStatus.OVERLIMIT: ("Over Limit", "red", "destructive"),
}


def sanitize_amount(value) -> float:
    """Coerce None, NaN, infinite or negative amounts to 0.0"""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def calculate_utilization(balance: float, limit: float) -> float:
    """Balance as a percentage of limit; 0 when the limit is zero, negative or not a number"""
    limit = sanitize_amount(limit)
    if limit <= 0:
        return 0.0
    return (sanitize_amount(balance) / limit) * 100


def utilization_status(percentage: float) -> UtilizationStatus:
    """
    Map a utilization percentage to its band.

    Upper bounds are inclusive on the lower band:
    - <= 10%:  good
    - <= 30%:  medium
    - <= 100%: high
    - > 100%:  overlimit
    """
    if percentage > OVERLIMIT_THRESHOLD:
        return UtilizationStatus.OVERLIMIT
    if percentage > MEDIUM_THRESHOLD:
        return UtilizationStatus.HIGH
    if percentage > GOOD_THRESHOLD:
        return UtilizationStatus.MEDIUM
    return UtilizationStatus.GOOD


def classify(balance: float, limit: float) -> UtilizationInfo:
    """Percentage, status and display metadata for a balance/limit pair"""
    percentage = calculate_utilization(balance, limit)
    status = utilization_status(percentage)
    badge_label, color_token, badge_variant = _DISPLAY[status]

    return UtilizationInfo(
        percentage=percentage,
        status=status,
        badge_label=badge_label,
        color_token=color_token,
        badge_variant=badge_variant,
    )
