"""Unit tests for reminder schedule derivation"""

from datetime import date

from cardtempo.domain.models import CreditCard, PaymentPurpose
from cardtempo.domain.optimizer import optimize_card
from cardtempo.domain.reminders import build_reminders


def plan_for(today):
    card = CreditCard("card-1", "Everyday", credit_limit=10_000, current_balance=5_000, statement_date=25, due_date=20)
    return optimize_card(card, 5, today)


def test_build_reminders_offsets_each_payment(today):
    reminders = build_reminders([plan_for(today)], days_before=3, reference_date=today)

    assert [(r.reminder_date, r.payment_date) for r in reminders] == [
        (date(2025, 1, 20), date(2025, 1, 23)),
        (date(2025, 2, 17), date(2025, 2, 20)),
    ]
    assert reminders[0].purpose is PaymentPurpose.OPTIMIZATION
    assert reminders[0].amount == 4_500
    assert reminders[1].card_name == "Everyday"


def test_build_reminders_skips_past_dates(today):
    reminders = build_reminders([plan_for(today)], days_before=3, reference_date=date(2025, 1, 20))

    assert [r.payment_date for r in reminders] == [date(2025, 2, 20)]


def test_build_reminders_clamps_offset(today):
    """Offsets above 14 days behave like 14"""
    reminders = build_reminders([plan_for(today)], days_before=30, reference_date=today)

    assert [r.reminder_date for r in reminders] == [date(2025, 2, 6)]


def test_build_reminders_no_payments(today):
    card = CreditCard("paid", "Paid Off", credit_limit=1_000, current_balance=0, statement_date=1, due_date=1)
    assert build_reminders([optimize_card(card, 5, today)], 3, today) == []
