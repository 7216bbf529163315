"""Reminder schedule derivation from payment plans"""

from datetime import date, timedelta
from typing import Iterable, List

from cardtempo.domain.models import CardPaymentPlan, PaymentReminderDraft

MIN_DAYS_BEFORE = 1
MAX_DAYS_BEFORE = 14


def build_reminders(
    plans: Iterable[CardPaymentPlan],
    days_before: int,
    reference_date: date,
) -> List[PaymentReminderDraft]:
    """
    One reminder per scheduled payment, days_before ahead of it.

    days_before is clamped to 1-14. Reminders that would fire on or before
    reference_date are skipped, so only future notifications are returned,
    ordered by reminder date.
    """
    offset = max(MIN_DAYS_BEFORE, min(int(days_before), MAX_DAYS_BEFORE))

    reminders = []
    for plan in plans:
        for payment in plan.payments:
            reminder_date = payment.date - timedelta(days=offset)
            if reminder_date <= reference_date:
                continue
            reminders.append(
                PaymentReminderDraft(
                    card_id=plan.card.id,
                    card_name=plan.card.nickname,
                    payment_date=payment.date,
                    reminder_date=reminder_date,
                    amount=payment.amount,
                    purpose=payment.purpose,
                    description=payment.description,
                )
            )

    return sorted(reminders, key=lambda r: (r.reminder_date, r.card_id))
