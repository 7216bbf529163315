"""Data access layer for payment reminders"""

import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from cardtempo.domain.exceptions import ReminderNotFoundError
from cardtempo.domain.models import PaymentReminderDraft
from cardtempo.infrastructure.database.models import PaymentReminder


class ReminderRepository:
    """Repository for payment reminders"""

    def __init__(self, db: Session):
        self.db = db

    def create_reminders(self, user_id: str, drafts: List[PaymentReminderDraft]) -> List[PaymentReminder]:
        """Persist reminder drafts for a user"""
        rows = [
            PaymentReminder(
                user_id=user_id,
                card_id=draft.card_id,
                card_name=draft.card_name,
                payment_date=draft.payment_date,
                reminder_date=draft.reminder_date,
                amount=draft.amount,
                purpose=draft.purpose.value,
                description=draft.description,
                status="pending",
            )
            for draft in drafts
        ]
        self.db.add_all(rows)
        self.db.flush()  # Get IDs without committing
        return rows

    def get_reminders_by_user(self, user_id: str, status: Optional[str] = None, limit: int = 100) -> List[PaymentReminder]:
        """Fetch a user's reminders, soonest first"""
        query = self.db.query(PaymentReminder).filter(PaymentReminder.user_id == user_id)
        if status is not None:
            query = query.filter(PaymentReminder.status == status)
        return query.order_by(PaymentReminder.reminder_date.asc()).limit(limit).all()

    def update_status(self, reminder_id: uuid.UUID, status: str) -> PaymentReminder:
        """Mark a reminder sent or dismissed"""
        reminder = (
            self.db.query(PaymentReminder)
            .filter(PaymentReminder.id == reminder_id)
            .first()
        )
        if reminder is None:
            raise ReminderNotFoundError(f"Reminder {reminder_id} not found")

        reminder.status = status
        self.db.flush()
        return reminder
