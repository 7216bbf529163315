"""SQLAlchemy ORM models for persisted payment reminders"""

import uuid

from sqlalchemy import Column, Date, DateTime, Float, Text, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class PaymentReminder(Base):
    """Notification scheduled ahead of a planned card payment"""

    __tablename__ = "payment_reminder"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    card_id = Column(Text, nullable=False)
    card_name = Column(Text, nullable=False)
    payment_date = Column(Date, nullable=False)
    reminder_date = Column(Date, nullable=False, index=True)
    amount = Column(Float, nullable=False)
    purpose = Column(Text, nullable=False)  # optimization | balance
    description = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default="pending")  # pending | sent | dismissed
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
