"""Payment reminder endpoints - schedule, list and update reminders"""

import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from cardtempo.api.dependencies import (
    get_optimizer_settings,
    get_request_id,
    resolve_reference_date,
    resolve_target_utilization,
)
from cardtempo.api.v1.schemas import (
    ReminderListResponse,
    ReminderRequest,
    ReminderSchema,
    ReminderStatusUpdate,
)
from cardtempo.config import settings
from cardtempo.domain.exceptions import NoFutureRemindersError, ReminderNotFoundError
from cardtempo.domain.optimizer import OptimizerSettings, optimize_portfolio
from cardtempo.domain.reminders import build_reminders
from cardtempo.infrastructure.database.models import PaymentReminder
from cardtempo.infrastructure.database.repositories import ReminderRepository
from cardtempo.infrastructure.database.session import get_db
from cardtempo.infrastructure.observability.metrics import reminders_created_counter

router = APIRouter()


def _to_schema(reminder: PaymentReminder) -> ReminderSchema:
    return ReminderSchema(
        id=str(reminder.id),
        card_id=reminder.card_id,
        card_name=reminder.card_name,
        payment_date=reminder.payment_date,
        reminder_date=reminder.reminder_date,
        amount=reminder.amount,
        purpose=reminder.purpose,
        description=reminder.description,
        status=reminder.status,
    )


def _to_response(user_id: str, reminders: List[PaymentReminder]) -> ReminderListResponse:
    return ReminderListResponse(user_id=user_id, reminders=[_to_schema(r) for r in reminders])


@router.post("/reminders", response_model=ReminderListResponse, status_code=201)
def create_reminders(
    request_body: ReminderRequest,
    request: Request,
    db: Session = Depends(get_db),
    optimizer_settings: OptimizerSettings = Depends(get_optimizer_settings),
):
    """
    Plan the user's payments and store a reminder ahead of each one.

    Flow:
    1. Optimize the submitted cards
    2. Derive reminder dates days_before each payment, dropping past ones
    3. Persist the reminders
    """
    request_id = get_request_id(request)
    reference_date = resolve_reference_date(request_body.reference_date)
    days_before = request_body.days_before or settings.default_reminder_days_before

    try:
        result = optimize_portfolio(
            request_body.domain_cards(),
            resolve_target_utilization(request_body.target_utilization),
            reference_date,
            optimizer_settings,
        )
        drafts = build_reminders(result.cards, days_before, reference_date)
        if not drafts:
            raise NoFutureRemindersError("No future payments found to set reminders for")

        rows = ReminderRepository(db).create_reminders(request_body.user_id, drafts)
        db.commit()

        reminders_created_counter.inc(len(rows))
        logging.info(
            "Reminders scheduled",
            extra={"request_id": request_id, "user_id": request_body.user_id, "count": len(rows)},
        )
        return _to_response(request_body.user_id, rows)

    except NoFutureRemindersError as e:
        db.rollback()
        logging.warning(f"No reminders created: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reminders", response_model=ReminderListResponse)
def list_reminders(
    user_id: str = Query(..., description="User identifier"),
    status: Optional[str] = Query(None, description="Filter by pending, sent or dismissed"),
    db: Session = Depends(get_db),
):
    """Retrieve a user's reminders, soonest first"""
    reminders = ReminderRepository(db).get_reminders_by_user(user_id, status=status)
    return _to_response(user_id, reminders)


@router.patch("/reminders/{reminder_id}", response_model=ReminderSchema)
def update_reminder(
    reminder_id: str,
    request_body: ReminderStatusUpdate,
    db: Session = Depends(get_db),
):
    """Mark a reminder as sent or dismissed"""
    try:
        reminder_uuid = uuid.UUID(reminder_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid reminder ID format")

    try:
        reminder = ReminderRepository(db).update_status(reminder_uuid, request_body.status)
    except ReminderNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Reminder not found")

    db.commit()
    return _to_schema(reminder)
