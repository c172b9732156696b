# pawsclinic/services/intake.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from pawsclinic.core.errors import ErrorSeverity, PersistenceError, ValidationError, log_error
from pawsclinic.core.logging import get_logger, mask_phone
from pawsclinic.crud.appointment import AppointmentStore
from pawsclinic.schemas.appointment import AppointmentDetails, AppointmentSubmission
from pawsclinic.services.notifier import NotificationDispatcher, format_message, sanitize

logger = get_logger(__name__)

DEFAULT_SPECIES = "Unknown"


class IntakeStage(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    DISPATCHED = "dispatched"
    PERSISTED = "persisted"
    RESPONDED = "responded"


# ---------- Public contract returned to the route ----------

class IntakeResult(BaseModel):
    sid: Optional[str] = Field(None, description="Provider message id, None when sending was skipped")
    persisted: bool = Field(..., description="Whether the record reached the store")


# ---------- Internal helpers ----------

def _optional(value: Optional[str]) -> Optional[str]:
    cleaned = sanitize(value)
    return cleaned or None


def validate_submission(submission: AppointmentSubmission) -> AppointmentDetails:
    """
    Check required fields and consent, returning sanitized details.
    Raises ValidationError; nothing is sent or stored on failure.
    """
    owner_name = sanitize(submission.owner_name)
    phone = sanitize(submission.phone)
    pet_name = sanitize(submission.pet_name)
    service = sanitize(submission.service)

    # consent must be the JSON literal true, not merely truthy
    if not (owner_name and phone and pet_name and service) or submission.agree is not True:
        raise ValidationError()

    return AppointmentDetails(
        owner_name=owner_name,
        phone=phone,
        pet_name=pet_name,
        species=sanitize(submission.species) or DEFAULT_SPECIES,
        service=service,
        email=_optional(submission.email),
        preferred_date=_optional(submission.date),
        preferred_time=_optional(submission.time),
        notes=_optional(submission.message),
    )


# ---------- Core orchestration ----------

class IntakeHandler:
    """
    Runs one submission through validate -> dispatch -> persist.

    A delivery failure ends the request before anything is stored. A
    storage failure after a successful send is logged and the caller still
    sees success, since staff already have the message.
    """

    def __init__(self, dispatcher: NotificationDispatcher, store: AppointmentStore):
        self.dispatcher = dispatcher
        self.store = store

    async def submit(self, submission: AppointmentSubmission) -> IntakeResult:
        logger.info("intake_stage", stage=IntakeStage.RECEIVED.value)

        details = validate_submission(submission)
        logger.info("intake_stage", stage=IntakeStage.VALIDATED.value, phone=mask_phone(details.phone))

        # fail fast on missing sender config before composing anything
        route = self.dispatcher.resolve_route()
        sid = await self.dispatcher.dispatch(format_message(details), route)
        logger.info("intake_stage", stage=IntakeStage.DISPATCHED.value, sid=sid)

        persisted = False
        try:
            appointment_id = await self.store.insert(**details.model_dump())
        except PersistenceError as e:
            log_error(e, {"component": "intake", "sid": sid}, ErrorSeverity.HIGH)
        else:
            persisted = True
            logger.info("intake_stage", stage=IntakeStage.PERSISTED.value, appointment_id=appointment_id)

        logger.info("intake_stage", stage=IntakeStage.RESPONDED.value, persisted=persisted)
        return IntakeResult(sid=sid, persisted=persisted)
