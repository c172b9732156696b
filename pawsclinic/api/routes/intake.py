# pawsclinic/api/routes/intake.py
from fastapi import APIRouter, Depends

from pawsclinic.api.deps import get_intake_handler
from pawsclinic.schemas.appointment import AppointmentSubmission, SendSmsResponse
from pawsclinic.services.intake import IntakeHandler

router = APIRouter(prefix="/api", tags=["intake"])


@router.post("/send-sms", response_model=SendSmsResponse)
async def send_sms(
    submission: AppointmentSubmission,
    intake: IntakeHandler = Depends(get_intake_handler),
) -> SendSmsResponse:
    """Notify clinic staff of an appointment request and record it."""
    result = await intake.submit(submission)
    return SendSmsResponse(success=True, sid=result.sid)
