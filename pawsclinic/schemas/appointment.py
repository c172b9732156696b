# pawsclinic/schemas/appointment.py

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


class AppointmentSubmission(BaseModel):
    """Raw appointment form as posted by the clinic website."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    owner_name: Optional[str] = Field(None, alias="ownerName", examples=["Jane Doe"])
    phone: Optional[str] = Field(None, examples=["555-1000"])
    pet_name: Optional[str] = Field(None, alias="petName", examples=["Rex"])
    species: Optional[str] = Field(None, examples=["Dog"])
    service: Optional[str] = Field(None, examples=["Checkup"])
    date: Optional[str] = Field(None, description="Preferred date, free-form")
    time: Optional[str] = Field(None, description="Preferred time, free-form")
    message: Optional[str] = Field(None, description="Notes for the clinic")
    email: Optional[str] = None
    # left untyped: consent only counts when the JSON value is literally true
    agree: Any = None


class SendSmsResponse(BaseModel):
    success: bool = True
    sid: Optional[str] = None


class AppointmentOut(BaseModel):
    id: int
    owner_name: str
    phone: str
    email: Optional[str] = None
    pet_name: str
    species: str
    service: str
    preferred_date: Optional[str] = None
    preferred_time: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands timestamps back without tzinfo
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)


class AppointmentListResponse(BaseModel):
    success: bool = True
    appointments: List[AppointmentOut]


class AppointmentDetails(BaseModel):
    """A validated, sanitized submission ready to send and store."""
    model_config = ConfigDict(frozen=True)

    owner_name: str
    phone: str
    pet_name: str
    species: str
    service: str
    email: Optional[str] = None
    preferred_date: Optional[str] = None
    preferred_time: Optional[str] = None
    notes: Optional[str] = None
