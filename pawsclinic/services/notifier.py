# pawsclinic/services/notifier.py
"""
Composes the staff notification for an appointment request and hands it
to the messaging provider.
"""
from __future__ import annotations

import asyncio
import functools
import re
from dataclasses import dataclass
from typing import Any, Optional

from pawsclinic.core.config import DestinationMode, Settings
from pawsclinic.core.errors import ConfigurationError
from pawsclinic.core.logging import get_logger, mask_phone
from pawsclinic.schemas.appointment import AppointmentDetails
from pawsclinic.services.messaging import MessagingClient

logger = get_logger(__name__)

MAX_FIELD_LENGTH = 240
WHATSAPP_PREFIX = "whatsapp:"
MESSAGE_HEADER = "New Appointment Request:"

_LINE_BREAKS = re.compile(r"[\r\n]+")


def sanitize(value: Any) -> str:
    """Collapse CR/LF runs to one space, trim, then cut to 240 characters."""
    text = "" if value is None else str(value)
    return _LINE_BREAKS.sub(" ", text).strip()[:MAX_FIELD_LENGTH]


def format_message(details: AppointmentDetails) -> str:
    """
    Build the staff notification text.

    ``details`` comes out of ``validate_submission`` already sanitized, so
    fields go in verbatim and the text matches what gets stored.
    """
    lines = [
        MESSAGE_HEADER,
        f"Owner: {details.owner_name} ({details.phone})",
    ]
    if details.email:
        lines.append(f"Email: {details.email}")
    lines.append(f"Pet: {details.pet_name} ({details.species})")
    lines.append(f"Service: {details.service}")
    if details.preferred_date or details.preferred_time:
        preferred = " ".join(v for v in (details.preferred_date, details.preferred_time) if v)
        lines.append(f"Preferred: {preferred}")
    if details.notes:
        lines.append(f"Notes: {details.notes}")
    return "\n".join(lines)


def _whatsapp_address(number: str) -> str:
    return number if number.startswith(WHATSAPP_PREFIX) else f"{WHATSAPP_PREFIX}{number}"


@dataclass(frozen=True)
class DeliveryRoute:
    mode: DestinationMode
    to: str
    from_: Optional[str] = None
    messaging_service_sid: Optional[str] = None


class NotificationDispatcher:
    """Sends staff notifications through a MessagingClient."""

    def __init__(self, settings: Settings, client: Optional[MessagingClient]):
        self.settings = settings
        self.client = client

    @property
    def mode(self) -> DestinationMode:
        return self.settings.destination_mode

    def resolve_route(self, mode: Optional[DestinationMode] = None) -> DeliveryRoute:
        """
        Work out sender and destination for ``mode`` (default: configured mode).
        Raises ConfigurationError when the required identity is missing.
        """
        mode = mode or self.mode
        s = self.settings

        if not s.CLINIC_SMS_TO:
            raise ConfigurationError("CLINIC_SMS_TO not configured")

        if mode == DestinationMode.WHATSAPP:
            if not s.WHATSAPP_FROM:
                raise ConfigurationError("WHATSAPP_FROM not configured")
            return DeliveryRoute(
                mode=mode,
                to=_whatsapp_address(s.CLINIC_SMS_TO),
                from_=_whatsapp_address(s.WHATSAPP_FROM),
            )

        if s.TWILIO_FROM_NUMBER:
            return DeliveryRoute(mode=mode, to=s.CLINIC_SMS_TO, from_=s.TWILIO_FROM_NUMBER)
        if s.TWILIO_MESSAGING_SERVICE_SID:
            return DeliveryRoute(
                mode=mode,
                to=s.CLINIC_SMS_TO,
                messaging_service_sid=s.TWILIO_MESSAGING_SERVICE_SID,
            )
        raise ConfigurationError(
            "No Twilio sender configured "
            "(TWILIO_FROM_NUMBER or TWILIO_MESSAGING_SERVICE_SID required)"
        )

    async def dispatch(self, message: str, route: Optional[DeliveryRoute] = None) -> Optional[str]:
        """
        Send ``message`` and return the provider's message sid.

        Returns None without sending when no provider client is available.
        Provider failures raise DeliveryError.
        """
        route = route or self.resolve_route()

        if self.client is None:
            logger.warning("message_not_sent", reason="twilio_client_unavailable", mode=route.mode.value)
            return None

        send = functools.partial(
            self.client.send_message,
            to=route.to,
            body=message,
            from_=route.from_,
            messaging_service_sid=route.messaging_service_sid,
        )
        # Twilio's SDK blocks; keep it off the event loop
        loop = asyncio.get_running_loop()
        sid = await loop.run_in_executor(None, send)

        logger.info("message_sent", sid=sid, mode=route.mode.value, to=mask_phone(route.to))
        return sid
