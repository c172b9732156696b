# pawsclinic/services/messaging.py
"""
Twilio Messaging API adapter.

Everything else in the app talks to the MessagingClient protocol; this is
the only module that imports the Twilio SDK.
"""
from __future__ import annotations

from typing import Optional, Protocol

from twilio.base.exceptions import TwilioException, TwilioRestException
from twilio.rest import Client

from pawsclinic.core.config import Settings
from pawsclinic.core.errors import DeliveryError
from pawsclinic.core.logging import get_logger

logger = get_logger(__name__)


class MessagingClient(Protocol):
    def send_message(
        self,
        *,
        to: str,
        body: str,
        from_: Optional[str] = None,
        messaging_service_sid: Optional[str] = None,
    ) -> Optional[str]:
        """Hand one message to the provider and return its message id."""
        ...


class TwilioMessagingClient:
    """Blocking client; callers run it off the event loop."""

    def __init__(self, account_sid: str, auth_token: str):
        self.client = Client(account_sid, auth_token)

    def send_message(
        self,
        *,
        to: str,
        body: str,
        from_: Optional[str] = None,
        messaging_service_sid: Optional[str] = None,
    ) -> Optional[str]:
        params = {"to": to, "body": body}
        if from_:
            params["from_"] = from_
        if messaging_service_sid:
            params["messaging_service_sid"] = messaging_service_sid

        try:
            message = self.client.messages.create(**params)
        except TwilioRestException as e:
            raise DeliveryError(e.msg or DeliveryError.default_message) from e
        except (TwilioException, OSError) as e:
            # OSError covers connection failures raised by the HTTP layer
            raise DeliveryError(str(e) or DeliveryError.default_message) from e
        return message.sid


def build_messaging_client(settings: Settings) -> Optional[MessagingClient]:
    """Construct the Twilio client, or None when it cannot be used."""
    if not settings.has_twilio_credentials:
        logger.warning("twilio_client_unavailable", reason="missing_credentials")
        return None

    try:
        client = TwilioMessagingClient(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
    except TwilioException as e:
        logger.warning("twilio_client_unavailable", reason="construction_failed", error=str(e))
        return None

    logger.info("twilio_client_ready")
    return client
