"""Twilio SMS service wrapper.

Thin wrapper around the Twilio REST API for sending SMS messages to players.
Normalizes player contacts to E.164 and sends single messages. Without
credentials every send is a logged dry run.
"""

import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from twilio.rest import Client

logger = logging.getLogger(__name__)

DEFAULT_COUNTRY_CODE = os.getenv("SMS_DEFAULT_COUNTRY_CODE", "62")


def format_e164(phone: str, default_country: str = DEFAULT_COUNTRY_CODE) -> str:
    """
    Normalize a player contact to E.164 format.

    Accepts:
      - +6281234567890   (already E.164)
      - 6281234567890    (country code, missing +)
      - 081234567890     (national format with trunk 0)
      - 0812-3456-7890, (0812) 3456 7890

    Returns:
      - "+6281234567890"

    Raises:
      - ValueError if phone can't be parsed
    """
    if not phone or not phone.strip():
        raise ValueError("Phone number is empty")

    raw = phone.strip()
    # Strip everything except digits
    digits = re.sub(r"[^\d]", "", raw)

    if raw.startswith("+") and len(digits) >= 8:
        candidate = f"+{digits}"
    elif digits.startswith("0") and len(digits) >= 9:
        # National format: drop the trunk prefix
        candidate = f"+{default_country}{digits[1:]}"
    elif digits.startswith(default_country) and len(digits) >= 10:
        candidate = f"+{digits}"
    else:
        raise ValueError(
            f"Cannot parse phone number: '{phone}'. "
            f"Expected national format (0...) or E.164 format."
        )

    if not validate_e164(candidate):
        raise ValueError(f"Cannot parse phone number: '{phone}'.")
    return candidate


def validate_e164(phone: str) -> bool:
    """Check if a phone number is valid E.164 format."""
    return bool(re.match(r"^\+[1-9]\d{6,14}$", phone))


MAX_BODY_LENGTH = 1600


@dataclass
class SmsResult:
    """Outcome of one send attempt, shaped like an sms_log row."""

    sid: Optional[str]
    status: str
    error: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return self.status in ("queued", "sent", "delivered", "dry_run")


class TwilioService:
    """
    Sends player notifications through Twilio.

    Credentials come from TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and
    TWILIO_FROM_NUMBER. With any of them missing the service runs dry:
    messages are logged and reported as "dry_run" instead of being sent.
    """

    def __init__(self, account_sid: str = "", auth_token: str = "", from_number: str = ""):
        self.from_number = from_number
        self.client: Optional[Client] = None
        if account_sid and auth_token and from_number:
            self.client = Client(account_sid, auth_token)
            logger.info(f"Twilio client initialized, sending from {from_number}")
        else:
            logger.warning("Twilio credentials not configured; SMS notifications run in dry-run mode")

    @classmethod
    def from_env(cls) -> "TwilioService":
        return cls(
            account_sid=os.getenv("TWILIO_ACCOUNT_SID", ""),
            auth_token=os.getenv("TWILIO_AUTH_TOKEN", ""),
            from_number=os.getenv("TWILIO_FROM_NUMBER", ""),
        )

    @property
    def dry_run(self) -> bool:
        return self.client is None

    @property
    def is_configured(self) -> bool:
        return not self.dry_run

    def send_sms(self, to: str, body: str) -> SmsResult:
        """Send one message to an E.164 number. Never raises on delivery errors."""
        if not validate_e164(to):
            return SmsResult(sid=None, status="failed", error=f"Invalid phone number format: {to}")

        if len(body) > MAX_BODY_LENGTH:
            body = body[: MAX_BODY_LENGTH - 3] + "..."

        if self.dry_run:
            logger.info(f"[DRY RUN] SMS to {to}: {body[:80]}")
            return SmsResult(sid=f"DRY_RUN_{datetime.now(timezone.utc).isoformat()}", status="dry_run")

        try:
            message = self.client.messages.create(body=body, from_=self.from_number, to=to)
        except Exception as e:
            logger.error(f"Failed to send SMS to {to}: {e}")
            return SmsResult(sid=None, status="failed", error=str(e))

        logger.info(f"SMS sent to {to}: SID={message.sid}, status={message.status}")
        return SmsResult(sid=message.sid, status=message.status)


_twilio_service: Optional[TwilioService] = None


def get_twilio_service() -> TwilioService:
    """Process-wide service, built from the environment on first use."""
    global _twilio_service
    if _twilio_service is None:
        _twilio_service = TwilioService.from_env()
    return _twilio_service
