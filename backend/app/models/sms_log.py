"""SMS log model for tracking verification notifications."""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class SmsLog(SQLModel, table=True):
    """Log of every SMS attempted for a registration decision."""

    __tablename__ = "sms_log"

    id: Optional[int] = Field(default=None, primary_key=True)
    game_id: int = Field(foreign_key="game.id", index=True)
    player_id: Optional[int] = Field(default=None, foreign_key="player.id")
    phone_number: str  # Recipient phone in E.164 format
    message_body: str
    message_type: str  # registration_confirmed|registration_rejected
    twilio_sid: Optional[str] = Field(default=None)
    status: str = Field(default="queued")  # queued|sent|dry_run|failed
    error_message: Optional[str] = Field(default=None)
    sent_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
