"""
Registration decision notifications.

Texts a player when an admin confirms or rejects their registration. A failed
or skipped notification never undoes the status change; every attempt is
recorded in sms_log.
"""

import logging
import os
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from app.models.game import Game
from app.models.player import Player, PlayerStatus
from app.models.sms_log import SmsLog
from app.services.twilio_service import format_e164, get_twilio_service

logger = logging.getLogger(__name__)

MESSAGE_TEMPLATES = {
    PlayerStatus.confirmed: (
        "{game_title}: Hi {player_name}, your registration for {team_name} is confirmed. "
        "See you on {date} at {venue}!"
    ),
    PlayerStatus.rejected: (
        "{game_title}: Hi {player_name}, we could not verify your payment proof for {team_name}. "
        "Your registration was rejected; you may register again."
    ),
}


def notifications_enabled() -> bool:
    return os.getenv("SMS_NOTIFICATIONS_ENABLED", "true").lower() in ("true", "1", "yes")


def render_status_message(game: Game, player: Player) -> str:
    template = MESSAGE_TEMPLATES[PlayerStatus(player.status)]
    return template.format(
        game_title=game.title,
        player_name=player.name,
        team_name=player.team.name if player.team else "your team",
        date=game.scheduled_at.strftime("%a %d %b %H:%M"),
        venue=game.venue_name,
    )


def notify_status_change(session: Session, game: Game, player: Player) -> Optional[SmsLog]:
    """Send the decision SMS for a player that just left `pending`."""
    if not notifications_enabled():
        return None

    try:
        phone = format_e164(player.contact)
    except ValueError:
        logger.warning(f"Skipping notification for player {player.id}: unparseable contact '{player.contact}'")
        return None

    body = render_status_message(game, player)
    result = get_twilio_service().send_sms(phone, body)

    log = SmsLog(
        game_id=game.id,
        player_id=player.id,
        phone_number=phone,
        message_body=body,
        message_type=f"registration_{PlayerStatus(player.status).value}",
        twilio_sid=result.sid,
        status=result.status,
        error_message=result.error,
    )
    try:
        session.add(log)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to record SMS log for player {player.id}: {e}")
        return None
    return log
