"""
Verification State Machine

    pending --> confirmed
    pending --> rejected

confirmed and rejected are terminal. Re-applying the current status is a
no-op, so admin double clicks are harmless.
"""

import logging
from dataclasses import dataclass
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.models.game import Game
from app.models.player import Player, PlayerStatus
from app.models.team import Team
from app.services.errors import InvalidStatusTransition, NotFound, PersistenceFailure
from app.services.game_store import load_game, transaction
from app.services.notifications import notify_status_change

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = (PlayerStatus.confirmed, PlayerStatus.rejected)


@dataclass
class PendingRegistration:
    game: Game
    player: Player


def _validate_status_transition(current: str, new: str) -> None:
    if new not in TERMINAL_STATUSES:
        raise InvalidStatusTransition(f"Invalid status: {new}")
    if current in TERMINAL_STATUSES and current != new:
        raise InvalidStatusTransition(f"Player is already {current}; status is final")


def update_player_status(session: Session, game_id: int, player_id: int, new_status: str) -> Player:
    """
    Move a player out of `pending`.

    The player is searched across every team of the game. Raises NotFound for
    an unknown game or player; PersistenceFailure propagates from the store.
    """
    game = load_game(session, game_id)

    player = next((p for team in game.teams for p in team.players if p.id == player_id), None)
    if player is None:
        raise NotFound("player")

    current = player.status
    _validate_status_transition(current, new_status)
    if current == new_status:
        return player

    with transaction(session):
        player.status = PlayerStatus(new_status).value
        session.add(player)
    session.refresh(player)

    logger.info("Player %d in game %d: %s -> %s", player.id, game.id, current, new_status)
    notify_status_change(session, game, player)
    return player


def get_pending_registrations(session: Session) -> List[PendingRegistration]:
    """
    Every pending player across all games as (game, player) pairs.

    Ordered by game, then team, then player insertion order; not sorted by
    registration time.
    """
    query = (
        select(Game, Player)
        .join(Team, Team.game_id == Game.id)
        .join(Player, Player.team_id == Team.id)
        .where(Player.status == PlayerStatus.pending.value)
        .order_by(Game.id, Team.id, Player.id)
    )
    try:
        rows = session.exec(query).all()
    except SQLAlchemyError as exc:
        raise PersistenceFailure() from exc
    return [PendingRegistration(game=game, player=player) for game, player in rows]
