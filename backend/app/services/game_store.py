"""
Game Store

Persistence boundary for the league core. The collaborator is a SQLModel
Session, so the same code runs against sqlite (file or in-memory) and any
other SQLAlchemy-backed database.

Reads always query the session; nothing is cached between calls.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.models.game import Game, GameStatus
from app.services.errors import NotFound, PersistenceFailure

logger = logging.getLogger(__name__)


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """
    Run a unit of work against the session.

    Commits when the block exits cleanly. Any exception rolls back everything
    written inside the block; collaborator errors are re-raised as
    PersistenceFailure with the original error as __cause__.
    """
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Persistence failure, transaction rolled back: %s", exc)
        raise PersistenceFailure() from exc
    except Exception:
        session.rollback()
        raise


def load_game(session: Session, game_id: int) -> Game:
    """Load a game aggregate or raise NotFound("game")."""
    try:
        game = session.get(Game, game_id)
    except SQLAlchemyError as exc:
        raise PersistenceFailure() from exc
    if game is None:
        raise NotFound("game")
    return game


def load_all_games(session: Session, status: Optional[GameStatus] = None) -> List[Game]:
    """All games in insertion order, optionally filtered by lifecycle status."""
    query = select(Game).order_by(Game.id)
    if status is not None:
        query = query.where(Game.status == GameStatus(status).value)
    try:
        return list(session.exec(query).all())
    except SQLAlchemyError as exc:
        raise PersistenceFailure() from exc


def save_game(session: Session, game: Game) -> Game:
    """
    Upsert a game aggregate.

    The game and every team, player and match attached to it are written in
    one transaction (full-aggregate replace, last write wins).
    """
    with transaction(session):
        session.add(game)
    session.refresh(game)
    return game
