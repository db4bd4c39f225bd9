"""Persistence boundary: lookups, ordering, transaction rollback and error wrapping."""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session, select

from app.models.game import GameStatus
from app.models.team import Team
from app.services.errors import NotFound, PersistenceFailure
from app.services.game_store import load_all_games, load_game, save_game, transaction


def test_load_game_not_found(session: Session):
    with pytest.raises(NotFound) as exc:
        load_game(session, 1)
    assert exc.value.entity_kind == "game"
    assert exc.value.reason == "Game not found"


def test_load_all_games_in_insertion_order(session: Session, make_game):
    first = make_game(title="First")
    second = make_game(title="Second", status="completed")
    third = make_game(title="Third")

    assert [g.id for g in load_all_games(session)] == [first.id, second.id, third.id]
    assert [g.id for g in load_all_games(session, GameStatus.upcoming)] == [first.id, third.id]
    assert [g.id for g in load_all_games(session, GameStatus.completed)] == [second.id]


def test_save_game_upserts_aggregate(session: Session, make_game):
    game = make_game(team_names=("A", "B"))
    game.title = "Renamed"
    game.teams.append(Team(name="C"))

    saved = save_game(session, game)

    assert saved.title == "Renamed"
    assert [t.name for t in saved.teams] == ["A", "B", "C"]
    assert len(session.exec(select(Team)).all()) == 3


def test_save_game_wraps_integrity_error(session: Session, make_game):
    game = make_game(team_names=("A", "B"))
    game.teams.append(Team(name="A"))

    with pytest.raises(PersistenceFailure) as exc:
        save_game(session, game)
    assert isinstance(exc.value.__cause__, IntegrityError)

    session.expire_all()
    assert [t.name for t in load_game(session, game.id).teams] == ["A", "B"]


def test_transaction_rolls_back_on_domain_error(session: Session, make_game):
    game = make_game()

    with pytest.raises(NotFound):
        with transaction(session):
            game.title = "Should not stick"
            session.add(game)
            raise NotFound("team")

    session.expire_all()
    assert load_game(session, game.id).title == "Sunday League"


def test_transaction_wraps_collaborator_errors(session: Session, monkeypatch):
    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", failing_commit)

    with pytest.raises(PersistenceFailure) as exc:
        with transaction(session):
            pass
    assert exc.value.reason == "Could not save changes, please try again"
