"""Result recorder: score/scorer overwrite, scorer snapshots, outcome."""

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from app.services.errors import InvalidResult, NotFound
from app.services.match_generator import generate_matches
from app.services.registration import register_player
from app.services.result_recorder import Scorer, match_outcome, update_match_result


@pytest.fixture
def played(session: Session, make_game, proof):
    """Two teams with one player each and a generated match."""
    game = make_game(team_names=("Team Merah", "Team Biru"), max_players_per_team=11)
    merah, biru = game.teams
    medy = register_player(session, game.id, merah.id, "Medy Renaldy", "081234567890", proof).player
    cahyo = register_player(session, game.id, biru.id, "Cahyo Wibowo", "081234567892", proof).player
    [match] = generate_matches(session, game.id)

    # Sides follow the shuffled pairing; map players to A/B accordingly
    by_team = {merah.id: medy, biru.id: cahyo}
    return {
        "game": game,
        "match": match,
        "player_a": by_team[match.team_a_id],
        "player_b": by_team[match.team_b_id],
    }


def test_record_result(session: Session, played):
    game, match = played["game"], played["match"]
    a, b = played["player_a"], played["player_b"]

    updated = update_match_result(
        session,
        game.id,
        match.id,
        3,
        1,
        [Scorer(player_id=a.id, player_name=a.name, goals=2)],
        [Scorer(player_id=b.id, player_name=b.name, goals=1)],
    )

    assert updated.score_a == 3
    assert updated.score_b == 1
    assert updated.scorers_a == [{"player_id": a.id, "player_name": a.name, "goals": 2}]
    assert updated.scorers_b == [{"player_id": b.id, "player_name": b.name, "goals": 1}]
    assert updated.result_recorded_at is not None
    assert match_outcome(updated) == updated.team_a_name


def test_result_can_be_overwritten(session: Session, played):
    game, match = played["game"], played["match"]

    update_match_result(session, game.id, match.id, 3, 1, [], [])
    updated = update_match_result(session, game.id, match.id, 2, 2, [], [])

    assert (updated.score_a, updated.score_b) == (2, 2)
    assert updated.scorers_a == []
    assert match_outcome(updated) == "Draw"


def test_outcome_without_result(played):
    assert match_outcome(played["match"]) is None


def test_scorer_name_snapshot_taken_from_player(session: Session, played):
    game, match = played["game"], played["match"]
    a = played["player_a"]

    updated = update_match_result(session, game.id, match.id, 1, 0, [Scorer(player_id=a.id, player_name="", goals=1)], [])
    original_name = a.name
    assert updated.scorers_a[0]["player_name"] == original_name

    # Renaming the player later does not touch the recorded scorer
    a.name = "Renamed Player"
    session.add(a)
    session.commit()
    session.refresh(updated)
    assert updated.scorers_a[0]["player_name"] == original_name


def test_scorer_goals_below_score_allowed(session: Session, played):
    game, match = played["game"], played["match"]
    a = played["player_a"]

    updated = update_match_result(session, game.id, match.id, 4, 0, [Scorer(player_id=a.id, player_name=a.name, goals=1)], [])

    assert updated.score_a == 4


@pytest.mark.parametrize(
    "score_a,goals,message",
    [
        (1, 2, "account for 2 goals"),
        (2, 0, "goals must be >= 1"),
        (-1, 1, "score_A must be >= 0"),
    ],
)
def test_invalid_results_rejected(session: Session, played, score_a, goals, message):
    game, match = played["game"], played["match"]
    a = played["player_a"]

    with pytest.raises(InvalidResult) as exc:
        update_match_result(session, game.id, match.id, score_a, 0, [Scorer(player_id=a.id, player_name=a.name, goals=goals)], [])
    assert message in exc.value.reason

    session.refresh(match)
    assert match.score_a is None


def test_scorer_must_play_for_that_side(session: Session, played):
    game, match = played["game"], played["match"]
    b = played["player_b"]

    with pytest.raises(InvalidResult):
        update_match_result(session, game.id, match.id, 1, 0, [Scorer(player_id=b.id, player_name=b.name, goals=1)], [])


def test_unknown_match(session: Session, played, make_game):
    with pytest.raises(NotFound) as exc:
        update_match_result(session, played["game"].id, 99999, 1, 0, [], [])
    assert exc.value.entity_kind == "match"

    other = make_game(title="Other game")
    with pytest.raises(NotFound):
        update_match_result(session, other.id, played["match"].id, 1, 0, [], [])


def test_result_leaves_teams_and_players_untouched(session: Session, played):
    game, match = played["game"], played["match"]
    before = [(t.id, t.name, [(p.id, p.name, p.status) for p in t.players]) for t in game.teams]

    update_match_result(session, game.id, match.id, 1, 0, [], [])

    session.refresh(game)
    after = [(t.id, t.name, [(p.id, p.name, p.status) for p in t.players]) for t in game.teams]
    assert after == before


# ============================================================================
# HTTP
# ============================================================================


def test_result_endpoint(client: TestClient, played):
    game, match = played["game"], played["match"]
    b = played["player_b"]

    resp = client.put(
        f"/api/games/{game.id}/matches/{match.id}/result",
        json={"score_a": 0, "score_b": 2, "scorers_b": [{"player_id": b.id, "goals": 2}]},
    )

    assert resp.status_code == 200
    data = resp.json()
    assert data["score_a"] == 0
    assert data["score_b"] == 2
    assert data["scorers_b"] == [{"player_id": b.id, "player_name": b.name, "goals": 2}]
    assert data["outcome"] == match.team_b_name

    detail = client.get(f"/api/games/{game.id}/matches/{match.id}").json()
    assert detail["outcome"] == match.team_b_name


def test_result_endpoint_errors(client: TestClient, played):
    game, match = played["game"], played["match"]
    url = f"/api/games/{game.id}/matches/{{}}/result"

    assert client.put(url.format(99999), json={"score_a": 1, "score_b": 0}).status_code == 404
    assert client.put(url.format(match.id), json={"score_a": -1, "score_b": 0}).status_code == 422
    assert client.get(f"/api/games/{game.id}/matches/99999").status_code == 404
