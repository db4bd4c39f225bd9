"""
Result Recorder

Attaches a final score and per-side scorer breakdown to one generated match.
Only that match changes; teams and players are never touched.

Scorer names are snapshots: when a name is not supplied it is copied from the
player record at entry time and never re-synced afterwards.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from sqlmodel import Session

from app.models.game import Game
from app.models.match import Match
from app.services.errors import InvalidResult, NotFound
from app.services.game_store import load_game, transaction

logger = logging.getLogger(__name__)

DRAW = "Draw"


@dataclass
class Scorer:
    player_id: int
    player_name: str
    goals: int = 1


def _snapshot_scorers(game: Game, team_id: int, side: str, score: int, scorers: Sequence[Scorer]) -> List[Dict]:
    """Validate one side's scorers and return them as JSON-ready dicts."""
    if score < 0:
        raise InvalidResult(f"score_{side} must be >= 0")

    names_by_id = {
        p.id: p.name for team in game.teams if team.id == team_id for p in team.players
    }
    snapshot = []
    for scorer in scorers:
        if scorer.goals < 1:
            raise InvalidResult(f"Scorer goals must be >= 1 (team {side})")
        if scorer.player_id not in names_by_id:
            raise InvalidResult(f"Player {scorer.player_id} is not on team {side}")
        name = scorer.player_name or names_by_id[scorer.player_id]
        snapshot.append(asdict(Scorer(player_id=scorer.player_id, player_name=name, goals=scorer.goals)))

    total = sum(s["goals"] for s in snapshot)
    if total > score:
        raise InvalidResult(f"Scorers for team {side} account for {total} goals but the score is {score}")
    return snapshot


def update_match_result(
    session: Session,
    game_id: int,
    match_id: int,
    score_a: int,
    score_b: int,
    scorers_a: Sequence[Scorer],
    scorers_b: Sequence[Scorer],
) -> Match:
    """
    Overwrite the score and scorers of a match.

    Goal sums below a side's score are accepted (own goals, unattributed
    goals); sums above it are rejected.

    Raises:
        NotFound: game or match does not exist
        InvalidResult: negative score, non-positive goals, foreign scorer,
            or scorers exceeding the score
        PersistenceFailure: store error
    """
    game = load_game(session, game_id)
    match = next((m for m in game.matches if m.id == match_id), None)
    if match is None:
        raise NotFound("match")

    snapshot_a = _snapshot_scorers(game, match.team_a_id, "A", score_a, scorers_a)
    snapshot_b = _snapshot_scorers(game, match.team_b_id, "B", score_b, scorers_b)

    with transaction(session):
        match.score_a = score_a
        match.score_b = score_b
        match.scorers_a = snapshot_a
        match.scorers_b = snapshot_b
        match.result_recorded_at = datetime.now(timezone.utc)
        session.add(match)
    session.refresh(match)

    logger.info(
        "Result for match %d in game %d: %s %d - %d %s",
        match.id,
        game.id,
        match.team_a_name,
        score_a,
        score_b,
        match.team_b_name,
    )
    return match


def match_outcome(match: Match) -> Optional[str]:
    """Winning team name, "Draw", or None while no result is recorded."""
    if not match.has_result:
        return None
    if match.score_a > match.score_b:
        return match.team_a_name
    if match.score_b > match.score_a:
        return match.team_b_name
    return DRAW
