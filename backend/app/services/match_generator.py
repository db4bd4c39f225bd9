"""
Match Generator

Round robin pairing for a game: every unordered pair of teams plays once.
Pairs are enumerated in stored team order (i < j), then shuffled with
Fisher-Yates so the published order is unpredictable while each pair still
appears exactly once.

Regeneration replaces the game's whole match list, recorded results included.
The delete and the insert run in a single transaction.
"""

import logging
import random
from typing import List, Optional, Sequence, Tuple, TypeVar

from sqlmodel import Session

from app.models.match import Match
from app.models.team import Team
from app.services.errors import InsufficientTeams
from app.services.game_store import load_game, transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")


def round_robin_pairs(teams: Sequence[T]) -> List[Tuple[T, T]]:
    """All (teams[i], teams[j]) with i < j: n * (n-1) / 2 pairs."""
    pairs = []
    for i in range(len(teams)):
        for j in range(i + 1, len(teams)):
            pairs.append((teams[i], teams[j]))
    return pairs


def shuffle_in_place(items: List[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    Fisher-Yates shuffle: walk from the last index down to 1 and swap with a
    uniformly random index in [0, i].
    """
    rng = rng or random.Random()
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


def build_matches(game_id: int, teams: Sequence[Team], rng: Optional[random.Random] = None) -> List[Match]:
    """Unsaved Match rows for every pairing, in shuffled order."""
    pairs = shuffle_in_place(round_robin_pairs(teams), rng)
    return [
        Match(
            game_id=game_id,
            sequence=seq,
            team_a_id=team_a.id,
            team_a_name=team_a.name,
            team_b_id=team_b.id,
            team_b_name=team_b.name,
        )
        for seq, (team_a, team_b) in enumerate(pairs)
    ]


def generate_matches(session: Session, game_id: int, rng: Optional[random.Random] = None) -> List[Match]:
    """
    Generate (or regenerate) the round robin match list for a game.

    Raises:
        NotFound: game does not exist
        InsufficientTeams: fewer than 2 teams
        PersistenceFailure: store error; the previous match list is kept
    """
    game = load_game(session, game_id)
    teams = list(game.teams)
    if len(teams) < 2:
        logger.warning("Game %d has %d team(s); no matches generated", game_id, len(teams))
        raise InsufficientTeams()

    new_matches = build_matches(game.id, teams, rng)

    with transaction(session):
        replaced = len(game.matches)
        # delete-orphan cascade removes the previous list
        game.matches = new_matches
        session.add(game)

    session.refresh(game)
    logger.info(
        "Generated %d matches for game %d (%d teams, replaced %d)",
        len(new_matches),
        game.id,
        len(teams),
        replaced,
    )
    return list(game.matches)
