"""
Registration Manager

Validates and records a player joining a team. Preconditions are checked in
order and the first failure wins:

1. game exists
2. team exists within that game
3. team has a free slot (rejected players do not hold one)
4. no non-rejected player in the whole game shares the contact

Failures are returned, not raised, so callers can render the reason inline.
Only PersistenceFailure propagates.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Session

from app.models.player import Player, PlayerStatus
from app.services.errors import CapacityExceeded, DuplicateRegistration, LeagueError, NotFound
from app.services.game_store import load_game, save_game

logger = logging.getLogger(__name__)

ALLOWED_PROOF_TYPES = ("image/jpeg", "image/png", "application/pdf")


@dataclass(frozen=True)
class ProofFile:
    name: str
    type: str  # MIME type
    url: str


@dataclass
class RegistrationResult:
    success: bool
    reason: Optional[str] = None
    error: Optional[LeagueError] = None
    player: Optional[Player] = None

    @classmethod
    def failed(cls, error: LeagueError) -> "RegistrationResult":
        return cls(success=False, reason=error.reason, error=error)


def register_player(
    session: Session,
    game_id: int,
    team_id: int,
    name: str,
    contact: str,
    proof_file: ProofFile,
) -> RegistrationResult:
    """
    Register a player into a team as `pending`.

    On success exactly one Player is appended to the team and persisted;
    nothing else changes. Concurrent double submission is not guarded.
    """
    try:
        game = load_game(session, game_id)
    except NotFound as e:
        return RegistrationResult.failed(e)

    team = next((t for t in game.teams if t.id == team_id), None)
    if team is None:
        return RegistrationResult.failed(NotFound("team"))

    if len(team.active_players()) >= game.max_players_per_team:
        logger.warning("Registration refused: team %d in game %d is full", team_id, game_id)
        return RegistrationResult.failed(CapacityExceeded())

    for other in game.teams:
        for p in other.active_players():
            if p.contact == contact:
                logger.warning("Registration refused: duplicate contact in game %d", game_id)
                return RegistrationResult.failed(DuplicateRegistration())

    player = Player(
        game_id=game.id,
        team_id=team.id,
        name=name,
        contact=contact,
        proof_file_name=proof_file.name,
        proof_file_type=proof_file.type,
        proof_file_url=proof_file.url,
        status=PlayerStatus.pending.value,
        registered_at=datetime.now(timezone.utc),
    )
    team.players.append(player)
    save_game(session, game)
    session.refresh(player)

    logger.info("Registered player %d (%s) to team %d in game %d", player.id, name, team.id, game.id)
    return RegistrationResult(success=True, player=player)
