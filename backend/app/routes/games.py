"""
Game Management API Routes
CRUD for games and their teams, gallery links, and the admin dashboard summary.
"""

from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, func, select

from app.database import get_session
from app.models.game import Game, GameStatus
from app.models.player import Player, PlayerStatus
from app.models.team import Team
from app.services.errors import NotFound, PersistenceFailure
from app.services.game_store import load_all_games, load_game, save_game
from app.services.result_recorder import match_outcome

router = APIRouter()

DEFAULT_TEAM_NAMES = ["Team Merah", "Team Biru", "Team Kuning", "Team Hijau"]


# ============================================================================
# Request/Response Models
# ============================================================================


def _check_team_names(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is None:
        return v
    names = [n.strip() for n in v]
    if any(not n for n in names):
        raise ValueError("team names must not be empty")
    if len(set(names)) != len(names):
        raise ValueError("team names must be unique within a game")
    return names


def _to_utc(v: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes (datetime-local form input) are taken as UTC."""
    if v is None:
        return v
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class GameCreate(BaseModel):
    title: str
    scheduled_at: datetime
    venue_name: str
    address: str = ""
    maps_link: str = ""
    description: str = ""
    price_per_player: int = 0
    max_players_per_team: int = 11
    status: GameStatus = GameStatus.upcoming
    team_names: List[str] = DEFAULT_TEAM_NAMES

    @field_validator("scheduled_at")
    @classmethod
    def validate_scheduled_at(cls, v):
        return _to_utc(v)

    @field_validator("max_players_per_team")
    @classmethod
    def validate_capacity(cls, v):
        if v < 1:
            raise ValueError("max_players_per_team must be >= 1")
        return v

    @field_validator("price_per_player")
    @classmethod
    def validate_price(cls, v):
        if v < 0:
            raise ValueError("price_per_player must be >= 0")
        return v

    @field_validator("team_names")
    @classmethod
    def validate_team_names(cls, v):
        return _check_team_names(v)


class GameUpdate(BaseModel):
    title: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    venue_name: Optional[str] = None
    address: Optional[str] = None
    maps_link: Optional[str] = None
    description: Optional[str] = None
    price_per_player: Optional[int] = None
    max_players_per_team: Optional[int] = None
    status: Optional[GameStatus] = None
    # Position i renames the i-th team; extra names append new teams
    team_names: Optional[List[str]] = None

    @field_validator("scheduled_at")
    @classmethod
    def validate_scheduled_at(cls, v):
        return _to_utc(v)

    @field_validator("max_players_per_team")
    @classmethod
    def validate_capacity(cls, v):
        if v is not None and v < 1:
            raise ValueError("max_players_per_team must be >= 1")
        return v

    @field_validator("price_per_player")
    @classmethod
    def validate_price(cls, v):
        if v is not None and v < 0:
            raise ValueError("price_per_player must be >= 0")
        return v

    @field_validator("team_names")
    @classmethod
    def validate_team_names(cls, v):
        return _check_team_names(v)


class GalleryLinkCreate(BaseModel):
    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        v = v.strip()
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("url must be an absolute http(s) URL")
        return v


class ProofFileResponse(BaseModel):
    name: str
    type: str
    url: str


class PlayerResponse(BaseModel):
    id: int
    team_id: int
    name: str
    contact: str
    proof_file: ProofFileResponse
    status: str
    registered_at: datetime


class TeamResponse(BaseModel):
    id: int
    name: str
    active_count: int
    is_full: bool
    players: List[PlayerResponse]


class ScorerResponse(BaseModel):
    player_id: int
    player_name: str
    goals: int


class MatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    sequence: int
    team_a_id: int
    team_a_name: str
    team_b_id: int
    team_b_name: str
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    scorers_a: Optional[List[ScorerResponse]] = None
    scorers_b: Optional[List[ScorerResponse]] = None
    result_recorded_at: Optional[datetime] = None
    outcome: Optional[str] = None


class GameSummaryResponse(BaseModel):
    id: int
    title: str
    scheduled_at: datetime
    venue_name: str
    price_per_player: int
    max_players_per_team: int
    status: str
    team_count: int
    total_active_players: int


class GameResponse(BaseModel):
    id: int
    title: str
    scheduled_at: datetime
    venue_name: str
    address: str
    maps_link: str
    description: str
    price_per_player: int
    max_players_per_team: int
    status: str
    gallery_links: List[str]
    total_active_players: int
    teams: List[TeamResponse]
    matches: List[MatchResponse]
    created_at: datetime
    updated_at: datetime


class DashboardResponse(BaseModel):
    upcoming_games: int
    completed_games: int
    pending_registrations: int


# ============================================================================
# Serialization helpers
# ============================================================================


def player_to_response(player: Player) -> PlayerResponse:
    return PlayerResponse(
        id=player.id,
        team_id=player.team_id,
        name=player.name,
        contact=player.contact,
        proof_file=ProofFileResponse(
            name=player.proof_file_name, type=player.proof_file_type, url=player.proof_file_url
        ),
        status=player.status,
        registered_at=player.registered_at,
    )


def match_to_response(match) -> MatchResponse:
    response = MatchResponse.model_validate(match)
    response.outcome = match_outcome(match)
    return response


def _total_active_players(game: Game) -> int:
    return sum(len(team.active_players()) for team in game.teams)


def game_to_response(game: Game) -> GameResponse:
    teams = [
        TeamResponse(
            id=team.id,
            name=team.name,
            active_count=len(team.active_players()),
            is_full=len(team.active_players()) >= game.max_players_per_team,
            players=[player_to_response(p) for p in team.players],
        )
        for team in game.teams
    ]
    return GameResponse(
        id=game.id,
        title=game.title,
        scheduled_at=game.scheduled_at,
        venue_name=game.venue_name,
        address=game.address,
        maps_link=game.maps_link,
        description=game.description,
        price_per_player=game.price_per_player,
        max_players_per_team=game.max_players_per_team,
        status=game.status,
        gallery_links=list(game.gallery_links or []),
        total_active_players=_total_active_players(game),
        teams=teams,
        matches=[match_to_response(m) for m in game.matches],
        created_at=game.created_at,
        updated_at=game.updated_at,
    )


def get_game_or_404(session: Session, game_id: int) -> Game:
    try:
        return load_game(session, game_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.reason)
    except PersistenceFailure as e:
        raise HTTPException(status_code=503, detail=e.reason)


def save_game_or_error(session: Session, game: Game) -> Game:
    try:
        return save_game(session, game)
    except PersistenceFailure as e:
        if isinstance(e.__cause__, IntegrityError):
            raise HTTPException(status_code=409, detail="Team names must be unique within a game")
        raise HTTPException(status_code=503, detail=e.reason)


def flush_or_error(session: Session) -> None:
    """Flush pending changes inside the open transaction; save_game commits them."""
    try:
        session.flush()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="Team names must be unique within a game")
    except SQLAlchemyError:
        session.rollback()
        raise HTTPException(status_code=503, detail=PersistenceFailure().reason)


# ============================================================================
# Game CRUD Endpoints
# ============================================================================


@router.get("/games", response_model=List[GameSummaryResponse])
def list_games(
    status: Optional[GameStatus] = Query(None, description="Filter by lifecycle status"),
    session: Session = Depends(get_session),
):
    """List games in creation order"""
    try:
        games = load_all_games(session, status)
    except PersistenceFailure as e:
        raise HTTPException(status_code=503, detail=e.reason)
    return [
        GameSummaryResponse(
            id=g.id,
            title=g.title,
            scheduled_at=g.scheduled_at,
            venue_name=g.venue_name,
            price_per_player=g.price_per_player,
            max_players_per_team=g.max_players_per_team,
            status=g.status,
            team_count=len(g.teams),
            total_active_players=_total_active_players(g),
        )
        for g in games
    ]


@router.post("/games", response_model=GameResponse, status_code=201)
def create_game(request: GameCreate, session: Session = Depends(get_session)):
    """Create a game together with its teams"""
    data = request.model_dump(exclude={"team_names", "status"})
    game = Game(**data, status=request.status.value, gallery_links=[])
    game.teams = [Team(name=name) for name in request.team_names]
    game = save_game_or_error(session, game)
    return game_to_response(game)


@router.get("/games/{game_id}", response_model=GameResponse)
def get_game(game_id: int, session: Session = Depends(get_session)):
    """Get a game with teams, players and matches"""
    return game_to_response(get_game_or_404(session, game_id))


@router.patch("/games/{game_id}", response_model=GameResponse)
def update_game(game_id: int, request: GameUpdate, session: Session = Depends(get_session)):
    """
    Update game fields.

    team_names renames existing teams by position and appends any extra names
    as new teams. Existing teams and their players are never removed.
    """
    game = get_game_or_404(session, game_id)

    updates = request.model_dump(exclude_unset=True, exclude={"team_names"})
    for key, value in updates.items():
        if value is None:
            continue
        if key == "status":
            value = GameStatus(value).value
        setattr(game, key, value)

    if request.team_names is not None:
        teams = list(game.teams)
        if len(request.team_names) < len(teams):
            raise HTTPException(status_code=400, detail="Teams cannot be removed from a game")
        renames = [(team, name) for team, name in zip(teams, request.team_names) if team.name != name]
        if renames:
            # (game_id, name) is checked per row UPDATE; park renamed rows first
            for team, _ in renames:
                team.name = f"__renaming_{team.id}"
            flush_or_error(session)
            for team, name in renames:
                team.name = name
            flush_or_error(session)
        for name in request.team_names[len(teams):]:
            game.teams.append(Team(name=name))

    game = save_game_or_error(session, game)
    return game_to_response(game)


# ============================================================================
# Gallery Endpoints
# ============================================================================


@router.post("/games/{game_id}/gallery", response_model=GameResponse, status_code=201)
def add_gallery_link(game_id: int, request: GalleryLinkCreate, session: Session = Depends(get_session)):
    """Append a media link to the game gallery"""
    game = get_game_or_404(session, game_id)
    # Reassign so the JSON column is flagged dirty
    game.gallery_links = list(game.gallery_links or []) + [request.url]
    game = save_game_or_error(session, game)
    return game_to_response(game)


@router.delete("/games/{game_id}/gallery/{index}", response_model=GameResponse)
def remove_gallery_link(game_id: int, index: int, session: Session = Depends(get_session)):
    """Remove the gallery link at a position"""
    game = get_game_or_404(session, game_id)
    links = list(game.gallery_links or [])
    if index < 0 or index >= len(links):
        raise HTTPException(status_code=404, detail=NotFound("gallery link").reason)
    del links[index]
    game.gallery_links = links
    game = save_game_or_error(session, game)
    return game_to_response(game)


# ============================================================================
# Dashboard
# ============================================================================


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(session: Session = Depends(get_session)):
    """Counts shown on the admin dashboard"""
    try:
        upcoming = session.exec(select(func.count(Game.id)).where(Game.status == GameStatus.upcoming.value)).one()
        completed = session.exec(select(func.count(Game.id)).where(Game.status == GameStatus.completed.value)).one()
        pending = session.exec(select(func.count(Player.id)).where(Player.status == PlayerStatus.pending.value)).one()
    except SQLAlchemyError:
        raise HTTPException(status_code=503, detail=PersistenceFailure().reason)
    return DashboardResponse(upcoming_games=upcoming, completed_games=completed, pending_registrations=pending)
