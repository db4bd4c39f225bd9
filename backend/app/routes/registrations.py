"""
Registration and Verification API Routes

Players self-register into a team with a payment proof reference; admins
confirm or reject pending registrations.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.database import get_session
from app.models.player import PlayerStatus
from app.models.sms_log import SmsLog
from app.routes.games import PlayerResponse, get_game_or_404, player_to_response
from app.services.errors import (
    CapacityExceeded,
    DuplicateRegistration,
    InvalidStatusTransition,
    NotFound,
    PersistenceFailure,
)
from app.services.registration import ALLOWED_PROOF_TYPES, ProofFile, register_player
from app.services.verification import get_pending_registrations, update_player_status

router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================


class ProofFileIn(BaseModel):
    name: str
    type: str
    url: str

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        if v not in ALLOWED_PROOF_TYPES:
            raise ValueError("Only JPG, PNG, and PDF files are allowed")
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        if not v or not v.strip():
            raise ValueError("Please upload payment proof")
        return v.strip()


class RegistrationRequest(BaseModel):
    name: str
    contact: str
    proof_file: ProofFileIn

    @field_validator("name", "contact")
    @classmethod
    def validate_required(cls, v):
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class RegistrationResponse(BaseModel):
    success: bool
    player: PlayerResponse


class StatusUpdateRequest(BaseModel):
    status: PlayerStatus


class PendingRegistrationResponse(BaseModel):
    game_id: int
    game_title: str
    team_name: str
    player: PlayerResponse


class SmsLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    player_id: Optional[int] = None
    phone_number: str
    message_body: str
    message_type: str
    status: str
    error_message: Optional[str] = None
    sent_at: datetime


# ============================================================================
# Registration
# ============================================================================


@router.post(
    "/games/{game_id}/teams/{team_id}/registrations",
    response_model=RegistrationResponse,
    status_code=201,
)
def create_registration(
    game_id: int, team_id: int, request: RegistrationRequest, session: Session = Depends(get_session)
):
    """
    Register a player into a team. The player starts as `pending`.

    Failure reasons are returned in `detail`:
    - 404 "Game not found" / "Team not found"
    - 409 "Team is full"
    - 409 "You have already registered for this game"
    """
    proof = ProofFile(name=request.proof_file.name, type=request.proof_file.type, url=request.proof_file.url)
    try:
        result = register_player(session, game_id, team_id, request.name, request.contact, proof)
    except PersistenceFailure as e:
        raise HTTPException(status_code=503, detail=e.reason)

    if not result.success:
        if isinstance(result.error, NotFound):
            raise HTTPException(status_code=404, detail=result.reason)
        if isinstance(result.error, (CapacityExceeded, DuplicateRegistration)):
            raise HTTPException(status_code=409, detail=result.reason)
        raise HTTPException(status_code=400, detail=result.reason)

    return RegistrationResponse(success=True, player=player_to_response(result.player))


# ============================================================================
# Verification
# ============================================================================


@router.get("/registrations/pending", response_model=List[PendingRegistrationResponse])
def list_pending_registrations(session: Session = Depends(get_session)):
    """All pending registrations across every game (game, team, player order)"""
    try:
        pending = get_pending_registrations(session)
    except PersistenceFailure as e:
        raise HTTPException(status_code=503, detail=e.reason)
    return [
        PendingRegistrationResponse(
            game_id=entry.game.id,
            game_title=entry.game.title,
            team_name=entry.player.team.name,
            player=player_to_response(entry.player),
        )
        for entry in pending
    ]


@router.patch("/games/{game_id}/players/{player_id}/status", response_model=PlayerResponse)
def set_player_status(
    game_id: int, player_id: int, request: StatusUpdateRequest, session: Session = Depends(get_session)
):
    """Confirm or reject a registration. Re-sending the current status is a no-op."""
    try:
        player = update_player_status(session, game_id, player_id, request.status.value)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.reason)
    except InvalidStatusTransition as e:
        raise HTTPException(status_code=409, detail=e.reason)
    except PersistenceFailure as e:
        raise HTTPException(status_code=503, detail=e.reason)
    return player_to_response(player)


@router.get("/games/{game_id}/notifications", response_model=List[SmsLogResponse])
def list_notifications(game_id: int, session: Session = Depends(get_session)):
    """SMS notifications sent for registration decisions in a game"""
    get_game_or_404(session, game_id)
    try:
        return session.exec(select(SmsLog).where(SmsLog.game_id == game_id).order_by(SmsLog.id)).all()
    except SQLAlchemyError:
        raise HTTPException(status_code=503, detail=PersistenceFailure().reason)
