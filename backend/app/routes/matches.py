"""
Match API Routes
Round robin generation and result entry for a game's matches.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlmodel import Session

from app.database import get_session
from app.routes.games import MatchResponse, get_game_or_404, match_to_response
from app.services.errors import InsufficientTeams, InvalidResult, NotFound, PersistenceFailure
from app.services.match_generator import generate_matches
from app.services.result_recorder import Scorer, update_match_result

router = APIRouter()


class ScorerIn(BaseModel):
    player_id: int
    player_name: str = ""
    goals: int = 1


class MatchResultRequest(BaseModel):
    score_a: int
    score_b: int
    scorers_a: List[ScorerIn] = Field(default_factory=list)
    scorers_b: List[ScorerIn] = Field(default_factory=list)


class GenerateMatchesResponse(BaseModel):
    game_id: int
    matches_count: int
    matches: List[MatchResponse]


@router.post("/games/{game_id}/matches/generate", response_model=GenerateMatchesResponse)
def generate_game_matches(game_id: int, session: Session = Depends(get_session)):
    """
    Generate the round robin match list for a game.

    Every pair of teams plays once, in random order. Any existing match list,
    including recorded results, is replaced.
    """
    try:
        matches = generate_matches(session, game_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.reason)
    except InsufficientTeams as e:
        raise HTTPException(status_code=409, detail=e.reason)
    except PersistenceFailure as e:
        raise HTTPException(status_code=503, detail=e.reason)

    return GenerateMatchesResponse(
        game_id=game_id,
        matches_count=len(matches),
        matches=[match_to_response(m) for m in matches],
    )


@router.get("/games/{game_id}/matches", response_model=List[MatchResponse])
def list_matches(game_id: int, session: Session = Depends(get_session)):
    """Matches of a game in published (shuffled) order"""
    game = get_game_or_404(session, game_id)
    return [match_to_response(m) for m in game.matches]


@router.get("/games/{game_id}/matches/{match_id}", response_model=MatchResponse)
def get_match(game_id: int, match_id: int, session: Session = Depends(get_session)):
    """One match with its result and outcome"""
    game = get_game_or_404(session, game_id)
    match = next((m for m in game.matches if m.id == match_id), None)
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return match_to_response(match)


@router.put("/games/{game_id}/matches/{match_id}/result", response_model=MatchResponse)
def record_match_result(
    game_id: int, match_id: int, payload: MatchResultRequest, session: Session = Depends(get_session)
):
    """Record the final score and scorers of a match"""
    try:
        match = update_match_result(
            session,
            game_id,
            match_id,
            payload.score_a,
            payload.score_b,
            [Scorer(**s.model_dump()) for s in payload.scorers_a],
            [Scorer(**s.model_dump()) for s in payload.scorers_b],
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.reason)
    except InvalidResult as e:
        raise HTTPException(status_code=422, detail=e.reason)
    except PersistenceFailure as e:
        raise HTTPException(status_code=503, detail=e.reason)
    return match_to_response(match)
