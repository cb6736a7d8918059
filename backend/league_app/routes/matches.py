from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from league_app.database import get_session
from league_app.errors import LeagueError
from league_app.models.match import Match
from league_app.services import match_recording
from league_app.services.match_recording import ParticipantInput
from league_app.utils.guards import acting_user_id, http_error

router = APIRouter()


class ParticipantPayload(BaseModel):
    player_id: int
    score: int
    result: Optional[str] = None


class MatchCreate(BaseModel):
    match_date: datetime
    participants: List[ParticipantPayload]
    fixture_id: Optional[int] = None


class ScoreEdit(BaseModel):
    scores: Dict[int, int]


class ParticipantResponse(BaseModel):
    player_id: int
    score: int
    result: str

    class Config:
        from_attributes = True


class MatchResponse(BaseModel):
    id: int
    league_id: int
    fixture_id: Optional[int]
    match_date: datetime
    recorded_by: int
    status: str
    is_disputed: bool
    disputed_by: Optional[int]
    participants: List[ParticipantResponse]


def _match_response(session: Session, match: Match) -> MatchResponse:
    return MatchResponse(
        id=match.id,
        league_id=match.league_id,
        fixture_id=match.fixture_id,
        match_date=match.match_date,
        recorded_by=match.recorded_by,
        status=match.status,
        is_disputed=match.is_disputed,
        disputed_by=match.disputed_by,
        participants=[
            ParticipantResponse.model_validate(p) for p in match_recording.list_participants(session, match.id)
        ],
    )


@router.post("/leagues/{league_id}/matches", response_model=MatchResponse, status_code=201)
def record_match(
    league_id: int,
    payload: MatchCreate,
    user_id: int = Depends(acting_user_id),
    session: Session = Depends(get_session),
) -> MatchResponse:
    """Record a played match; completes the linked fixture when fixture_id is given"""
    try:
        match = match_recording.record_match(
            session,
            league_id,
            recorded_by=user_id,
            match_date=payload.match_date,
            participants=[ParticipantInput(p.player_id, p.score, p.result) for p in payload.participants],
            fixture_id=payload.fixture_id,
        )
    except LeagueError as e:
        raise http_error(e)
    return _match_response(session, match)


@router.get("/matches/{match_id}", response_model=MatchResponse)
def get_match(match_id: int, session: Session = Depends(get_session)) -> MatchResponse:
    try:
        match = match_recording.get_match(session, match_id)
    except LeagueError as e:
        raise http_error(e)
    return _match_response(session, match)


@router.patch("/matches/{match_id}/scores", response_model=MatchResponse)
def edit_scores(
    match_id: int,
    payload: ScoreEdit,
    user_id: int = Depends(acting_user_id),
    session: Session = Depends(get_session),
) -> MatchResponse:
    """Correct scores outside a dispute (409 while the match is disputed)"""
    try:
        match = match_recording.edit_match_scores(session, match_id, user_id, payload.scores)
    except LeagueError as e:
        raise http_error(e)
    return _match_response(session, match)
