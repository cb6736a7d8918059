from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator, model_validator
from sqlmodel import Session, select

from league_app.database import get_session
from league_app.errors import LeagueError
from league_app.models.league import League
from league_app.services import league_service
from league_app.utils.guards import acting_user_id, http_error

router = APIRouter()


class PlayerCreate(BaseModel):
    display_name: str
    email: Optional[str] = None

    @field_validator("display_name")
    @classmethod
    def validate_display_name(cls, v):
        if not v or not v.strip():
            raise ValueError("display_name is required")
        return v.strip()


class PlayerResponse(BaseModel):
    id: int
    display_name: str
    email: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class LeagueCreate(BaseModel):
    name: str
    game_type: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("name is required")
        return v.strip()


class LeagueResponse(BaseModel):
    id: int
    name: str
    game_type: str
    description: Optional[str]
    created_by: int
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


class MemberJoin(BaseModel):
    player_id: int


class MemberStatusUpdate(BaseModel):
    active: bool


class MemberResponse(BaseModel):
    id: int
    league_id: int
    player_id: int
    role: str
    status: str
    joined_at: datetime

    class Config:
        from_attributes = True


class SeasonCreate(BaseModel):
    name: str
    start_date: date
    end_date: Optional[date] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def validate_date_range(self):
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must be >= start_date")
        return self


class SeasonResponse(BaseModel):
    id: int
    league_id: int
    name: str
    description: Optional[str]
    season_number: int
    start_date: date
    end_date: Optional[date]
    status: str
    created_at: datetime

    class Config:
        from_attributes = True


@router.post("/players", response_model=PlayerResponse, status_code=201)
def create_player(payload: PlayerCreate, session: Session = Depends(get_session)):
    """Register a player profile"""
    return league_service.create_player(session, payload.display_name, payload.email)


@router.get("/players/{player_id}", response_model=PlayerResponse)
def get_player(player_id: int, session: Session = Depends(get_session)):
    try:
        return league_service.require_player(session, player_id)
    except LeagueError as e:
        raise http_error(e)


@router.post("/leagues", response_model=LeagueResponse, status_code=201)
def create_league(
    payload: LeagueCreate,
    user_id: int = Depends(acting_user_id),
    session: Session = Depends(get_session),
):
    """Create a league; the caller becomes its creator and first member"""
    try:
        return league_service.create_league(
            session, payload.name, payload.game_type, created_by=user_id, description=payload.description
        )
    except LeagueError as e:
        raise http_error(e)


@router.get("/leagues", response_model=List[LeagueResponse])
def list_leagues(session: Session = Depends(get_session)):
    return session.exec(select(League).order_by(League.id)).all()


@router.get("/leagues/{league_id}", response_model=LeagueResponse)
def get_league(league_id: int, session: Session = Depends(get_session)):
    try:
        return league_service.require_league(session, league_id)
    except LeagueError as e:
        raise http_error(e)


@router.post("/leagues/{league_id}/members", response_model=MemberResponse, status_code=201)
def join_league(league_id: int, payload: MemberJoin, session: Session = Depends(get_session)):
    try:
        return league_service.join_league(session, league_id, payload.player_id)
    except LeagueError as e:
        raise http_error(e)


@router.get("/leagues/{league_id}/members", response_model=List[MemberResponse])
def list_members(league_id: int, session: Session = Depends(get_session)):
    try:
        return league_service.list_members(session, league_id)
    except LeagueError as e:
        raise http_error(e)


@router.patch("/leagues/{league_id}/members/{player_id}", response_model=MemberResponse)
def update_member_status(
    league_id: int, player_id: int, payload: MemberStatusUpdate, session: Session = Depends(get_session)
):
    """Activate or deactivate a membership (inactive members are not scheduled)"""
    try:
        return league_service.set_member_status(session, league_id, player_id, payload.active)
    except LeagueError as e:
        raise http_error(e)


@router.post("/leagues/{league_id}/seasons", response_model=SeasonResponse, status_code=201)
def create_season(league_id: int, payload: SeasonCreate, session: Session = Depends(get_session)):
    try:
        return league_service.create_season(
            session,
            league_id,
            payload.name,
            payload.start_date,
            end_date=payload.end_date,
            description=payload.description,
        )
    except LeagueError as e:
        raise http_error(e)


@router.get("/leagues/{league_id}/seasons", response_model=List[SeasonResponse])
def list_seasons(league_id: int, session: Session = Depends(get_session)):
    try:
        return league_service.list_seasons(session, league_id)
    except LeagueError as e:
        raise http_error(e)
