"""
Season fixture endpoints: plan (one-shot per season), list, void, clear.
"""
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from league_app.database import get_session
from league_app.errors import LeagueError
from league_app.services import fixture_service
from league_app.services.league_service import require_active_member, require_league
from league_app.utils.guards import acting_user_id, http_error

router = APIRouter()


class FixturePlanRequest(BaseModel):
    start_date: date
    interval_days: int = 7
    submission_window_hours: int = 48
    return_fixtures: bool = False


class FixtureResponse(BaseModel):
    id: int
    league_id: int
    season_id: Optional[int]
    round_index: int
    sequence_in_round: int
    home_player_id: int
    away_player_id: int
    scheduled_date: datetime
    submission_deadline: datetime
    status: str
    match_id: Optional[int] = None
    winner_id: Optional[int] = None

    class Config:
        from_attributes = True


class ByeResponse(BaseModel):
    round_index: int
    player_id: int


class FixturePlanResponse(BaseModel):
    league_id: int
    season_id: int
    total_rounds: int
    total_fixtures: int
    fixtures: List[FixtureResponse]
    byes: List[ByeResponse]


@router.post(
    "/leagues/{league_id}/seasons/{season_id}/fixtures",
    response_model=FixturePlanResponse,
    status_code=201,
)
def plan_fixtures(
    league_id: int,
    season_id: int,
    payload: FixturePlanRequest,
    session: Session = Depends(get_session),
    user_id: int = Depends(acting_user_id),
) -> FixturePlanResponse:
    """
    Generate the season's round-robin fixtures from the active roster.

    Fails with 409 if the season already has fixtures, 422 for a bad cadence
    or fewer than 2 active players. Only active members may plan.
    """
    try:
        require_active_member(session, league_id, user_id)
        result = fixture_service.plan_season_fixtures(
            session,
            league_id,
            season_id,
            payload.start_date,
            payload.interval_days,
            payload.submission_window_hours,
            return_fixtures=payload.return_fixtures,
        )
    except LeagueError as e:
        raise http_error(e)

    return FixturePlanResponse(
        league_id=result.league_id,
        season_id=result.season_id,
        total_rounds=result.total_rounds,
        total_fixtures=result.total_fixtures,
        fixtures=[FixtureResponse.model_validate(f) for f in result.fixtures],
        byes=[ByeResponse(round_index=b.round_index, player_id=b.player_id) for b in result.byes],
    )


@router.get("/leagues/{league_id}/seasons/{season_id}/fixtures", response_model=List[FixtureResponse])
def list_season_fixtures(league_id: int, season_id: int, session: Session = Depends(get_session)):
    try:
        require_league(session, league_id)
    except LeagueError as e:
        raise http_error(e)
    return fixture_service.list_fixtures(session, league_id, season_id)


@router.delete("/leagues/{league_id}/seasons/{season_id}/fixtures")
def delete_season_fixtures(
    league_id: int,
    season_id: int,
    session: Session = Depends(get_session),
    user_id: int = Depends(acting_user_id),
):
    """Clear an unplayed season schedule so it can be planned again"""
    try:
        require_active_member(session, league_id, user_id)
        deleted = fixture_service.delete_season_fixtures(session, league_id, season_id)
    except LeagueError as e:
        raise http_error(e)
    return {"deleted": deleted}


@router.get("/leagues/{league_id}/fixtures", response_model=List[FixtureResponse])
def list_league_fixtures(
    league_id: int,
    season_id: Optional[int] = None,
    player_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    try:
        require_league(session, league_id)
    except LeagueError as e:
        raise http_error(e)
    if player_id is not None:
        return fixture_service.list_player_fixtures(session, league_id, player_id, season_id)
    return fixture_service.list_fixtures(session, league_id, season_id)


@router.get("/leagues/{league_id}/fixtures/overdue", response_model=List[FixtureResponse])
def list_overdue_fixtures(league_id: int, session: Session = Depends(get_session)):
    try:
        require_league(session, league_id)
    except LeagueError as e:
        raise http_error(e)
    return fixture_service.list_overdue_fixtures(session, league_id)


@router.post("/fixtures/{fixture_id}/void", response_model=FixtureResponse)
def void_fixture(
    fixture_id: int,
    session: Session = Depends(get_session),
    user_id: int = Depends(acting_user_id),
):
    try:
        fixture = fixture_service.get_fixture(session, fixture_id)
        require_active_member(session, fixture.league_id, user_id)
        return fixture_service.void_fixture(session, fixture_id)
    except LeagueError as e:
        raise http_error(e)
