"""
Dispute endpoints. Every mutation goes through the shared DisputeCoordinator so
create / resolve / withdraw on one match are serialized.
"""
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from league_app.database import get_session
from league_app.errors import LeagueError
from league_app.models.dispute import Dispute
from league_app.services import dispute_queries
from league_app.services.dispute_coordinator import DisputeCoordinator
from league_app.services.stores import scores_from_json
from league_app.utils.guards import acting_user_id, http_error

router = APIRouter()

_coordinator = DisputeCoordinator()


def get_dispute_coordinator() -> DisputeCoordinator:
    return _coordinator


class DisputeCreate(BaseModel):
    reason: str
    proposed_scores: Optional[Dict[int, int]] = None


class DisputeResolve(BaseModel):
    resolution: str  # "accepted" | "rejected" | "modified"
    resolution_notes: Optional[str] = None
    new_scores: Optional[Dict[int, int]] = None


class DisputeResponse(BaseModel):
    id: int
    match_id: int
    disputed_by: int
    reason: str
    proposed_scores: Optional[Dict[int, int]] = None
    status: str
    resolution: Optional[str] = None
    resolution_scores: Optional[Dict[int, int]] = None
    resolved_by: Optional[int] = None
    resolved_at: Optional[datetime] = None
    resolution_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


def _dispute_response(dispute: Dispute) -> DisputeResponse:
    return DisputeResponse(
        id=dispute.id,
        match_id=dispute.match_id,
        disputed_by=dispute.disputed_by,
        reason=dispute.reason,
        proposed_scores=scores_from_json(dispute.proposed_scores) if dispute.proposed_scores else None,
        status=dispute.status,
        resolution=dispute.resolution,
        resolution_scores=scores_from_json(dispute.resolution_scores) if dispute.resolution_scores else None,
        resolved_by=dispute.resolved_by,
        resolved_at=dispute.resolved_at,
        resolution_notes=dispute.resolution_notes,
        created_at=dispute.created_at,
        updated_at=dispute.updated_at,
    )


@router.post("/matches/{match_id}/disputes", response_model=DisputeResponse, status_code=201)
def create_dispute(
    match_id: int,
    payload: DisputeCreate,
    user_id: int = Depends(acting_user_id),
    session: Session = Depends(get_session),
    coordinator: DisputeCoordinator = Depends(get_dispute_coordinator),
) -> DisputeResponse:
    """Challenge a recorded match (participants only; one open dispute per match)"""
    try:
        dispute = coordinator.create_dispute(session, match_id, user_id, payload.reason, payload.proposed_scores)
    except LeagueError as e:
        raise http_error(e)
    return _dispute_response(dispute)


@router.get("/matches/{match_id}/disputes", response_model=List[DisputeResponse])
def list_match_disputes(
    match_id: int,
    user_id: int = Depends(acting_user_id),
    session: Session = Depends(get_session),
) -> List[DisputeResponse]:
    return [_dispute_response(d) for d in dispute_queries.list_match_disputes(session, match_id, user_id)]


@router.get("/disputes/{dispute_id}", response_model=DisputeResponse)
def get_dispute(
    dispute_id: int,
    user_id: int = Depends(acting_user_id),
    session: Session = Depends(get_session),
) -> DisputeResponse:
    try:
        dispute = dispute_queries.get_dispute_for_viewer(session, dispute_id, user_id)
    except LeagueError as e:
        raise http_error(e)
    return _dispute_response(dispute)


@router.post("/disputes/{dispute_id}/resolve", response_model=DisputeResponse)
def resolve_dispute(
    dispute_id: int,
    payload: DisputeResolve,
    user_id: int = Depends(acting_user_id),
    session: Session = Depends(get_session),
    coordinator: DisputeCoordinator = Depends(get_dispute_coordinator),
) -> DisputeResponse:
    try:
        dispute = coordinator.resolve_dispute(
            session,
            dispute_id,
            user_id,
            payload.resolution,
            notes=payload.resolution_notes,
            new_scores=payload.new_scores,
        )
    except LeagueError as e:
        raise http_error(e)
    return _dispute_response(dispute)


@router.post("/disputes/{dispute_id}/withdraw", response_model=DisputeResponse)
def withdraw_dispute(
    dispute_id: int,
    user_id: int = Depends(acting_user_id),
    session: Session = Depends(get_session),
    coordinator: DisputeCoordinator = Depends(get_dispute_coordinator),
) -> DisputeResponse:
    try:
        dispute = coordinator.withdraw_dispute(session, dispute_id, user_id)
    except LeagueError as e:
        raise http_error(e)
    return _dispute_response(dispute)


@router.get("/leagues/{league_id}/disputes", response_model=List[DisputeResponse])
def list_league_disputes(
    league_id: int,
    user_id: int = Depends(acting_user_id),
    session: Session = Depends(get_session),
) -> List[DisputeResponse]:
    """Open disputes in the league on matches the caller played"""
    return [_dispute_response(d) for d in dispute_queries.list_league_open_disputes(session, league_id, user_id)]
