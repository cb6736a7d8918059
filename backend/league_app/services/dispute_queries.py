"""
Dispute read side.

Visibility: only participants of the disputed match may see a dispute.
Single reads by anyone else fail with NotParticipant; match listings come
back empty for them.
"""

from typing import List

from sqlmodel import Session, select

from league_app.errors import DisputeNotFound, NotParticipant
from league_app.models.dispute import DISPUTE_OPEN, Dispute
from league_app.models.match import Match, MatchParticipant


def _is_participant(session: Session, match_id: int, player_id: int) -> bool:
    row = session.exec(
        select(MatchParticipant.id).where(
            MatchParticipant.match_id == match_id,
            MatchParticipant.player_id == player_id,
        )
    ).first()
    return row is not None


def get_dispute_for_viewer(session: Session, dispute_id: int, viewer_id: int) -> Dispute:
    dispute = session.get(Dispute, dispute_id)
    if not dispute:
        raise DisputeNotFound(f"Dispute {dispute_id} not found")
    if not _is_participant(session, dispute.match_id, viewer_id):
        raise NotParticipant(f"Player {viewer_id} cannot view dispute {dispute_id}")
    return dispute


def list_match_disputes(session: Session, match_id: int, viewer_id: int) -> List[Dispute]:
    """Newest first."""
    if not _is_participant(session, match_id, viewer_id):
        return []
    return list(
        session.exec(
            select(Dispute)
            .where(Dispute.match_id == match_id)
            .order_by(Dispute.created_at.desc(), Dispute.id.desc())
        ).all()
    )


def list_league_open_disputes(session: Session, league_id: int, viewer_id: int) -> List[Dispute]:
    """Open disputes in a league on matches the viewer played, newest first."""
    query = (
        select(Dispute)
        .join(Match, Match.id == Dispute.match_id)
        .join(MatchParticipant, MatchParticipant.match_id == Match.id)
        .where(
            Match.league_id == league_id,
            Dispute.status == DISPUTE_OPEN,
            MatchParticipant.player_id == viewer_id,
        )
        .order_by(Dispute.created_at.desc(), Dispute.id.desc())
    )
    return list(session.exec(query).all())
