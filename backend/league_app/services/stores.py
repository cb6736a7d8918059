"""
SQLModel implementations of the roster, match, fixture and dispute stores.

All stores share the caller's Session and never commit; the caller owns the
transaction boundary. Writes are flushed so constraint violations surface
inside the caller's critical section.
"""

from typing import Dict, List, Mapping, Optional, Sequence

from sqlalchemy import update
from sqlmodel import Session, select

from league_app.errors import DisputeNotFound, MatchNotFound
from league_app.models.dispute import DISPUTE_OPEN, Dispute
from league_app.models.fixture import Fixture
from league_app.models.league import MEMBER_ACTIVE, LeagueMember
from league_app.models.match import RESULT_DRAW, RESULT_LOSS, RESULT_WIN, Match, MatchParticipant
from league_app.models.player import Player
from league_app.services.fixture_planner import PlannedFixture
from league_app.services.ports import MatchSnapshot, ParticipantScore
from league_app.services.round_robin import Member
from league_app.utils.clock import utc_now


def derive_results(scores: Mapping[int, int]) -> Dict[int, str]:
    """Higher score wins, equal scores draw (two-participant matches)."""
    (a, score_a), (b, score_b) = scores.items()
    if score_a == score_b:
        return {a: RESULT_DRAW, b: RESULT_DRAW}
    if score_a > score_b:
        return {a: RESULT_WIN, b: RESULT_LOSS}
    return {a: RESULT_LOSS, b: RESULT_WIN}


def scores_to_json(scores: Optional[Mapping[int, int]]) -> Optional[Dict[str, int]]:
    if scores is None:
        return None
    return {str(player_id): score for player_id, score in scores.items()}


def scores_from_json(raw: Optional[Mapping[str, int]]) -> Dict[int, int]:
    if not raw:
        return {}
    return {int(player_id): score for player_id, score in raw.items()}


class SqlRosterProvider:
    def __init__(self, session: Session):
        self.session = session

    def list_active_members(self, league_id: int) -> List[Member]:
        """Active members ordered by join time, then membership id."""
        rows = self.session.exec(
            select(LeagueMember, Player)
            .join(Player, Player.id == LeagueMember.player_id)
            .where(LeagueMember.league_id == league_id, LeagueMember.status == MEMBER_ACTIVE)
            .order_by(LeagueMember.joined_at, LeagueMember.id)
        ).all()
        return [Member(id=player.id, display_name=player.display_name, active=True) for _, player in rows]


class SqlMatchStore:
    def __init__(self, session: Session):
        self.session = session

    def _participants(self, match_id: int) -> List[MatchParticipant]:
        return list(
            self.session.exec(
                select(MatchParticipant)
                .where(MatchParticipant.match_id == match_id)
                .order_by(MatchParticipant.id)
                .execution_options(populate_existing=True)
            ).all()
        )

    def lock_match(self, match_id: int) -> Match:
        """SELECT ... FOR UPDATE on the match row (no-op on SQLite)."""
        match = self.session.exec(
            select(Match).where(Match.id == match_id).with_for_update().execution_options(populate_existing=True)
        ).first()
        if match is None:
            raise MatchNotFound(f"Match {match_id} not found")
        return match

    def claim_undisputed(self, match_id: int) -> bool:
        """
        Touch the match only while it is not disputed. False means a dispute
        was opened since the caller last read the row.
        """
        table = Match.__table__
        result = self.session.connection().execute(
            update(table)
            .where(table.c.id == match_id, table.c.is_disputed.is_(False))
            .values(updated_at=utc_now())
        )
        return result.rowcount == 1

    def get_match(self, match_id: int) -> MatchSnapshot:
        match = self.session.exec(
            select(Match).where(Match.id == match_id).execution_options(populate_existing=True)
        ).first()
        if match is None:
            raise MatchNotFound(f"Match {match_id} not found")
        return MatchSnapshot(
            id=match.id,
            league_id=match.league_id,
            participants=tuple(
                ParticipantScore(player_id=p.player_id, score=p.score, result=p.result)
                for p in self._participants(match_id)
            ),
            is_disputed=match.is_disputed,
            disputed_by=match.disputed_by,
        )

    def update_participant_scores(self, match_id: int, scores: Mapping[int, int]) -> None:
        """
        Overwrite listed scores, leave the rest, then recompute results and the
        winner of the linked fixture (if any).
        """
        match = self.session.get(Match, match_id)
        participants = self._participants(match_id)
        if match is None or not participants:
            raise MatchNotFound(f"Match {match_id} not found")

        for participant in participants:
            if participant.player_id in scores:
                participant.score = scores[participant.player_id]

        if len(participants) == 2:
            results = derive_results({p.player_id: p.score for p in participants})
            for participant in participants:
                participant.result = results[participant.player_id]

        for participant in participants:
            self.session.add(participant)

        if match.fixture_id is not None:
            fixture = self.session.get(Fixture, match.fixture_id)
            if fixture is not None:
                winners = [p.player_id for p in participants if p.result == RESULT_WIN]
                fixture.winner_id = winners[0] if winners else None
                self.session.add(fixture)

        self.session.flush()

    def set_dispute_flag(self, match_id: int, flag: bool, disputed_by: Optional[int] = None) -> None:
        match = self.session.get(Match, match_id)
        if match is None:
            raise MatchNotFound(f"Match {match_id} not found")
        match.is_disputed = flag
        match.disputed_by = disputed_by if flag else None
        match.updated_at = utc_now()
        self.session.add(match)
        self.session.flush()


class SqlFixtureStore:
    def __init__(self, session: Session):
        self.session = session

    def save_fixtures(
        self, league_id: int, season_id: Optional[int], fixtures: Sequence[PlannedFixture]
    ) -> List[Fixture]:
        rows: List[Fixture] = []
        for planned in fixtures:
            row = Fixture(
                league_id=league_id,
                season_id=season_id,
                round_index=planned.round_index,
                sequence_in_round=planned.sequence_in_round,
                home_player_id=planned.home_player_id,
                away_player_id=planned.away_player_id,
                scheduled_date=planned.scheduled_date,
                submission_deadline=planned.submission_deadline,
                status=planned.status,
            )
            self.session.add(row)
            rows.append(row)
        self.session.flush()
        return rows

    def fixtures_exist_for(self, season_id: int) -> bool:
        existing = self.session.exec(select(Fixture.id).where(Fixture.season_id == season_id).limit(1)).first()
        return existing is not None


class SqlDisputeStore:
    def __init__(self, session: Session):
        self.session = session

    def insert_dispute(self, dispute: Dispute) -> int:
        # The partial unique index uq_dispute_open_match rejects a second open row
        self.session.add(dispute)
        self.session.flush()
        return dispute.id

    def get_dispute(self, dispute_id: int) -> Optional[Dispute]:
        return self.session.exec(
            select(Dispute).where(Dispute.id == dispute_id).execution_options(populate_existing=True)
        ).first()

    def get_open_dispute(self, match_id: int) -> Optional[Dispute]:
        return self.session.exec(
            select(Dispute)
            .where(Dispute.match_id == match_id, Dispute.status == DISPUTE_OPEN)
            .execution_options(populate_existing=True)
        ).first()

    def update_dispute(
        self,
        dispute_id: int,
        status: str,
        resolution: Optional[str] = None,
        notes: Optional[str] = None,
        resolved_by: Optional[int] = None,
        resolution_scores: Optional[Mapping[int, int]] = None,
    ) -> Dispute:
        dispute = self.session.get(Dispute, dispute_id)
        if dispute is None:
            raise DisputeNotFound(f"Dispute {dispute_id} not found")

        now = utc_now()
        dispute.status = status
        dispute.resolution = resolution
        dispute.resolution_notes = notes
        dispute.updated_at = now
        if resolved_by is not None:
            dispute.resolved_by = resolved_by
            dispute.resolved_at = now
        if resolution_scores is not None:
            dispute.resolution_scores = scores_to_json(resolution_scores)

        self.session.add(dispute)
        self.session.flush()
        return dispute
