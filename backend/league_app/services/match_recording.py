"""
Match recording and ordinary score edits.

A match has exactly two distinct participants, both active league members.
Recording against a fixture requires the fixture to be pending and the
participants to equal its pairing; the fixture then becomes completed.

While a match is disputed its scores belong to the dispute coordinator, and
ordinary edits are refused.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlmodel import Session, select

from league_app.errors import (
    FixtureNotFound,
    FixtureNotPending,
    InvalidMatch,
    InvalidScores,
    MatchNotFound,
    MatchUnderDispute,
    NotLeagueMember,
    NotParticipant,
)
from league_app.models.fixture import FIXTURE_COMPLETED, FIXTURE_PENDING, Fixture
from league_app.models.match import RESULT_DRAW, RESULT_LOSS, RESULT_WIN, Match, MatchParticipant
from league_app.services.league_service import is_active_member, require_league
from league_app.services.stores import SqlMatchStore, derive_results
from league_app.utils.clock import as_naive_utc
from league_app.utils.locks import match_locks

logger = logging.getLogger(__name__)

VALID_RESULT_SETS = ({RESULT_WIN, RESULT_LOSS}, {RESULT_DRAW})


@dataclass(frozen=True)
class ParticipantInput:
    player_id: int
    score: int
    result: Optional[str] = None  # derived from scores when omitted


def _validate_participants(participants: Sequence[ParticipantInput]) -> Dict[int, str]:
    if len(participants) != 2:
        raise InvalidMatch(f"A match has exactly two participants (got {len(participants)})")

    a, b = participants
    if a.player_id == b.player_id:
        raise InvalidMatch("Match participants must be distinct")

    for p in participants:
        if isinstance(p.score, bool) or not isinstance(p.score, int) or p.score < 0:
            raise InvalidScores(f"Score for player {p.player_id} must be a non-negative integer")

    derived = derive_results({a.player_id: a.score, b.player_id: b.score})
    if a.result is None and b.result is None:
        return derived

    results = {a.result, b.result}
    if results not in VALID_RESULT_SETS:
        raise InvalidMatch(f"Inconsistent results: {a.result}/{b.result}")
    if a.result != derived[a.player_id]:
        raise InvalidMatch("Results do not agree with scores")
    return {a.player_id: a.result, b.player_id: b.result}


def record_match(
    session: Session,
    league_id: int,
    recorded_by: int,
    match_date: datetime,
    participants: Sequence[ParticipantInput],
    fixture_id: Optional[int] = None,
) -> Match:
    require_league(session, league_id)
    results = _validate_participants(participants)

    for p in participants:
        if not is_active_member(session, league_id, p.player_id):
            raise NotLeagueMember(f"Player {p.player_id} is not an active member of league {league_id}")
    if not is_active_member(session, league_id, recorded_by):
        raise NotLeagueMember(f"Player {recorded_by} is not an active member of league {league_id}")

    fixture: Optional[Fixture] = None
    if fixture_id is not None:
        fixture = session.get(Fixture, fixture_id)
        if not fixture or fixture.league_id != league_id:
            raise FixtureNotFound(f"Fixture {fixture_id} not found in league {league_id}")
        if fixture.status != FIXTURE_PENDING:
            raise FixtureNotPending(f"Fixture {fixture_id} is {fixture.status}")
        if {fixture.home_player_id, fixture.away_player_id} != {p.player_id for p in participants}:
            raise InvalidMatch(f"Participants do not match the pairing of fixture {fixture_id}")

    try:
        match = Match(
            league_id=league_id,
            fixture_id=fixture_id,
            match_date=as_naive_utc(match_date),
            recorded_by=recorded_by,
        )
        session.add(match)
        session.flush()

        for p in participants:
            session.add(
                MatchParticipant(
                    match_id=match.id,
                    player_id=p.player_id,
                    score=p.score,
                    result=results[p.player_id],
                )
            )

        if fixture is not None:
            fixture.status = FIXTURE_COMPLETED
            fixture.match_id = match.id
            winners = [pid for pid, res in results.items() if res == RESULT_WIN]
            fixture.winner_id = winners[0] if winners else None
            session.add(fixture)

        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(match)
    logger.info("Recorded match %s in league %s (fixture %s)", match.id, league_id, fixture_id)
    return match


def get_match(session: Session, match_id: int) -> Match:
    match = session.get(Match, match_id)
    if not match:
        raise MatchNotFound(f"Match {match_id} not found")
    return match


def list_participants(session: Session, match_id: int) -> List[MatchParticipant]:
    return list(
        session.exec(
            select(MatchParticipant).where(MatchParticipant.match_id == match_id).order_by(MatchParticipant.id)
        ).all()
    )


def edit_match_scores(session: Session, match_id: int, edited_by: int, scores: Dict[int, int]) -> Match:
    """
    Ordinary correction by a participant; refused while a dispute is open.

    Runs under the same per-match lock as the dispute coordinator, and the
    write only lands if the row is still undisputed at UPDATE time.
    """
    store = SqlMatchStore(session)
    with match_locks.hold(match_id):
        session.expire_all()
        try:
            match = store.lock_match(match_id)
            if match.is_disputed:
                raise MatchUnderDispute(
                    f"Match {match_id} is under dispute; resolve or withdraw the dispute first"
                )

            participant_ids = {p.player_id for p in list_participants(session, match_id)}
            if edited_by not in participant_ids:
                raise NotParticipant(f"Player {edited_by} is not a participant of match {match_id}")
            for player_id, score in scores.items():
                if player_id not in participant_ids:
                    raise InvalidScores(f"Player {player_id} is not a participant of match {match_id}")
                if isinstance(score, bool) or not isinstance(score, int) or score < 0:
                    raise InvalidScores(f"Score for player {player_id} must be a non-negative integer")

            if not store.claim_undisputed(match_id):
                logger.warning("Score edit on match %s lost to a dispute", match_id)
                raise MatchUnderDispute(
                    f"Match {match_id} is under dispute; resolve or withdraw the dispute first"
                )
            store.update_participant_scores(match_id, scores)
            session.commit()
        except Exception:
            session.rollback()
            raise

        session.refresh(match)
    return match
