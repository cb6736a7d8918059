"""
Tests for recording matches and editing scores outside a dispute.
"""

from datetime import date, datetime

import pytest
from sqlmodel import Session

from league_app.errors import (
    FixtureNotPending,
    InvalidMatch,
    InvalidScores,
    MatchUnderDispute,
    NotLeagueMember,
    NotParticipant,
)
from league_app.models.fixture import FIXTURE_COMPLETED, Fixture
from league_app.models.match import RESULT_DRAW, RESULT_LOSS, RESULT_WIN
from league_app.services import fixture_service, league_service
from league_app.services.dispute_coordinator import DisputeCoordinator
from league_app.services.match_recording import (
    ParticipantInput,
    edit_match_scores,
    list_participants,
    record_match,
)

PLAYED_AT = datetime(2026, 3, 5, 19, 0)


def scores_of(session, match_id):
    return {p.player_id: (p.score, p.result) for p in list_participants(session, match_id)}


def test_record_derives_results(session: Session, make_league):
    league, (p1, p2) = make_league(2)

    match = record_match(session, league.id, p1.id, PLAYED_AT, [ParticipantInput(p1.id, 3), ParticipantInput(p2.id, 7)])

    assert match.id is not None
    assert match.is_disputed is False
    assert scores_of(session, match.id) == {p1.id: (3, RESULT_LOSS), p2.id: (7, RESULT_WIN)}


def test_record_draw(session: Session, make_league):
    league, (p1, p2) = make_league(2)

    match = record_match(session, league.id, p2.id, PLAYED_AT, [ParticipantInput(p1.id, 1), ParticipantInput(p2.id, 1)])

    assert {r for _, r in scores_of(session, match.id).values()} == {RESULT_DRAW}


def test_explicit_results_must_agree_with_scores(session: Session, make_league):
    league, (p1, p2) = make_league(2)

    with pytest.raises(InvalidMatch):
        record_match(
            session,
            league.id,
            p1.id,
            PLAYED_AT,
            [ParticipantInput(p1.id, 1, RESULT_WIN), ParticipantInput(p2.id, 5, RESULT_LOSS)],
        )


@pytest.mark.parametrize(
    "participants,error",
    [
        (lambda a, b: [ParticipantInput(a, 1)], InvalidMatch),
        (lambda a, b: [ParticipantInput(a, 1), ParticipantInput(a, 2)], InvalidMatch),
        (lambda a, b: [ParticipantInput(a, -1), ParticipantInput(b, 2)], InvalidScores),
    ],
)
def test_invalid_participants(session: Session, make_league, participants, error):
    league, (p1, p2) = make_league(2)

    with pytest.raises(error):
        record_match(session, league.id, p1.id, PLAYED_AT, participants(p1.id, p2.id))


def test_participants_must_be_active_members(session: Session, make_league):
    league, (p1, p2, p3) = make_league(3)
    outsider = league_service.create_player(session, "Outsider")

    with pytest.raises(NotLeagueMember):
        record_match(session, league.id, p1.id, PLAYED_AT, [ParticipantInput(p1.id, 1), ParticipantInput(outsider.id, 0)])

    league_service.set_member_status(session, league.id, p3.id, active=False)
    with pytest.raises(NotLeagueMember):
        record_match(session, league.id, p1.id, PLAYED_AT, [ParticipantInput(p1.id, 1), ParticipantInput(p3.id, 0)])


def test_recording_against_fixture_completes_it(session: Session, make_league):
    league, players = make_league(4)
    season = league_service.create_season(session, league.id, "Spring", date(2030, 1, 6))
    fixture = fixture_service.plan_season_fixtures(
        session, league.id, season.id, date(2030, 1, 6), 7, 48, now=datetime(2030, 1, 1)
    ).fixtures[0]
    home, away = fixture.home_player_id, fixture.away_player_id
    fixture_id = fixture.id

    match = record_match(
        session, league.id, away, PLAYED_AT, [ParticipantInput(away, 4), ParticipantInput(home, 6)], fixture_id=fixture_id
    )

    fixture = session.get(Fixture, fixture_id)
    assert fixture.status == FIXTURE_COMPLETED
    assert fixture.match_id == match.id
    assert fixture.winner_id == home
    assert match.fixture_id == fixture_id

    with pytest.raises(FixtureNotPending):
        record_match(
            session, league.id, home, PLAYED_AT, [ParticipantInput(home, 1), ParticipantInput(away, 0)], fixture_id=fixture_id
        )


def test_fixture_pairing_must_match(session: Session, make_league):
    league, players = make_league(4)
    season = league_service.create_season(session, league.id, "Spring", date(2030, 1, 6))
    fixture = fixture_service.plan_season_fixtures(
        session, league.id, season.id, date(2030, 1, 6), 7, 48, now=datetime(2030, 1, 1)
    ).fixtures[0]
    outsider = next(p.id for p in players if p.id not in (fixture.home_player_id, fixture.away_player_id))

    with pytest.raises(InvalidMatch):
        record_match(
            session,
            league.id,
            fixture.home_player_id,
            PLAYED_AT,
            [ParticipantInput(fixture.home_player_id, 1), ParticipantInput(outsider, 0)],
            fixture_id=fixture.id,
        )


def test_edit_scores_recomputes_results(session: Session, played_match):
    _, match, (p1, p2, _) = played_match

    edit_match_scores(session, match.id, p2.id, {p2.id: 12})

    assert scores_of(session, match.id) == {p1.id: (10, RESULT_LOSS), p2.id: (12, RESULT_WIN)}


def test_edit_scores_guards(session: Session, played_match):
    _, match, (p1, p2, p3) = played_match

    with pytest.raises(NotParticipant):
        edit_match_scores(session, match.id, p3.id, {p1.id: 1})
    with pytest.raises(InvalidScores):
        edit_match_scores(session, match.id, p1.id, {p3.id: 1})
    with pytest.raises(InvalidScores):
        edit_match_scores(session, match.id, p1.id, {p1.id: -3})


def test_edit_refused_while_disputed(session: Session, played_match):
    _, match, (p1, p2, _) = played_match
    DisputeCoordinator().create_dispute(session, match.id, p2.id, "Score was 8-10")

    with pytest.raises(MatchUnderDispute):
        edit_match_scores(session, match.id, p1.id, {p1.id: 11})
    assert scores_of(session, match.id)[p1.id] == (10, RESULT_WIN)
