"""
Season fixture lifecycle: plan, list, void, clear.

plan_season_fixtures is the one-click pipeline:
1. Refuse if the season already has fixtures (no silent duplicate schedule)
2. Load the active roster
3. Generate round-robin rounds (optionally with return fixtures)
4. Place rounds on the calendar
5. Persist pending fixtures in one transaction

Concurrent plans for one season queue on the in-process season lock and on
the season row (FOR UPDATE) before the existence check. Planners in other
processes that slip past both hit the (season, round, sequence) unique
constraint, and the losing insert becomes FixturesAlreadyPlanned.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Union

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from league_app.errors import FixtureNotFound, FixtureNotPending, FixturesAlreadyPlanned, InsufficientPlayers
from league_app.models.fixture import FIXTURE_PENDING, FIXTURE_VOID, Fixture
from league_app.services import fixture_planner, round_robin
from league_app.services.league_service import require_league, require_season
from league_app.services.ports import FixtureStore, RosterProvider
from league_app.services.stores import SqlFixtureStore, SqlRosterProvider
from league_app.utils.clock import as_naive_utc, utc_now
from league_app.utils.locks import season_locks

logger = logging.getLogger(__name__)


@dataclass
class ByeRecord:
    round_index: int
    player_id: int


@dataclass
class FixturePlanResult:
    league_id: int
    season_id: int
    total_rounds: int
    fixtures: List[Fixture] = field(default_factory=list)
    byes: List[ByeRecord] = field(default_factory=list)

    @property
    def total_fixtures(self) -> int:
        return len(self.fixtures)


def plan_season_fixtures(
    session: Session,
    league_id: int,
    season_id: int,
    start_date: Union[date, datetime],
    interval_days: int,
    submission_window_hours: int,
    return_fixtures: bool = False,
    now: Optional[datetime] = None,
    allow_past_start: Optional[bool] = None,
) -> FixturePlanResult:
    require_league(session, league_id)

    fixture_store: FixtureStore = SqlFixtureStore(session)
    roster: RosterProvider = SqlRosterProvider(session)
    with season_locks.hold(season_id):
        # Drop anything read before the lock was held
        session.expire_all()
        try:
            require_season(session, league_id, season_id, for_update=True)
            if fixture_store.fixtures_exist_for(season_id):
                raise FixturesAlreadyPlanned(
                    f"Season {season_id} already has fixtures; delete them before re-planning"
                )

            members = roster.list_active_members(league_id)
            rounds = round_robin.generate(members, cycles=2 if return_fixtures else 1)
            if not rounds:
                raise InsufficientPlayers(
                    f"Round-robin requires at least 2 active players (league has {len(members)})"
                )

            planned = fixture_planner.plan(
                rounds,
                start_date,
                interval_days,
                submission_window_hours,
                now=now,
                allow_past_start=allow_past_start,
            )
            rows = fixture_store.save_fixtures(league_id, season_id, planned)
            session.commit()
        except IntegrityError:
            session.rollback()
            logger.warning("Concurrent plan lost for season %s (unique constraint)", season_id)
            raise FixturesAlreadyPlanned(f"Season {season_id} already has fixtures; delete them before re-planning")
        except Exception:
            session.rollback()
            raise

        for row in rows:
            session.refresh(row)

    byes = [ByeRecord(round_index=r.index, player_id=r.bye.id) for r in rounds if r.bye is not None]
    logger.info(
        "Planned season %s for league %s: %d rounds, %d fixtures, %d byes",
        season_id,
        league_id,
        len(rounds),
        len(rows),
        len(byes),
    )
    return FixturePlanResult(
        league_id=league_id,
        season_id=season_id,
        total_rounds=len(rounds),
        fixtures=rows,
        byes=byes,
    )


def list_fixtures(session: Session, league_id: int, season_id: Optional[int] = None) -> List[Fixture]:
    """Stable order: round_index, scheduled_date, sequence_in_round."""
    query = select(Fixture).where(Fixture.league_id == league_id)
    if season_id is not None:
        query = query.where(Fixture.season_id == season_id)
    query = query.order_by(Fixture.round_index, Fixture.scheduled_date, Fixture.sequence_in_round)
    return list(session.exec(query).all())


def list_player_fixtures(
    session: Session, league_id: int, player_id: int, season_id: Optional[int] = None
) -> List[Fixture]:
    query = select(Fixture).where(
        Fixture.league_id == league_id,
        or_(Fixture.home_player_id == player_id, Fixture.away_player_id == player_id),
    )
    if season_id is not None:
        query = query.where(Fixture.season_id == season_id)
    return list(session.exec(query.order_by(Fixture.round_index, Fixture.sequence_in_round)).all())


def list_overdue_fixtures(session: Session, league_id: int, now: Optional[datetime] = None) -> List[Fixture]:
    """Pending fixtures whose submission deadline has passed."""
    now = as_naive_utc(now) if now else utc_now()
    return list(
        session.exec(
            select(Fixture)
            .where(
                Fixture.league_id == league_id,
                Fixture.status == FIXTURE_PENDING,
                Fixture.submission_deadline < now,
            )
            .order_by(Fixture.submission_deadline, Fixture.id)
        ).all()
    )


def get_fixture(session: Session, fixture_id: int) -> Fixture:
    fixture = session.get(Fixture, fixture_id)
    if not fixture:
        raise FixtureNotFound(f"Fixture {fixture_id} not found")
    return fixture


def void_fixture(session: Session, fixture_id: int) -> Fixture:
    fixture = get_fixture(session, fixture_id)
    if fixture.status != FIXTURE_PENDING:
        raise FixtureNotPending(f"Fixture {fixture_id} is {fixture.status}; only pending fixtures can be voided")

    fixture.status = FIXTURE_VOID
    session.add(fixture)
    session.commit()
    session.refresh(fixture)
    return fixture


def delete_season_fixtures(session: Session, league_id: int, season_id: int) -> int:
    """
    Delete every fixture of a season so it can be re-planned.
    Refused once any fixture has a recorded match.
    """
    require_season(session, league_id, season_id)
    fixtures = session.exec(select(Fixture).where(Fixture.season_id == season_id)).all()

    played = [f.id for f in fixtures if f.match_id is not None]
    if played:
        raise FixtureNotPending(f"Season {season_id} has fixtures with recorded matches: {played}")

    for fixture in fixtures:
        session.delete(fixture)
    session.commit()
    logger.info("Deleted %d fixtures of season %s", len(fixtures), season_id)
    return len(fixtures)
