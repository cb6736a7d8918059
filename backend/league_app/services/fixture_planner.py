"""
Fixture Planner

Places generated rounds on the calendar:
    scheduled_date      = start + k * interval_days   (k = 0-based round position)
    submission_deadline = scheduled_date + submission_window_hours

Pure: no persistence, no clock reads unless `now` is omitted.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Sequence, Union

from league_app import settings
from league_app.errors import InvalidCadence, StartDateInPast
from league_app.models.fixture import FIXTURE_PENDING
from league_app.services.round_robin import Round
from league_app.utils.clock import as_naive_utc, utc_now


@dataclass(frozen=True)
class PlannedFixture:
    round_index: int
    sequence_in_round: int
    home_player_id: int
    away_player_id: int
    scheduled_date: datetime
    submission_deadline: datetime
    status: str = FIXTURE_PENDING


def _as_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return as_naive_utc(value)
    return datetime.combine(value, time.min)


def validate_cadence(
    start_date: Union[date, datetime],
    interval_days: int,
    submission_window_hours: int,
    now: Optional[datetime] = None,
    allow_past_start: Optional[bool] = None,
) -> None:
    if interval_days <= 0:
        raise InvalidCadence(f"interval_days must be positive (got {interval_days})")
    if submission_window_hours <= 0:
        raise InvalidCadence(f"submission_window_hours must be positive (got {submission_window_hours})")

    if allow_past_start is None:
        allow_past_start = settings.ALLOW_PAST_START_DATE
    if allow_past_start:
        return

    now = as_naive_utc(now) if now else utc_now()
    if isinstance(start_date, datetime):
        in_past = as_naive_utc(start_date) < now
    else:
        # Whole-day start dates stay valid for the rest of that day
        in_past = start_date < now.date()
    if in_past:
        raise StartDateInPast(f"Start date {start_date.isoformat()} is before {now.isoformat()}")


def plan(
    rounds: Sequence[Round],
    start_date: Union[date, datetime],
    interval_days: int,
    submission_window_hours: int,
    now: Optional[datetime] = None,
    allow_past_start: Optional[bool] = None,
) -> List[PlannedFixture]:
    """
    Produce dated pending fixtures for every real pairing; byes get none.
    Output order: round order, then sequence within round.
    """
    validate_cadence(start_date, interval_days, submission_window_hours, now, allow_past_start)

    start = _as_datetime(start_date)
    fixtures: List[PlannedFixture] = []

    for k, rnd in enumerate(rounds):
        scheduled = start + timedelta(days=k * interval_days)
        deadline = scheduled + timedelta(hours=submission_window_hours)
        for pairing in rnd.pairings:
            fixtures.append(
                PlannedFixture(
                    round_index=rnd.index,
                    sequence_in_round=pairing.sequence,
                    home_player_id=pairing.home.id,
                    away_player_id=pairing.away.id,
                    scheduled_date=scheduled,
                    submission_deadline=deadline,
                )
            )

    return fixtures
