"""
Naive UTC normalization for stored timestamps.
"""

from datetime import datetime, timedelta, timezone

from league_app.services.match_recording import ParticipantInput, record_match
from league_app.utils.clock import as_naive_utc, utc_now


def test_utc_now_is_naive():
    now = utc_now()
    assert now.tzinfo is None
    assert abs(datetime.now(timezone.utc).replace(tzinfo=None) - now) < timedelta(seconds=5)


def test_aware_values_convert_to_utc():
    evening_in_new_york = datetime(2026, 3, 5, 19, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert as_naive_utc(evening_in_new_york) == datetime(2026, 3, 6, 0, 0)


def test_naive_values_pass_through():
    value = datetime(2026, 3, 5, 19, 0)
    assert as_naive_utc(value) is value


def test_recorded_match_date_is_stored_as_naive_utc(session, make_league):
    league, (p1, p2) = make_league(2)

    match = record_match(
        session,
        league.id,
        p1.id,
        datetime(2026, 3, 5, 21, 0, tzinfo=timezone(timedelta(hours=2))),
        [ParticipantInput(p1.id, 3), ParticipantInput(p2.id, 1)],
    )

    assert match.match_date == datetime(2026, 3, 5, 19, 0)
