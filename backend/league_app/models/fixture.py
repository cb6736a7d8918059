from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, SQLModel

from league_app.utils.clock import utc_now

FIXTURE_PENDING = "pending"
FIXTURE_COMPLETED = "completed"
FIXTURE_VOID = "void"


class Fixture(SQLModel, table=True):
    # One schedule per season: a second plan collides on its first fixture
    __table_args__ = (
        SAUniqueConstraint("season_id", "round_index", "sequence_in_round", name="uq_fixture_season_round_seq"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    league_id: int = Field(foreign_key="league.id", index=True)
    season_id: Optional[int] = Field(default=None, foreign_key="season.id", index=True)
    round_index: int  # 1..N within the season schedule
    sequence_in_round: int

    # Oriented pairing: home is the lower circle position
    home_player_id: int = Field(foreign_key="player.id")
    away_player_id: int = Field(foreign_key="player.id")

    scheduled_date: datetime
    submission_deadline: datetime
    status: str = Field(default=FIXTURE_PENDING)  # "pending" | "completed" | "void"

    # Populated when a match is recorded against this fixture
    match_id: Optional[int] = Field(default=None)
    winner_id: Optional[int] = Field(default=None, foreign_key="player.id")

    created_at: datetime = Field(default_factory=utc_now)
