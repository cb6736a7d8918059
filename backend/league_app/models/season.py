from datetime import date, datetime
from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, SQLModel

from league_app.utils.clock import utc_now


class Season(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("league_id", "season_number", name="uq_season_league_number"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    league_id: int = Field(foreign_key="league.id", index=True)
    name: str
    description: Optional[str] = None
    season_number: int
    start_date: date
    end_date: Optional[date] = None
    status: str = Field(default="upcoming")  # "upcoming" | "active" | "completed" | "cancelled"
    created_at: datetime = Field(default_factory=utc_now)
