from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from league_app.utils.clock import utc_now

if TYPE_CHECKING:
    from league_app.models.player import Player

RESULT_WIN = "win"
RESULT_LOSS = "loss"
RESULT_DRAW = "draw"


class Match(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    league_id: int = Field(foreign_key="league.id", index=True)
    fixture_id: Optional[int] = Field(default=None, foreign_key="fixture.id")
    match_date: datetime
    recorded_by: int = Field(foreign_key="player.id")
    status: str = Field(default="completed")  # "completed" | "cancelled"

    # Mutated only by the dispute coordinator
    is_disputed: bool = Field(default=False)
    disputed_by: Optional[int] = Field(default=None, foreign_key="player.id")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    # Relationships
    participants: List["MatchParticipant"] = Relationship(back_populates="match")


class MatchParticipant(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("match_id", "player_id", name="uq_matchparticipant_match_player"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    player_id: int = Field(foreign_key="player.id")
    score: int
    result: str  # "win" | "loss" | "draw"

    # Relationships
    match: "Match" = Relationship(back_populates="participants")
    player: "Player" = Relationship()
