from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from league_app.utils.clock import utc_now

if TYPE_CHECKING:
    from league_app.models.player import Player

MEMBER_ACTIVE = "active"
MEMBER_INACTIVE = "inactive"


class League(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    game_type: str
    description: Optional[str] = None
    created_by: int = Field(foreign_key="player.id")
    status: str = Field(default="active")  # "active" | "archived"
    created_at: datetime = Field(default_factory=utc_now)

    # Relationships
    members: List["LeagueMember"] = Relationship(back_populates="league")


class LeagueMember(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("league_id", "player_id", name="uq_leaguemember_league_player"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    league_id: int = Field(foreign_key="league.id", index=True)
    player_id: int = Field(foreign_key="player.id", index=True)
    role: str = Field(default="member")  # "creator" | "admin" | "member"
    status: str = Field(default=MEMBER_ACTIVE)  # "active" | "inactive"
    joined_at: datetime = Field(default_factory=utc_now)

    # Relationships
    league: "League" = Relationship(back_populates="members")
    player: "Player" = Relationship()
