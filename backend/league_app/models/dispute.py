from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import JSON, Index, text
from sqlmodel import Column, Field, SQLModel

from league_app.utils.clock import utc_now

DISPUTE_OPEN = "open"
DISPUTE_RESOLVED = "resolved"
DISPUTE_WITHDRAWN = "withdrawn"

RESOLUTION_ACCEPTED = "accepted"
RESOLUTION_REJECTED = "rejected"
RESOLUTION_MODIFIED = "modified"


class Dispute(SQLModel, table=True):
    __table_args__ = (
        # At most one open dispute per match
        Index(
            "uq_dispute_open_match",
            "match_id",
            unique=True,
            sqlite_where=text("status = 'open'"),
            postgresql_where=text("status = 'open'"),
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    disputed_by: int = Field(foreign_key="player.id")
    reason: str

    # JSON object keys are strings: {"<player_id>": score}
    proposed_scores: Optional[Dict[str, int]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    status: str = Field(default=DISPUTE_OPEN)  # "open" | "resolved" | "withdrawn"
    resolution: Optional[str] = Field(default=None)  # "accepted" | "rejected" | "modified"
    resolution_scores: Optional[Dict[str, int]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    resolved_by: Optional[int] = Field(default=None, foreign_key="player.id")
    resolved_at: Optional[datetime] = Field(default=None)
    resolution_notes: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})
