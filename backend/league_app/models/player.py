from datetime import datetime
from typing import Optional

from sqlmodel import Field, SQLModel

from league_app.utils.clock import utc_now


class Player(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    display_name: str
    email: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now)
