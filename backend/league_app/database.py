from pathlib import Path
from typing import Generator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from league_app.settings import DATABASE_URL, SQL_ECHO

_is_sqlite = DATABASE_URL.startswith("sqlite")
_connect_args = {"check_same_thread": False} if _is_sqlite else {}

if _is_sqlite and ":memory:" not in DATABASE_URL:
    db_path = DATABASE_URL.replace("sqlite:///", "", 1)
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

engine: Engine = create_engine(
    DATABASE_URL,
    echo=SQL_ECHO,
    connect_args=_connect_args,
)


def get_session() -> Generator[Session, None, None]:
    """Get database session"""
    with Session(engine) as session:
        yield session


def init_db() -> None:
    """Initialize database - create all tables"""
    # Import all models to ensure they're registered with SQLModel metadata
    from league_app.models.dispute import Dispute  # noqa: F401
    from league_app.models.fixture import Fixture  # noqa: F401
    from league_app.models.league import League, LeagueMember  # noqa: F401
    from league_app.models.match import Match, MatchParticipant  # noqa: F401
    from league_app.models.player import Player  # noqa: F401
    from league_app.models.season import Season  # noqa: F401

    SQLModel.metadata.create_all(engine)
