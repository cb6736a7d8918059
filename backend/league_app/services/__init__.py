"""
Services Layer

League business logic that:
- Accepts domain inputs (IDs, sessions, rosters, cadence settings)
- Returns domain outputs (models, dataclasses)
- Does NOT depend on HTTP request/response objects
- Reports failures as league_app.errors exceptions
"""

# Force SQLModel table registration at test discovery time
from league_app.models.dispute import Dispute  # noqa: F401
from league_app.models.fixture import Fixture  # noqa: F401
from league_app.models.league import League, LeagueMember  # noqa: F401
from league_app.models.match import Match, MatchParticipant  # noqa: F401
from league_app.models.player import Player  # noqa: F401
from league_app.models.season import Season  # noqa: F401
