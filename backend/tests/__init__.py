# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from league_app.models.dispute import Dispute  # noqa: F401
from league_app.models.fixture import Fixture  # noqa: F401
from league_app.models.league import League, LeagueMember  # noqa: F401
from league_app.models.match import Match, MatchParticipant  # noqa: F401
from league_app.models.player import Player  # noqa: F401
from league_app.models.season import Season  # noqa: F401
