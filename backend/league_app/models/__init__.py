from league_app.models.dispute import Dispute
from league_app.models.fixture import Fixture
from league_app.models.league import League, LeagueMember
from league_app.models.match import Match, MatchParticipant
from league_app.models.player import Player
from league_app.models.season import Season

__all__ = [
    "Player",
    "League",
    "LeagueMember",
    "Season",
    "Fixture",
    "Match",
    "MatchParticipant",
    "Dispute",
]
