"""
Collaborator interfaces consumed by the scheduling and dispute core.

SQL-backed implementations live in league_app.services.stores.
"""

from dataclasses import dataclass
from typing import List, Mapping, Optional, Protocol, Sequence, Tuple

from league_app.models.dispute import Dispute
from league_app.models.fixture import Fixture
from league_app.services.fixture_planner import PlannedFixture
from league_app.services.round_robin import Member


@dataclass(frozen=True)
class ParticipantScore:
    player_id: int
    score: int
    result: str


@dataclass(frozen=True)
class MatchSnapshot:
    id: int
    league_id: int
    participants: Tuple[ParticipantScore, ...]
    is_disputed: bool
    disputed_by: Optional[int]

    @property
    def participant_ids(self) -> Tuple[int, ...]:
        return tuple(p.player_id for p in self.participants)


class RosterProvider(Protocol):
    def list_active_members(self, league_id: int) -> List[Member]: ...


class MatchStore(Protocol):
    def get_match(self, match_id: int) -> MatchSnapshot:
        """Raises MatchNotFound."""
        ...

    def update_participant_scores(self, match_id: int, scores: Mapping[int, int]) -> None: ...

    def set_dispute_flag(self, match_id: int, flag: bool, disputed_by: Optional[int] = None) -> None: ...


class FixtureStore(Protocol):
    def save_fixtures(
        self, league_id: int, season_id: Optional[int], fixtures: Sequence[PlannedFixture]
    ) -> List[Fixture]: ...

    def fixtures_exist_for(self, season_id: int) -> bool: ...


class DisputeStore(Protocol):
    def insert_dispute(self, dispute: Dispute) -> int:
        """Must reject a second open dispute for the same match."""
        ...

    def get_dispute(self, dispute_id: int) -> Optional[Dispute]: ...

    def get_open_dispute(self, match_id: int) -> Optional[Dispute]: ...

    def update_dispute(
        self,
        dispute_id: int,
        status: str,
        resolution: Optional[str] = None,
        notes: Optional[str] = None,
        resolved_by: Optional[int] = None,
        resolution_scores: Optional[Mapping[int, int]] = None,
    ) -> Dispute: ...
