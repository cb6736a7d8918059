"""
League error taxonomy.

Every failure the core reports to a caller is one of these. Each class carries a
stable machine code and the HTTP status routers map it to, so clients can tell
"you can't do this" (403) apart from "someone already did this" (409).
"""


class LeagueError(Exception):
    """Base exception for league operations"""

    code = "LEAGUE_ERROR"
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code

    def detail(self) -> str:
        return f"{self.code}: {self.message}"


# ---------------------------------------------------------------------------
# Validation (bad input shape)
# ---------------------------------------------------------------------------


class ValidationError(LeagueError):
    code = "VALIDATION_ERROR"
    status_code = 422


class InvalidReason(ValidationError):
    code = "INVALID_REASON"


class InvalidCadence(ValidationError):
    code = "INVALID_CADENCE"


class StartDateInPast(ValidationError):
    code = "START_DATE_IN_PAST"


class InvalidScores(ValidationError):
    code = "INVALID_SCORES"


class InvalidResolution(ValidationError):
    code = "INVALID_RESOLUTION"


class InvalidMatch(ValidationError):
    code = "INVALID_MATCH"


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------


class AuthorizationError(LeagueError):
    code = "FORBIDDEN"
    status_code = 403


class NotParticipant(AuthorizationError):
    code = "NOT_PARTICIPANT"


class NotDisputeOwner(AuthorizationError):
    code = "NOT_DISPUTE_OWNER"


class SelfResolutionForbidden(AuthorizationError):
    code = "SELF_RESOLUTION_FORBIDDEN"


class NotLeagueMember(AuthorizationError):
    code = "NOT_LEAGUE_MEMBER"


# ---------------------------------------------------------------------------
# Conflicts (someone already did this)
# ---------------------------------------------------------------------------


class ConflictError(LeagueError):
    code = "CONFLICT"
    status_code = 409


class DuplicateOpenDispute(ConflictError):
    code = "DUPLICATE_OPEN_DISPUTE"


class DisputeNotOpen(ConflictError):
    code = "DISPUTE_NOT_OPEN"


class FixturesAlreadyPlanned(ConflictError):
    code = "FIXTURES_ALREADY_PLANNED"


class FixtureNotPending(ConflictError):
    code = "FIXTURE_NOT_PENDING"


class MatchUnderDispute(ConflictError):
    code = "MATCH_UNDER_DISPUTE"


# ---------------------------------------------------------------------------
# Insufficient data
# ---------------------------------------------------------------------------


class InsufficientDataError(LeagueError):
    code = "INSUFFICIENT_DATA"
    status_code = 422


class InsufficientPlayers(InsufficientDataError):
    code = "INSUFFICIENT_PLAYERS"


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------


class NotFoundError(LeagueError):
    code = "NOT_FOUND"
    status_code = 404


class MatchNotFound(NotFoundError):
    code = "MATCH_NOT_FOUND"


class DisputeNotFound(NotFoundError):
    code = "DISPUTE_NOT_FOUND"


class FixtureNotFound(NotFoundError):
    code = "FIXTURE_NOT_FOUND"


class LeagueNotFound(NotFoundError):
    code = "LEAGUE_NOT_FOUND"


class SeasonNotFound(NotFoundError):
    code = "SEASON_NOT_FOUND"


class PlayerNotFound(NotFoundError):
    code = "PLAYER_NOT_FOUND"
