"""
Request guards shared by routers.

- acting_user_id: the caller's player id (authentication happens upstream)
- http_error: LeagueError -> HTTPException with "CODE: message" detail
"""

from fastapi import Header, HTTPException

from league_app.errors import LeagueError


def acting_user_id(x_user_id: int = Header(..., description="Player id of the caller")) -> int:
    return x_user_id


def http_error(exc: LeagueError) -> HTTPException:
    """
    Map a league failure to its stable HTTP status.

    403: caller may not do this (not a participant / not the owner)
    409: state conflict (already disputed, not open, already planned)
    404 / 422: missing entity / bad input or too few players
    """
    return HTTPException(status_code=exc.status_code, detail=exc.detail())
