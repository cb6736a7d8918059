"""
Leagues, players, memberships and seasons.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from league_app.errors import ConflictError, LeagueNotFound, NotLeagueMember, PlayerNotFound, SeasonNotFound
from league_app.models.league import MEMBER_ACTIVE, MEMBER_INACTIVE, League, LeagueMember
from league_app.models.player import Player
from league_app.models.season import Season


def create_player(session: Session, display_name: str, email: Optional[str] = None) -> Player:
    player = Player(display_name=display_name.strip(), email=email)
    session.add(player)
    session.commit()
    session.refresh(player)
    return player


def require_player(session: Session, player_id: int) -> Player:
    player = session.get(Player, player_id)
    if not player:
        raise PlayerNotFound(f"Player {player_id} not found")
    return player


def require_league(session: Session, league_id: int) -> League:
    league = session.get(League, league_id)
    if not league:
        raise LeagueNotFound(f"League {league_id} not found")
    return league


def create_league(
    session: Session, name: str, game_type: str, created_by: int, description: Optional[str] = None
) -> League:
    """Create a league; its creator becomes the first active member."""
    require_player(session, created_by)
    league = League(name=name.strip(), game_type=game_type, created_by=created_by, description=description)
    session.add(league)
    session.flush()
    session.add(LeagueMember(league_id=league.id, player_id=created_by, role="creator"))
    session.commit()
    session.refresh(league)
    return league


def join_league(session: Session, league_id: int, player_id: int) -> LeagueMember:
    """Join (or re-activate membership in) a league."""
    require_league(session, league_id)
    require_player(session, player_id)

    membership = session.exec(
        select(LeagueMember).where(LeagueMember.league_id == league_id, LeagueMember.player_id == player_id)
    ).first()
    if membership:
        if membership.status == MEMBER_ACTIVE:
            raise ConflictError(f"Player {player_id} is already a member of league {league_id}")
        membership.status = MEMBER_ACTIVE
    else:
        membership = LeagueMember(league_id=league_id, player_id=player_id)

    session.add(membership)
    session.commit()
    session.refresh(membership)
    return membership


def set_member_status(session: Session, league_id: int, player_id: int, active: bool) -> LeagueMember:
    membership = session.exec(
        select(LeagueMember).where(LeagueMember.league_id == league_id, LeagueMember.player_id == player_id)
    ).first()
    if not membership:
        raise NotLeagueMember(f"Player {player_id} is not a member of league {league_id}")
    membership.status = MEMBER_ACTIVE if active else MEMBER_INACTIVE
    session.add(membership)
    session.commit()
    session.refresh(membership)
    return membership


def is_active_member(session: Session, league_id: int, player_id: int) -> bool:
    membership = session.exec(
        select(LeagueMember).where(
            LeagueMember.league_id == league_id,
            LeagueMember.player_id == player_id,
            LeagueMember.status == MEMBER_ACTIVE,
        )
    ).first()
    return membership is not None


def list_members(session: Session, league_id: int) -> List[LeagueMember]:
    require_league(session, league_id)
    return list(
        session.exec(
            select(LeagueMember)
            .where(LeagueMember.league_id == league_id)
            .order_by(LeagueMember.joined_at, LeagueMember.id)
        ).all()
    )


def create_season(
    session: Session,
    league_id: int,
    name: str,
    start_date: date,
    end_date: Optional[date] = None,
    description: Optional[str] = None,
    status: str = "upcoming",
) -> Season:
    """Create the league's next season (season_number auto-increments per league)."""
    require_league(session, league_id)
    last_number = session.exec(select(func.max(Season.season_number)).where(Season.league_id == league_id)).one()
    season = Season(
        league_id=league_id,
        name=name.strip(),
        description=description,
        season_number=(last_number or 0) + 1,
        start_date=start_date,
        end_date=end_date,
        status=status,
    )
    session.add(season)
    session.commit()
    session.refresh(season)
    return season


def require_season(session: Session, league_id: int, season_id: int, for_update: bool = False) -> Season:
    """Load a season of the league; for_update takes SELECT ... FOR UPDATE on its row (no-op on SQLite)."""
    query = select(Season).where(Season.id == season_id)
    if for_update:
        query = query.with_for_update().execution_options(populate_existing=True)
    season = session.exec(query).first()
    if not season or season.league_id != league_id:
        raise SeasonNotFound(f"Season {season_id} not found in league {league_id}")
    return season


def list_seasons(session: Session, league_id: int) -> List[Season]:
    require_league(session, league_id)
    return list(
        session.exec(select(Season).where(Season.league_id == league_id).order_by(Season.season_number)).all()
    )


def require_active_member(session: Session, league_id: int, player_id: int) -> None:
    require_league(session, league_id)
    if not is_active_member(session, league_id, player_id):
        raise NotLeagueMember(f"Player {player_id} is not an active member of league {league_id}")
