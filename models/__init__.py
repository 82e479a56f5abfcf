"""
HoopsTourney Database Models

SQLAlchemy ORM models for tournaments, groups, teams, matches and players.
"""

from models.base import (
    Base,
    create_db_engine,
    create_session_factory,
    get_session,
    init_db,
)
from models.tournament import Tournament
from models.group import Group, GroupColor
from models.team import Team
from models.match import Match
from models.player import Player, PlayerMatchStats

__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "get_session",
    "init_db",
    "Tournament",
    "Group",
    "GroupColor",
    "Team",
    "Match",
    "Player",
    "PlayerMatchStats",
]
