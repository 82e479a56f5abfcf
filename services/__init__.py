"""
HoopsTourney Services

Repository access and the standings pipeline.
"""

from services.repository import (
    TournamentRepository,
    InMemoryRepository,
    SqlAlchemyRepository,
    TournamentNotFoundError,
)
from services.standings_service import StandingsService, PlayoffOverview, open_service

__all__ = [
    "TournamentRepository",
    "InMemoryRepository",
    "SqlAlchemyRepository",
    "TournamentNotFoundError",
    "StandingsService",
    "PlayoffOverview",
    "open_service",
]
