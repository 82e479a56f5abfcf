"""
Tournament model: one edition of the event, owning its groups and matches.
"""

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base

if TYPE_CHECKING:
    from models.group import Group
    from models.match import Match
    from models.player import Player


class Tournament(Base):
    """
    A tournament edition.

    Phases: Group Stage -> Play-in -> Finals (Round of 16 ... Final)

    Standings are never stored here; they are recomputed from matches on
    every read.
    """
    __tablename__ = "tournaments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    groups: Mapped[list["Group"]] = relationship(
        back_populates="tournament",
        cascade="all, delete-orphan",
        order_by="Group.id",
    )
    matches: Mapped[list["Match"]] = relationship(
        back_populates="tournament",
        cascade="all, delete-orphan"
    )
    players: Mapped[list["Player"]] = relationship(
        back_populates="tournament",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Tournament(id={self.id}, name='{self.name}')>"

    @property
    def team_count(self) -> int:
        """Number of teams across all groups."""
        return sum(len(group.teams) for group in self.groups)
