"""
Player and per-match scoring models.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base

if TYPE_CHECKING:
    from models.team import Team
    from models.match import Match
    from models.tournament import Tournament


class Player(Base):
    """A registered player on a team."""
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[int] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    team_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    surname: Mapped[str] = mapped_column(String(100), nullable=False)
    birth_year: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Relationships
    tournament: Mapped["Tournament"] = relationship(back_populates="players")
    team: Mapped["Team"] = relationship(back_populates="players")
    match_stats: Mapped[list["PlayerMatchStats"]] = relationship(
        back_populates="player",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Player(id={self.id}, name='{self.name} {self.surname}')>"


class PlayerMatchStats(Base):
    """Points a player scored in one match."""
    __tablename__ = "player_match_stats"
    __table_args__ = (
        UniqueConstraint("player_id", "match_id", name="uq_player_match"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    match_id: Mapped[int] = mapped_column(ForeignKey("matches.id"), nullable=False)
    points: Mapped[int] = mapped_column(Integer, default=0)

    # Relationships
    player: Mapped["Player"] = relationship(back_populates="match_stats")
    match: Mapped["Match"] = relationship(back_populates="player_stats")

    def __repr__(self) -> str:
        return f"<PlayerMatchStats(player={self.player_id}, match={self.match_id}, points={self.points})>"
