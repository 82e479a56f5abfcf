"""
Match model for group-stage, play-in and finals games.
"""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from engine.records import derive_winner
from models.base import Base

if TYPE_CHECKING:
    from models.team import Team
    from models.tournament import Tournament
    from models.player import PlayerMatchStats


class Match(Base):
    """
    A match between two teams on a given day, time slot and field.

    Scores and winner stay null until the result is recorded. A level score
    records no winner.
    """
    __tablename__ = "matches"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[int] = mapped_column(ForeignKey("tournaments.id"), nullable=False)

    # Scheduling
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    time_slot: Mapped[str] = mapped_column(String(20), nullable=False)  # "18:00 > 18:15"
    field: Mapped[str] = mapped_column(String(10), nullable=False)

    # Participants
    team1_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)
    team2_id: Mapped[int] = mapped_column(ForeignKey("teams.id"), nullable=False)

    # Final scores
    score1: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    score2: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Winner reference
    winner_id: Mapped[Optional[int]] = mapped_column(ForeignKey("teams.id"), nullable=True)

    # Relationships
    tournament: Mapped["Tournament"] = relationship(back_populates="matches")
    team1: Mapped["Team"] = relationship(foreign_keys=[team1_id])
    team2: Mapped["Team"] = relationship(foreign_keys=[team2_id])
    player_stats: Mapped[list["PlayerMatchStats"]] = relationship(
        back_populates="match",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return (
            f"<Match(id={self.id}, day={self.day}, slot='{self.time_slot}', "
            f"{self.team1_id} vs {self.team2_id})>"
        )

    @property
    def is_played(self) -> bool:
        return self.winner_id is not None

    def record_result(self, score1: int, score2: int) -> Optional[int]:
        """
        Store final scores and derive the winner.

        Returns:
            The winning team id, or None on a level score
        """
        if score1 < 0 or score2 < 0:
            raise ValueError("Scores cannot be negative")
        self.score1 = score1
        self.score2 = score2
        self.winner_id = derive_winner(self.team1_id, self.team2_id, score1, score2)
        return self.winner_id

    def clear_result(self) -> None:
        """Return the match to unplayed."""
        self.score1 = None
        self.score2 = None
        self.winner_id = None
