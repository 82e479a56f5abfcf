"""
Team model for tournament groups.
"""

from typing import TYPE_CHECKING

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base

if TYPE_CHECKING:
    from models.group import Group
    from models.player import Player


class Team(Base):
    """
    A team competing in one group.

    Only the name may change once created; results live on matches.
    """
    __tablename__ = "teams"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    group_id: Mapped[int] = mapped_column(ForeignKey("groups.id"), nullable=False)

    # Relationships
    group: Mapped["Group"] = relationship(back_populates="teams")
    players: Mapped[list["Player"]] = relationship(back_populates="team")

    def __repr__(self) -> str:
        return f"<Team(id={self.id}, name='{self.name}', group={self.group_id})>"

    def rename(self, name: str) -> None:
        """Change the display name."""
        if not name or not name.strip():
            raise ValueError("Team name cannot be empty")
        self.name = name.strip()
