"""
Group model: a round-robin pool of teams.
"""

import enum
from typing import TYPE_CHECKING

from sqlalchemy import String, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base

if TYPE_CHECKING:
    from models.team import Team
    from models.tournament import Tournament


class GroupColor(enum.Enum):
    """Color tag shown next to a group's name."""
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    PURPLE = "purple"


class Group(Base):
    """A group of teams playing each other once in the group stage."""
    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    tournament_id: Mapped[int] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[GroupColor] = mapped_column(SAEnum(GroupColor), nullable=False)

    # Relationships
    tournament: Mapped["Tournament"] = relationship(back_populates="groups")
    teams: Mapped[list["Team"]] = relationship(
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="Team.id",
    )

    def __repr__(self) -> str:
        return f"<Group(id={self.id}, name='{self.name}', color={self.color.value})>"
