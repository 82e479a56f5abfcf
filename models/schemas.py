"""
Pydantic schemas for data validation and for the shapes handed to the UI.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from models.group import GroupColor


# ============ Input Schemas ============

class TeamCreate(BaseModel):
    """Schema for creating a new team."""
    name: str = Field(..., min_length=1, max_length=200)
    group_id: int

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class GroupCreate(BaseModel):
    """Schema for creating a new group."""
    name: str = Field(..., min_length=1, max_length=100)
    color: GroupColor


class MatchResultInput(BaseModel):
    """Final score entered for a match."""
    score1: int = Field(..., ge=0)
    score2: int = Field(..., ge=0)


# ============ Standings Schemas ============

class TeamStandingResponse(BaseModel):
    """One row of a standings table."""
    team_id: int
    team_name: str
    group_id: int
    matches_played: int
    matches_won: int
    matches_lost: int
    points_scored: int
    points_conceded: int
    points_difference: int
    win_percentage: float
    group_points: int
    group_position: Optional[int] = None

    class Config:
        from_attributes = True


class WarningResponse(BaseModel):
    """A data condition reported next to the results."""
    code: str
    message: str
    team_ids: list[int] = Field(default_factory=list)
    match_ids: list[int] = Field(default_factory=list)

    @field_validator("code", mode="before")
    @classmethod
    def code_value(cls, v):
        return getattr(v, "value", v)

    class Config:
        from_attributes = True


class GroupStandingsResponse(BaseModel):
    """Ranked table of one group."""
    group_id: int
    name: str
    color: str
    standings: list[TeamStandingResponse]


class QualificationResponse(BaseModel):
    """Direct qualifiers and play-in pool."""
    direct_qualifiers: list[TeamStandingResponse]
    play_in_pool: list[TeamStandingResponse]
    direct_shortfall: int = 0
    play_in_shortfall: int = 0
    warnings: list[WarningResponse] = Field(default_factory=list)


class BracketMatchResponse(BaseModel):
    """A finals-day match placed in a round."""
    match_id: int
    time_slot: str
    field: str
    team_a_id: int
    team_b_id: int
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    winner_id: Optional[int] = None

    class Config:
        from_attributes = True


class BracketRoundResponse(BaseModel):
    """Matches of one round plus placeholders still to schedule."""
    round: str
    matches: list[BracketMatchResponse]
    unfilled: int
