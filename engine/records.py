"""
Plain data records consumed by the standings engine.

The persistence layer converts its rows into these immutable records, so the
engine can be driven by a database snapshot or by in-memory fixtures alike.
"""

import enum
from dataclasses import dataclass, field
from typing import Iterable, Optional

from config import PhaseSettings, PHASE_SETTINGS


class Phase(enum.Enum):
    """Tournament phases, distinguished by the day number of a match."""
    GROUP_STAGE = "group_stage"
    PLAY_IN = "play_in"
    FINALS = "finals"


GROUP_STAGE_ONLY = frozenset({Phase.GROUP_STAGE})
KNOCKOUT_PHASES = frozenset({Phase.PLAY_IN, Phase.FINALS})


def phase_of_day(day: int, settings: PhaseSettings = PHASE_SETTINGS) -> Optional[Phase]:
    """Map a day number to its phase, or None for a day outside the calendar."""
    if day == settings.play_in_day:
        return Phase.PLAY_IN
    if day == settings.finals_day:
        return Phase.FINALS
    if day in settings.group_days:
        return Phase.GROUP_STAGE
    return None


def derive_winner(team_a_id: int, team_b_id: int,
                  score_a: Optional[int], score_b: Optional[int]) -> Optional[int]:
    """
    Derive the winner from final scores.

    Returns:
        The id of the side with the strictly greater score, or None when
        either score is missing or the scores are level.
    """
    if score_a is None or score_b is None:
        return None
    if score_a > score_b:
        return team_a_id
    elif score_b > score_a:
        return team_b_id
    return None


@dataclass(frozen=True)
class GroupRecord:
    """A round-robin group of teams."""
    group_id: int
    name: str
    color: str = ""

    @property
    def label(self) -> str:
        return f"{self.name} ({self.color})" if self.color else self.name


@dataclass(frozen=True)
class TeamRecord:
    """A team and the group it plays in."""
    team_id: int
    name: str
    group_id: int


@dataclass(frozen=True)
class MatchRecord:
    """
    A scheduled match.

    A match with no winner is undecided: either unplayed, in progress, or
    finished level.
    """
    match_id: int
    day: int
    time_slot: str
    field: str
    team_a_id: int
    team_b_id: int
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    winner_id: Optional[int] = None

    @property
    def is_decided(self) -> bool:
        return self.winner_id is not None

    @property
    def pair_key(self) -> frozenset[int]:
        """Unordered key of the two sides."""
        return frozenset((self.team_a_id, self.team_b_id))

    @property
    def schedule_key(self) -> tuple[int, str, str]:
        """Chronological sort key; slot labels sort lexically as HH:MM."""
        return (self.day, self.time_slot, self.field)

    def involves(self, team_id: int) -> bool:
        return team_id in (self.team_a_id, self.team_b_id)

    def scores_for(self, team_id: int) -> tuple[int, int]:
        """Return (scored, conceded) from the given team's point of view."""
        if team_id == self.team_a_id:
            return self.score_a or 0, self.score_b or 0
        return self.score_b or 0, self.score_a or 0


@dataclass(frozen=True)
class PlayerRecord:
    """A registered player."""
    player_id: int
    name: str
    surname: str
    team_id: int


@dataclass(frozen=True)
class PlayerPointsRecord:
    """Points scored by one player in one match."""
    player_id: int
    match_id: int
    points: int


@dataclass(frozen=True)
class TournamentSnapshot:
    """
    Everything one standings computation reads, fetched in one go.

    The snapshot is never refreshed during a computation.
    """
    tournament_id: int
    groups: tuple[GroupRecord, ...]
    teams: tuple[TeamRecord, ...]
    matches: tuple[MatchRecord, ...]
    players: tuple[PlayerRecord, ...] = field(default_factory=tuple)
    player_points: tuple[PlayerPointsRecord, ...] = field(default_factory=tuple)

    def teams_in_group(self, group_id: int) -> list[TeamRecord]:
        return [t for t in self.teams if t.group_id == group_id]

    def matches_in(self, phases: Optional[Iterable[Phase]],
                   settings: PhaseSettings = PHASE_SETTINGS) -> list[MatchRecord]:
        """Matches restricted to a set of phases; None keeps every match."""
        if phases is None:
            return list(self.matches)
        wanted = frozenset(phases)
        return [m for m in self.matches if phase_of_day(m.day, settings) in wanted]
