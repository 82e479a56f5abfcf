"""
Player scoring leaderboards, per phase.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from config import PhaseSettings, PHASE_SETTINGS
from engine.records import (
    MatchRecord,
    Phase,
    PlayerPointsRecord,
    PlayerRecord,
    TeamRecord,
    phase_of_day,
)

# Leaderboard lengths shown for each phase
GROUP_STAGE_LIMIT = 100
KNOCKOUT_LIMIT = 50


@dataclass(frozen=True)
class ScorerLine:
    """One row of a scoring leaderboard."""
    player_id: int
    name: str
    surname: str
    team_id: int
    team_name: str
    points: int
    matches: int

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"


def top_scorers(
    players: Iterable[PlayerRecord],
    player_points: Iterable[PlayerPointsRecord],
    matches: Iterable[MatchRecord],
    teams: Iterable[TeamRecord],
    phases: Optional[Iterable[Phase]] = None,
    limit: Optional[int] = None,
    settings: PhaseSettings = PHASE_SETTINGS,
) -> list[ScorerLine]:
    """
    Rank players by points scored in the given phases.

    Every player appears, with 0 points if they never scored. Players level
    on points keep roster order.

    Args:
        phases: Phases whose matches count; None counts every match
        limit: Keep only the first `limit` rows
    """
    wanted = frozenset(phases) if phases is not None else None
    counted_matches = {
        m.match_id for m in matches
        if wanted is None or phase_of_day(m.day, settings) in wanted
    }
    team_names = {t.team_id: t.name for t in teams}

    totals: dict[int, int] = {}
    appearances: dict[int, int] = {}
    for line in player_points:
        if line.match_id not in counted_matches:
            continue
        totals[line.player_id] = totals.get(line.player_id, 0) + line.points
        appearances[line.player_id] = appearances.get(line.player_id, 0) + 1

    board = sorted(
        (
            ScorerLine(
                player_id=p.player_id,
                name=p.name,
                surname=p.surname,
                team_id=p.team_id,
                team_name=team_names.get(p.team_id, ""),
                points=totals.get(p.player_id, 0),
                matches=appearances.get(p.player_id, 0),
            )
            for p in players
        ),
        key=lambda line: line.points,
        reverse=True,
    )
    return board[:limit] if limit is not None else board
