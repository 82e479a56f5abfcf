"""
Standings Engine

Turns finished matches into ranked group tables:
Team Record Aggregator -> Group Ranker -> Head-to-Head Tiebreaker.

Ranking order:
1. Win percentage (desc), stable with respect to input order
2. Head-to-head points among the tied teams only (2 per win, desc)
3. Overall points difference (desc)
Teams still level keep their incoming order.
"""

import enum
import logging
from dataclasses import dataclass, field, replace
from itertools import combinations
from typing import Iterable, Optional, Sequence

from config import PhaseSettings, PHASE_SETTINGS
from engine.records import (
    GroupRecord,
    MatchRecord,
    Phase,
    TeamRecord,
    TournamentSnapshot,
    GROUP_STAGE_ONLY,
    derive_winner,
    phase_of_day,
)

logger = logging.getLogger(__name__)

# Head-to-head points awarded for each win among tied teams
HEAD_TO_HEAD_WIN_POINTS = 2

# Group table points per win
GROUP_POINTS_PER_WIN = 2


class WarningCode(enum.Enum):
    """Data conditions the engine resolves locally and reports."""
    UNKNOWN_TEAM = "unknown_team"
    INVALID_WINNER = "invalid_winner"
    DUPLICATE_PAIRING = "duplicate_pairing"
    QUOTA_SHORTFALL = "quota_shortfall"


@dataclass(frozen=True)
class StandingsWarning:
    """A reported inconsistency; never fatal."""
    code: WarningCode
    message: str
    team_ids: tuple[int, ...] = ()
    match_ids: tuple[int, ...] = ()


def _warn(warnings: list[StandingsWarning], warning: StandingsWarning) -> None:
    logger.warning("%s: %s", warning.code.value, warning.message)
    warnings.append(warning)


@dataclass(frozen=True)
class TeamStanding:
    """
    Derived record of one team over a set of matches.

    Recomputed on every query and never mutated; ranking produces copies
    carrying a group_position.
    """
    team_id: int
    team_name: str
    group_id: int
    matches_played: int = 0
    matches_won: int = 0
    points_scored: int = 0
    points_conceded: int = 0
    group_position: Optional[int] = None

    @property
    def matches_lost(self) -> int:
        return self.matches_played - self.matches_won

    @property
    def win_percentage(self) -> float:
        """Won over decided matches; 0 when nothing has been decided."""
        if self.matches_played == 0:
            return 0.0
        return self.matches_won / self.matches_played

    @property
    def points_difference(self) -> int:
        return self.points_scored - self.points_conceded

    @property
    def group_points(self) -> int:
        return self.matches_won * GROUP_POINTS_PER_WIN


@dataclass
class HeadToHeadRecord:
    """Head-to-head record of one team against the rest of a tied cluster."""
    team_id: int
    games: int = 0
    wins: int = 0

    @property
    def points(self) -> int:
        return self.wins * HEAD_TO_HEAD_WIN_POINTS


@dataclass(frozen=True)
class GroupStandingsTable:
    """Ranked standings of one group."""
    group: GroupRecord
    standings: tuple[TeamStanding, ...]

    def position_of(self, team_id: int) -> Optional[int]:
        for standing in self.standings:
            if standing.team_id == team_id:
                return standing.group_position
        return None


@dataclass
class StandingsResult:
    """Group tables plus every condition reported while building them."""
    tables: list[GroupStandingsTable] = field(default_factory=list)
    warnings: list[StandingsWarning] = field(default_factory=list)

    # Pair index of the same pass, reused by the cross-group pools
    index: Optional["HeadToHeadIndex"] = None

    def table_for(self, group_id: int) -> Optional[GroupStandingsTable]:
        return next((t for t in self.tables if t.group.group_id == group_id), None)

    def position_of(self, team_id: int) -> Optional[int]:
        for table in self.tables:
            position = table.position_of(team_id)
            if position is not None:
                return position
        return None


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

def validate_matches(
    matches: Sequence[MatchRecord],
    teams: Iterable[TeamRecord],
) -> tuple[list[MatchRecord], list[StandingsWarning]]:
    """
    Drop matches referencing teams outside the roster and undecide matches
    whose winner contradicts the match.

    Returns:
        (usable matches in input order, warnings)
    """
    if matches is None:
        raise ValueError("match list is required")

    known = {t.team_id for t in teams}
    valid: list[MatchRecord] = []
    warnings: list[StandingsWarning] = []

    for match in matches:
        unknown = tuple(
            tid for tid in (match.team_a_id, match.team_b_id) if tid not in known
        )
        if unknown:
            _warn(warnings, StandingsWarning(
                code=WarningCode.UNKNOWN_TEAM,
                message=f"Match {match.match_id} references unknown team(s) {list(unknown)}; skipped",
                team_ids=unknown,
                match_ids=(match.match_id,),
            ))
            continue

        if match.winner_id is not None:
            expected = derive_winner(
                match.team_a_id, match.team_b_id, match.score_a, match.score_b
            )
            scores_known = match.score_a is not None and match.score_b is not None
            if (not match.involves(match.winner_id)
                    or (scores_known and expected != match.winner_id)):
                _warn(warnings, StandingsWarning(
                    code=WarningCode.INVALID_WINNER,
                    message=(
                        f"Match {match.match_id} winner {match.winner_id} does not "
                        f"match score {match.score_a}-{match.score_b}; treated as undecided"
                    ),
                    team_ids=(match.team_a_id, match.team_b_id),
                    match_ids=(match.match_id,),
                ))
                match = replace(match, winner_id=None)

        valid.append(match)

    return valid, warnings


# ---------------------------------------------------------------------------
# Team Record Aggregator
# ---------------------------------------------------------------------------

def aggregate_team_record(
    team: TeamRecord,
    matches: Iterable[MatchRecord],
    phases: Optional[Iterable[Phase]] = None,
    settings: PhaseSettings = PHASE_SETTINGS,
) -> TeamStanding:
    """
    Fold a team's matches into a TeamStanding.

    Only decided matches count towards played, won, scored and conceded.
    A team without decided matches still gets a (zeroed) standing.

    Args:
        team: The team to aggregate
        matches: Matches to consider; those not involving the team are ignored
        phases: Restrict to these phases; None keeps every match
    """
    wanted = frozenset(phases) if phases is not None else None

    played = won = scored = conceded = 0
    for match in matches:
        if not match.involves(team.team_id) or not match.is_decided:
            continue
        if wanted is not None and phase_of_day(match.day, settings) not in wanted:
            continue

        played += 1
        if match.winner_id == team.team_id:
            won += 1
        team_scored, team_conceded = match.scores_for(team.team_id)
        scored += team_scored
        conceded += team_conceded

    return TeamStanding(
        team_id=team.team_id,
        team_name=team.name,
        group_id=team.group_id,
        matches_played=played,
        matches_won=won,
        points_scored=scored,
        points_conceded=conceded,
    )


# ---------------------------------------------------------------------------
# Head-to-Head Tiebreaker
# ---------------------------------------------------------------------------

PhasePairKey = tuple[Optional[Phase], frozenset[int]]

# Lookup preference when a pair met in more than one phase
LOOKUP_ORDER: tuple[Optional[Phase], ...] = (
    Phase.GROUP_STAGE, Phase.PLAY_IN, Phase.FINALS, None,
)


class HeadToHeadIndex:
    """
    Decided matches indexed by phase and unordered team pair.

    Built once per ranking pass. A group-stage game and a later knockout
    rematch are separate entries. When a pair has more than one decided
    match in the same phase, the latest by (day, time slot) is kept and a
    warning is recorded.
    """

    def __init__(self, matches: Iterable[MatchRecord],
                 settings: PhaseSettings = PHASE_SETTINGS):
        self._by_pair: dict[PhasePairKey, MatchRecord] = {}
        self._duplicates: dict[PhasePairKey, list[MatchRecord]] = {}
        self.warnings: list[StandingsWarning] = []

        for match in matches:
            if not match.is_decided or match.team_a_id == match.team_b_id:
                continue
            key = (phase_of_day(match.day, settings), match.pair_key)
            current = self._by_pair.get(key)
            if current is None:
                self._by_pair[key] = match
                continue

            self._duplicates.setdefault(key, [current]).append(match)
            # Later-scheduled match wins; input order breaks equal slots
            if match.schedule_key >= current.schedule_key:
                self._by_pair[key] = match

        for key, duplicates in self._duplicates.items():
            phase, pair = key
            kept = self._by_pair[key]
            phase_name = phase.value if phase is not None else "unscheduled"
            _warn(self.warnings, StandingsWarning(
                code=WarningCode.DUPLICATE_PAIRING,
                message=(
                    f"Teams {sorted(pair)} have {len(duplicates)} decided matches in "
                    f"the {phase_name} phase; using match {kept.match_id}"
                ),
                team_ids=tuple(sorted(pair)),
                match_ids=tuple(m.match_id for m in duplicates),
            ))

    def __len__(self) -> int:
        return len(self._by_pair)

    def lookup(self, team1_id: int, team2_id: int) -> Optional[MatchRecord]:
        """The decided match between two teams, group-stage meeting first."""
        pair = frozenset((team1_id, team2_id))
        for phase in LOOKUP_ORDER:
            match = self._by_pair.get((phase, pair))
            if match is not None:
                return match
        return None


def head_to_head_records(
    cluster: Sequence[TeamStanding],
    index: HeadToHeadIndex,
) -> dict[int, HeadToHeadRecord]:
    """Head-to-head records of each cluster member against the others."""
    records = {s.team_id: HeadToHeadRecord(team_id=s.team_id) for s in cluster}

    for first, second in combinations(cluster, 2):
        match = index.lookup(first.team_id, second.team_id)
        if match is None:
            continue
        records[first.team_id].games += 1
        records[second.team_id].games += 1
        winner = records.get(match.winner_id)
        if winner is not None:
            winner.wins += 1

    return records


def resolve_tiebreak(
    cluster: Sequence[TeamStanding],
    index: HeadToHeadIndex,
) -> list[TeamStanding]:
    """
    Order a cluster tied on win percentage.

    Sorts by head-to-head points, then by overall points difference. This is
    a single pass: teams still level on head-to-head points are separated by
    points difference directly, without re-running head-to-head on the
    narrower sub-cluster.
    """
    if len(cluster) < 2:
        return list(cluster)

    records = head_to_head_records(cluster, index)
    return sorted(
        cluster,
        key=lambda s: (records[s.team_id].points, s.points_difference),
        reverse=True,
    )


# ---------------------------------------------------------------------------
# Group Ranker
# ---------------------------------------------------------------------------

def rank_teams(
    standings: Sequence[TeamStanding],
    index: HeadToHeadIndex,
) -> list[TeamStanding]:
    """
    Rank standings by win percentage, resolving equal-percentage runs.

    Only maximal runs of two or more equal win percentages are handed to the
    tiebreaker; everything else keeps its place.
    """
    if standings is None:
        raise ValueError("standings are required")

    ordered = sorted(standings, key=lambda s: s.win_percentage, reverse=True)
    if len(ordered) <= 1:
        return ordered

    result: list[TeamStanding] = []
    i = 0
    while i < len(ordered):
        j = i + 1
        while j < len(ordered) and ordered[j].win_percentage == ordered[i].win_percentage:
            j += 1

        tied_group = ordered[i:j]
        if len(tied_group) == 1:
            result.append(tied_group[0])
        else:
            result.extend(resolve_tiebreak(tied_group, index))
        i = j

    return result


def rank_group(
    standings: Sequence[TeamStanding],
    index: HeadToHeadIndex,
) -> list[TeamStanding]:
    """Rank one group and assign 1-based group positions."""
    return [
        replace(standing, group_position=position)
        for position, standing in enumerate(rank_teams(standings, index), start=1)
    ]


def compute_group_standings(
    snapshot: TournamentSnapshot,
    phases: Optional[Iterable[Phase]] = GROUP_STAGE_ONLY,
    settings: PhaseSettings = PHASE_SETTINGS,
) -> StandingsResult:
    """
    Build every group table of a tournament snapshot.

    Args:
        snapshot: Groups, teams and matches read in one go
        phases: Matches that count; defaults to the group stage
        settings: Day-to-phase mapping

    Returns:
        StandingsResult with one table per group, in group order
    """
    if snapshot.groups is None or snapshot.teams is None:
        raise ValueError("roster is required")

    matches, warnings = validate_matches(
        snapshot.matches_in(phases, settings), snapshot.teams
    )
    index = HeadToHeadIndex(matches, settings)
    warnings.extend(index.warnings)

    result = StandingsResult(warnings=warnings, index=index)
    for group in snapshot.groups:
        team_standings = [
            aggregate_team_record(team, matches)
            for team in snapshot.teams_in_group(group.group_id)
        ]
        result.tables.append(GroupStandingsTable(
            group=group,
            standings=tuple(rank_group(team_standings, index)),
        ))

    logger.debug(
        "Ranked %d groups from %d matches (%d warnings)",
        len(result.tables), len(matches), len(result.warnings),
    )
    return result
