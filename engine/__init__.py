"""
HoopsTourney Standings Engine

Standings, head-to-head tiebreaks, playoff qualification and bracket
rounds. This module contains no persistence dependencies.
"""

from engine.records import (
    Phase,
    GroupRecord,
    TeamRecord,
    MatchRecord,
    PlayerRecord,
    PlayerPointsRecord,
    TournamentSnapshot,
    derive_winner,
    phase_of_day,
)
from engine.standings import (
    TeamStanding,
    StandingsWarning,
    WarningCode,
    GroupStandingsTable,
    StandingsResult,
    HeadToHeadIndex,
    aggregate_team_record,
    resolve_tiebreak,
    rank_group,
    compute_group_standings,
)
from engine.pools import build_position_pools
from engine.qualification import (
    PoolQuota,
    QualificationQuotas,
    QualificationResult,
    select_qualifiers,
    resolve_play_in_winners,
)
from engine.bracket import BracketRound, BracketView, classify_round, build_bracket_view
from engine.schedule import generate_time_slots, day_label
from engine.scorers import ScorerLine, top_scorers

__all__ = [
    "Phase",
    "GroupRecord",
    "TeamRecord",
    "MatchRecord",
    "PlayerRecord",
    "PlayerPointsRecord",
    "TournamentSnapshot",
    "derive_winner",
    "phase_of_day",
    "TeamStanding",
    "StandingsWarning",
    "WarningCode",
    "GroupStandingsTable",
    "StandingsResult",
    "HeadToHeadIndex",
    "aggregate_team_record",
    "resolve_tiebreak",
    "rank_group",
    "compute_group_standings",
    "build_position_pools",
    "PoolQuota",
    "QualificationQuotas",
    "QualificationResult",
    "select_qualifiers",
    "resolve_play_in_winners",
    "BracketRound",
    "BracketView",
    "classify_round",
    "build_bracket_view",
    "generate_time_slots",
    "day_label",
    "ScorerLine",
    "top_scorers",
]
