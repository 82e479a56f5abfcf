"""
Cross-Group Pool Builder

Collects the team at each group position across every group (all group
winners, all runners-up, ...) and ranks each positional pool with the same
win-percentage and head-to-head rule used inside a group.
"""

from typing import Iterable

from engine.standings import (
    GroupStandingsTable,
    HeadToHeadIndex,
    TeamStanding,
    rank_teams,
)


def build_position_pools(
    tables: Iterable[GroupStandingsTable],
    index: HeadToHeadIndex,
) -> dict[int, list[TeamStanding]]:
    """
    Build ranked positional pools.

    Args:
        tables: Ranked group tables (group positions already assigned)
        index: Head-to-head index over the original group-stage results;
               teams from different groups usually never met, so most pool
               ties fall through to points difference

    Returns:
        {group_position: ranked standings}, ordered by position. Each
        standing keeps the group_position it earned in its own group.
    """
    by_position: dict[int, list[TeamStanding]] = {}
    for table in tables:
        for standing in table.standings:
            if standing.group_position is None:
                continue
            by_position.setdefault(standing.group_position, []).append(standing)

    return {
        position: rank_teams(by_position[position], index)
        for position in sorted(by_position)
    }
