"""
Shared fixtures: record builders and a five-group tournament.
"""

from itertools import count

import pytest

from engine.records import GroupRecord, MatchRecord, TeamRecord, derive_winner
from engine.standings import TeamStanding
from services.repository import InMemoryRepository

COLORS = ["red", "blue", "green", "yellow", "purple"]


@pytest.fixture
def make_match():
    """Build MatchRecords with increasing ids; the winner follows the score."""
    ids = count(1)

    def _make(team_a, team_b, score_a=None, score_b=None, day=1,
              time_slot="18:00 > 18:15", field="A", winner_id="derive"):
        if winner_id == "derive":
            winner_id = derive_winner(team_a, team_b, score_a, score_b)
        return MatchRecord(
            match_id=next(ids),
            day=day,
            time_slot=time_slot,
            field=field,
            team_a_id=team_a,
            team_b_id=team_b,
            score_a=score_a,
            score_b=score_b,
            winner_id=winner_id,
        )

    return _make


@pytest.fixture
def make_standing():
    """Build a TeamStanding from played/won/difference."""
    def _make(team_id, played=0, won=0, diff=0, group_id=1, position=None):
        return TeamStanding(
            team_id=team_id,
            team_name=f"Team {team_id}",
            group_id=group_id,
            matches_played=played,
            matches_won=won,
            points_scored=100 + diff,
            points_conceded=100,
            group_position=position,
        )

    return _make


@pytest.fixture
def five_group_repository(make_match):
    """
    Tournament 1: five groups of five teams, full round robin on group days.

    Team ids are group * 10 + seed. The better seed always wins, by a margin
    of 10 * group, so positions follow seeds and the later groups have the
    larger point differences.
    """
    repo = InMemoryRepository()
    for group_id in range(1, 6):
        repo.add_group(1, GroupRecord(group_id=group_id, name=f"Group {group_id}",
                                      color=COLORS[group_id - 1]))
        seeds = [group_id * 10 + seed for seed in range(1, 6)]
        for team_id in seeds:
            repo.add_team(TeamRecord(team_id=team_id, name=f"Team {team_id}",
                                     group_id=group_id))

        day_cycle = [1, 2, 3, 4, 6]
        for i, better in enumerate(seeds):
            for worse in seeds[i + 1:]:
                repo.add_match(1, make_match(
                    better, worse, 50 + 10 * group_id, 50,
                    day=day_cycle[(better + worse) % len(day_cycle)],
                ))
    return repo
