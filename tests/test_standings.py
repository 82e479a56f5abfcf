"""
Tests for the Standings Engine

Covers the team record aggregator, the head-to-head tiebreaker, the group
ranker and match validation.
"""

import pytest

from engine.records import (
    GroupRecord,
    Phase,
    TeamRecord,
    TournamentSnapshot,
    GROUP_STAGE_ONLY,
)
from engine.standings import (
    HeadToHeadIndex,
    WarningCode,
    aggregate_team_record,
    compute_group_standings,
    head_to_head_records,
    rank_group,
    rank_teams,
    resolve_tiebreak,
    validate_matches,
)


TEAM_1 = TeamRecord(team_id=1, name="Dragons", group_id=1)


class TestTeamRecordAggregator:
    """Tests for folding matches into a TeamStanding."""

    @pytest.fixture
    def matches(self, make_match):
        return [
            make_match(1, 2, 50, 40, day=1),          # win as team A
            make_match(3, 1, 45, 30, day=2),          # loss as team B
            make_match(1, 4, day=3),                  # unplayed
            make_match(1, 2, 60, 20, day=5),          # play-in win
            make_match(5, 6, 10, 0, day=1),           # not involving team 1
        ]

    def test_group_stage_only(self, matches):
        """Only group-stage decided matches count."""
        standing = aggregate_team_record(TEAM_1, matches, phases=GROUP_STAGE_ONLY)

        assert standing.matches_played == 2
        assert standing.matches_won == 1
        assert standing.matches_lost == 1
        assert standing.points_scored == 80
        assert standing.points_conceded == 85
        assert standing.points_difference == -5
        assert standing.win_percentage == 0.5
        assert standing.group_points == 2

    def test_no_phase_filter_counts_every_decided_match(self, matches):
        """General stats include play-in matches."""
        standing = aggregate_team_record(TEAM_1, matches)

        assert standing.matches_played == 3
        assert standing.matches_won == 2
        assert standing.points_scored == 140
        assert standing.points_conceded == 105

    def test_zero_decided_matches(self, make_match):
        """A team without results gets a zeroed standing."""
        standing = aggregate_team_record(TEAM_1, [make_match(1, 2)])

        assert standing.matches_played == 0
        assert standing.win_percentage == 0
        assert standing.points_difference == 0
        assert standing.team_name == "Dragons"

    def test_level_score_is_not_played(self, make_match):
        """A level score has no winner and does not count."""
        standing = aggregate_team_record(TEAM_1, [make_match(1, 2, 40, 40)])

        assert standing.matches_played == 0
        assert standing.points_scored == 0

    def test_won_never_exceeds_played(self, make_match):
        """0 <= won <= played for every aggregated team."""
        matches = [
            make_match(1, 2, 50, 40),
            make_match(2, 3, 50, 40),
            make_match(3, 1, 50, 40),
            make_match(1, 3),
        ]
        for team_id in (1, 2, 3):
            team = TeamRecord(team_id=team_id, name=str(team_id), group_id=1)
            standing = aggregate_team_record(team, matches)
            assert 0 <= standing.matches_won <= standing.matches_played
            assert 0.0 <= standing.win_percentage <= 1.0


class TestHeadToHeadIndex:
    """Tests for the unordered pair index."""

    def test_lookup_is_order_independent(self, make_match):
        """Pairs are unordered."""
        match = make_match(1, 2, 50, 40)
        index = HeadToHeadIndex([match])

        assert index.lookup(1, 2) is match
        assert index.lookup(2, 1) is match
        assert index.lookup(1, 3) is None

    def test_undecided_matches_are_not_indexed(self, make_match):
        """Unplayed and level matches never count head to head."""
        index = HeadToHeadIndex([make_match(1, 2), make_match(1, 3, 40, 40)])

        assert len(index) == 0

    def test_duplicate_pairing_keeps_latest_and_warns(self, make_match):
        """Two decided matches between the same teams: the latest is used."""
        early = make_match(1, 2, 50, 40, day=1)
        late = make_match(1, 2, 30, 45, day=3)
        index = HeadToHeadIndex([late, early])

        assert index.lookup(1, 2) is late
        assert len(index.warnings) == 1
        warning = index.warnings[0]
        assert warning.code == WarningCode.DUPLICATE_PAIRING
        assert set(warning.match_ids) == {early.match_id, late.match_id}

    def test_knockout_rematch_is_not_a_duplicate(self, make_match):
        """A group game and a finals rematch are different phases."""
        group_game = make_match(1, 2, 50, 40, day=1)
        rematch = make_match(2, 1, 60, 40, day=7)
        index = HeadToHeadIndex([group_game, rematch])

        assert index.warnings == []
        assert len(index) == 2
        assert index.lookup(1, 2) is group_game
        assert index.lookup(2, 1) is group_game

    def test_knockout_meeting_used_when_no_group_game(self, make_match):
        """Teams that only met after the group stage still have a result."""
        play_in = make_match(3, 4, 55, 50, day=5)
        index = HeadToHeadIndex([play_in])

        assert index.lookup(4, 3) is play_in

    def test_duplicate_pairing_is_not_summed(self, make_standing, make_match):
        """Head-to-head points come from one match only."""
        index = HeadToHeadIndex([
            make_match(1, 2, 50, 40, day=1),
            make_match(1, 2, 30, 45, day=3),
        ])
        records = head_to_head_records([make_standing(1), make_standing(2)], index)

        assert records[1].points == 0
        assert records[2].points == 2
        assert records[1].games == 1
        assert records[2].games == 1


class TestTiebreakResolver:
    """Tests for resolving clusters tied on win percentage."""

    def test_head_to_head_winner_ranks_first(self, make_standing, make_match):
        """The winner of the direct match goes ahead despite a worse difference."""
        a = make_standing(1, played=4, won=2, diff=30)
        b = make_standing(2, played=4, won=2, diff=-10)
        index = HeadToHeadIndex([make_match(2, 1, 55, 50)])

        assert resolve_tiebreak([a, b], index) == [b, a]

    def test_three_way_cycle_with_equal_difference_keeps_input_order(
            self, make_standing, make_match):
        """A beat B, B beat C, C beat A, same difference: order is preserved."""
        a = make_standing(1, played=5, won=3, diff=10)
        b = make_standing(2, played=5, won=3, diff=10)
        c = make_standing(3, played=5, won=3, diff=10)
        index = HeadToHeadIndex([
            make_match(1, 2, 50, 45),
            make_match(2, 3, 50, 45),
            make_match(3, 1, 50, 45),
        ])

        records = head_to_head_records([a, b, c], index)
        assert [records[t].points for t in (1, 2, 3)] == [2, 2, 2]

        assert resolve_tiebreak([a, b, c], index) == [a, b, c]
        assert resolve_tiebreak([c, b, a], index) == [c, b, a]
        # Deterministic across runs
        assert resolve_tiebreak([a, b, c], index) == resolve_tiebreak([a, b, c], index)

    def test_three_way_cycle_falls_through_to_difference(self, make_standing, make_match):
        """Equal head-to-head points are separated by points difference."""
        a = make_standing(1, played=5, won=3, diff=2)
        b = make_standing(2, played=5, won=3, diff=15)
        c = make_standing(3, played=5, won=3, diff=7)
        index = HeadToHeadIndex([
            make_match(1, 2, 50, 45),
            make_match(2, 3, 50, 45),
            make_match(3, 1, 50, 45),
        ])

        assert resolve_tiebreak([a, b, c], index) == [b, c, a]

    def test_teams_that_never_met_use_difference(self, make_standing):
        """Cross-group teams without a direct match: straight to difference."""
        y = make_standing(2, played=4, won=2, diff=-3, group_id=2)
        x = make_standing(1, played=4, won=2, diff=10, group_id=1)
        index = HeadToHeadIndex([])

        records = head_to_head_records([y, x], index)
        assert records[1].games == 0
        assert records[2].games == 0
        assert resolve_tiebreak([y, x], index) == [x, y]

    def test_single_pass_does_not_rerun_head_to_head(self, make_standing, make_match):
        """
        A and B both finish on 2 head-to-head points although B beat A.

        The resolver separates them by points difference (A ahead) instead of
        re-running head-to-head between A and B alone.
        """
        a = make_standing(1, played=6, won=3, diff=20)
        b = make_standing(2, played=6, won=3, diff=5)
        c = make_standing(3, played=6, won=3, diff=40)
        index = HeadToHeadIndex([
            make_match(2, 1, 50, 48),   # B beat A
            make_match(1, 3, 50, 48),   # A beat C
            # B and C never met
        ])

        assert resolve_tiebreak([a, b, c], index) == [a, b, c]

    def test_cluster_of_one_is_unchanged(self, make_standing):
        """Nothing to break."""
        a = make_standing(1)
        assert resolve_tiebreak([a], HeadToHeadIndex([])) == [a]


class TestGroupRanker:
    """Tests for ranking one group and assigning positions."""

    def test_only_tied_run_is_reordered(self, make_standing, make_match):
        """Teams outside an equal-percentage run keep their place."""
        t1 = make_standing(1, played=3, won=3, diff=-50)
        t2 = make_standing(2, played=3, won=1, diff=40)
        t3 = make_standing(3, played=3, won=1, diff=-5)
        t4 = make_standing(4, played=3, won=0, diff=90)
        index = HeadToHeadIndex([make_match(3, 2, 50, 49)])

        ranked = rank_group([t4, t2, t3, t1], index)

        assert [s.team_id for s in ranked] == [1, 3, 2, 4]
        assert [s.group_position for s in ranked] == [1, 2, 3, 4]

    def test_positions_are_unique_and_gapless(self, make_standing):
        """Positions are exactly 1..n."""
        standings = [make_standing(i, played=2, won=i % 3, diff=i) for i in range(1, 8)]
        ranked = rank_group(standings, HeadToHeadIndex([]))

        assert sorted(s.group_position for s in ranked) == list(range(1, 8))

    def test_input_standings_are_not_mutated(self, make_standing):
        """Ranking returns new standings."""
        standing = make_standing(1, played=1, won=1)
        ranked = rank_group([standing], HeadToHeadIndex([]))

        assert standing.group_position is None
        assert ranked[0].group_position == 1

    def test_empty_group(self):
        """Ranking an empty group is a no-op."""
        assert rank_group([], HeadToHeadIndex([])) == []

    def test_zero_match_teams_stay_in_table(self, make_standing):
        """Teams without results rank last but are kept."""
        played = make_standing(1, played=2, won=1)
        idle = make_standing(2)
        ranked = rank_teams([idle, played], HeadToHeadIndex([]))

        assert [s.team_id for s in ranked] == [1, 2]

    def test_missing_standings_raise(self):
        """None instead of a list is a caller error."""
        with pytest.raises(ValueError):
            rank_teams(None, HeadToHeadIndex([]))


class TestValidateMatches:
    """Tests for reference-data checks before ranking."""

    ROSTER = [TeamRecord(team_id=i, name=f"T{i}", group_id=1) for i in (1, 2, 3)]

    def test_unknown_team_is_skipped(self, make_match):
        """A match against a team outside the roster is dropped and reported."""
        good = make_match(1, 2, 50, 40)
        bad = make_match(1, 99, 50, 40)

        valid, warnings = validate_matches([good, bad], self.ROSTER)

        assert valid == [good]
        assert len(warnings) == 1
        assert warnings[0].code == WarningCode.UNKNOWN_TEAM
        assert warnings[0].team_ids == (99,)
        assert warnings[0].match_ids == (bad.match_id,)

    def test_winner_outside_match_is_undecided(self, make_match):
        """A winner that is neither side is cleared."""
        match = make_match(1, 2, 50, 40, winner_id=3)

        valid, warnings = validate_matches([match], self.ROSTER)

        assert valid[0].winner_id is None
        assert warnings[0].code == WarningCode.INVALID_WINNER

    def test_winner_contradicting_score_is_undecided(self, make_match):
        """A winner on a level or losing score is cleared."""
        level = make_match(1, 2, 40, 40, winner_id=1)
        losing = make_match(1, 3, 30, 40, winner_id=1)

        valid, warnings = validate_matches([level, losing], self.ROSTER)

        assert [m.winner_id for m in valid] == [None, None]
        assert [w.code for w in warnings] == [WarningCode.INVALID_WINNER] * 2

    def test_missing_match_list_raises(self):
        """An absent match list is a precondition violation."""
        with pytest.raises(ValueError):
            validate_matches(None, self.ROSTER)


class TestComputeGroupStandings:
    """Tests for building every table of a snapshot."""

    @pytest.fixture
    def snapshot(self, make_match):
        groups = (
            GroupRecord(group_id=1, name="Group A", color="red"),
            GroupRecord(group_id=2, name="Group B", color="blue"),
        )
        teams = (
            TeamRecord(team_id=1, name="Dragons", group_id=1),
            TeamRecord(team_id=2, name="Phoenix", group_id=1),
            TeamRecord(team_id=3, name="Tigers", group_id=1),
            TeamRecord(team_id=4, name="Lions", group_id=2),
            TeamRecord(team_id=5, name="Eagles", group_id=2),
        )
        matches = (
            make_match(1, 2, 40, 50, day=1),
            make_match(2, 3, 60, 50, day=2),
            make_match(1, 3, 70, 20, day=6),
            make_match(4, 5, 30, 35, day=1),
            make_match(1, 2, 99, 10, day=5),     # play-in, ignored
            make_match(4, 42, 10, 0, day=1),     # unknown team, skipped
        )
        return TournamentSnapshot(tournament_id=1, groups=groups, teams=teams, matches=matches)

    def test_tables_per_group(self, snapshot):
        """One ranked table per group, in group order."""
        result = compute_group_standings(snapshot)

        assert [t.group.name for t in result.tables] == ["Group A", "Group B"]
        group_a = result.table_for(1)
        assert [s.team_id for s in group_a.standings] == [2, 1, 3]
        assert [s.group_position for s in group_a.standings] == [1, 2, 3]

        group_b = result.table_for(2)
        assert [s.team_id for s in group_b.standings] == [5, 4]

    def test_play_in_matches_do_not_count(self, snapshot):
        """Group standings ignore play-in results."""
        result = compute_group_standings(snapshot)
        dragons = result.table_for(1).standings[1]

        assert dragons.team_id == 1
        assert dragons.matches_played == 2
        assert dragons.points_scored == 110

    def test_unknown_team_reported(self, snapshot):
        """The match against an unknown team is reported, not counted."""
        result = compute_group_standings(snapshot)

        assert [w.code for w in result.warnings] == [WarningCode.UNKNOWN_TEAM]
        lions = result.table_for(2).standings[1]
        assert lions.matches_played == 1

    def test_all_phases(self, snapshot):
        """Without a phase filter the play-in match counts too."""
        result = compute_group_standings(snapshot, phases=None)
        dragons = next(s for s in result.table_for(1).standings if s.team_id == 1)

        assert dragons.matches_played == 3

    def test_rematch_across_phases_ranks_on_group_meeting(self, make_match):
        """
        Unfiltered ranking with a finals rematch: no duplicate warning, and the
        group-stage result decides head-to-head.
        """
        snapshot = TournamentSnapshot(
            tournament_id=1,
            groups=(GroupRecord(group_id=1, name="Group A"),),
            teams=(
                TeamRecord(team_id=1, name="Dragons", group_id=1),
                TeamRecord(team_id=2, name="Phoenix", group_id=1),
            ),
            matches=(
                make_match(1, 2, 50, 40, day=1),
                make_match(2, 1, 60, 40, day=7),
            ),
        )

        result = compute_group_standings(snapshot, phases=None)

        assert WarningCode.DUPLICATE_PAIRING not in [w.code for w in result.warnings]
        standings = result.table_for(1).standings
        # Both 1-1; Dragons won the group game despite the worse difference
        assert [s.team_id for s in standings] == [1, 2]
        assert standings[0].points_difference == -10

    def test_idempotent(self, snapshot):
        """Same snapshot, same tables, same tie order."""
        first = compute_group_standings(snapshot)
        second = compute_group_standings(snapshot)

        assert first.tables == second.tables

    def test_position_lookup(self, snapshot):
        """Group position of a team across tables."""
        result = compute_group_standings(snapshot)

        assert result.position_of(3) == 3
        assert result.position_of(5) == 1
        assert result.position_of(999) is None

    def test_group_without_teams(self):
        """An empty group yields an empty table."""
        snapshot = TournamentSnapshot(
            tournament_id=1,
            groups=(GroupRecord(group_id=9, name="Empty"),),
            teams=(),
            matches=(),
        )
        result = compute_group_standings(snapshot, phases={Phase.GROUP_STAGE})

        assert result.tables[0].standings == ()
        assert result.warnings == []
