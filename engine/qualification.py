"""
Playoff Qualification Selector

Slices the ranked positional pools into direct qualifiers (straight to the
finals-day bracket) and the play-in pool (one extra elimination match).

Default quotas for 5 groups and a 16-team bracket:
- Direct: every group winner + the 3 best runners-up
- Play-in: the remaining runners-up, every 3rd and 4th, the 4 best 5ths
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence

from config import QualificationSettings, QUALIFICATION_SETTINGS
from engine.records import MatchRecord
from engine.standings import (
    StandingsResult,
    StandingsWarning,
    TeamStanding,
    WarningCode,
)

logger = logging.getLogger(__name__)

DIRECT = "direct"
PLAY_IN = "play_in"


@dataclass(frozen=True)
class PoolQuota:
    """
    How many teams of one positional pool go where.

    The first `direct` teams qualify directly, the next `play_in` teams go to
    the play-in. None takes every remaining team of the pool.
    """
    position: int
    direct: Optional[int] = 0
    play_in: Optional[int] = 0


@dataclass(frozen=True)
class QualificationQuotas:
    """Quota table plus the number of play-in winners joining the bracket."""
    pools: tuple[PoolQuota, ...]
    play_in_winners: int = 8

    @classmethod
    def from_settings(
        cls, settings: QualificationSettings = QUALIFICATION_SETTINGS
    ) -> "QualificationQuotas":
        return cls(
            pools=tuple(
                PoolQuota(position=position, direct=direct, play_in=play_in)
                for position, direct, play_in in settings.pool_quotas
            ),
            play_in_winners=settings.play_in_winners,
        )


@dataclass(frozen=True)
class QuotaShortfall:
    """A quota that the available teams could not fill."""
    position: int
    section: str  # "direct" or "play_in"
    expected: int
    available: int

    @property
    def missing(self) -> int:
        return self.expected - self.available


@dataclass
class QualificationResult:
    """Direct qualifiers and play-in pool, plus any reported shortfall."""
    direct_qualifiers: list[TeamStanding] = field(default_factory=list)
    play_in_pool: list[TeamStanding] = field(default_factory=list)
    pools: dict[int, list[TeamStanding]] = field(default_factory=dict)
    shortfalls: list[QuotaShortfall] = field(default_factory=list)
    warnings: list[StandingsWarning] = field(default_factory=list)

    @property
    def direct_shortfall(self) -> int:
        return sum(s.missing for s in self.shortfalls if s.section == DIRECT)

    @property
    def play_in_shortfall(self) -> int:
        return sum(s.missing for s in self.shortfalls if s.section == PLAY_IN)

    @property
    def expected_direct(self) -> int:
        return len(self.direct_qualifiers) + self.direct_shortfall

    @property
    def expected_play_in(self) -> int:
        return len(self.play_in_pool) + self.play_in_shortfall


def _take(pool: Sequence[TeamStanding], quota: Optional[int]) -> int:
    return len(pool) if quota is None else min(quota, len(pool))


def select_qualifiers(
    pools: Mapping[int, Sequence[TeamStanding]],
    group_count: int,
    quotas: Optional[QualificationQuotas] = None,
) -> QualificationResult:
    """
    Split ranked positional pools into direct qualifiers and play-in pool.

    Pools are consumed in quota order. When a pool holds fewer teams than
    its quota asks for, every available team is taken and the gap is
    reported as a shortfall instead of failing.

    Args:
        pools: {group_position: ranked standings}
        group_count: Number of groups, i.e. the expected size of a full pool
        quotas: Quota table; defaults to the configured one
    """
    if pools is None:
        raise ValueError("positional pools are required")
    quotas = quotas or QualificationQuotas.from_settings()

    result = QualificationResult(pools={p: list(teams) for p, teams in pools.items()})

    for quota in quotas.pools:
        pool = list(pools.get(quota.position, []))

        direct_count = _take(pool, quota.direct)
        direct_expected = group_count if quota.direct is None else quota.direct
        result.direct_qualifiers.extend(pool[:direct_count])

        remaining = pool[direct_count:]
        play_in_count = _take(remaining, quota.play_in)
        if quota.play_in is None:
            play_in_expected = max(group_count - direct_expected, 0)
        else:
            play_in_expected = quota.play_in
        result.play_in_pool.extend(remaining[:play_in_count])

        for section, expected, available in (
            (DIRECT, direct_expected, direct_count),
            (PLAY_IN, play_in_expected, play_in_count),
        ):
            if available >= expected:
                continue
            shortfall = QuotaShortfall(
                position=quota.position,
                section=section,
                expected=expected,
                available=available,
            )
            result.shortfalls.append(shortfall)
            message = (
                f"Position {quota.position} {section} quota expects {expected} "
                f"team(s), only {available} available"
            )
            logger.warning("%s: %s", WarningCode.QUOTA_SHORTFALL.value, message)
            result.warnings.append(StandingsWarning(
                code=WarningCode.QUOTA_SHORTFALL,
                message=message,
                team_ids=tuple(s.team_id for s in pool),
            ))

    logger.info(
        "Qualification: %d direct, %d play-in (shortfall %d/%d)",
        len(result.direct_qualifiers), len(result.play_in_pool),
        result.direct_shortfall, result.play_in_shortfall,
    )
    return result


def resolve_play_in_winners(
    play_in_matches: Iterable[MatchRecord],
    play_in_pool: Sequence[TeamStanding],
    standings: StandingsResult,
) -> list[TeamStanding]:
    """
    Winners of decided play-in matches, in schedule order.

    Only matches involving a play-in team count. Each winner is returned with
    its group-stage standing, so it keeps its group position.
    """
    pool_ids = {s.team_id for s in play_in_pool}
    by_team = {
        s.team_id: s for table in standings.tables for s in table.standings
    }

    winners: list[TeamStanding] = []
    seen: set[int] = set()
    for match in sorted(play_in_matches, key=lambda m: m.schedule_key):
        if not match.is_decided:
            continue
        if match.team_a_id not in pool_ids and match.team_b_id not in pool_ids:
            continue
        standing = by_team.get(match.winner_id)
        if standing is None or standing.team_id in seen:
            continue
        seen.add(standing.team_id)
        winners.append(standing)

    return winners


def playoff_field(
    result: QualificationResult,
    play_in_winners: Sequence[TeamStanding],
) -> list[TeamStanding]:
    """Every team in the finals-day bracket: direct qualifiers, then play-in winners."""
    return list(result.direct_qualifiers) + list(play_in_winners)


def expected_playoff_size(
    result: QualificationResult,
    quotas: Optional[QualificationQuotas] = None,
) -> int:
    """Bracket size once the play-in is complete."""
    quotas = quotas or QualificationQuotas.from_settings()
    return len(result.direct_qualifiers) + quotas.play_in_winners
