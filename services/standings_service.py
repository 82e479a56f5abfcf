"""
Standings Service

Runs the standings pipeline once per read request:
repository snapshot -> group tables -> positional pools -> qualification,
plus the finals-day bracket view and scoring leaderboards.

Nothing is cached; every call reads a fresh snapshot and recomputes.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from config import (
    LoggingSettings,
    Paths,
    PhaseSettings,
    LOGGING_SETTINGS,
    PATHS,
    PHASE_SETTINGS,
    init_config,
)
from engine.bracket import (
    BracketRound,
    BracketView,
    ROUND_BY_TIME_SLOT,
    build_bracket_view,
    expected_matches,
)
from engine.pools import build_position_pools
from engine.qualification import (
    QualificationQuotas,
    QualificationResult,
    expected_playoff_size,
    playoff_field,
    resolve_play_in_winners,
    select_qualifiers,
)
from engine.records import (
    GROUP_STAGE_ONLY,
    Phase,
    TournamentSnapshot,
)
from engine.scorers import GROUP_STAGE_LIMIT, KNOCKOUT_LIMIT, ScorerLine, top_scorers
from engine.standings import (
    StandingsResult,
    StandingsWarning,
    TeamStanding,
    compute_group_standings,
    validate_matches,
)
from models.schemas import (
    BracketMatchResponse,
    BracketRoundResponse,
    GroupStandingsResponse,
    QualificationResponse,
    TeamStandingResponse,
    WarningResponse,
)
from models.base import (
    create_db_engine,
    create_session_factory,
    get_database_url,
    init_db,
)
from services.repository import SqlAlchemyRepository, TournamentRepository

logger = logging.getLogger(__name__)


@dataclass
class PlayoffOverview:
    """Everything the playoff page shows, from one snapshot."""
    standings: StandingsResult
    qualification: QualificationResult
    play_in_winners: list[TeamStanding] = field(default_factory=list)
    bracket: Optional[BracketView] = None
    expected_playoff_size: int = 0

    @property
    def playoff_field(self) -> list[TeamStanding]:
        return playoff_field(self.qualification, self.play_in_winners)

    @property
    def warnings(self) -> list[StandingsWarning]:
        seen: list[StandingsWarning] = []
        for warning in self.standings.warnings + self.qualification.warnings:
            if warning not in seen:
                seen.append(warning)
        return seen


class StandingsService:
    """
    Standings, qualification and bracket queries over a repository.

    Usage:
        service = StandingsService(SqlAlchemyRepository(session_factory))
        tables = service.group_standings(tournament_id)
        result = service.qualification(tournament_id)
    """

    def __init__(
        self,
        repository: TournamentRepository,
        phase_settings: PhaseSettings = PHASE_SETTINGS,
        quotas: Optional[QualificationQuotas] = None,
        round_table: Mapping[str, BracketRound] = ROUND_BY_TIME_SLOT,
        expected_round_matches: Optional[Mapping[BracketRound, int]] = None,
    ):
        self.repository = repository
        self.phase_settings = phase_settings
        self.quotas = quotas or QualificationQuotas.from_settings()
        self.round_table = round_table
        self.expected_round_matches = (
            expected_round_matches if expected_round_matches is not None
            else expected_matches()
        )

    # ----- pipeline steps on a snapshot -----

    def _standings(self, snapshot: TournamentSnapshot,
                   phases: Optional[Iterable[Phase]] = GROUP_STAGE_ONLY) -> StandingsResult:
        return compute_group_standings(snapshot, phases, self.phase_settings)

    def _qualification(self, standings: StandingsResult) -> QualificationResult:
        pools = build_position_pools(standings.tables, standings.index)
        return select_qualifiers(pools, len(standings.tables), self.quotas)

    def _phase_matches(self, snapshot: TournamentSnapshot, phase: Phase):
        matches, _ = validate_matches(
            snapshot.matches_in({phase}, self.phase_settings), snapshot.teams
        )
        return matches

    # ----- queries -----

    def group_standings(self, tournament_id: int) -> StandingsResult:
        """Group tables counting group-stage matches only."""
        snapshot = self.repository.load_snapshot(tournament_id)
        return self._standings(snapshot)

    def team_stats(self, tournament_id: int) -> StandingsResult:
        """Group tables counting every match of every phase."""
        snapshot = self.repository.load_snapshot(tournament_id)
        return self._standings(snapshot, phases=None)

    def qualification(self, tournament_id: int) -> QualificationResult:
        """Direct qualifiers and play-in pool."""
        snapshot = self.repository.load_snapshot(tournament_id)
        standings = self._standings(snapshot)
        result = self._qualification(standings)
        result.warnings = standings.warnings + result.warnings
        return result

    def bracket_view(self, tournament_id: int) -> BracketView:
        """Finals-day matches grouped by round."""
        snapshot = self.repository.load_snapshot(tournament_id)
        return build_bracket_view(
            self._phase_matches(snapshot, Phase.FINALS),
            self.round_table,
            self.expected_round_matches,
        )

    def playoff_overview(self, tournament_id: int) -> PlayoffOverview:
        """Qualification, play-in winners and bracket from a single snapshot."""
        snapshot = self.repository.load_snapshot(tournament_id)
        standings = self._standings(snapshot)
        qualification = self._qualification(standings)

        winners = resolve_play_in_winners(
            self._phase_matches(snapshot, Phase.PLAY_IN),
            qualification.play_in_pool,
            standings,
        )
        bracket = build_bracket_view(
            self._phase_matches(snapshot, Phase.FINALS),
            self.round_table,
            self.expected_round_matches,
        )

        overview = PlayoffOverview(
            standings=standings,
            qualification=qualification,
            play_in_winners=winners,
            bracket=bracket,
            expected_playoff_size=expected_playoff_size(qualification, self.quotas),
        )
        logger.info(
            "Tournament %d playoff field: %d of %d teams known",
            tournament_id, len(overview.playoff_field), overview.expected_playoff_size,
        )
        return overview

    def top_scorers(
        self,
        tournament_id: int,
        phases: Optional[Iterable[Phase]] = GROUP_STAGE_ONLY,
        limit: Optional[int] = None,
    ) -> list[ScorerLine]:
        """
        Scoring leaderboard for a set of phases.

        Without an explicit limit, boards restricted to knockout phases are
        cut at 50 rows and every other board at 100.
        """
        snapshot = self.repository.load_snapshot(tournament_id)
        phases = frozenset(phases) if phases is not None else None
        if limit is None:
            knockout_only = phases is not None and not phases & GROUP_STAGE_ONLY
            limit = KNOCKOUT_LIMIT if knockout_only else GROUP_STAGE_LIMIT
        return top_scorers(
            snapshot.players,
            snapshot.player_points,
            snapshot.matches,
            snapshot.teams,
            phases=phases,
            limit=limit,
            settings=self.phase_settings,
        )


def open_service(
    database_url: Optional[str] = None,
    paths: Paths = PATHS,
    logging_settings: LoggingSettings = LOGGING_SETTINGS,
) -> StandingsService:
    """
    Application setup: directories, logging, database tables and the service.

    Args:
        database_url: SQLAlchemy URL; defaults to the SQLite file under `paths`
        paths: Data, config and log directories
        logging_settings: Root logger configuration
    """
    init_config(paths, logging_settings)

    engine = create_db_engine(database_url or get_database_url(paths))
    init_db(engine)
    logger.info("Standings service ready on %s", engine.url)
    return StandingsService(SqlAlchemyRepository(create_session_factory(engine)))


# ============ Response conversion ============

def standings_to_response(result: StandingsResult) -> list[GroupStandingsResponse]:
    """Group tables as UI response schemas."""
    return [
        GroupStandingsResponse(
            group_id=table.group.group_id,
            name=table.group.name,
            color=table.group.color,
            standings=[TeamStandingResponse.model_validate(s) for s in table.standings],
        )
        for table in result.tables
    ]


def qualification_to_response(result: QualificationResult) -> QualificationResponse:
    """Qualification result as a UI response schema."""
    return QualificationResponse(
        direct_qualifiers=[TeamStandingResponse.model_validate(s) for s in result.direct_qualifiers],
        play_in_pool=[TeamStandingResponse.model_validate(s) for s in result.play_in_pool],
        direct_shortfall=result.direct_shortfall,
        play_in_shortfall=result.play_in_shortfall,
        warnings=[WarningResponse.model_validate(w) for w in result.warnings],
    )


def bracket_to_response(view: BracketView) -> list[BracketRoundResponse]:
    """Bracket view as UI response schemas, one entry per round."""
    rounds = [
        BracketRoundResponse(
            round=bracket_round.value,
            matches=[BracketMatchResponse.model_validate(m) for m in matches],
            unfilled=view.unfilled.get(bracket_round, 0),
        )
        for bracket_round, matches in view.rounds.items()
    ]
    if view.other:
        rounds.append(BracketRoundResponse(
            round=BracketRound.OTHER.value,
            matches=[BracketMatchResponse.model_validate(m) for m in view.other],
            unfilled=0,
        ))
    return rounds
