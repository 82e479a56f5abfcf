"""
Tournament Repository

Read-only access to roster and match data for the standings pipeline.
The pipeline receives a repository instead of reaching for a global
database client, so it runs the same against SQLite or in-memory fixtures.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from config import PhaseSettings, PHASE_SETTINGS
from engine.records import (
    GroupRecord,
    MatchRecord,
    Phase,
    PlayerPointsRecord,
    PlayerRecord,
    TeamRecord,
    TournamentSnapshot,
    phase_of_day,
)
from models.base import get_session
from models.group import Group
from models.match import Match
from models.player import Player, PlayerMatchStats
from models.team import Team
from models.tournament import Tournament


class TournamentNotFoundError(ValueError):
    """Raised when a tournament id does not exist."""


class TournamentRepository(ABC):
    """Query contract of the Match Record Source."""

    phase_settings: PhaseSettings = PHASE_SETTINGS

    @abstractmethod
    def has_tournament(self, tournament_id: int) -> bool:
        ...

    @abstractmethod
    def list_groups(self, tournament_id: int) -> list[GroupRecord]:
        ...

    @abstractmethod
    def list_teams(self, group_id: int) -> list[TeamRecord]:
        ...

    @abstractmethod
    def list_matches(self, tournament_id: int,
                     phases: Optional[Iterable[Phase]] = None) -> list[MatchRecord]:
        ...

    @abstractmethod
    def list_players(self, tournament_id: int) -> list[PlayerRecord]:
        ...

    @abstractmethod
    def list_player_points(self, tournament_id: int) -> list[PlayerPointsRecord]:
        ...

    def load_snapshot(self, tournament_id: int) -> TournamentSnapshot:
        """
        Read everything one standings computation needs.

        Raises:
            TournamentNotFoundError: if the tournament does not exist
        """
        if not self.has_tournament(tournament_id):
            raise TournamentNotFoundError(f"Tournament {tournament_id} not found")

        groups = self.list_groups(tournament_id)
        teams = [team for group in groups for team in self.list_teams(group.group_id)]
        return TournamentSnapshot(
            tournament_id=tournament_id,
            groups=tuple(groups),
            teams=tuple(teams),
            matches=tuple(self.list_matches(tournament_id)),
            players=tuple(self.list_players(tournament_id)),
            player_points=tuple(self.list_player_points(tournament_id)),
        )

    def _filter_phases(self, matches: Iterable[MatchRecord],
                       phases: Optional[Iterable[Phase]]) -> list[MatchRecord]:
        if phases is None:
            return list(matches)
        wanted = frozenset(phases)
        return [m for m in matches if phase_of_day(m.day, self.phase_settings) in wanted]


class InMemoryRepository(TournamentRepository):
    """Repository over plain records, for fixtures and tests."""

    def __init__(self, phase_settings: PhaseSettings = PHASE_SETTINGS):
        self.phase_settings = phase_settings
        self._tournaments: set[int] = set()
        self._groups: dict[int, list[GroupRecord]] = {}
        self._teams: dict[int, list[TeamRecord]] = {}
        self._matches: dict[int, list[MatchRecord]] = {}
        self._players: dict[int, list[PlayerRecord]] = {}
        self._player_points: dict[int, list[PlayerPointsRecord]] = {}

    def add_tournament(self, tournament_id: int) -> None:
        self._tournaments.add(tournament_id)

    def add_group(self, tournament_id: int, group: GroupRecord) -> None:
        self.add_tournament(tournament_id)
        self._groups.setdefault(tournament_id, []).append(group)

    def add_team(self, team: TeamRecord) -> None:
        self._teams.setdefault(team.group_id, []).append(team)

    def add_match(self, tournament_id: int, match: MatchRecord) -> None:
        self._matches.setdefault(tournament_id, []).append(match)

    def add_player(self, tournament_id: int, player: PlayerRecord) -> None:
        self._players.setdefault(tournament_id, []).append(player)

    def add_player_points(self, tournament_id: int, line: PlayerPointsRecord) -> None:
        self._player_points.setdefault(tournament_id, []).append(line)

    def has_tournament(self, tournament_id: int) -> bool:
        return tournament_id in self._tournaments

    def list_groups(self, tournament_id: int) -> list[GroupRecord]:
        return list(self._groups.get(tournament_id, []))

    def list_teams(self, group_id: int) -> list[TeamRecord]:
        return list(self._teams.get(group_id, []))

    def list_matches(self, tournament_id: int,
                     phases: Optional[Iterable[Phase]] = None) -> list[MatchRecord]:
        return self._filter_phases(self._matches.get(tournament_id, []), phases)

    def list_players(self, tournament_id: int) -> list[PlayerRecord]:
        return list(self._players.get(tournament_id, []))

    def list_player_points(self, tournament_id: int) -> list[PlayerPointsRecord]:
        return list(self._player_points.get(tournament_id, []))


def _group_record(group: Group) -> GroupRecord:
    return GroupRecord(group_id=group.id, name=group.name, color=group.color.value)


def _team_record(team: Team) -> TeamRecord:
    return TeamRecord(team_id=team.id, name=team.name, group_id=team.group_id)


def _match_record(match: Match) -> MatchRecord:
    return MatchRecord(
        match_id=match.id,
        day=match.day,
        time_slot=match.time_slot,
        field=match.field,
        team_a_id=match.team1_id,
        team_b_id=match.team2_id,
        score_a=match.score1,
        score_b=match.score2,
        winner_id=match.winner_id,
    )


class SqlAlchemyRepository(TournamentRepository):
    """
    Repository over the ORM tables.

    Individual list_* calls each open their own session; load_snapshot reads
    everything inside one session so the snapshot is consistent.
    """

    def __init__(self, session_factory: sessionmaker,
                 phase_settings: PhaseSettings = PHASE_SETTINGS):
        self.session_factory = session_factory
        self.phase_settings = phase_settings

    # ----- queries on an open session -----

    def _groups(self, session: Session, tournament_id: int) -> list[GroupRecord]:
        rows = session.scalars(
            select(Group).where(Group.tournament_id == tournament_id).order_by(Group.id)
        )
        return [_group_record(g) for g in rows]

    def _teams(self, session: Session, group_ids: list[int]) -> list[TeamRecord]:
        if not group_ids:
            return []
        rows = session.scalars(
            select(Team).where(Team.group_id.in_(group_ids)).order_by(Team.group_id, Team.id)
        )
        teams = [_team_record(t) for t in rows]
        # Keep group order as listed, not by id
        order = {group_id: i for i, group_id in enumerate(group_ids)}
        return sorted(teams, key=lambda t: order[t.group_id])

    def _matches(self, session: Session, tournament_id: int) -> list[MatchRecord]:
        rows = session.scalars(
            select(Match)
            .where(Match.tournament_id == tournament_id)
            .order_by(Match.day, Match.time_slot, Match.field, Match.id)
        )
        return [_match_record(m) for m in rows]

    def _players(self, session: Session, tournament_id: int) -> list[PlayerRecord]:
        rows = session.scalars(
            select(Player).where(Player.tournament_id == tournament_id).order_by(Player.id)
        )
        return [
            PlayerRecord(player_id=p.id, name=p.name, surname=p.surname, team_id=p.team_id)
            for p in rows
        ]

    def _player_points(self, session: Session, tournament_id: int) -> list[PlayerPointsRecord]:
        rows = session.scalars(
            select(PlayerMatchStats)
            .join(Player, PlayerMatchStats.player_id == Player.id)
            .where(Player.tournament_id == tournament_id)
            .order_by(PlayerMatchStats.id)
        )
        return [
            PlayerPointsRecord(player_id=s.player_id, match_id=s.match_id, points=s.points)
            for s in rows
        ]

    # ----- repository contract -----

    def has_tournament(self, tournament_id: int) -> bool:
        with get_session(self.session_factory) as session:
            return session.get(Tournament, tournament_id) is not None

    def list_groups(self, tournament_id: int) -> list[GroupRecord]:
        with get_session(self.session_factory) as session:
            return self._groups(session, tournament_id)

    def list_teams(self, group_id: int) -> list[TeamRecord]:
        with get_session(self.session_factory) as session:
            return self._teams(session, [group_id])

    def list_matches(self, tournament_id: int,
                     phases: Optional[Iterable[Phase]] = None) -> list[MatchRecord]:
        with get_session(self.session_factory) as session:
            return self._filter_phases(self._matches(session, tournament_id), phases)

    def list_players(self, tournament_id: int) -> list[PlayerRecord]:
        with get_session(self.session_factory) as session:
            return self._players(session, tournament_id)

    def list_player_points(self, tournament_id: int) -> list[PlayerPointsRecord]:
        with get_session(self.session_factory) as session:
            return self._player_points(session, tournament_id)

    def load_snapshot(self, tournament_id: int) -> TournamentSnapshot:
        with get_session(self.session_factory) as session:
            if session.get(Tournament, tournament_id) is None:
                raise TournamentNotFoundError(f"Tournament {tournament_id} not found")

            groups = self._groups(session, tournament_id)
            return TournamentSnapshot(
                tournament_id=tournament_id,
                groups=tuple(groups),
                teams=tuple(self._teams(session, [g.group_id for g in groups])),
                matches=tuple(self._matches(session, tournament_id)),
                players=tuple(self._players(session, tournament_id)),
                player_points=tuple(self._player_points(session, tournament_id)),
            )
