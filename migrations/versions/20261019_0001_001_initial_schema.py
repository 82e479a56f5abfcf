"""Initial schema - tournament, roster and match tables

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates all tables read by the standings engine:
- tournaments: Tournament editions
- groups: Round-robin groups with a color tag
- teams: Teams, one group each
- matches: Scheduled matches with final scores and winner
- players: Registered players
- player_match_stats: Points per player per match
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ### Tournaments table ###
    op.create_table(
        'tournaments',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )

    # ### Groups table ###
    op.create_table(
        'groups',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('tournament_id', sa.Integer(), sa.ForeignKey('tournaments.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('color', sa.Enum(
            'RED', 'BLUE', 'GREEN', 'YELLOW', 'PURPLE',
            name='groupcolor'
        ), nullable=False),
    )

    # ### Teams table ###
    op.create_table(
        'teams',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('group_id', sa.Integer(), sa.ForeignKey('groups.id'), nullable=False),
    )

    # ### Matches table ###
    op.create_table(
        'matches',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('tournament_id', sa.Integer(), sa.ForeignKey('tournaments.id'), nullable=False),
        # Scheduling
        sa.Column('day', sa.Integer(), nullable=False),
        sa.Column('time_slot', sa.String(20), nullable=False),
        sa.Column('field', sa.String(10), nullable=False),
        # Participants
        sa.Column('team1_id', sa.Integer(), sa.ForeignKey('teams.id'), nullable=False),
        sa.Column('team2_id', sa.Integer(), sa.ForeignKey('teams.id'), nullable=False),
        # Result
        sa.Column('score1', sa.Integer(), nullable=True),
        sa.Column('score2', sa.Integer(), nullable=True),
        sa.Column('winner_id', sa.Integer(), sa.ForeignKey('teams.id'), nullable=True),
    )

    # ### Players table ###
    op.create_table(
        'players',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('tournament_id', sa.Integer(), sa.ForeignKey('tournaments.id'), nullable=False),
        sa.Column('team_id', sa.Integer(), sa.ForeignKey('teams.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('surname', sa.String(100), nullable=False),
        sa.Column('birth_year', sa.Integer(), nullable=True),
    )

    # ### Player match stats table ###
    op.create_table(
        'player_match_stats',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('players.id'), nullable=False),
        sa.Column('match_id', sa.Integer(), sa.ForeignKey('matches.id'), nullable=False),
        sa.Column('points', sa.Integer(), nullable=True),
        sa.UniqueConstraint('player_id', 'match_id', name='uq_player_match'),
    )

    # ### Indexes for standings queries ###
    op.create_index('ix_matches_tournament_day', 'matches', ['tournament_id', 'day'])
    op.create_index('ix_teams_group_id', 'teams', ['group_id'])
    op.create_index('ix_groups_tournament_id', 'groups', ['tournament_id'])


def downgrade() -> None:
    # Drop indexes
    op.drop_index('ix_groups_tournament_id', 'groups')
    op.drop_index('ix_teams_group_id', 'teams')
    op.drop_index('ix_matches_tournament_day', 'matches')

    # Drop tables in reverse order of creation
    op.drop_table('player_match_stats')
    op.drop_table('players')
    op.drop_table('matches')
    op.drop_table('teams')
    op.drop_table('groups')
    op.drop_table('tournaments')
