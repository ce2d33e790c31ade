"""create user, teams, players, games and player_stats

Revision ID: 3c9a1f5e7b20
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3c9a1f5e7b20'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    existing_tables = set(sa.inspect(bind).get_table_names())

    if 'user' not in existing_tables:
        op.create_table(
            'user',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('password_hash', sa.String(length=256), nullable=False),
        )
        op.create_index('ix_user_username', 'user', ['username'], unique=True)

    if 'teams' not in existing_tables:
        op.create_table(
            'teams',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('color', sa.String(length=16), nullable=True),
            sa.Column('sport', sa.String(length=32), nullable=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_teams_user_id', 'teams', ['user_id'])

    if 'players' not in existing_tables:
        op.create_table(
            'players',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(length=128), nullable=False),
            sa.Column('team_id', sa.Integer(), sa.ForeignKey('teams.id'), nullable=False),
            sa.Column('position', sa.String(length=64), nullable=True),
            sa.Column('jersey_number', sa.Integer(), nullable=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_players_team_id', 'players', ['team_id'])

    if 'games' not in existing_tables:
        op.create_table(
            'games',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
            sa.Column('sport_id', sa.String(length=32), nullable=False),
            sa.Column('team1_id', sa.Integer(), sa.ForeignKey('teams.id'), nullable=False),
            sa.Column('team2_id', sa.Integer(), sa.ForeignKey('teams.id'), nullable=False),
            sa.Column('team1_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('team2_score', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('team1_fouls', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('team2_fouls', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('game_time', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('shot_clock_time', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('is_game_clock_running', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('is_shot_clock_running', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('current_period', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('game_status', sa.String(length=16), nullable=False, server_default='active'),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_games_user_id', 'games', ['user_id'])

    if 'player_stats' not in existing_tables:
        op.create_table(
            'player_stats',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_id', sa.Integer(), sa.ForeignKey('games.id'), nullable=False),
            sa.Column('player_id', sa.Integer(), sa.ForeignKey('players.id'), nullable=False),
            sa.Column('stat_type', sa.String(length=32), nullable=False),
            sa.Column('value', sa.Float(), nullable=False),
            sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_player_stats_game_id', 'player_stats', ['game_id'])
        op.create_index('ix_player_stats_player_id', 'player_stats', ['player_id'])
        op.create_index('ix_player_stats_user_id', 'player_stats', ['user_id'])


def downgrade():
    op.drop_table('player_stats')
    op.drop_table('games')
    op.drop_table('players')
    op.drop_table('teams')
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
