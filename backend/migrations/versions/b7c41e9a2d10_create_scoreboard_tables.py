"""create user, game_state, teams and scores

Revision ID: b7c41e9a2d10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b7c41e9a2d10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'user' not in existing_tables:
        op.create_table(
            'user',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('password_hash', sa.String(length=256), nullable=False),
        )
        op.create_index('ix_user_username', 'user', ['username'], unique=True)

    if 'game_state' not in existing_tables:
        op.create_table(
            'game_state',
            sa.Column('id', sa.String(length=32), primary_key=True),
            sa.Column('started_at', sa.DateTime(), nullable=True),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )

    if 'teams' not in existing_tables:
        op.create_table(
            'teams',
            sa.Column('id', sa.String(length=32), primary_key=True),
            sa.Column('name', sa.String(length=64), nullable=False),
            sa.Column('remaining_points', sa.Integer(), nullable=False),
            sa.Column('updated_at', sa.DateTime(), nullable=False),
        )

    if 'scores' not in existing_tables:
        op.create_table(
            'scores',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('team_id', sa.String(length=32), sa.ForeignKey('teams.id'), nullable=False),
            sa.Column('score', sa.Integer(), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.CheckConstraint('score >= 0 AND score <= 180', name='ck_scores_score_range'),
        )
        op.create_index('ix_scores_team_id', 'scores', ['team_id'])


def downgrade():
    op.drop_index('ix_scores_team_id', table_name='scores')
    op.drop_table('scores')
    op.drop_table('teams')
    op.drop_table('game_state')
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
