"""initial schema: users, journeys, entries, tasks, rank ladders

Revision ID: 20261019120000
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019120000'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all engine tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column('username', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=False)

    op.create_table(
        'journeys',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('rank_system', sa.String(length=64), nullable=True),
        sa.Column('start', sa.DateTime(), nullable=False),
        sa.Column('end', sa.DateTime(), nullable=True),
        sa.Column('note', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_journeys_id'), 'journeys', ['id'], unique=False)
    op.create_index(op.f('ix_journeys_user_id'), 'journeys', ['user_id'], unique=False)
    op.create_index(op.f('ix_journeys_end'), 'journeys', ['end'], unique=False)

    op.create_table(
        'entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('privacy_pending', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('note', sa.Integer(), nullable=False),
        sa.Column('text', sa.String(length=4096), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_entries_id'), 'entries', ['id'], unique=False)
    op.create_index(op.f('ix_entries_user_id'), 'entries', ['user_id'], unique=False)
    op.create_index(op.f('ix_entries_created_at'), 'entries', ['created_at'], unique=False)

    op.create_table(
        'task_definitions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('prompt_key', sa.String(length=128), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('prompt_key'),
    )
    op.create_index(op.f('ix_task_definitions_id'), 'task_definitions', ['id'], unique=False)

    op.create_table(
        'tasks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.BigInteger(), nullable=False),
        sa.Column('task_ref', sa.Integer(), nullable=False),
        sa.Column('message_ref', sa.BigInteger(), nullable=True),
        sa.Column('is_done', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['task_ref'], ['task_definitions.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_tasks_id'), 'tasks', ['id'], unique=False)
    op.create_index(op.f('ix_tasks_user_id'), 'tasks', ['user_id'], unique=False)
    op.create_index(op.f('ix_tasks_updated_at'), 'tasks', ['updated_at'], unique=False)

    op.create_table(
        'rank_systems',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('display_name', sa.String(length=128), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )
    op.create_index(op.f('ix_rank_systems_id'), 'rank_systems', ['id'], unique=False)

    op.create_table(
        'rank_levels',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('rank_system_id', sa.Integer(), nullable=False),
        sa.Column('days', sa.Integer(), nullable=False),
        sa.Column('label', sa.String(length=128), nullable=False),
        sa.ForeignKeyConstraint(['rank_system_id'], ['rank_systems.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('rank_system_id', 'days', name='uq_rank_level_days'),
    )
    op.create_index(op.f('ix_rank_levels_id'), 'rank_levels', ['id'], unique=False)
    op.create_index(op.f('ix_rank_levels_rank_system_id'), 'rank_levels', ['rank_system_id'], unique=False)


def downgrade() -> None:
    """Drop all engine tables."""
    op.drop_table('rank_levels')
    op.drop_table('rank_systems')
    op.drop_table('tasks')
    op.drop_table('task_definitions')
    op.drop_table('entries')
    op.drop_table('journeys')
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_table('users')
