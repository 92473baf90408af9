"""create workouts and heart_rate_samples tables

Revision ID: 3e1f0c9a7b21
Revises:
Create Date: 2025-12-02 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '3e1f0c9a7b21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'workouts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_type', sa.String(length=20), nullable=False, server_default='Other'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='completed'),
        sa.Column('source', sa.String(length=20), nullable=False, server_default='manual'),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('hr_max', sa.Integer(), nullable=False),
        sa.Column('avg_hr', sa.Integer(), nullable=True),
        sa.Column('max_hr', sa.Integer(), nullable=True),
        sa.Column('min_hr', sa.Integer(), nullable=True),
        sa.Column('effort', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('notes', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index('ix_workouts_id', 'workouts', ['id'])
    op.create_index('ix_workouts_started_at', 'workouts', ['started_at'])

    op.create_table(
        'heart_rate_samples',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_id', sa.Integer(), sa.ForeignKey('workouts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('idx', sa.Integer(), nullable=False),
        sa.Column('heart_rate', sa.Integer(), nullable=True),
        sa.Column('recorded_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_heart_rate_samples_id', 'heart_rate_samples', ['id'])
    op.create_index('ix_heart_rate_samples_workout_id', 'heart_rate_samples', ['workout_id'])


def downgrade() -> None:
    op.drop_index('ix_heart_rate_samples_workout_id', table_name='heart_rate_samples')
    op.drop_index('ix_heart_rate_samples_id', table_name='heart_rate_samples')
    op.drop_table('heart_rate_samples')
    op.drop_index('ix_workouts_started_at', table_name='workouts')
    op.drop_index('ix_workouts_id', table_name='workouts')
    op.drop_table('workouts')
