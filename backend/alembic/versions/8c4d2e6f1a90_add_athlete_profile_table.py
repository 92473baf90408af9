"""add athlete_profile table

Revision ID: 8c4d2e6f1a90
Revises: 3e1f0c9a7b21
Create Date: 2025-12-04 18:05:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8c4d2e6f1a90'
down_revision: Union[str, Sequence[str], None] = '3e1f0c9a7b21'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = inspector.get_table_names()
    if 'athlete_profile' not in tables:
        op.create_table(
            'athlete_profile',
            sa.Column('id', sa.Integer(), primary_key=True, nullable=False),
            sa.Column('age', sa.Integer(), nullable=True),
            sa.Column('max_heart_rate', sa.Integer(), nullable=True),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        )


def downgrade() -> None:
    # Safe drop if exists
    op.execute('DROP TABLE IF EXISTS athlete_profile')
