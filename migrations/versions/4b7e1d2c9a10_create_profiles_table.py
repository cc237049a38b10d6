"""create_profiles_table

Revision ID: 4b7e1d2c9a10
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b7e1d2c9a10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the profiles table holding one progression document per user."""
    op.create_table('profiles',
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('experience', sa.Integer(), server_default='0', nullable=False),
        sa.Column('level', sa.Integer(), server_default='1', nullable=False),
        sa.Column('level_points', sa.Integer(), server_default='0', nullable=False),
        sa.Column(
            'stats',
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text('\'{"strength": 10, "stamina": 10, "agility": 10}\'::jsonb'),
            nullable=False,
        ),
        sa.Column(
            'tasks',
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'[]'::jsonb"),
            nullable=False,
        ),
        sa.Column('version', sa.Integer(), server_default='1', nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('experience >= 0', name='ck_profiles_experience'),
        sa.CheckConstraint('level >= 1', name='ck_profiles_level'),
        sa.CheckConstraint('level_points >= 0', name='ck_profiles_level_points'),
        sa.PrimaryKeyConstraint('user_id'),
    )


def downgrade() -> None:
    """Drop the profiles table."""
    op.drop_table('profiles')
