"""create users and tracks tables

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('bio', sa.String(500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'tracks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(255), nullable=True),
        sa.Column('artist', sa.String(255), nullable=True),
        sa.Column('album', sa.String(255), nullable=True),
        sa.Column('release_date', sa.String(20), nullable=True),
        sa.Column('language', sa.String(50), nullable=True),
        sa.Column('country', sa.String(100), nullable=True),
        sa.Column('genre', sa.String(100), nullable=True),
        sa.Column('explicit', sa.Boolean(), nullable=False),
        sa.Column('bpm', sa.Integer(), nullable=True),
        sa.Column('file', sa.String(500), nullable=False),
        sa.Column('cover', sa.String(500), nullable=True),
        sa.Column('plays', sa.Integer(), server_default='0', nullable=False),
        sa.Column('top_monday', sa.Boolean(), server_default='0', nullable=False),
        sa.Column('uploaded_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['uploaded_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tracks_artist', 'tracks', ['artist'])
    op.create_index('ix_tracks_top_monday', 'tracks', ['top_monday'])
    op.create_index('ix_tracks_uploaded_by', 'tracks', ['uploaded_by'])


def downgrade() -> None:
    op.drop_index('ix_tracks_uploaded_by', table_name='tracks')
    op.drop_index('ix_tracks_top_monday', table_name='tracks')
    op.drop_index('ix_tracks_artist', table_name='tracks')
    op.drop_table('tracks')

    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
