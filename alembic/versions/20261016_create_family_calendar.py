"""Create users, families, family_members and family_events tables

Revision ID: 4f1c2a7b9d10
Revises:
Create Date: 2026-10-16

Members and events are keyed by (family_id, id) so they can only be
addressed through their family.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4f1c2a7b9d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('users',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('family_id', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('families',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('calendar_id', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('family_members',
        sa.Column('family_id', sa.String(length=128), nullable=False),
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('family_id', 'id')
    )
    with op.batch_alter_table('family_members', schema=None) as batch_op:
        batch_op.create_index('idx_family_member_role', ['family_id', 'role'], unique=False)

    op.create_table('family_events',
        sa.Column('family_id', sa.String(length=128), nullable=False),
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('creator', sa.String(length=128), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('summary', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('assign_for', sa.String(length=128), nullable=False),
        sa.Column('event_id', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['family_id'], ['families.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('family_id', 'id')
    )
    with op.batch_alter_table('family_events', schema=None) as batch_op:
        batch_op.create_index('idx_family_event_start', ['family_id', 'start_time'], unique=False)
        batch_op.create_index('idx_family_event_end', ['family_id', 'end_time'], unique=False)


def downgrade() -> None:
    with op.batch_alter_table('family_events', schema=None) as batch_op:
        batch_op.drop_index('idx_family_event_end')
        batch_op.drop_index('idx_family_event_start')
    op.drop_table('family_events')
    with op.batch_alter_table('family_members', schema=None) as batch_op:
        batch_op.drop_index('idx_family_member_role')
    op.drop_table('family_members')
    op.drop_table('families')
    op.drop_table('users')
