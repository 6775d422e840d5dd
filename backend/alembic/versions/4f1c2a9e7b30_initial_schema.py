"""Initial schema: users, groups, notes, revisions, access lists, history

Revision ID: 4f1c2a9e7b30
Revises:
Create Date: 2025-10-02 18:12:05.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4f1c2a9e7b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False, unique=True),
        sa.Column('display_name', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('photo', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('length(username) <= 64', name='ck_users_username_len'),
    )
    op.create_index('idx_users_username', 'users', ['username'])

    op.create_table(
        'groups',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False, unique=True),
        sa.Column('display_name', sa.String(length=128), nullable=False),
        sa.Column('special', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('idx_groups_name', 'groups', ['name'])

    op.create_table(
        'group_members',
        sa.Column('group_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('groups.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    )

    # current_revision_id gets its foreign key once revisions exists
    op.create_table(
        'notes',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('alias', sa.String(length=64), nullable=True, unique=True),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('current_revision_id', sa.Integer(), nullable=True),
        sa.Column('view_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_viewed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('alias IS NULL OR length(alias) <= 64', name='ck_notes_alias_len'),
    )
    op.create_index('idx_notes_owner_id', 'notes', ['owner_id'])
    op.create_index('idx_notes_alias', 'notes', ['alias'])

    op.create_table(
        'revisions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('note_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('notes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('author_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('length', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('idx_revisions_note_id', 'revisions', ['note_id'])
    op.create_index('idx_revisions_note_id_id', 'revisions', ['note_id', 'id'])

    op.create_foreign_key(
        'fk_notes_current_revision', 'notes', 'revisions',
        ['current_revision_id'], ['id'], ondelete='SET NULL',
    )

    op.create_table(
        'note_user_permissions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('note_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('notes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('can_edit', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint('note_id', 'user_id', name='uq_note_user_permissions_note_user'),
    )
    op.create_index('idx_note_user_permissions_user_id', 'note_user_permissions', ['user_id'])

    op.create_table(
        'note_group_permissions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('note_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('notes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('group_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('can_edit', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint('note_id', 'group_id', name='uq_note_group_permissions_note_group'),
    )
    op.create_index('idx_note_group_permissions_group_id', 'note_group_permissions', ['group_id'])

    op.create_table(
        'history_entries',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('note_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('notes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('last_visited', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_edited', sa.DateTime(timezone=True), nullable=True),
        sa.Column('pinned', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.UniqueConstraint('user_id', 'note_id', name='uq_history_entries_user_note'),
    )
    op.create_index('idx_history_entries_user_id', 'history_entries', ['user_id'])
    op.create_index('idx_history_entries_note_id', 'history_entries', ['note_id'])

    groups = sa.table(
        'groups',
        sa.column('id', postgresql.UUID(as_uuid=True)),
        sa.column('name', sa.String),
        sa.column('display_name', sa.String),
        sa.column('special', sa.Boolean),
        sa.column('created_at', sa.DateTime(timezone=True)),
        sa.column('updated_at', sa.DateTime(timezone=True)),
    )
    op.execute(
        groups.insert().from_select(
            ['id', 'name', 'display_name', 'special', 'created_at', 'updated_at'],
            sa.select(
                sa.func.gen_random_uuid(), sa.literal('everyone'), sa.literal('Everyone'),
                sa.true(), sa.func.now(), sa.func.now(),
            ).union_all(
                sa.select(
                    sa.func.gen_random_uuid(), sa.literal('loggedIn'), sa.literal('Logged-in users'),
                    sa.true(), sa.func.now(), sa.func.now(),
                )
            ),
        )
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('history_entries')
    op.drop_table('note_group_permissions')
    op.drop_table('note_user_permissions')
    op.drop_constraint('fk_notes_current_revision', 'notes', type_='foreignkey')
    op.drop_table('revisions')
    op.drop_table('notes')
    op.drop_table('group_members')
    op.drop_table('groups')
    op.drop_table('users')
