"""create teams, team members and team key access

Revision ID: 002_create_teams
Revises: 001_create_users
Create Date: 2026-02-22

Adds the key-wrapping access model:
  - teams             → credential-owning teams; is_personal marks the one
                        team created with each user at signup
  - team_members      → users ↔ teams with a team_role (member, admin)
  - team_key_access   → the team's symmetric key wrapped for each member

E2EE Key Sharing Architecture:
  - Each team has one symmetric key, never seen by the server
  - Each member has their own wrapped copy in team_key_access
  - A team_members row without a team_key_access row is never written
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '002_create_teams'
down_revision = '001_create_users'
branch_labels = None
depends_on = None


team_role = sa.Enum('member', 'admin', name='team_role')


def upgrade():
    # ─── Create teams table ──────────────────────────────────────────────
    op.create_table(
        'teams',
        sa.Column('id', sa.Uuid(), primary_key=True,
                  server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('is_personal', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.text('NOW()')),
    )

    # ─── Create team_members table ───────────────────────────────────────
    op.create_table(
        'team_members',
        sa.Column('team_id', sa.Uuid(),
                  sa.ForeignKey('teams.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.Uuid(),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('role', team_role, nullable=False, server_default='member'),
    )

    op.create_index('ix_team_members_user_id', 'team_members', ['user_id'])

    # ─── Create team_key_access table ────────────────────────────────────
    op.create_table(
        'team_key_access',
        sa.Column('team_id', sa.Uuid(),
                  sa.ForeignKey('teams.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('user_id', sa.Uuid(),
                  sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('encrypted_team_key', sa.LargeBinary(), nullable=False),
        sa.Column('nonce', sa.LargeBinary(), nullable=False),
    )

    op.create_index('ix_team_key_access_user_id', 'team_key_access', ['user_id'])


def downgrade():
    op.drop_index('ix_team_key_access_user_id', table_name='team_key_access')
    op.drop_table('team_key_access')

    op.drop_index('ix_team_members_user_id', table_name='team_members')
    op.drop_table('team_members')

    op.drop_table('teams')
    team_role.drop(op.get_bind(), checkfirst=True)
