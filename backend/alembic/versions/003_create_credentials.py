"""create credentials

Revision ID: 003_create_credentials
Revises: 002_create_teams
Create Date: 2026-02-22

Adds team-owned encrypted credentials:
  - title, hostname, username, kind → plaintext, for listing and search
  - public_key                      → SSH public half (ssh_key credentials only)
  - encrypted_secret, nonce         → secret encrypted client-side with the team key
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '003_create_credentials'
down_revision = '002_create_teams'
branch_labels = None
depends_on = None


secret_kind = sa.Enum('password', 'ssh_key', name='secret_kind')


def upgrade():
    op.create_table(
        'credentials',
        sa.Column('id', sa.Uuid(), primary_key=True,
                  server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('team_id', sa.Uuid(),
                  sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('hostname', sa.Text(), nullable=False),
        sa.Column('username', sa.Text(), nullable=False),
        sa.Column('kind', secret_kind, nullable=False, server_default='password'),
        sa.Column('public_key', sa.Text(), nullable=True),
        sa.Column('encrypted_secret', sa.LargeBinary(), nullable=False),
        sa.Column('nonce', sa.LargeBinary(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_index('idx_credentials_team_created', 'credentials', ['team_id', 'created_at'])


def downgrade():
    op.drop_index('idx_credentials_team_created', table_name='credentials')
    op.drop_table('credentials')
    secret_kind.drop(op.get_bind(), checkfirst=True)
