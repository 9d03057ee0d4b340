"""create invite codes

Revision ID: 004_create_invite_codes
Revises: 003_create_credentials
Create Date: 2026-02-22

Adds single-use registration invites:
  - code     → random UUID4 string handed to the invitee
  - is_used  → flipped false → true by the signup transaction, never back
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '004_create_invite_codes'
down_revision = '003_create_credentials'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'invite_codes',
        sa.Column('id', sa.Uuid(), primary_key=True,
                  server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('code', sa.Text(), nullable=False),
        sa.Column('is_used', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.text('NOW()')),
        sa.UniqueConstraint('code', name='uq_invite_codes_code'),
    )


def downgrade():
    op.drop_table('invite_codes')
