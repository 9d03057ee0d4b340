"""create users

Revision ID: 001_create_users
Revises:
Create Date: 2026-02-22

Creates the users table:
  - email                  → unique login identity
  - password_hash          → client-derived password verifier (opaque bytes)
  - password_salt          → salt for client-side password key derivation
  - public_key             → plaintext public key, used by others to wrap team keys
  - encrypted_private_key  → private key encrypted under the password-derived key
  - private_key_nonce      → AEAD nonce for encrypted_private_key

Zero-knowledge: every key column is BYTEA written verbatim from the client.
updated_at is maintained by a trigger so direct SQL updates keep it current.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_create_users'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True,
                  server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('password_hash', sa.LargeBinary(), nullable=False),
        sa.Column('password_salt', sa.LargeBinary(), nullable=False),
        sa.Column('public_key', sa.LargeBinary(), nullable=False),
        sa.Column('encrypted_private_key', sa.LargeBinary(), nullable=False),
        sa.Column('private_key_nonce', sa.LargeBinary(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.DateTime(timezone=True),
                  nullable=False, server_default=sa.text('NOW()')),
    )

    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # ─── Keep updated_at current ─────────────────────────────────────────
    op.execute("""
        CREATE OR REPLACE FUNCTION update_modified_column()
            RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = now();
            RETURN NEW;
        END;
        $$ language 'plpgsql'
    """)
    op.execute("""
        CREATE TRIGGER update_user_modtime
            BEFORE UPDATE ON users
            FOR EACH ROW
        EXECUTE PROCEDURE update_modified_column()
    """)


def downgrade():
    op.execute('DROP TRIGGER IF EXISTS update_user_modtime ON users')
    op.execute('DROP FUNCTION IF EXISTS update_modified_column()')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
