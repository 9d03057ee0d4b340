"""
SQLAlchemy Models
Database table definitions for users, teams, key access, credentials and invites

Zero-Knowledge Design:
  - The server never sees plaintext secrets or private keys.
  - Every cryptographic value (public key, encrypted private key, wrapped team
    key, nonces, credential secrets) is an opaque byte blob produced client-side
    and stored verbatim in a LargeBinary (BYTEA) column.
  - A team's symmetric key is wrapped once per member (team_key_access).
    Holding that row plus the member's private key is what grants the ability
    to decrypt the team's credentials.
  - Every team_members row must have a matching team_key_access row. Both are
    always written in the same transaction.
"""

from sqlalchemy import (
    Column, String, Text, DateTime, ForeignKey, Boolean, LargeBinary, Uuid, Enum, Index
)
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum
import uuid

from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TeamRole(str, enum.Enum):
    """Team member roles. Admin manages membership, member only reads/writes credentials."""
    MEMBER = "member"
    ADMIN = "admin"


class SecretKind(str, enum.Enum):
    """Kind of secret stored in a credential."""
    PASSWORD = "password"
    SSH_KEY = "ssh_key"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class User(Base):
    """User identity plus the user's client-generated key pair"""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(Text, nullable=False)

    # Client-derived password verifier and the salt used to derive it.
    # The salt is handed back by GET /auth/salt before login.
    password_hash = Column(LargeBinary, nullable=False)
    password_salt = Column(LargeBinary, nullable=False)

    # Plaintext public key, used by others to wrap team keys for this user
    public_key = Column(LargeBinary, nullable=False)

    # Private key encrypted under the password-derived key, with its AEAD nonce
    encrypted_private_key = Column(LargeBinary, nullable=False)
    private_key_nonce = Column(LargeBinary, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    memberships = relationship("TeamMember", back_populates="user", cascade="all, delete-orphan")
    key_grants = relationship("TeamKeyAccess", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"


class Team(Base):
    """
    Team owning a set of credentials.

    Personal teams (is_personal=True) are created together with their user
    during signup and only ever contain that user.
    """
    __tablename__ = "teams"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    is_personal = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    members = relationship("TeamMember", back_populates="team", cascade="all, delete-orphan")
    key_grants = relationship("TeamKeyAccess", back_populates="team", cascade="all, delete-orphan")
    credentials = relationship("Credential", back_populates="team", cascade="all, delete-orphan")


class TeamMember(Base):
    """Team membership (many-to-many: users <-> teams) with a role"""
    __tablename__ = "team_members"

    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    role = Column(
        Enum(TeamRole, name="team_role", values_callable=_enum_values),
        default=TeamRole.MEMBER,
        nullable=False,
    )

    # Relationships
    team = relationship("Team", back_populates="members")
    user = relationship("User", back_populates="memberships")


class TeamKeyAccess(Base):
    """
    The team's symmetric key wrapped for one specific user.

    encrypted_team_key + nonce are stored exactly as the client sent them;
    the server cannot check that they unwrap correctly.
    """
    __tablename__ = "team_key_access"

    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True)
    encrypted_team_key = Column(LargeBinary, nullable=False)
    nonce = Column(LargeBinary, nullable=False)

    # Relationships
    team = relationship("Team", back_populates="key_grants")
    user = relationship("User", back_populates="key_grants")


class Credential(Base):
    """
    Encrypted credential owned by a team.

    title/hostname/username/kind stay plaintext so clients can list and search;
    the secret itself is encrypted with the team key.
    """
    __tablename__ = "credentials"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    team_id = Column(Uuid, ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    hostname = Column(Text, nullable=False)
    username = Column(Text, nullable=False)
    kind = Column(
        Enum(SecretKind, name="secret_kind", values_callable=_enum_values),
        default=SecretKind.PASSWORD,
        nullable=False,
    )
    public_key = Column(Text, nullable=True)  # SSH public half, ssh_key only
    encrypted_secret = Column(LargeBinary, nullable=False)
    nonce = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=utcnow)

    # Relationships
    team = relationship("Team", back_populates="credentials")

    __table_args__ = (
        Index("idx_credentials_team_created", "team_id", "created_at"),
    )


class InviteCode(Base):
    """
    Single-use registration invite.
    is_used only ever goes false -> true, and only as part of a committed signup.
    """
    __tablename__ = "invite_codes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    code = Column(Text, unique=True, nullable=False)
    is_used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
