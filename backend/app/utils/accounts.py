"""
Account Bootstrap
Creates a complete new account from an invite and client-generated key material.

One transaction, in this order:
  1. Redeem the invite code            (invite_codes UPDATE)
  2. Insert the user                   (users)
  3. Insert the personal team          (teams, is_personal = true)
  4. Add the user to it as admin       (team_members)
  5. Store the wrapped personal key    (team_key_access)
  6. Commit

Any failure in 1-6 rolls the whole transaction back, invite redemption
included, so an invite is only spent on a fully created account. The unique
email constraint is the final arbiter between concurrent signups for the same
address: the loser's transaction rolls back and its invite stays unused.
"""

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import User, Team, TeamMember, TeamKeyAccess, TeamRole
from app.schemas import SignupRequest
from app.utils.invites import InviteRejected, redeem_invite

logger = logging.getLogger(__name__)


class RegistrationFailed(HTTPException):
    """Generic signup failure. Never carries database details."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration failed"
        )


def personal_team_name(name: str) -> str:
    return f"{name}'s Personal Team"


def create_account(db: Session, signup: SignupRequest) -> User:
    """
    Run the account bootstrap transaction.

    Args:
        db: Database session (committed or rolled back before returning)
        signup: Validated signup payload with decoded key material

    Returns:
        User: The newly created user

    Raises:
        InviteRejected: 403 if the invite code is unknown or already used
        RegistrationFailed: 500 if any insert or the commit fails
    """
    try:
        redeem_invite(db, signup.invite_code)

        user = User(
            email=signup.email,
            name=signup.name,
            password_hash=signup.password_hash,
            password_salt=signup.password_salt,
            public_key=signup.public_key,
            encrypted_private_key=signup.encrypted_private_key,
            private_key_nonce=signup.private_key_nonce,
        )
        db.add(user)
        db.flush()  # Get user ID without committing transaction

        team = Team(name=personal_team_name(signup.name), is_personal=True)
        db.add(team)
        db.flush()

        db.add(TeamMember(team_id=team.id, user_id=user.id, role=TeamRole.ADMIN))
        db.add(TeamKeyAccess(
            team_id=team.id,
            user_id=user.id,
            encrypted_team_key=signup.wrapped_personal_key,
            nonce=signup.personal_key_nonce,
        ))

        db.commit()

    except InviteRejected:
        db.rollback()
        logger.info("Signup rejected: invalid or used invite code")
        raise

    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Signup transaction rolled back: {e.__class__.__name__}")
        raise RegistrationFailed() from e

    logger.info(f"Created user {user.id} with personal team {team.id}")
    return user
