"""
Team Key Management
Shared teams and the per-member wrapped team key.

Every write here inserts the membership and the key-access grant in the same
transaction. A member without a team_key_access row could see that credentials
exist but never decrypt them, so the two rows are never written separately.
"""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models import Team, TeamMember, TeamKeyAccess, TeamRole, User
from app.utils.permissions import check_team_admin, check_team_permission

logger = logging.getLogger(__name__)


def create_team(
    db: Session,
    creator_id: UUID,
    name: str,
    wrapped_team_key: bytes,
    nonce: bytes
) -> Team:
    """
    Create a shared team. Creator automatically becomes admin.

    Args:
        db: Database session
        creator_id: User creating the team
        name: Team display name
        wrapped_team_key: New team key wrapped for the creator
        nonce: Nonce for wrapped_team_key

    Returns:
        Team: The created team
    """
    team = Team(name=name, is_personal=False)
    db.add(team)
    try:
        db.flush()

        db.add(TeamMember(team_id=team.id, user_id=creator_id, role=TeamRole.ADMIN))
        db.add(TeamKeyAccess(
            team_id=team.id,
            user_id=creator_id,
            encrypted_team_key=wrapped_team_key,
            nonce=nonce,
        ))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"User {creator_id} created team {team.id}")
    return team


def add_team_member(
    db: Session,
    team_id: UUID,
    actor_id: UUID,
    user_id: UUID,
    role: TeamRole,
    wrapped_team_key: bytes,
    nonce: bytes
) -> TeamMember:
    """
    Add a user to a team together with their wrapped copy of the team key.
    Only admins can add members.

    The actor wraps the team key for the new member client-side, using the
    member's public key, before calling this.

    Raises:
        TeamAccessDenied: 403 if actor is not a team admin
        HTTPException: 400 if team is personal or user already a member
        HTTPException: 404 if the user does not exist
    """
    check_team_admin(db, actor_id, team_id)

    team = db.get(Team, team_id)
    if team.is_personal:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Personal teams cannot have additional members"
        )

    if db.get(User, user_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    if db.get(TeamMember, (team_id, user_id)) is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User is already a member of this team"
        )

    member = TeamMember(team_id=team_id, user_id=user_id, role=role)
    db.add(member)
    db.add(TeamKeyAccess(
        team_id=team_id,
        user_id=user_id,
        encrypted_team_key=wrapped_team_key,
        nonce=nonce,
    ))
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"User {actor_id} added {user_id} to team {team_id} as {role.value}")
    return member


def get_team_key_access(db: Session, team_id: UUID, user_id: UUID) -> TeamKeyAccess:
    """
    Return the caller's wrapped team key.

    Raises:
        TeamAccessDenied: 403 if user is not a member of the team
        HTTPException: 404 if the member has no key access
    """
    check_team_permission(db, user_id, team_id)

    access = db.get(TeamKeyAccess, (team_id, user_id))
    if access is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No key access for this team"
        )

    return access
