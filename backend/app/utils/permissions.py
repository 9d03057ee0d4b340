"""
Permission and Authorization Utilities
Team-level access control for the credential vault

═══════════════════════════════════════════════════════════════════════════════
ACCESS MODEL
═══════════════════════════════════════════════════════════════════════════════

Being able to read a team's credentials takes two things:

1. MEMBERSHIP (team_members table)
   The server only hands out a team's rows (credentials, the caller's wrapped
   team key) to members of that team. Roles:

   - admin (2): Manage membership, grant key access to new members
   - member (1): Read and add credentials

2. KEY ACCESS (team_key_access table)
   The team key wrapped for this member. Only the member's private key can
   unwrap it, and only the unwrapped team key decrypts credential secrets.
   The server enforces (1); (2) is enforced by the cryptography client-side.

Membership and key access are always written together, so a member never
exists without a way to unwrap the team key.
"""

from typing import Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models import Team, TeamMember, TeamRole


ROLE_HIERARCHY = {
    TeamRole.ADMIN: 2,
    TeamRole.MEMBER: 1,
}


class TeamAccessDenied(HTTPException):
    """Custom permission exception with standard HTTP 403 response."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )


def check_team_permission(
    db: Session,
    user_id: UUID,
    team_id: UUID,
    required_role: Optional[TeamRole] = None
) -> TeamMember:
    """
    Verify user belongs to team with optional minimum role check.

    Args:
        db: Database session
        user_id: User requesting access
        team_id: Team UUID
        required_role: Minimum role required (admin, member)

    Returns:
        TeamMember: Membership record if authorized

    Raises:
        HTTPException: 404 if team not found
        TeamAccessDenied: 403 if user not member or insufficient role
    """
    team = db.get(Team, team_id)

    if not team:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Team not found"
        )

    member = db.get(TeamMember, (team_id, user_id))

    if not member:
        raise TeamAccessDenied("You are not a member of this team")

    if required_role:
        user_level = ROLE_HIERARCHY.get(member.role, 0)
        required_level = ROLE_HIERARCHY.get(required_role, 0)

        if user_level < required_level:
            raise TeamAccessDenied(
                f"Insufficient permissions. Required role: {required_role.value}"
            )

    return member


def check_team_admin(db: Session, user_id: UUID, team_id: UUID) -> TeamMember:
    """Shorthand for check_team_permission with admin role."""
    return check_team_permission(db, user_id, team_id, required_role=TeamRole.ADMIN)
