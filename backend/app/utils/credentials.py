"""
Credential Store
Encrypted credentials owned by teams.

The secret is encrypted client-side with the team key and stored as-is.
Membership is checked before anything is written or read.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models import Credential, SecretKind
from app.utils.permissions import check_team_permission


def add_credential(
    db: Session,
    team_id: UUID,
    user_id: UUID,
    title: str,
    hostname: str,
    username: str,
    kind: SecretKind,
    encrypted_secret: bytes,
    nonce: bytes,
    public_key: Optional[str] = None
) -> Credential:
    """
    Store an encrypted credential for a team the user belongs to.

    Raises:
        TeamAccessDenied: 403 if user is not a team member
        HTTPException: 400 if a public key is given for a non-SSH credential
    """
    check_team_permission(db, user_id, team_id)

    if public_key is not None and kind != SecretKind.SSH_KEY:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only SSH key credentials can carry a public key"
        )

    credential = Credential(
        team_id=team_id,
        title=title,
        hostname=hostname,
        username=username,
        kind=kind,
        public_key=public_key,
        encrypted_secret=encrypted_secret,
        nonce=nonce,
    )
    db.add(credential)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(credential)
    return credential


def list_credentials(db: Session, team_id: UUID, user_id: UUID) -> List[Credential]:
    """List a team's credentials, oldest first. Caller must be a member."""
    check_team_permission(db, user_id, team_id)

    return db.query(Credential).filter(
        Credential.team_id == team_id
    ).order_by(Credential.created_at).all()
