"""
Invite Ledger
Single-use invite codes gating registration.

Redemption is a single conditional UPDATE:

    UPDATE invite_codes SET is_used = true
    WHERE code = :code AND is_used = false

and succeeds only if exactly one row changed. Concurrent redemptions of the
same code are serialized by the row lock taken by that UPDATE: the first one
wins, every other caller sees zero affected rows once the winner commits.
If the winner rolls back instead, the code is still unused and the next
caller can redeem it.

redeem_invite() never commits. It is meant to run inside the caller's
transaction so that the code is only spent if everything else commits too.
"""

import logging
import uuid

from fastapi import HTTPException, status
from sqlalchemy import update
from sqlalchemy.orm import Session

from app.models import InviteCode

logger = logging.getLogger(__name__)


class InviteRejected(HTTPException):
    """
    Invite code is unknown or already used.
    Both cases share one message so callers cannot tell them apart.
    """

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid invite code"
        )


def generate_invite_code() -> str:
    """128-bit random code, formatted as a UUID4 string."""
    return str(uuid.uuid4())


def issue_invite(db: Session) -> str:
    """
    Create and persist a new unused invite code.

    Returns:
        str: The new code

    Raises:
        SQLAlchemyError: If the insert or commit fails (transaction rolled back)
    """
    invite = InviteCode(code=generate_invite_code(), is_used=False)
    db.add(invite)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Issued invite {invite.id}")
    return invite.code


def redeem_invite(db: Session, code: str) -> None:
    """
    Mark an unused invite code as used, within the current transaction.

    Args:
        db: Database session (transaction left open)
        code: Invite code supplied by the client

    Raises:
        InviteRejected: If no unused invite with this code exists
    """
    result = db.execute(
        update(InviteCode)
        .where(InviteCode.code == code, InviteCode.is_used.is_(False))
        .values(is_used=True)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        raise InviteRejected()
