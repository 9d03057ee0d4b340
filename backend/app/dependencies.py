"""
Dependency Functions
FastAPI dependency injection functions for request authorization
"""

import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from app.config import settings


async def require_invite_issuer(
    x_invite_token: Optional[str] = Header(None)
) -> None:
    """
    Dependency gating invite issuance.

    When INVITE_ISSUER_TOKEN is configured, the request must carry the same
    value in the X-Invite-Token header. When it is not configured, issuance
    is open and the application logs a warning at startup.

    Raises:
        HTTPException: 403 Forbidden if the token is missing or wrong
    """
    expected = settings.INVITE_ISSUER_TOKEN
    if not expected:
        return

    if x_invite_token is None or not secrets.compare_digest(
        x_invite_token.encode("utf-8"), expected.encode("utf-8")
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invite issuance not permitted"
        )
