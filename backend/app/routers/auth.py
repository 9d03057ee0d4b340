"""
Authentication Routes
Invite-gated signup, invite issuance and salt distribution

Key Bootstrap Flow:
  SIGNUP:
    1. Client obtains an invite code (POST /auth/invite, or out of band)
    2. Client generates a random salt and derives its password key locally
    3. Client generates a key pair, encrypts the private key with the password key
    4. Client generates a personal team key and wraps it for itself
    5. Client sends everything Base64-encoded to POST /auth/signup
    6. Server redeems the invite and creates user, personal team, admin
       membership and key access in one transaction

  LOGIN:
    1. Client calls GET /auth/salt?email=... to fetch its salt
    2. Client re-derives its password key locally before touching any secrets
"""

import base64

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import require_invite_issuer
from app.schemas import SignupRequest
from app.utils.accounts import create_account
from app.utils.invites import issue_invite
from app.utils.salt import lookup_salt

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_class=Response)
def signup(
    signup_data: SignupRequest,
    db: Session = Depends(get_db)
):
    """
    Sign up a new user with a one-time invite code.

    Returns 201 with an empty body on success, 403 if the invite code is
    invalid or already used, 422 for malformed fields (including bad
    Base64), 500 if the account could not be created. No partial account
    is ever left behind.
    """
    create_account(db, signup_data)
    return Response(status_code=status.HTTP_201_CREATED)


@router.post(
    "/invite",
    response_class=PlainTextResponse,
    dependencies=[Depends(require_invite_issuer)]
)
def generate_invite(db: Session = Depends(get_db)):
    """Generate a new single-use invite code, returned as plain text."""
    return issue_invite(db)


@router.get("/salt", response_class=PlainTextResponse)
def get_salt(
    email: str = Query(..., min_length=1, max_length=320),
    db: Session = Depends(get_db)
):
    """
    Fetch the Base64-encoded password salt for an email address.

    Unknown emails get a deterministic fabricated salt of the same length,
    so this endpoint never reveals whether an account exists.
    """
    salt = lookup_salt(db, email)
    return base64.b64encode(salt).decode("ascii")
