"""
Credential Salt Lookup

Clients fetch their password salt before login so they can derive their key
material locally. To avoid revealing whether an account exists, an unknown
email gets a fabricated salt of the same length instead of an error.

Fabricated salt algorithm (fixed, so results survive restarts):

    seed = int.from_bytes(
        blake2b(email.encode("utf-8"), digest_size=8, key=FAKE_SALT_KEY*).digest(),
        "big",
    )
    salt = random.Random(seed).randbytes(SALT_LENGTH)   # Mersenne Twister

* keys over 64 bytes are first reduced to their 64-byte blake2b digest.

The same email always yields the same salt, different emails yield unrelated
salts. This is a best-effort deterrent against account enumeration, not a
secrecy guarantee: Mersenne Twister is not a cryptographic generator, and
without FAKE_SALT_KEY anyone can recompute the fabricated salts.
"""

import hashlib
import random
from typing import Optional

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.orm import Session

from app.config import settings
from app.models import User


def normalize_email(email: str) -> str:
    """
    Normalize the way EmailStr does at signup, so lookups match stored emails.
    Addresses that do not validate are returned unchanged; no account can have one.
    """
    try:
        return validate_email(email, check_deliverability=False).normalized
    except EmailNotValidError:
        return email


def blake2b_key(key: str) -> bytes:
    """
    Fit a configured key of any length to blake2b's 64-byte key limit.
    Longer keys are replaced by their own 64-byte blake2b digest, as HMAC does.
    """
    raw = key.encode("utf-8")
    if len(raw) > hashlib.blake2b.MAX_KEY_SIZE:
        return hashlib.blake2b(raw).digest()
    return raw


def fabricate_salt(email: str, length: Optional[int] = None, key: Optional[str] = None) -> bytes:
    """Deterministic stand-in salt for an email that has no account."""
    length = settings.SALT_LENGTH if length is None else length
    key = settings.FAKE_SALT_KEY if key is None else key

    digest = hashlib.blake2b(
        email.encode("utf-8"),
        digest_size=8,
        key=blake2b_key(key),
    ).digest()
    rng = random.Random(int.from_bytes(digest, "big"))
    return rng.randbytes(length)


def lookup_salt(db: Session, email: str) -> bytes:
    """
    Return the stored password salt for email, or a fabricated one.

    Never signals "not found". Database errors propagate to the caller.
    """
    email = normalize_email(email)
    salt = db.query(User.password_salt).filter(User.email == email).scalar()

    if salt is None:
        return fabricate_salt(email)

    return bytes(salt)
